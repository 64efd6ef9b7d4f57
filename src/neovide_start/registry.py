"""Bundle registries: resolve a bundle identifier to an executable path.

``LaunchServicesRegistry`` asks macOS through pyobjc. ``StaticRegistry``
reads identifier-to-path mappings from configuration and understands the
``.app`` bundle layout, so the launcher also works where LaunchServices is
not available.
"""
from __future__ import annotations

import os
import plistlib
import sys
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import cast
from xml.parsers.expat import ExpatError

import structlog

from neovide_start.config import LauncherConfig
from neovide_start.core.exceptions import (
    RegistryUnavailableError,
    TargetNotFoundError,
    TargetUnreadableError,
)
from neovide_start.core.models import ResolvedTarget

logger = structlog.get_logger(__name__)


class BundleRegistry(ABC):
    """Identifier-addressable application bundle lookup."""

    @abstractmethod
    def locate(self, bundle_id: str) -> str | None:
        """Return the bundle location for ``bundle_id``, or None if unknown."""

    @abstractmethod
    def executable_path(self, bundle_path: str) -> str | None:
        """Return the bundle's executable, or None if it declares none.

        Raises:
            OSError: If the bundle itself cannot be opened or read.
        """


def _import_appkit() -> tuple[ModuleType, ModuleType]:
    """Import pyobjc lazily so the launcher imports on any platform."""
    try:
        import AppKit  # type: ignore[import-not-found]  # noqa: PLC0415
        import Foundation  # type: ignore[import-not-found]  # noqa: PLC0415
    except ImportError as exc:
        raise RegistryUnavailableError(
            "LaunchServices lookup requires pyobjc-framework-Cocoa on macOS."
        ) from exc
    return cast(ModuleType, AppKit), cast(ModuleType, Foundation)


class LaunchServicesRegistry(BundleRegistry):
    """macOS registry backed by NSWorkspace and NSBundle."""

    def __init__(self) -> None:
        self._appkit, self._foundation = _import_appkit()

    def locate(self, bundle_id: str) -> str | None:
        workspace = self._appkit.NSWorkspace.sharedWorkspace()
        url = workspace.URLForApplicationWithBundleIdentifier_(bundle_id)
        if url is None:
            return None
        return str(url.path())

    def executable_path(self, bundle_path: str) -> str | None:
        bundle = self._foundation.NSBundle.bundleWithPath_(bundle_path)
        if bundle is None:
            raise OSError(f"cannot open bundle {bundle_path}")
        path = bundle.executablePath()
        return str(path) if path is not None else None


class StaticRegistry(BundleRegistry):
    """Registry backed by a fixed identifier-to-path mapping.

    A mapped directory is read as a ``.app`` bundle
    (``Contents/Info.plist`` names ``Contents/MacOS/<CFBundleExecutable>``);
    a mapped regular file is used as the executable directly.

    Args:
        bundles: Mapping of bundle identifier to bundle directory or file.
    """

    def __init__(self, bundles: Mapping[str, str]) -> None:
        self._bundles = dict(bundles)

    def locate(self, bundle_id: str) -> str | None:
        raw = self._bundles.get(bundle_id)
        if raw is None:
            return None
        path = Path(raw).expanduser()
        if not path.exists():
            logger.debug("static_bundle_missing", bundle_id=bundle_id, path=str(path))
            return None
        return str(path.resolve())

    def executable_path(self, bundle_path: str) -> str | None:
        path = Path(bundle_path)
        if path.is_file():
            return str(path) if os.access(path, os.X_OK) else None

        info_plist = path / "Contents" / "Info.plist"
        with open(info_plist, "rb") as f:
            try:
                info = plistlib.load(f)
            except (ValueError, ExpatError) as exc:
                raise OSError(f"malformed Info.plist in {bundle_path}") from exc

        name = info.get("CFBundleExecutable") if isinstance(info, dict) else None
        if not isinstance(name, str) or not name:
            return None
        executable = path / "Contents" / "MacOS" / name
        return str(executable) if executable.is_file() else None


def create_registry(config: LauncherConfig) -> BundleRegistry:
    """Pick the registry for this host and configuration."""
    if config.bundles or sys.platform != "darwin":
        return StaticRegistry(config.bundles)
    return LaunchServicesRegistry()


def resolve_target(
    registry: BundleRegistry,
    bundle_id: str,
    display_name: str = "Neovide",
) -> ResolvedTarget:
    """Resolve ``bundle_id`` to its executable through ``registry``.

    Args:
        registry: Bundle registry to query.
        bundle_id: Stable identifier of the target application.
        display_name: Human-readable name used in error messages.

    Returns:
        ResolvedTarget with the bundle and executable paths.

    Raises:
        TargetNotFoundError: If the registry does not know ``bundle_id``.
        TargetUnreadableError: If the bundle cannot be read or has no executable.
    """
    bundle_path = registry.locate(bundle_id)
    if bundle_path is None:
        raise TargetNotFoundError(f"Cannot find {display_name}.", bundle_id=bundle_id)

    try:
        executable = registry.executable_path(bundle_path)
    except OSError as exc:
        logger.debug("bundle_unreadable", bundle_path=bundle_path, error=str(exc))
        raise TargetUnreadableError(
            f"Could not read {display_name} bundle.", bundle_path=bundle_path
        ) from exc

    if executable is None:
        raise TargetUnreadableError(
            f"Could not find executable in {display_name} bundle.",
            bundle_path=bundle_path,
        )

    logger.info("target_resolved", bundle_id=bundle_id, executable=executable)
    return ResolvedTarget(bundle_id=bundle_id, bundle_path=bundle_path, executable=executable)
