"""Foreground activation hints for the launched application.

Activation is advisory. Backends never raise: an unavailable window server
or an old macOS without cooperative activation just means the launcher keeps
focus, which is logged and otherwise ignored.
"""
from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from types import ModuleType
from typing import cast

import structlog

logger = structlog.get_logger(__name__)


class ActivationBackend(ABC):
    """Application-switching layer the launcher cooperates with."""

    @abstractmethod
    def yield_to_bundle(self, bundle_id: str) -> None:
        """Hint that focus should pass to ``bundle_id`` once it is running."""

    @abstractmethod
    def activate(self, pid: int) -> bool:
        """Bring process ``pid`` to the foreground.

        Returns:
            True if the process is a known running application and the
            activation request was accepted.
        """


class NullActivation(ActivationBackend):
    """No window server: activation never succeeds."""

    def yield_to_bundle(self, bundle_id: str) -> None:
        logger.debug("activation_unavailable", bundle_id=bundle_id)

    def activate(self, pid: int) -> bool:
        return False


def _import_appkit() -> ModuleType:
    import AppKit  # type: ignore[import-not-found]  # noqa: PLC0415

    return cast(ModuleType, AppKit)


class AppKitActivation(ActivationBackend):
    """Cooperative activation through NSApplication / NSRunningApplication.

    Args:
        appkit: The imported ``AppKit`` module.
    """

    def __init__(self, appkit: ModuleType) -> None:
        self._appkit = appkit
        self._app = appkit.NSApplication.sharedApplication()

    def yield_to_bundle(self, bundle_id: str) -> None:
        try:
            self._app.yieldActivationToApplicationWithBundleIdentifier_(bundle_id)
        except AttributeError:
            # yieldActivation* exists from macOS 14 on.
            logger.debug("yield_activation_unsupported", bundle_id=bundle_id)

    def activate(self, pid: int) -> bool:
        running = self._appkit.NSRunningApplication
        app = running.runningApplicationWithProcessIdentifier_(pid)
        if app is None:
            return False
        try:
            self._app.yieldActivationToApplication_(app)
        except AttributeError:
            logger.debug("yield_activation_unsupported", pid=pid)
        try:
            activated = bool(app.activate())
        except AttributeError:
            activated = bool(app.activateWithOptions_(0))
        logger.debug("activation_requested", pid=pid, activated=activated)
        return activated


def create_activation() -> ActivationBackend:
    """Return the AppKit backend on macOS when pyobjc is installed."""
    if sys.platform != "darwin":
        return NullActivation()
    try:
        appkit = _import_appkit()
    except ImportError as exc:
        logger.warning("appkit_import_failed", error=str(exc))
        return NullActivation()
    return AppKitActivation(appkit)
