"""Configuration loading for neovide-start.

The launcher runs with built-in defaults. A YAML file named by the
``NEOVIDE_START_CONFIG`` environment variable may override the target,
the supervision window, and a static bundle registry.
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from neovide_start.core.exceptions import ConfigError

CONFIG_ENV_VAR = "NEOVIDE_START_CONFIG"


class TargetConfig(BaseModel):
    """Application to launch.

    Attributes:
        bundle_id: Stable identifier registered with the bundle registry.
        display_name: Name used in diagnostics (e.g. "Cannot find Neovide.").
    """

    bundle_id: str = Field(default="com.neovide.neovide", min_length=1)
    display_name: str = "Neovide"


class SupervisionConfig(BaseModel):
    """Bounded liveness check after spawning.

    Attributes:
        attempts: Number of polling attempts before leaving the child alone.
        interval_s: Delay before each poll, in seconds.
    """

    attempts: int = Field(default=5, ge=1)
    interval_s: float = Field(default=0.1, ge=0.0)


class LauncherConfig(BaseModel):
    """Root configuration for neovide-start.

    Attributes:
        target: Application to launch.
        supervision: Polling window settings.
        bundles: Optional static registry mapping bundle identifiers to
            bundle directories or executables. When non-empty it replaces
            the system registry.
    """

    target: TargetConfig = Field(default_factory=TargetConfig)
    supervision: SupervisionConfig = Field(default_factory=SupervisionConfig)
    bundles: dict[str, str] = Field(default_factory=dict)


def load_launcher_config(path: Path) -> LauncherConfig:
    """Load launcher configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        LauncherConfig with any missing sections set to defaults.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigError: If the file cannot be read, is not valid YAML, or fails
            validation.
    """
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Config file {path} must contain a mapping")

    try:
        return LauncherConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {path}: {exc}") from exc


def config_from_env(environ: Mapping[str, str] | None = None) -> LauncherConfig:
    """Load the config file named by ``NEOVIDE_START_CONFIG``, or defaults."""
    env = os.environ if environ is None else environ
    raw = env.get(CONFIG_ENV_VAR, "").strip()
    if not raw:
        return LauncherConfig()

    path = Path(raw).expanduser()
    try:
        return load_launcher_config(path)
    except FileNotFoundError as exc:
        raise ConfigError(str(exc)) from exc
