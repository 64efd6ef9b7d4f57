"""Exception hierarchy for neovide-start.

Every launcher failure is terminal. Each exception carries the process exit
code the launcher should end with. Never use bare except clauses.
"""
from __future__ import annotations

import errno as errno_codes

from neovide_start.core.enums import ExitCode


class LauncherError(Exception):
    """Base exception for all launcher errors."""

    exit_code: int = ExitCode.SOFTWARE

    def __init__(self, message: str, exit_code: int | None = None) -> None:
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(LauncherError):
    """Configuration file exists but cannot be used."""

    exit_code = ExitCode.CONFIG


# Target resolution
class TargetNotFoundError(LauncherError):
    """The bundle identifier is unknown to the registry."""

    exit_code = ExitCode.UNAVAILABLE

    def __init__(self, message: str, bundle_id: str) -> None:
        super().__init__(message)
        self.bundle_id = bundle_id


class TargetUnreadableError(LauncherError):
    """The bundle was located but its executable could not be found."""

    exit_code = ExitCode.OSFILE

    def __init__(self, message: str, bundle_path: str) -> None:
        super().__init__(message)
        self.bundle_path = bundle_path


class RegistryUnavailableError(LauncherError):
    """The system bundle registry cannot be queried on this host."""

    exit_code = ExitCode.UNAVAILABLE


# Process lifecycle
class SpawnFailedError(LauncherError):
    """posix_spawn refused to start the executable."""

    exit_code = ExitCode.UNAVAILABLE

    def __init__(self, path: str, errno: int) -> None:
        symbol = errno_codes.errorcode.get(errno, "EUNKNOWN")
        super().__init__(f"exec {path} failed: [{errno}: {symbol}]")
        self.path = path
        self.errno = errno
        self.symbol = symbol


class ChildEarlyExitError(LauncherError):
    """The child exited with a non-zero status during supervision."""

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message, exit_code=status)
        self.status = status


class ChildSignaledError(LauncherError):
    """The child was terminated or stopped by a signal during supervision."""

    exit_code = ExitCode.SOFTWARE

    def __init__(self, message: str, signal: int | None) -> None:
        super().__init__(message)
        self.signal = signal
