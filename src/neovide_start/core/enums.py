"""Core enumerations for neovide-start."""
from enum import IntEnum, StrEnum


class ExitCode(IntEnum):
    """Launcher exit statuses (values from sysexits.h)."""

    OK = 0
    UNAVAILABLE = 69  # EX_UNAVAILABLE
    SOFTWARE = 70     # EX_SOFTWARE
    OSFILE = 72       # EX_OSFILE
    CONFIG = 78       # EX_CONFIG
    INTERRUPTED = 130  # 128 + SIGINT


class WaitKind(StrEnum):
    """Decoded state of a child process after a wait call."""

    RUNNING = "running"
    EXITED = "exited"
    SIGNALED = "signaled"
    STOPPED = "stopped"
    UNKNOWN = "unknown"
