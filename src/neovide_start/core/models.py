"""Core Pydantic data models for neovide-start."""
from __future__ import annotations

import os

from pydantic import BaseModel

from neovide_start.core.enums import ExitCode, WaitKind


class ResolvedTarget(BaseModel):
    """An application bundle resolved to its executable.

    Attributes:
        bundle_id: Stable identifier the target was looked up by.
        bundle_path: Location of the bundle on the file system.
        executable: Absolute path of the bundle's entry executable.
    """

    bundle_id: str
    bundle_path: str
    executable: str

    model_config = {"frozen": True}


class ArgumentPartition(BaseModel):
    """Launcher flags separated from the arguments forwarded to the child.

    Attributes:
        detach: True when ``--fork`` was the last fork option given.
        arguments: Argument sequence passed to the child after the executable.
    """

    detach: bool = False
    arguments: tuple[str, ...] = ()

    model_config = {"frozen": True}


class WaitOutcome(BaseModel):
    """Result of one wait call on the child process.

    Attributes:
        kind: Decoded process state.
        status: Raw wait status as returned by waitpid.
        code: Exit code when ``kind`` is EXITED.
        signal: Signal number when ``kind`` is SIGNALED or STOPPED.
    """

    kind: WaitKind
    status: int = 0
    code: int | None = None
    signal: int | None = None

    model_config = {"frozen": True}

    @classmethod
    def running(cls) -> WaitOutcome:
        return cls(kind=WaitKind.RUNNING)

    @classmethod
    def from_status(cls, status: int) -> WaitOutcome:
        """Decode a POSIX wait status."""
        if os.WIFEXITED(status):
            return cls(kind=WaitKind.EXITED, status=status, code=os.WEXITSTATUS(status))
        if os.WIFSIGNALED(status):
            return cls(kind=WaitKind.SIGNALED, status=status, signal=os.WTERMSIG(status))
        if os.WIFSTOPPED(status):
            return cls(kind=WaitKind.STOPPED, status=status, signal=os.WSTOPSIG(status))
        return cls(kind=WaitKind.UNKNOWN, status=status)

    @property
    def is_definite(self) -> bool:
        return self.kind is not WaitKind.RUNNING

    @property
    def is_clean(self) -> bool:
        """True for a definite outcome whose raw status is zero."""
        return self.is_definite and self.status == 0

    @property
    def launcher_exit_code(self) -> int:
        """Exit code the launcher propagates for this outcome."""
        if self.kind is WaitKind.EXITED and self.code is not None:
            return self.code
        return int(ExitCode.SOFTWARE)

    def describe(self) -> str:
        if self.kind is WaitKind.EXITED:
            return f"exited with status {self.code}"
        if self.kind is WaitKind.SIGNALED:
            return f"terminated on signal {self.signal}"
        if self.kind is WaitKind.STOPPED:
            return f"stopped on signal {self.signal}"
        if self.kind is WaitKind.RUNNING:
            return "still running"
        return f"unknown status value {self.status}"
