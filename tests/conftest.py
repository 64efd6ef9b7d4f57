"""Shared pytest fixtures for neovide-start tests."""
from __future__ import annotations

import io
import os

# Diagnostics must be plain text for substring assertions.
os.environ["NO_COLOR"] = "1"

from collections.abc import Iterable

import pytest

from neovide_start.activation import ActivationBackend
from neovide_start.config import LauncherConfig, SupervisionConfig
from neovide_start.core.models import WaitOutcome
from neovide_start.diagnostics import ErrorStream
from neovide_start.registry import BundleRegistry
from neovide_start.supervisor import ProcessWaiter

EXECUTABLE = "/Applications/Neovide.app/Contents/MacOS/neovide"
BUNDLE_PATH = "/Applications/Neovide.app"


class TTYStringIO(io.StringIO):
    """In-memory stream that claims to be a terminal."""

    def isatty(self) -> bool:
        return True


class StubRegistry(BundleRegistry):
    """Registry with fixed answers; records lookups."""

    def __init__(
        self,
        bundles: dict[str, str] | None = None,
        executable: str | None = EXECUTABLE,
        unreadable: bool = False,
    ) -> None:
        self._bundles = bundles if bundles is not None else {"com.neovide.neovide": BUNDLE_PATH}
        self._executable = executable
        self._unreadable = unreadable
        self.lookups: list[str] = []

    def locate(self, bundle_id: str) -> str | None:
        self.lookups.append(bundle_id)
        return self._bundles.get(bundle_id)

    def executable_path(self, bundle_path: str) -> str | None:
        if self._unreadable:
            raise OSError(f"cannot open bundle {bundle_path}")
        return self._executable


class StubActivation(ActivationBackend):
    """Activation backend whose answers are scripted per call."""

    def __init__(self, results: Iterable[bool] = ()) -> None:
        self._results = list(results)
        self.yielded: list[str] = []
        self.activate_calls: list[int] = []

    def yield_to_bundle(self, bundle_id: str) -> None:
        self.yielded.append(bundle_id)

    def activate(self, pid: int) -> bool:
        self.activate_calls.append(pid)
        return self._results.pop(0) if self._results else False


class ScriptedWaiter(ProcessWaiter):
    """Returns queued outcomes for polls; a fixed outcome for blocking waits."""

    def __init__(
        self,
        polls: Iterable[WaitOutcome] = (),
        blocking: WaitOutcome | None = None,
    ) -> None:
        self._polls = list(polls)
        self._blocking = blocking or WaitOutcome.from_status(0)
        self.calls: list[tuple[int, bool]] = []

    def wait(self, pid: int, *, blocking: bool) -> WaitOutcome:
        self.calls.append((pid, blocking))
        if blocking:
            return self._blocking
        return self._polls.pop(0) if self._polls else WaitOutcome.running()


def exit_status(code: int) -> int:
    """Raw wait status for a normal exit with ``code``."""
    return (code & 0xFF) << 8


def stop_status(signal: int) -> int:
    """Raw wait status for a process stopped by ``signal``."""
    return (signal << 8) | 0x7F


@pytest.fixture
def fast_config() -> LauncherConfig:
    """Default config with no delay between polls."""
    return LauncherConfig(supervision=SupervisionConfig(attempts=5, interval_s=0.0))


@pytest.fixture
def stderr_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def error_stream(stderr_buffer: io.StringIO) -> ErrorStream:
    """Plain (uncolored) error stream writing to ``stderr_buffer``."""
    return ErrorStream(stream=stderr_buffer, environ={})


@pytest.fixture
def stub_registry() -> StubRegistry:
    return StubRegistry()


@pytest.fixture
def stub_activation() -> StubActivation:
    return StubActivation()
