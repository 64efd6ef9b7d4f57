"""Tests for the bounded supervision state machine."""
from __future__ import annotations

import signal

import pytest
from conftest import ScriptedWaiter, StubActivation, exit_status

from neovide_start.core.enums import ExitCode, WaitKind
from neovide_start.core.exceptions import ChildEarlyExitError, ChildSignaledError
from neovide_start.core.models import WaitOutcome
from neovide_start.supervisor import (
    Done,
    Polling,
    ProcessWaiter,
    Supervisor,
    WaitingIndefinitely,
)

PID = 4242
EXE = "/bin/neovide"


def make_supervisor(
    waiter: ScriptedWaiter,
    activation: StubActivation,
    detach: bool = False,
    attempts: int = 5,
) -> Supervisor:
    return Supervisor(
        PID,
        EXE,
        detach=detach,
        activation=activation,
        waiter=waiter,
        attempts=attempts,
        interval_s=0.0,
    )


@pytest.mark.asyncio
async def test_still_running_after_all_attempts() -> None:
    """Never activated: five non-blocking polls, then leave the child running."""
    waiter = ScriptedWaiter()
    activation = StubActivation()
    outcome = await make_supervisor(waiter, activation).run()
    assert outcome.kind is WaitKind.RUNNING
    assert waiter.calls == [(PID, False)] * 5
    assert activation.activate_calls == [PID] * 5


@pytest.mark.asyncio
async def test_early_nonzero_exit_propagates_code() -> None:
    waiter = ScriptedWaiter(polls=[WaitOutcome.running(), WaitOutcome.from_status(exit_status(3))])
    with pytest.raises(ChildEarlyExitError) as info:
        await make_supervisor(waiter, StubActivation()).run()
    assert info.value.exit_code == 3
    assert str(info.value) == f"{EXE} exited with status 3"
    assert len(waiter.calls) == 2


@pytest.mark.asyncio
async def test_signal_maps_to_software_error() -> None:
    waiter = ScriptedWaiter(polls=[WaitOutcome.from_status(int(signal.SIGABRT))])
    with pytest.raises(ChildSignaledError) as info:
        await make_supervisor(waiter, StubActivation()).run()
    assert info.value.exit_code == ExitCode.SOFTWARE
    assert str(info.value) == f"{EXE} terminated on signal {int(signal.SIGABRT)}"


@pytest.mark.asyncio
async def test_clean_exit_during_polling_ends_quietly() -> None:
    waiter = ScriptedWaiter(polls=[WaitOutcome.from_status(exit_status(0))])
    outcome = await make_supervisor(waiter, StubActivation()).run()
    assert outcome.is_clean
    assert len(waiter.calls) == 1


@pytest.mark.asyncio
async def test_activated_no_fork_blocks_until_exit() -> None:
    waiter = ScriptedWaiter(blocking=WaitOutcome.from_status(exit_status(0)))
    activation = StubActivation(results=[True])
    outcome = await make_supervisor(waiter, activation).run()
    assert outcome.is_clean
    assert waiter.calls == [(PID, True)]
    assert activation.activate_calls == [PID]


@pytest.mark.asyncio
async def test_activated_no_fork_failure_after_blocking_wait() -> None:
    waiter = ScriptedWaiter(blocking=WaitOutcome.from_status(exit_status(1)))
    with pytest.raises(ChildEarlyExitError) as info:
        await make_supervisor(waiter, StubActivation(results=[True])).run()
    assert info.value.exit_code == 1


@pytest.mark.asyncio
async def test_activation_retried_until_success_then_blocks() -> None:
    waiter = ScriptedWaiter()
    activation = StubActivation(results=[False, False, True])
    outcome = await make_supervisor(waiter, activation).run()
    assert outcome.is_clean
    assert activation.activate_calls == [PID] * 3
    assert waiter.calls == [(PID, False), (PID, False), (PID, True)]


@pytest.mark.asyncio
async def test_detach_never_blocks_and_activates_once() -> None:
    waiter = ScriptedWaiter()
    activation = StubActivation(results=[True])
    outcome = await make_supervisor(waiter, activation, detach=True).run()
    assert outcome.kind is WaitKind.RUNNING
    assert activation.activate_calls == [PID]
    assert all(blocking is False for _, blocking in waiter.calls)
    assert len(waiter.calls) == 5


@pytest.mark.asyncio
async def test_detach_still_reports_early_crash() -> None:
    waiter = ScriptedWaiter(polls=[WaitOutcome.from_status(exit_status(2))])
    with pytest.raises(ChildEarlyExitError):
        await make_supervisor(waiter, StubActivation(results=[True]), detach=True).run()


@pytest.mark.asyncio
async def test_step_transitions() -> None:
    supervisor = make_supervisor(ScriptedWaiter(), StubActivation(results=[True]))
    state = await supervisor.step(Polling(attempt=1))
    assert isinstance(state, WaitingIndefinitely)
    state = await supervisor.step(state)
    assert isinstance(state, Done)
    assert await supervisor.step(state) is state


@pytest.mark.asyncio
async def test_step_carries_activation_forward() -> None:
    activation = StubActivation(results=[True])
    supervisor = make_supervisor(ScriptedWaiter(), activation, detach=True)
    state = await supervisor.step(Polling(attempt=1))
    assert state == Polling(attempt=2, activated=True)
    await supervisor.step(state)
    assert activation.activate_calls == [PID]


def test_attempts_must_be_positive() -> None:
    with pytest.raises(ValueError, match="polling attempt"):
        make_supervisor(ScriptedWaiter(), StubActivation(), attempts=0)


class TestProcessWaiter:
    """ProcessWaiter over a patched os.waitpid."""

    def test_running(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("neovide_start.supervisor.os.waitpid", lambda pid, opts: (0, 0))
        assert ProcessWaiter().wait(PID, blocking=False).kind is WaitKind.RUNNING

    def test_exited(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            "neovide_start.supervisor.os.waitpid", lambda pid, opts: (pid, exit_status(5))
        )
        outcome = ProcessWaiter().wait(PID, blocking=True)
        assert outcome.code == 5

    def test_blocking_flag_selects_options(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import os

        seen: list[int] = []

        def fake_waitpid(pid: int, opts: int) -> tuple[int, int]:
            seen.append(opts)
            return pid, 0

        monkeypatch.setattr("neovide_start.supervisor.os.waitpid", fake_waitpid)
        ProcessWaiter().wait(PID, blocking=True)
        ProcessWaiter().wait(PID, blocking=False)
        assert seen == [0, os.WNOHANG]

    def test_already_reaped_is_clean(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def reaped(pid: int, opts: int) -> tuple[int, int]:
            raise ChildProcessError(10, "No child processes")

        monkeypatch.setattr("neovide_start.supervisor.os.waitpid", reaped)
        assert ProcessWaiter().wait(PID, blocking=False).is_clean
