"""Short supervision window after spawning the child.

A GUI application may start and then die a moment later (bad arguments,
missing runtime, crash during setup). The supervisor polls the child a few
times so such failures surface as the launcher's own exit status. When the
child takes focus and ``--no-fork`` is in effect, it waits for the child to
exit instead.

States: ``Polling(attempt)`` -> ``WaitingIndefinitely`` -> ``Done(outcome)``.
The child is never signalled by the launcher.
"""
from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass

import structlog

from neovide_start.activation import ActivationBackend
from neovide_start.core.enums import WaitKind
from neovide_start.core.exceptions import ChildEarlyExitError, ChildSignaledError
from neovide_start.core.models import WaitOutcome

logger = structlog.get_logger(__name__)

DEFAULT_ATTEMPTS = 5
DEFAULT_INTERVAL_S = 0.1


class ProcessWaiter:
    """Thin wrapper over ``os.waitpid`` returning decoded outcomes."""

    def wait(self, pid: int, *, blocking: bool) -> WaitOutcome:
        try:
            waited, status = os.waitpid(pid, 0 if blocking else os.WNOHANG)
        except ChildProcessError:
            # Already reaped; nothing left to report.
            logger.debug("child_already_reaped", pid=pid)
            return WaitOutcome.from_status(0)
        if waited == 0:
            return WaitOutcome.running()
        return WaitOutcome.from_status(status)


@dataclass(frozen=True)
class Polling:
    attempt: int
    activated: bool = False


@dataclass(frozen=True)
class WaitingIndefinitely:
    pass


@dataclass(frozen=True)
class Done:
    outcome: WaitOutcome


SupervisorState = Polling | WaitingIndefinitely | Done


class Supervisor:
    """Watches one spawned child for a bounded number of polls.

    Args:
        pid: Process id of the spawned child.
        executable: Path of the child, used in diagnostics.
        detach: True for ``--fork``: never block on the child.
        activation: Backend used to bring the child to the foreground.
        waiter: Wait primitive (defaults to ``os.waitpid``).
        attempts: Number of polling attempts.
        interval_s: Delay before each poll.
    """

    def __init__(
        self,
        pid: int,
        executable: str,
        *,
        detach: bool,
        activation: ActivationBackend,
        waiter: ProcessWaiter | None = None,
        attempts: int = DEFAULT_ATTEMPTS,
        interval_s: float = DEFAULT_INTERVAL_S,
    ) -> None:
        if attempts < 1:
            raise ValueError("At least one polling attempt is required.")
        self._pid = pid
        self._executable = executable
        self._detach = detach
        self._activation = activation
        self._waiter = waiter or ProcessWaiter()
        self._attempts = attempts
        self._interval_s = interval_s

    async def run(self) -> WaitOutcome:
        """Supervise the child until a definite outcome or the polls run out.

        Returns:
            The final outcome: RUNNING if the child outlived the window, or a
            clean exit.

        Raises:
            ChildEarlyExitError: The child exited with a non-zero status.
            ChildSignaledError: The child was killed or stopped by a signal.
        """
        state: SupervisorState = Polling(attempt=1)
        while not isinstance(state, Done):
            state = await self.step(state)

        outcome = state.outcome
        if outcome.is_definite and not outcome.is_clean:
            self._fail(outcome)
        logger.info("supervision_finished", pid=self._pid, outcome=outcome.kind.value)
        return outcome

    async def step(self, state: SupervisorState) -> SupervisorState:
        """Advance the state machine by one transition."""
        if isinstance(state, Done):
            return state
        if isinstance(state, WaitingIndefinitely):
            return Done(self._waiter.wait(self._pid, blocking=True))

        activated = state.activated or self._activate()
        await asyncio.sleep(self._interval_s)

        if activated and not self._detach:
            logger.debug("waiting_for_child", pid=self._pid, attempt=state.attempt)
            return WaitingIndefinitely()

        outcome = self._waiter.wait(self._pid, blocking=False)
        if outcome.is_definite:
            return Done(outcome)
        if state.attempt >= self._attempts:
            logger.debug("child_still_running", pid=self._pid, attempts=state.attempt)
            return Done(outcome)
        return Polling(attempt=state.attempt + 1, activated=activated)

    def _activate(self) -> bool:
        activated = self._activation.activate(self._pid)
        logger.debug("activation_attempted", pid=self._pid, activated=activated)
        return activated

    def _fail(self, outcome: WaitOutcome) -> None:
        message = f"{self._executable} {outcome.describe()}"
        if outcome.kind is WaitKind.EXITED:
            raise ChildEarlyExitError(message, status=outcome.launcher_exit_code)
        raise ChildSignaledError(message, signal=outcome.signal)
