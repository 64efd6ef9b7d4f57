"""Launcher orchestration: resolve, spawn, supervise, report."""
from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence

import structlog

from neovide_start.activation import ActivationBackend, create_activation
from neovide_start.arguments import partition_arguments
from neovide_start.config import LauncherConfig, config_from_env
from neovide_start.core.enums import ExitCode
from neovide_start.core.exceptions import LauncherError
from neovide_start.diagnostics import ErrorStream
from neovide_start.registry import BundleRegistry, create_registry, resolve_target
from neovide_start.spawner import spawn
from neovide_start.supervisor import ProcessWaiter, Supervisor

logger = structlog.get_logger(__name__)


def run(
    argv: Sequence[str],
    *,
    config: LauncherConfig | None = None,
    registry: BundleRegistry | None = None,
    activation: ActivationBackend | None = None,
    waiter: ProcessWaiter | None = None,
    errors: ErrorStream | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Launch the configured application and return the launcher exit code.

    Every failure is reported once on ``errors`` and turned into its exit
    code. Collaborators default to the real system ones.

    Args:
        argv: Command-line arguments, program name excluded.
        config: Launcher configuration (defaults to ``NEOVIDE_START_CONFIG``).
        registry: Bundle registry used to find the target.
        activation: Foreground activation backend.
        waiter: Wait primitive used by the supervisor.
        errors: Diagnostic stream.
        environ: Environment passed to the child and used for config lookup.

    Returns:
        Process exit code for the launcher.
    """
    errors = errors or ErrorStream(environ=environ)
    try:
        return _launch(argv, config, registry, activation, waiter, environ)
    except LauncherError as exc:
        logger.debug("launch_failed", error=type(exc).__name__, exit_code=int(exc.exit_code))
        errors.report(str(exc))
        return int(exc.exit_code)


def _launch(
    argv: Sequence[str],
    config: LauncherConfig | None,
    registry: BundleRegistry | None,
    activation: ActivationBackend | None,
    waiter: ProcessWaiter | None,
    environ: Mapping[str, str] | None,
) -> int:
    config = config or config_from_env(environ)
    target = config.target

    resolved = resolve_target(
        registry or create_registry(config), target.bundle_id, target.display_name
    )
    partition = partition_arguments(argv)

    activation = activation or create_activation()
    activation.yield_to_bundle(target.bundle_id)

    pid = spawn(resolved.executable, partition.arguments, env=environ)

    supervisor = Supervisor(
        pid,
        resolved.executable,
        detach=partition.detach,
        activation=activation,
        waiter=waiter,
        attempts=config.supervision.attempts,
        interval_s=config.supervision.interval_s,
    )
    asyncio.run(supervisor.run())
    return int(ExitCode.OK)
