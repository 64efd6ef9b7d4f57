"""Start the target executable as a child of the launcher."""
from __future__ import annotations

import os
from collections.abc import Mapping, Sequence

import structlog

from neovide_start.core.exceptions import SpawnFailedError

logger = structlog.get_logger(__name__)


def build_argv(executable: str, arguments: Sequence[str]) -> list[str]:
    """Argument vector for the child: the executable path, then its arguments."""
    return [executable, *arguments]


def spawn(
    executable: str,
    arguments: Sequence[str],
    env: Mapping[str, str] | None = None,
) -> int:
    """Spawn ``executable`` with ``posix_spawn`` and return the child pid.

    The launcher stays in place as the parent; the child inherits the
    launcher's environment unless ``env`` is given.

    Args:
        executable: Absolute path of the program to run.
        arguments: Arguments forwarded after the program path.
        env: Environment for the child (defaults to ``os.environ``).

    Returns:
        Process id of the child.

    Raises:
        SpawnFailedError: If the spawn call fails for any reason.
    """
    argv = build_argv(executable, arguments)
    try:
        pid = os.posix_spawn(executable, argv, os.environ if env is None else env)
    except OSError as exc:
        raise SpawnFailedError(executable, exc.errno or 0) from exc

    logger.info("child_spawned", pid=pid, executable=executable, argc=len(argv))
    return pid
