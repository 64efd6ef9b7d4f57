"""Split the launcher's command line into its own flags and child arguments."""
from __future__ import annotations

from collections.abc import Sequence

from neovide_start.core.models import ArgumentPartition

FORK = "--fork"
NO_FORK = "--no-fork"
SEPARATOR = "--"
FORK_OPTIONS = frozenset({FORK, NO_FORK})


def partition_arguments(argv: Sequence[str]) -> ArgumentPartition:
    """Partition raw arguments (program name excluded).

    Only tokens before the first ``--`` are scanned for ``--fork`` and
    ``--no-fork``. The last one given decides ``detach``; all of them are
    removed. Tokens after ``--`` are forwarded behind a re-inserted ``--``
    when there are any.

    Args:
        argv: Raw command-line arguments.

    Returns:
        ArgumentPartition with the detach flag and forwarded arguments.
    """
    tokens = list(argv)
    if SEPARATOR in tokens:
        split = tokens.index(SEPARATOR)
        primary, secondary = tokens[:split], tokens[split + 1 :]
    else:
        primary, secondary = tokens, []

    fork_option = next((t for t in reversed(primary) if t in FORK_OPTIONS), None)
    forwarded = [t for t in primary if t not in FORK_OPTIONS]
    if secondary:
        forwarded += [SEPARATOR, *secondary]

    return ArgumentPartition(detach=fork_option == FORK, arguments=tuple(forwarded))
