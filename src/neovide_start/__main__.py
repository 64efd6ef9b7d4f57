"""Console entry point: ``neovide-start`` / ``python -m neovide_start``."""
from __future__ import annotations

import sys

from neovide_start.core.enums import ExitCode
from neovide_start.launcher import run
from neovide_start.logging_config import configure_logging


def main() -> None:
    """Launch Neovide with the process arguments and exit with its status."""
    configure_logging()
    try:
        code = run(sys.argv[1:])
    except KeyboardInterrupt:
        # Ctrl-C while waiting on the child; the child is left alone.
        code = int(ExitCode.INTERRUPTED)
    raise SystemExit(code)


if __name__ == "__main__":
    main()
