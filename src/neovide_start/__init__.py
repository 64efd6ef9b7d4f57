"""neovide-start: launch the installed Neovide bundle from a terminal.

Spawns the application as a child process, forwards arguments, and watches
it briefly so that an immediate crash is reported with a matching exit status.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("neovide-start")
except PackageNotFoundError:
    # Fallback for source-only usage before installation.
    __version__ = "0.1.0"
__license__ = "MIT"
