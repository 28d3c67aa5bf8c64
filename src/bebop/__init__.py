"""bebop: context-aware prompt compiler for AI coding assistants."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("bebop")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
