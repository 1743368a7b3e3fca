"""tasktrack: dependency graph analysis and work planning for task sets."""

from tasktrack.config import VERSION as __version__

__all__ = ["__version__"]
