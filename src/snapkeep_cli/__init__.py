"""
Command-line interface for snapkeep.

Resolves the configuration profiles, sets up logging from the result and
runs the requested command between the configured hooks.
"""

from snapkeep import __version__

__all__ = ["__version__"]
