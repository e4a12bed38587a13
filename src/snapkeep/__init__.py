"""
snapkeep - layered configuration profiles and command hooks for backups.

Profiles are TOML documents that can include other profiles; the merged
result drives repository access and the hooks run around every command.
"""

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = ["__version__"]
