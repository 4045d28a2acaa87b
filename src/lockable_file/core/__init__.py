"""Core module - Foundation components for lockable-file.

- Version information
- Custom exceptions
- Lock policy configuration
- Logging helpers
- The locking subsystem (``lockable_file.core.locks``)
"""

from lockable_file.core.config import LockConfig, LockMechanism
from lockable_file.core.exceptions import (
    LockableFileError,
    LockConflictError,
    LockSystemError,
    UnsupportedMechanismError,
)
from lockable_file.core.version import __version__

__all__ = [
    "__version__",
    "LockConfig",
    "LockMechanism",
    "LockableFileError",
    "LockConflictError",
    "LockSystemError",
    "UnsupportedMechanismError",
]
