"""
lockable-file - Advisory whole-file locks for already-open files

Wraps flock(2), fcntl(2) record locks and Windows LockFileEx behind one
shared/exclusive, blocking/non-blocking API that reports contention with a
single LockConflictError on every platform.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any

__all__ = [
    "__version__",
    "LockableFile",
    "LockConfig",
    "LockMechanism",
    "LockableFileError",
    "LockConflictError",
    "LockSystemError",
    "UnsupportedMechanismError",
    "PlatformLockDriver",
    "setup_logging",
]

_EXPORTS = {
    "__version__": "lockable_file.core.version",
    "LockableFile": "lockable_file.core.locks",
    "PlatformLockDriver": "lockable_file.core.locks",
    "LockConfig": "lockable_file.core.config",
    "LockMechanism": "lockable_file.core.config",
    "LockableFileError": "lockable_file.core.exceptions",
    "LockConflictError": "lockable_file.core.exceptions",
    "LockSystemError": "lockable_file.core.exceptions",
    "UnsupportedMechanismError": "lockable_file.core.exceptions",
    "setup_logging": "lockable_file.core.logging",
}

logging.getLogger(__name__).addHandler(logging.NullHandler())

if TYPE_CHECKING:
    from lockable_file.core.config import LockConfig, LockMechanism
    from lockable_file.core.exceptions import (
        LockableFileError,
        LockConflictError,
        LockSystemError,
        UnsupportedMechanismError,
    )
    from lockable_file.core.locks import LockableFile, PlatformLockDriver
    from lockable_file.core.logging import setup_logging
    from lockable_file.core.version import __version__


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module = importlib.import_module(_EXPORTS[name])
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
