"""Locking subsystem for whole-file advisory locks.

The platform driver is chosen once, at import time: ``PosixLockDriver`` on
POSIX hosts and ``WindowsLockDriver`` on Windows. ``LockableFile`` is the
stable API on top of it.
"""

from lockable_file.core.locks.base import HasFileno, LockDriver
from lockable_file.core.locks.driver import PlatformLockDriver
from lockable_file.core.locks.file import LockableFile

__all__ = [
    "HasFileno",
    "LockDriver",
    "LockableFile",
    "PlatformLockDriver",
]
