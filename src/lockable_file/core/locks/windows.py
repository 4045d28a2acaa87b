"""Windows lock driver backed by `LockFileEx` / `UnlockFileEx`.

Windows has a single locking facility, so the POSIX mechanism setting is
ignored. Every request covers the largest representable region starting at
offset 0, which amounts to the whole file.

The kernel32 entry points are resolved on first use and cached for the
lifetime of the process.
"""

from __future__ import annotations

import ctypes
import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass

from lockable_file.core.config import LockMechanism
from lockable_file.core.exceptions import LockConflictError, LockSystemError
from lockable_file.core.locks.base import HasFileno, lock_mode

logger = logging.getLogger(__name__)

LOCKFILE_FAIL_IMMEDIATELY = 0x00000001
LOCKFILE_EXCLUSIVE_LOCK = 0x00000002

ERROR_LOCK_VIOLATION = 33
ERROR_NOT_LOCKED = 158
ERROR_IO_PENDING = 997

WHOLE_FILE_LOW = 0xFFFFFFFF
WHOLE_FILE_HIGH = 0xFFFFFFFF

# LockFileEx documents ERROR_IO_PENDING for contended fail-immediately calls,
# but in practice reports ERROR_LOCK_VIOLATION.
_CONFLICT_CODES = frozenset({ERROR_LOCK_VIOLATION, ERROR_IO_PENDING})


class _Overlapped(ctypes.Structure):
    _fields_ = [
        ("Internal", ctypes.c_void_p),
        ("InternalHigh", ctypes.c_void_p),
        ("Offset", ctypes.c_uint32),
        ("OffsetHigh", ctypes.c_uint32),
        ("hEvent", ctypes.c_void_p),
    ]


@dataclass(frozen=True)
class _Kernel32:
    lock_file_ex: Callable[..., int]
    unlock_file_ex: Callable[..., int]
    get_osfhandle: Callable[[int], int]
    get_last_error: Callable[[], int]
    format_error: Callable[[int], str]


@functools.cache
def _kernel32() -> _Kernel32:
    """Resolve the native lock entry points once per process."""
    import msvcrt

    dll = ctypes.WinDLL("kernel32", use_last_error=True)

    lock_file_ex = dll.LockFileEx
    lock_file_ex.argtypes = [
        ctypes.c_void_p,
        ctypes.c_uint32,
        ctypes.c_uint32,
        ctypes.c_uint32,
        ctypes.c_uint32,
        ctypes.POINTER(_Overlapped),
    ]
    lock_file_ex.restype = ctypes.c_int

    unlock_file_ex = dll.UnlockFileEx
    unlock_file_ex.argtypes = [
        ctypes.c_void_p,
        ctypes.c_uint32,
        ctypes.c_uint32,
        ctypes.c_uint32,
        ctypes.POINTER(_Overlapped),
    ]
    unlock_file_ex.restype = ctypes.c_int

    return _Kernel32(
        lock_file_ex=lock_file_ex,
        unlock_file_ex=unlock_file_ex,
        get_osfhandle=msvcrt.get_osfhandle,
        get_last_error=ctypes.get_last_error,
        format_error=ctypes.FormatError,
    )


def _os_handle(native: _Kernel32, file: HasFileno, operation: str) -> int:
    try:
        return native.get_osfhandle(file.fileno())
    except (OSError, ValueError) as e:
        raise LockSystemError(
            "Unable to resolve Windows file handle",
            operation=operation,
            mechanism=WindowsLockDriver.name,
            original_error=e,
        ) from e


class WindowsLockDriver:
    """Whole-file locks through kernel32 ``LockFileEx``."""

    name = "windows"
    supports_mechanisms = False

    def lock(self, file: HasFileno, *, exclusive: bool, blocking: bool, mechanism: LockMechanism) -> None:
        del mechanism  # Single native mechanism.
        mode = lock_mode(exclusive)

        flags = 0
        if exclusive:
            flags |= LOCKFILE_EXCLUSIVE_LOCK
        if not blocking:
            flags |= LOCKFILE_FAIL_IMMEDIATELY

        native = _kernel32()
        handle = _os_handle(native, file, f"{mode} lock")
        overlapped = _Overlapped()
        if native.lock_file_ex(handle, flags, 0, WHOLE_FILE_LOW, WHOLE_FILE_HIGH, ctypes.byref(overlapped)):
            return

        code = native.get_last_error()
        if code in _CONFLICT_CODES:
            raise LockConflictError(exclusive=exclusive, mechanism=self.name)
        logger.debug("LockFileEx %s lock failed with error %s", mode, code)
        raise LockSystemError(
            f"Unable to acquire {mode} lock",
            operation=f"{mode} lock",
            mechanism=self.name,
            error_code=code,
            details=native.format_error(code),
        )

    def unlock(self, file: HasFileno, *, mechanism: LockMechanism) -> None:
        del mechanism
        native = _kernel32()
        handle = _os_handle(native, file, "unlock")
        overlapped = _Overlapped()
        if native.unlock_file_ex(handle, 0, WHOLE_FILE_LOW, WHOLE_FILE_HIGH, ctypes.byref(overlapped)):
            return

        code = native.get_last_error()
        if code == ERROR_NOT_LOCKED:
            return
        raise LockSystemError(
            "Unable to release lock",
            operation="unlock",
            mechanism=self.name,
            error_code=code,
            details=native.format_error(code),
        )
