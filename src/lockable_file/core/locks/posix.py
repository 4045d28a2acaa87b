"""POSIX lock driver backed by `fcntl.flock` and `fcntl.lockf`.

Both mechanisms lock the whole file:

- FLOCK issues ``flock(2)`` with ``LOCK_SH``/``LOCK_EX`` and ``LOCK_NB`` for
  non-blocking requests. Ownership follows the open file description.
- FCNTL issues ``fcntl(2)`` record locks through ``fcntl.lockf`` with offset 0
  and length 0 (to end of file). ``LOCK_NB`` selects ``F_SETLK`` instead of
  ``F_SETLKW``. Ownership follows the process, so handles opened by the same
  process never contend with each other.

Unlocking an unlocked file is a native no-op for both mechanisms.
"""

from __future__ import annotations

import errno
import fcntl
import logging
import os
from collections.abc import Callable

from lockable_file.core.config import LockMechanism
from lockable_file.core.exceptions import LockConflictError, LockSystemError, UnsupportedMechanismError
from lockable_file.core.locks.base import HasFileno, lock_mode

logger = logging.getLogger(__name__)

_FLOCK_CONFLICT_ERRNOS = frozenset({errno.EWOULDBLOCK, errno.EAGAIN})
# POSIX allows F_SETLK to report contention as either EACCES or EAGAIN.
_FCNTL_CONFLICT_ERRNOS = frozenset({errno.EACCES, errno.EAGAIN, errno.EWOULDBLOCK})


def _flock(fd: int, operation: int) -> None:
    fcntl.flock(fd, operation)


def _range_lock(fd: int, operation: int) -> None:
    fcntl.lockf(fd, operation, 0, 0, os.SEEK_SET)


class PosixLockDriver:
    """Whole-file advisory locks on POSIX hosts."""

    name = "posix"
    supports_mechanisms = True

    @staticmethod
    def _resolve(mechanism: LockMechanism) -> tuple[Callable[[int, int], None], frozenset[int]]:
        if mechanism is LockMechanism.FLOCK:
            return _flock, _FLOCK_CONFLICT_ERRNOS
        if mechanism is LockMechanism.FCNTL:
            return _range_lock, _FCNTL_CONFLICT_ERRNOS
        raise UnsupportedMechanismError(mechanism)

    @staticmethod
    def _descriptor(file: HasFileno, operation: str, mechanism: LockMechanism) -> int:
        # Closed file objects raise ValueError from fileno().
        try:
            return file.fileno()
        except (OSError, ValueError) as e:
            raise LockSystemError(
                "Unable to resolve file descriptor",
                operation=operation,
                mechanism=mechanism.value,
                original_error=e,
            ) from e

    def lock(self, file: HasFileno, *, exclusive: bool, blocking: bool, mechanism: LockMechanism) -> None:
        native_call, conflict_errnos = self._resolve(mechanism)
        mode = lock_mode(exclusive)
        fd = self._descriptor(file, f"{mode} lock", mechanism)

        operation = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        if not blocking:
            operation |= fcntl.LOCK_NB

        try:
            native_call(fd, operation)
        except OSError as e:
            if e.errno in conflict_errnos:
                raise LockConflictError(exclusive=exclusive, mechanism=mechanism.value) from e
            logger.debug("%s %s lock failed with errno %s", mechanism.value, mode, e.errno)
            raise LockSystemError(
                f"Unable to acquire {mode} lock",
                operation=f"{mode} lock",
                mechanism=mechanism.value,
                original_error=e,
            ) from e

    def unlock(self, file: HasFileno, *, mechanism: LockMechanism) -> None:
        native_call, _ = self._resolve(mechanism)
        fd = self._descriptor(file, "unlock", mechanism)
        try:
            native_call(fd, fcntl.LOCK_UN)
        except OSError as e:
            raise LockSystemError(
                "Unable to release lock",
                operation="unlock",
                mechanism=mechanism.value,
                original_error=e,
            ) from e
