"""Protocols shared by the platform lock drivers."""

from __future__ import annotations

from typing import Protocol

from lockable_file.core.config import LockMechanism


class HasFileno(Protocol):
    """Anything backed by an OS file descriptor."""

    def fileno(self) -> int: ...


class LockDriver(Protocol):
    """Translates whole-file lock requests into native calls for one OS."""

    name: str
    supports_mechanisms: bool

    def lock(self, file: HasFileno, *, exclusive: bool, blocking: bool, mechanism: LockMechanism) -> None:
        """Acquire a shared or exclusive lock.

        Raises LockConflictError when a non-blocking request is contended and
        LockSystemError for any other native failure.
        """

    def unlock(self, file: HasFileno, *, mechanism: LockMechanism) -> None:
        """Release any lock held through file. Succeeds when nothing is held."""


def lock_mode(exclusive: bool) -> str:
    return "exclusive" if exclusive else "shared"
