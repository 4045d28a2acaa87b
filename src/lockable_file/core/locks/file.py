"""Lockable wrapper around an already-open file object."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from typing import Any

from lockable_file.core.config import LockConfig, LockMechanism
from lockable_file.core.exceptions import LockConflictError, LockSystemError, UnsupportedMechanismError
from lockable_file.core.locks.base import LockDriver, lock_mode
from lockable_file.core.locks.driver import PlatformLockDriver
from lockable_file.core.logging import with_log_context


class LockableFile:
    """Attach advisory whole-file locking to a borrowed file object.

    The wrapped file is never duplicated and is only closed by ``close()``,
    ``unlock_and_close()`` or leaving a ``with`` block. No lock state is
    tracked here: every acquire and release goes straight to the OS.

    A single instance must not be used from several threads at once; open the
    file once per thread instead.
    """

    def __init__(
        self,
        file: Any,
        *,
        config: LockConfig | None = None,
        driver: LockDriver | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ):
        self._file = file
        base_logger = logger or logging.getLogger(__name__)
        self._config = replace(config) if config is not None else LockConfig.from_env(logger=base_logger)
        self._driver = driver if driver is not None else PlatformLockDriver()
        self.logger = with_log_context(base_logger, file_name=getattr(file, "name", None))

    def __repr__(self) -> str:
        return (
            f"LockableFile(name={self.name!r}, blocking={self.blocking}, "
            f"mechanism={getattr(self.mechanism, 'value', self.mechanism)!r}, driver={self._driver.name!r})"
        )

    # ==================== POLICY ====================

    @property
    def blocking(self) -> bool:
        return self._config.blocking

    @blocking.setter
    def blocking(self, value: bool) -> None:
        self.set_blocking(value)

    @property
    def mechanism(self) -> LockMechanism:
        return self._config.mechanism

    @property
    def driver(self) -> LockDriver:
        return self._driver

    def set_blocking(self, blocking: bool) -> None:
        """Choose whether the next acquire call waits for the lock."""
        self._config.blocking = bool(blocking)

    def enable_blocking(self) -> None:
        self.set_blocking(True)

    def disable_blocking(self) -> None:
        self.set_blocking(False)

    def select_mechanism(self, mechanism: LockMechanism | str | int) -> None:
        """Pick the POSIX locking mechanism for later calls.

        A no-op on drivers with a single mechanism (Windows), so portable code
        can call it unconditionally. Switching while a lock is held leaves
        that lock to native semantics.
        """
        selected = LockMechanism.parse(mechanism)
        if not self._driver.supports_mechanisms:
            self.logger.debug("Driver '%s' has one mechanism; ignoring '%s'", self._driver.name, selected.value)
            return
        self._config.mechanism = selected

    def use_flock(self) -> None:
        self.select_mechanism(LockMechanism.FLOCK)

    def use_fcntl(self) -> None:
        self.select_mechanism(LockMechanism.FCNTL)

    # ==================== LOCKING ====================

    def acquire_shared(self) -> None:
        """Take a shared (read) lock on the whole file.

        Raises:
            LockConflictError: non-blocking mode and the file is exclusively locked
            LockSystemError: the native call failed for another reason
        """
        self._lock(exclusive=False)

    def acquire_exclusive(self) -> None:
        """Take an exclusive (write) lock on the whole file.

        Raises:
            LockConflictError: non-blocking mode and the file is locked
            LockSystemError: the native call failed for another reason
        """
        self._lock(exclusive=True)

    def release(self) -> None:
        """Drop any lock held through this file. Succeeds if none is held."""
        mechanism = self._checked_mechanism()
        try:
            self._driver.unlock(self._file, mechanism=mechanism)
        except LockSystemError as e:
            self.logger.warning("Failed to release lock: %s", e)
            raise
        self.logger.debug("Released lock")

    def unlock_and_close(self) -> None:
        """Release the lock, then close the file.

        If release fails the file is left open and the error propagates.
        """
        self.release()
        self._file.close()

    @contextmanager
    def shared(self) -> Iterator[LockableFile]:
        """Hold a shared lock for the duration of a ``with`` block."""
        self.acquire_shared()
        try:
            yield self
        finally:
            self.release()

    @contextmanager
    def exclusive(self) -> Iterator[LockableFile]:
        """Hold an exclusive lock for the duration of a ``with`` block."""
        self.acquire_exclusive()
        try:
            yield self
        finally:
            self.release()

    def _checked_mechanism(self) -> LockMechanism:
        mechanism = self._config.mechanism
        if not isinstance(mechanism, LockMechanism):
            raise UnsupportedMechanismError(mechanism)
        return mechanism

    def _lock(self, *, exclusive: bool) -> None:
        mechanism = self._checked_mechanism()
        blocking = self._config.blocking
        mode = lock_mode(exclusive)

        self.logger.debug(
            "Requesting %s lock (driver=%s, mechanism=%s, blocking=%s)",
            mode,
            self._driver.name,
            mechanism.value,
            blocking,
        )
        try:
            self._driver.lock(self._file, exclusive=exclusive, blocking=blocking, mechanism=mechanism)
        except LockConflictError:
            self.logger.debug("%s lock unavailable", mode.capitalize())
            raise
        except LockSystemError as e:
            self.logger.warning("Failed to acquire %s lock: %s", mode, e)
            raise
        self.logger.debug("Acquired %s lock", mode)

    # ==================== FILE PASS-THROUGH ====================

    @property
    def file(self) -> Any:
        return self._file

    @property
    def name(self) -> Any:
        return getattr(self._file, "name", None)

    @property
    def closed(self) -> bool:
        return getattr(self._file, "closed", False)

    def fileno(self) -> int:
        return self._file.fileno()

    def read(self, size: int = -1) -> Any:
        return self._file.read(size)

    def write(self, data: Any) -> int:
        return self._file.write(data)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._file.seek(offset, whence)

    def tell(self) -> int:
        return self._file.tell()

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        """Close the file without an explicit unlock; the OS drops its locks."""
        self._file.close()

    def __enter__(self) -> LockableFile:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.closed:
            return
        if exc_type is None:
            self.unlock_and_close()
            return
        # The body's exception wins over a failed release.
        try:
            self.unlock_and_close()
        except LockSystemError as release_error:
            self.logger.warning("Failed to release lock while handling %s: %s", exc_type.__name__, release_error)
