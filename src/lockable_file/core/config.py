"""Lock policy configuration for lockable-file.

``LockConfig`` holds the per-handle policy: whether acquire calls block and
which POSIX mechanism performs them. Defaults can be seeded from the
environment with ``LockConfig.from_env()``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from lockable_file.core.constants import (
    BLOCKING_ENV,
    DEFAULT_BLOCKING,
    DEFAULT_MECHANISM,
    FALSY_VALUES,
    MECHANISM_ENV,
    TRUTHY_VALUES,
)


class LockMechanism(Enum):
    """Native locking facility used on POSIX hosts. Ignored on Windows.

    FLOCK: ``flock(2)``. Locks belong to the open file description, so two
        independent ``open()`` calls on one path contend even inside a single
        process. Not usable over NFS on every system.
    FCNTL: ``fcntl(2)`` record locks. Works over NFS, but locks belong to the
        *process*: two handles opened by the same process never contend, and
        closing any descriptor for the file drops the process's locks.
    """

    FLOCK = "flock"
    FCNTL = "fcntl"

    @classmethod
    def parse(cls, value: LockMechanism | str | int) -> LockMechanism:
        """Coerce a mechanism, its case-insensitive name or its code into a member."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        elif isinstance(value, int) and not isinstance(value, bool):
            if 0 <= value < len(_MECHANISM_CODES):
                return cls(_MECHANISM_CODES[value])
        raise ValueError(f"Unknown lock mechanism {value!r}; expected one of: flock (0), fcntl (1)")


_MECHANISM_CODES = ("flock", "fcntl")


@dataclass
class LockConfig:
    """Locking policy attached to a single file handle.

    Attributes:
        blocking: Whether acquire calls wait for the lock (default: True)
        mechanism: POSIX mechanism to use (default: LockMechanism.FLOCK)
    """

    blocking: bool = DEFAULT_BLOCKING
    mechanism: LockMechanism = LockMechanism(DEFAULT_MECHANISM)

    def to_dict(self) -> dict[str, Any]:
        return {
            "blocking": self.blocking,
            "mechanism": getattr(self.mechanism, "value", self.mechanism),
        }

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> LockConfig:
        """Build a config from environment overrides, falling back to defaults.

        Unrecognized values are logged and ignored.
        """
        env = os.environ if environ is None else environ
        log = logger or logging.getLogger(__name__)
        config = cls()

        raw_mechanism = env.get(MECHANISM_ENV)
        if raw_mechanism is not None and raw_mechanism.strip():
            try:
                config.mechanism = LockMechanism.parse(raw_mechanism)
            except ValueError:
                log.warning(
                    "Unknown lock mechanism '%s' in %s; using %s",
                    raw_mechanism,
                    MECHANISM_ENV,
                    config.mechanism.value,
                )

        raw_blocking = env.get(BLOCKING_ENV)
        if raw_blocking is not None and raw_blocking.strip():
            normalized = raw_blocking.strip().lower()
            if normalized in TRUTHY_VALUES:
                config.blocking = True
            elif normalized in FALSY_VALUES:
                config.blocking = False
            else:
                log.warning(
                    "Invalid boolean '%s' in %s; using blocking=%s",
                    raw_blocking,
                    BLOCKING_ENV,
                    config.blocking,
                )

        return config
