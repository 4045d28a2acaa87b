"""Custom exceptions for lockable-file.

Two outcomes are recoverable and derive from ``LockableFileError``:

- ``LockConflictError``: a non-blocking request found the file locked. It is
  the same type for every mechanism and platform.
- ``LockSystemError``: any other native failure, with the native code and
  message kept for logging.

``UnsupportedMechanismError`` marks a programming mistake and is a
``ValueError`` instead, so handlers for lock errors never swallow it.
"""


class LockableFileError(Exception):
    """Base exception for recoverable locking errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class LockConflictError(LockableFileError):
    """Raised when a non-blocking lock request finds the file already locked.

    Attributes:
        exclusive: Whether the rejected request was exclusive
        mechanism: Name of the mechanism that reported the conflict
    """

    def __init__(
        self,
        message: str = "File already locked",
        *,
        exclusive: bool | None = None,
        mechanism: str | None = None,
        details: str | None = None,
    ):
        self.exclusive = exclusive
        self.mechanism = mechanism
        super().__init__(message, details)


class LockSystemError(LockableFileError):
    """Raised for native lock failures other than contention.

    Examples:
        - Invalid or closed file descriptor
        - File opened in a mode the mechanism cannot lock
        - Locking unsupported by the filesystem
        - I/O error reported by the kernel
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        mechanism: str | None = None,
        error_code: int | None = None,
        details: str | None = None,
        original_error: Exception | None = None,
    ):
        self.operation = operation
        self.mechanism = mechanism
        self.original_error = original_error
        if error_code is None and isinstance(original_error, OSError):
            error_code = original_error.errno
        self.error_code = error_code
        if details is None and original_error is not None:
            if isinstance(original_error, OSError):
                details = original_error.strerror
            else:
                details = str(original_error)
        super().__init__(message, details)

    def __str__(self) -> str:
        parts = [self.message]
        if self.operation:
            parts.append(f"during {self.operation}")
        if self.mechanism:
            parts.append(f"via {self.mechanism}")
        if self.error_code is not None:
            parts.append(f"code {self.error_code}")
        if self.details:
            parts.append(self.details)
        return " - ".join(parts)


class UnsupportedMechanismError(ValueError):
    """Raised when a lock call is made with an unrecognized mechanism.

    Only reachable by bypassing ``LockMechanism``; no native call is attempted.
    """

    def __init__(self, mechanism: object):
        self.mechanism = mechanism
        super().__init__(f"Unrecognized lock mechanism: {mechanism!r}")
