"""Import-time selection of the lock driver for the host OS."""

import os

if os.name == "nt":
    from lockable_file.core.locks.windows import WindowsLockDriver as PlatformLockDriver
else:
    from lockable_file.core.locks.posix import PosixLockDriver as PlatformLockDriver

__all__ = ["PlatformLockDriver"]
