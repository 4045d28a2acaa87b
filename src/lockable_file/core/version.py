"""Version information for lockable-file."""

__version__ = "1.0.0"
