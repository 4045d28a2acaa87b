"""Default values and environment variable names for lockable-file.

Environment overrides only seed the policy of newly wrapped files; the
setters on ``LockableFile`` always take precedence afterwards.
"""

# ==================== LOCK POLICY DEFAULTS ====================

DEFAULT_BLOCKING = True
DEFAULT_MECHANISM = "flock"

# ==================== ENVIRONMENT OVERRIDES ====================

MECHANISM_ENV = "LOCKABLE_FILE_MECHANISM"
BLOCKING_ENV = "LOCKABLE_FILE_BLOCKING"
LOG_LEVEL_ENV = "LOG_LEVEL"

TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})
FALSY_VALUES = frozenset({"0", "false", "no", "off"})

# ==================== LOGGING ====================

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
