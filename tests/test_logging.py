"""Tests for logging helpers and exception formatting."""

import errno
import json
import logging

import pytest

import lockable_file.core.logging as logging_module
from lockable_file.core.exceptions import (
    LockableFileError,
    LockConflictError,
    LockSystemError,
    UnsupportedMechanismError,
)
from lockable_file.core.logging import JSONFormatter, setup_logging, with_log_context


@pytest.fixture
def restore_package_logger():
    logger = logging.getLogger("lockable_file")
    level = logger.level
    handlers = list(logger.handlers)
    yield logger
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    logging_module._configured_handler = None


class TestLoggingSetup:
    """Test logging configuration"""

    def test_json_formatter_includes_context_fields(self):
        formatter = JSONFormatter()
        record = logging.LogRecord(
            name="lockable_file.core.locks.file",
            level=logging.DEBUG,
            pathname=__file__,
            lineno=10,
            msg="Acquired %s lock",
            args=("exclusive",),
            exc_info=None,
        )
        record.file_name = "/tmp/target.lock"

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "Acquired exclusive lock"
        assert payload["level"] == "DEBUG"
        assert payload["file_name"] == "/tmp/target.lock"
        assert "args" not in payload

    def test_with_log_context_merges_and_drops_none(self):
        base = logging.getLogger("lockable_file.test")
        adapter = with_log_context(base, file_name="a.lock", mechanism=None)
        nested = with_log_context(adapter, mechanism="fcntl")

        assert adapter.extra == {"file_name": "a.lock"}
        assert nested.extra == {"file_name": "a.lock", "mechanism": "fcntl"}
        assert nested.logger is base

    def test_call_extra_overrides_persistent_context(self, caplog):
        base = logging.getLogger("lockable_file.test")
        adapter = with_log_context(base, file_name="a.lock", mechanism="flock")

        with caplog.at_level(logging.INFO, logger="lockable_file.test"):
            adapter.info("switched", extra={"mechanism": "fcntl"})
            adapter.info("default")

        switched, default = caplog.records
        assert switched.mechanism == "fcntl"
        assert switched.file_name == "a.lock"
        assert default.mechanism == "flock"

    def test_setup_logging_uses_env_level(self, monkeypatch, restore_package_logger):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        logger = setup_logging()
        assert logger is restore_package_logger
        assert logger.level == logging.DEBUG

    def test_setup_logging_invalid_level_falls_back_to_info(self, restore_package_logger, capsys):
        logger = setup_logging(log_level="LOUD")
        assert logger.level == logging.INFO
        assert "Invalid log level 'LOUD'" in capsys.readouterr().err

    def test_setup_logging_replaces_its_handler(self, restore_package_logger):
        before = len(restore_package_logger.handlers)
        setup_logging(log_level="INFO")
        setup_logging(log_level="WARNING", log_format="json")

        assert len(restore_package_logger.handlers) == before + 1
        assert isinstance(logging_module._configured_handler.formatter, JSONFormatter)


class TestExceptions:
    """Test exception hierarchy and messages"""

    def test_conflict_is_recoverable_error(self):
        error = LockConflictError(exclusive=True, mechanism="flock")
        assert isinstance(error, LockableFileError)
        assert str(error) == "File already locked"

    def test_system_error_reports_native_context(self):
        native = OSError(errno.EIO, "Input/output error")
        error = LockSystemError("Unable to acquire exclusive lock", operation="exclusive lock", mechanism="flock", original_error=native)

        assert error.error_code == errno.EIO
        assert str(error) == (
            f"Unable to acquire exclusive lock - during exclusive lock - via flock - code {errno.EIO} - Input/output error"
        )

    def test_unsupported_mechanism_is_not_a_lock_error(self):
        error = UnsupportedMechanismError("lockf")
        assert isinstance(error, ValueError)
        assert not isinstance(error, LockableFileError)
        assert "'lockf'" in str(error)
