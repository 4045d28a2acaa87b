"""Tests for lock policy configuration."""

import logging

import pytest

from lockable_file.core.config import LockConfig, LockMechanism
from lockable_file.core.constants import BLOCKING_ENV, MECHANISM_ENV


class TestLockMechanism:
    """Test mechanism parsing"""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("flock", LockMechanism.FLOCK),
            ("FCNTL", LockMechanism.FCNTL),
            ("  fcntl ", LockMechanism.FCNTL),
            (LockMechanism.FLOCK, LockMechanism.FLOCK),
        ],
    )
    def test_parse_accepts_members_and_names(self, value, expected):
        assert LockMechanism.parse(value) is expected

    @pytest.mark.parametrize(("code", "expected"), [(0, LockMechanism.FLOCK), (1, LockMechanism.FCNTL)])
    def test_parse_accepts_numeric_codes(self, code, expected):
        assert LockMechanism.parse(code) is expected

    @pytest.mark.parametrize("value", ["lockf", "", 2, -1, True, None])
    def test_parse_rejects_unknown_values(self, value):
        with pytest.raises(ValueError, match="Unknown lock mechanism"):
            LockMechanism.parse(value)


class TestLockConfig:
    """Test LockConfig defaults and environment overrides"""

    def test_defaults(self):
        config = LockConfig()
        assert config.blocking is True
        assert config.mechanism is LockMechanism.FLOCK
        assert config.to_dict() == {"blocking": True, "mechanism": "flock"}

    def test_from_env_without_overrides_uses_defaults(self):
        assert LockConfig.from_env({}) == LockConfig()

    def test_from_env_reads_overrides(self):
        config = LockConfig.from_env({MECHANISM_ENV: "FCNTL", BLOCKING_ENV: "no"})
        assert config.mechanism is LockMechanism.FCNTL
        assert config.blocking is False

    @pytest.mark.parametrize(("raw", "expected"), [("1", True), ("on", True), ("0", False), ("False", False)])
    def test_from_env_parses_booleans(self, raw, expected):
        assert LockConfig.from_env({BLOCKING_ENV: raw}).blocking is expected

    def test_from_env_ignores_unknown_mechanism(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = LockConfig.from_env({MECHANISM_ENV: "lockf"})

        assert config.mechanism is LockMechanism.FLOCK
        assert "Unknown lock mechanism 'lockf'" in caplog.text

    def test_from_env_ignores_invalid_boolean(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = LockConfig.from_env({BLOCKING_ENV: "maybe"})

        assert config.blocking is True
        assert BLOCKING_ENV in caplog.text

    def test_from_env_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv(MECHANISM_ENV, "fcntl")
        assert LockConfig.from_env().mechanism is LockMechanism.FCNTL
