"""Pytest configuration and fixtures for lockable-file tests"""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from lockable_file.core.constants import BLOCKING_ENV, MECHANISM_ENV


@pytest.fixture(autouse=True)
def _clear_lock_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment overrides out of the default policy."""
    monkeypatch.delenv(MECHANISM_ENV, raising=False)
    monkeypatch.delenv(BLOCKING_ENV, raising=False)


@pytest.fixture
def lock_path(tmp_path: Path) -> Path:
    """Create an empty file to lock"""
    path = tmp_path / "target.lock"
    path.write_bytes(b"")
    return path


@pytest.fixture
def open_handle(lock_path: Path) -> Iterator[Callable[..., object]]:
    """Open independent handles to lock_path; any left open are closed at teardown"""
    handles = []

    def _open(mode: str = "a+") -> object:
        handle = open(str(lock_path), mode)
        handles.append(handle)
        return handle

    yield _open

    for handle in handles:
        if not handle.closed:
            handle.close()
