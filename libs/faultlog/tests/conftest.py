"""Shared fixtures for faultlog tests."""

from datetime import datetime

import pytest
from faultlog.store import ErrorLogStore


class SteppingClock:
    """Deterministic clock returning queued moments, then repeating the last one."""

    def __init__(self, *moments: datetime) -> None:
        self._moments = list(moments)
        self.calls = 0

    def __call__(self) -> datetime:
        self.calls += 1
        if len(self._moments) > 1:
            return self._moments.pop(0)
        return self._moments[0]


@pytest.fixture()
def fixed_moment() -> datetime:
    return datetime(2026, 10, 17, 9, 30, 15, 123000)


@pytest.fixture()
def clock_factory():
    return SteppingClock


@pytest.fixture()
def log_dir(tmp_path):
    return tmp_path / "logs" / "syserrs"


@pytest.fixture()
def store(log_dir) -> ErrorLogStore:
    return ErrorLogStore(log_dir)
