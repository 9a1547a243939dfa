from __future__ import annotations

import pytest

from attendance_ledger.ledger.memory_store import InMemoryLedgerStore
from attendance_ledger.ledger.service import AttendanceLedger
from attendance_ledger.main import create_app


# 2024-01-10 10:00:00 UTC
START_TS = 1_704_880_800


class FakeClock:
    def __init__(self, start: int = START_TS):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int = 1) -> int:
        self.now += seconds
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def ledger(store, clock) -> AttendanceLedger:
    return AttendanceLedger(store, clock=clock)


@pytest.fixture
def app(clock):
    return create_app("config.testing", clock=clock)


@pytest.fixture
def client(app):
    return app.test_client()
