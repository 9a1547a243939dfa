from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import mysql.connector
import pytest

from attendance_ledger.accounts.model import Account
from attendance_ledger.attendance.model import AttendanceRecord
from attendance_ledger.core.enums import EventKind, Role
from attendance_ledger.core.exceptions import AlreadyInitialized, AlreadyMarked, AlreadyRegistered
from attendance_ledger.ledger.events import LedgerEvent
from attendance_ledger.ledger.mysql_store import MySQLLedgerStore
from attendance_ledger.ledger.service import AttendanceLedger

ADMIN = "0xadmin"
STUDENT = "0xstudent"
DAY = "2024-01-10"

STUDENT_ACCOUNT = Account(address=STUDENT, name="Alice", role=Role.STUDENT, registration_time=100)
RECORD = AttendanceRecord(
    user_address=STUDENT,
    date=DAY,
    check_in_time=100,
    check_out_time=0,
    is_present=True,
    marked_by=STUDENT,
)


@dataclass
class FakeDatabase:
    """Records what the store sends; answers SELECTs by matching a substring of the SQL."""

    responses: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    failures: dict[str, Exception] = field(default_factory=dict)
    executed: list[tuple[str, tuple]] = field(default_factory=list)
    transactions: list[dict[str, Any]] = field(default_factory=list)
    next_rowid: int = 1
    commits: int = 0
    rollbacks: int = 0
    closes: int = 0

    def sql(self, index: int = -1) -> str:
        return self.executed[index][0]


class FakeCursor:
    def __init__(self, db: FakeDatabase):
        self._db = db
        self._rows: list[dict[str, Any]] = []
        self.lastrowid: Optional[int] = None

    def execute(self, sql: str, params=()):
        self._db.executed.append((" ".join(sql.split()), tuple(params)))
        for needle, exc in self._db.failures.items():
            if needle in sql:
                raise exc
        self._rows = []
        for needle, rows in self._db.responses.items():
            if needle in sql:
                self._rows = list(rows)
                break
        if sql.lstrip().upper().startswith("INSERT"):
            self.lastrowid = self._db.next_rowid
            self._db.next_rowid += 1

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, db: FakeDatabase):
        self._db = db

    def start_transaction(self, **kwargs):
        self._db.transactions.append(kwargs)

    def cursor(self, dictionary: bool = False):
        return FakeCursor(self._db)

    def commit(self):
        self._db.commits += 1

    def rollback(self):
        self._db.rollbacks += 1

    def close(self):
        self._db.closes += 1


class FakeConnFactory:
    def __init__(self, db: FakeDatabase):
        self._db = db

    def connect(self, *, with_database: bool = True):
        return FakeConnection(self._db)


def _store(db: FakeDatabase) -> MySQLLedgerStore:
    return MySQLLedgerStore(FakeConnFactory(db))


def _initialized(**kwargs) -> FakeDatabase:
    responses = {"FROM ledger_meta": [{"admin_address": ADMIN.encode()}]}
    responses.update(kwargs.pop("responses", {}))
    return FakeDatabase(responses=responses, **kwargs)


def test_transaction_locks_ledger_row_and_commits():
    db = _initialized()

    with _store(db).transaction() as tx:
        assert tx.get_admin() == ADMIN

    sql, params = db.executed[0]
    assert sql.startswith("SELECT admin_address FROM ledger_meta")
    assert sql.endswith("FOR UPDATE")
    assert params == (1,)
    assert db.transactions == [{"isolation_level": "READ COMMITTED", "readonly": False}]
    assert (db.commits, db.rollbacks, db.closes) == (1, 0, 1)


def test_error_inside_transaction_rolls_back_and_closes():
    db = _initialized()

    with pytest.raises(RuntimeError):
        with _store(db).transaction() as tx:
            tx.add_account(STUDENT_ACCOUNT)
            raise RuntimeError("boom")

    assert (db.commits, db.rollbacks, db.closes) == (0, 1, 1)


def test_snapshot_is_read_only_and_takes_no_row_lock():
    db = _initialized()

    with _store(db).snapshot() as tx:
        with pytest.raises(RuntimeError):
            tx.add_account(STUDENT_ACCOUNT)

    assert "FOR UPDATE" not in db.sql(0)
    assert db.transactions == [{"isolation_level": "READ COMMITTED", "readonly": True}]
    assert not any(sql.startswith("INSERT") for sql, _ in db.executed)


def test_uninitialized_store_has_no_admin():
    db = FakeDatabase()

    with _store(db).snapshot() as tx:
        assert tx.get_admin() is None


@pytest.mark.parametrize(
    "needle, write, expected",
    [
        (
            "INSERT INTO ledger_meta",
            lambda tx: tx.create_ledger(admin_address=ADMIN, created_at=100),
            AlreadyInitialized,
        ),
        ("INSERT INTO accounts", lambda tx: tx.add_account(STUDENT_ACCOUNT), AlreadyRegistered),
        ("INSERT INTO attendance_records", lambda tx: tx.add_record(RECORD), AlreadyMarked),
    ],
)
def test_duplicate_key_becomes_domain_error(needle, write, expected):
    db = _initialized(failures={needle: mysql.connector.IntegrityError("Duplicate entry")})

    with pytest.raises(expected):
        with _store(db).transaction() as tx:
            write(tx)

    assert (db.commits, db.rollbacks) == (0, 1)


def test_key_columns_are_sent_and_read_back_verbatim():
    row = {
        "user_address": bytearray(STUDENT.encode()),
        "att_date": b"Mon",
        "check_in_time": 100,
        "check_out_time": 0,
        "is_present": 1,
        "marked_by": b"0xteacher",
    }
    db = _initialized(responses={"FROM attendance_records": [row]})

    with _store(db).snapshot() as tx:
        record = tx.get_record(STUDENT, "Mon")
        tx.get_record(STUDENT, "mon")

    assert record == AttendanceRecord(
        user_address=STUDENT,
        date="Mon",
        check_in_time=100,
        check_out_time=0,
        is_present=True,
        marked_by="0xteacher",
    )
    lookups = [params for sql, params in db.executed if "FROM attendance_records" in sql]
    assert lookups == [(STUDENT, "Mon"), (STUDENT, "mon")]


def test_list_events_pages_by_sequence():
    rows = [
        {"sequence": 4, "kind": "AttendanceMarked", "emitted_at": 100, "payload": '{"date": "2024-01-10"}'},
        {"sequence": 5, "kind": "UserRegistered", "emitted_at": 101, "payload": '{"name": "Alice"}'},
    ]
    db = _initialized(responses={"FROM ledger_events": rows})

    with _store(db).snapshot() as tx:
        events = tx.list_events(since=3, limit=2)

    sql, params = db.executed[-1]
    assert "WHERE sequence > %s ORDER BY sequence ASC LIMIT %s" in sql
    assert params == (3, 2)
    assert [(e.sequence, e.kind) for e in events] == [
        (4, EventKind.ATTENDANCE_MARKED),
        (5, EventKind.USER_REGISTERED),
    ]
    assert events[0].data == {"date": DAY}


def test_append_event_takes_sequence_from_insert_id():
    db = _initialized(next_rowid=7)
    event = LedgerEvent(kind=EventKind.USER_REGISTERED, timestamp=100, data={"name": "Alice"})

    with _store(db).transaction() as tx:
        stored = tx.append_event(event)

    assert stored.sequence == 7
    assert db.executed[-1][1] == ("UserRegistered", 100, '{"name": "Alice"}')


def test_initialize_through_service_writes_in_one_transaction(clock):
    db = FakeDatabase()
    ledger = AttendanceLedger(_store(db), clock=clock)

    ledger.initialize(ADMIN)

    statements = [sql.split("(")[0] for sql, _ in db.executed]
    assert statements[1:] == ["INSERT INTO ledger_meta", "INSERT INTO accounts"]
    assert db.executed[2][1] == (ADMIN, "Admin", Role.ADMIN.code, clock.now)
    assert (db.commits, db.rollbacks) == (1, 0)


def test_register_race_rolls_back_without_event(clock):
    db = _initialized(failures={"INSERT INTO accounts": mysql.connector.IntegrityError("Duplicate entry")})
    ledger = AttendanceLedger(_store(db), clock=clock)

    with pytest.raises(AlreadyRegistered):
        ledger.register(STUDENT, "Alice", Role.STUDENT)

    assert not any("ledger_events" in sql for sql, _ in db.executed)
    assert (db.commits, db.rollbacks) == (0, 1)
