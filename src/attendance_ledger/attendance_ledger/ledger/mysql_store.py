from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Sequence

import mysql.connector

from ..accounts.model import Account
from ..attendance.model import AttendanceRecord
from ..core.enums import EventKind, Role
from ..core.exceptions import AlreadyInitialized, AlreadyMarked, AlreadyRegistered, RecordNotFound
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_transaction, fetchall, fetchone
from .events import LedgerEvent
from .repository import LedgerSession, LedgerStore

logger = logging.getLogger(__name__)

LEDGER_ROW_ID = 1

_RECORD_COLUMNS = "user_address, att_date, check_in_time, check_out_time, is_present, marked_by"


class MySQLLedgerStore(LedgerStore):
    """Ledger storage backed by the MySQL schema in ``database/schema.sql``.

    Read-write sessions lock the ``ledger_meta`` row first, so entry operations
    on one deployment run one after another.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self) -> Iterator[LedgerSession]:
        with db_transaction(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT admin_address FROM ledger_meta WHERE ledger_id=%s FOR UPDATE",
                (LEDGER_ROW_ID,),
            )
            row = fetchone(cur)
            yield _MySQLSession(cur, admin=_text(row["admin_address"]) if row else None, writable=True)

    @contextmanager
    def snapshot(self) -> Iterator[LedgerSession]:
        with db_transaction(self._conn_factory, readonly=True) as (_, cur):
            cur.execute("SELECT admin_address FROM ledger_meta WHERE ledger_id=%s", (LEDGER_ROW_ID,))
            row = fetchone(cur)
            yield _MySQLSession(cur, admin=_text(row["admin_address"]) if row else None, writable=False)


def _text(value: Any) -> str:
    # Key columns are VARBINARY; the connector hands them back as bytes.
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return value


def _row_to_account(r: Dict[str, Any]) -> Account:
    return Account(
        address=_text(r["address"]),
        name=r["name"],
        role=Role.from_code(int(r["role_code"])),
        registration_time=int(r["registration_time"]),
    )


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        user_address=_text(r["user_address"]),
        date=_text(r["att_date"]),
        check_in_time=int(r["check_in_time"]),
        check_out_time=int(r["check_out_time"]),
        is_present=bool(r["is_present"]),
        marked_by=_text(r["marked_by"]),
    )


def _row_to_event(r: Dict[str, Any]) -> LedgerEvent:
    return LedgerEvent(
        kind=EventKind(r["kind"]),
        timestamp=int(r["emitted_at"]),
        data=json.loads(r["payload"]),
        sequence=int(r["sequence"]),
    )


class _MySQLSession(LedgerSession):
    def __init__(self, cur, *, admin: Optional[str], writable: bool):
        self._cur = cur
        self._admin = admin
        self._writable = writable

    def _require_writable(self) -> None:
        if not self._writable:
            raise RuntimeError("Ledger snapshot is read-only")

    def get_admin(self) -> Optional[str]:
        return self._admin

    def create_ledger(self, *, admin_address: str, created_at: int) -> None:
        self._require_writable()
        try:
            self._cur.execute(
                "INSERT INTO ledger_meta(ledger_id, admin_address, created_at) VALUES(%s,%s,%s)",
                (LEDGER_ROW_ID, admin_address, created_at),
            )
        except mysql.connector.IntegrityError:
            # Lost the race against a concurrent initialize.
            raise AlreadyInitialized("Ledger is already initialized") from None
        self._admin = admin_address

    def get_account(self, address: str) -> Optional[Account]:
        self._cur.execute(
            "SELECT address, name, role_code, registration_time FROM accounts WHERE address=%s",
            (address,),
        )
        row = fetchone(self._cur)
        return _row_to_account(row) if row else None

    def add_account(self, account: Account) -> None:
        self._require_writable()
        try:
            self._cur.execute(
                "INSERT INTO accounts(address, name, role_code, registration_time) VALUES(%s,%s,%s,%s)",
                (account.address, account.name, account.role.code, account.registration_time),
            )
        except mysql.connector.IntegrityError:
            raise AlreadyRegistered(f"Account {account.address} is already registered") from None

    def get_record(self, user_address: str, date: str) -> Optional[AttendanceRecord]:
        self._cur.execute(
            f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE user_address=%s AND att_date=%s",
            (user_address, date),
        )
        row = fetchone(self._cur)
        return _row_to_record(row) if row else None

    def add_record(self, record: AttendanceRecord) -> None:
        self._require_writable()
        try:
            self._cur.execute(
                f"INSERT INTO attendance_records({_RECORD_COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s)",
                (
                    record.user_address,
                    record.date,
                    record.check_in_time,
                    record.check_out_time,
                    1 if record.is_present else 0,
                    record.marked_by,
                ),
            )
        except mysql.connector.IntegrityError:
            raise AlreadyMarked(f"Attendance already marked for {record.user_address} on {record.date}") from None

    def update_checkout(self, *, user_address: str, date: str, check_out_time: int) -> AttendanceRecord:
        self._require_writable()
        self._cur.execute(
            "UPDATE attendance_records SET check_out_time=%s WHERE user_address=%s AND att_date=%s",
            (check_out_time, user_address, date),
        )
        record = self.get_record(user_address, date)
        if record is None:
            raise RecordNotFound(f"No attendance record for {user_address} on {date}")
        return record

    def list_records_for_date(self, date: str) -> Sequence[AttendanceRecord]:
        self._cur.execute(
            f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE att_date=%s ORDER BY record_id ASC",
            (date,),
        )
        return [_row_to_record(r) for r in fetchall(self._cur)]

    def append_event(self, event: LedgerEvent) -> LedgerEvent:
        self._require_writable()
        self._cur.execute(
            "INSERT INTO ledger_events(kind, emitted_at, payload) VALUES(%s,%s,%s)",
            (event.kind.value, event.timestamp, json.dumps(dict(event.data), ensure_ascii=False)),
        )
        sequence = int(self._cur.lastrowid)
        logger.debug("Appended %s event #%d", event.kind.value, sequence)
        return LedgerEvent(kind=event.kind, timestamp=event.timestamp, data=event.data, sequence=sequence)

    def list_events(self, *, since: int, limit: int) -> Sequence[LedgerEvent]:
        self._cur.execute(
            """
            SELECT sequence, kind, emitted_at, payload
            FROM ledger_events
            WHERE sequence > %s
            ORDER BY sequence ASC
            LIMIT %s
            """,
            (int(since), int(limit)),
        )
        return [_row_to_event(r) for r in fetchall(self._cur)]
