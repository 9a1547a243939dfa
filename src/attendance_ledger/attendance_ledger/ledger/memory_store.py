from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from ..accounts.model import Account
from ..attendance.model import AttendanceRecord
from ..core.exceptions import RecordNotFound
from .events import LedgerEvent
from .repository import LedgerSession, LedgerStore

logger = logging.getLogger(__name__)


class InMemoryLedgerStore(LedgerStore):
    """Process-local ledger storage.

    Records live once in an arena (``_records``); both date indices hold arena
    positions, so a checkout written through one index is visible through the
    other. A single re-entrant lock serializes every session.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._admin: Optional[str] = None
        self._created_at = 0
        self._accounts: Dict[str, Account] = {}
        self._records: List[AttendanceRecord] = []
        self._by_date_then_account: Dict[str, Dict[str, int]] = {}
        self._by_date: Dict[str, List[int]] = {}
        self._events: List[LedgerEvent] = []

    @contextmanager
    def transaction(self) -> Iterator[LedgerSession]:
        with self._lock:
            session = _MemorySession(self, writable=True)
            try:
                yield session
            except Exception:
                session.rollback()
                raise

    @contextmanager
    def snapshot(self) -> Iterator[LedgerSession]:
        with self._lock:
            yield _MemorySession(self, writable=False)


class _MemorySession(LedgerSession):
    def __init__(self, store: InMemoryLedgerStore, *, writable: bool):
        self._store = store
        self._writable = writable
        self._undo: List[Callable[[], None]] = []

    def rollback(self) -> None:
        if not self._undo:
            return
        logger.warning("Rolling back %d staged ledger write(s)", len(self._undo))
        while self._undo:
            self._undo.pop()()

    def _require_writable(self) -> None:
        if not self._writable:
            raise RuntimeError("Ledger snapshot is read-only")

    def get_admin(self) -> Optional[str]:
        return self._store._admin

    def create_ledger(self, *, admin_address: str, created_at: int) -> None:
        self._require_writable()
        store = self._store
        store._admin = admin_address
        store._created_at = created_at

        def undo() -> None:
            store._admin = None
            store._created_at = 0

        self._undo.append(undo)

    def get_account(self, address: str) -> Optional[Account]:
        return self._store._accounts.get(address)

    def add_account(self, account: Account) -> None:
        self._require_writable()
        accounts = self._store._accounts
        accounts[account.address] = account
        self._undo.append(lambda: accounts.pop(account.address, None))

    def get_record(self, user_address: str, date: str) -> Optional[AttendanceRecord]:
        slot = self._store._by_date_then_account.get(date, {}).get(user_address)
        if slot is None:
            return None
        return self._store._records[slot]

    def add_record(self, record: AttendanceRecord) -> None:
        self._require_writable()
        store = self._store
        slot = len(store._records)
        store._records.append(record)
        store._by_date_then_account.setdefault(record.date, {})[record.user_address] = slot
        store._by_date.setdefault(record.date, []).append(slot)

        def undo() -> None:
            store._by_date[record.date].pop()
            if not store._by_date[record.date]:
                del store._by_date[record.date]
            del store._by_date_then_account[record.date][record.user_address]
            if not store._by_date_then_account[record.date]:
                del store._by_date_then_account[record.date]
            store._records.pop()

        self._undo.append(undo)

    def update_checkout(self, *, user_address: str, date: str, check_out_time: int) -> AttendanceRecord:
        self._require_writable()
        store = self._store
        slot = store._by_date_then_account.get(date, {}).get(user_address)
        if slot is None:
            raise RecordNotFound(f"No attendance record for {user_address} on {date}")

        previous = store._records[slot]
        updated = replace(previous, check_out_time=check_out_time)
        store._records[slot] = updated

        def undo() -> None:
            store._records[slot] = previous

        self._undo.append(undo)
        return updated

    def list_records_for_date(self, date: str) -> Sequence[AttendanceRecord]:
        records = self._store._records
        return [records[slot] for slot in self._store._by_date.get(date, [])]

    def append_event(self, event: LedgerEvent) -> LedgerEvent:
        self._require_writable()
        events = self._store._events
        stored = replace(event, sequence=len(events) + 1)
        events.append(stored)
        self._undo.append(events.pop)
        return stored

    def list_events(self, *, since: int, limit: int) -> Sequence[LedgerEvent]:
        return list(self._store._events[since : since + limit])
