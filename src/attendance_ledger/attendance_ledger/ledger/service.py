from __future__ import annotations

import logging
from typing import Callable, Optional

from ..accounts.model import Account
from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import now_timestamp
from ..core.constants import CHECKOUT_UNSET, DEFAULT_EVENTS_PAGE_LIMIT, MAX_EVENTS_PAGE_LIMIT
from ..core.enums import SELF_REGISTRABLE_ROLES, Role
from ..core.exceptions import (
    AlreadyInitialized,
    AlreadyMarked,
    AlreadyRegistered,
    InvalidRole,
    NotAuthorized,
    NotInitialized,
    RecordNotFound,
    UserNotFound,
)
from .events import LedgerEvent, attendance_marked, user_registered
from .repository import LedgerSession, LedgerStore

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Use case: the attendance ledger of one deployment.

    Every entry operation takes the authenticated caller address as its first
    argument and runs as one store transaction: all checks happen before the
    first write, and a failure leaves no trace.
    """

    def __init__(self, store: LedgerStore, *, clock: Optional[Callable[[], int]] = None):
        self._store = store
        self._clock = clock or now_timestamp

    def initialize(self, caller: str) -> Account:
        now = self._clock()
        with self._store.transaction() as tx:
            if tx.get_admin() is not None:
                raise AlreadyInitialized("Ledger is already initialized")

            admin = Account(address=caller, name="Admin", role=Role.ADMIN, registration_time=now)
            tx.create_ledger(admin_address=caller, created_at=now)
            tx.add_account(admin)

        logger.info("Ledger initialized by %s", caller)
        return admin

    def register(self, caller: str, name: str, role: Role | int | str) -> Account:
        parsed = Role.parse(role)
        if parsed not in SELF_REGISTRABLE_ROLES:
            raise InvalidRole(f"Role {parsed.value} cannot be self-registered")

        now = self._clock()
        with self._store.transaction() as tx:
            self._require_initialized(tx)
            if tx.get_account(caller) is not None:
                raise AlreadyRegistered(f"Account {caller} is already registered")

            account = Account(address=caller, name=name, role=parsed, registration_time=now)
            tx.add_account(account)
            tx.append_event(user_registered(account, timestamp=now))

        logger.info("Registered %s as %s", caller, parsed.value)
        return account

    def mark_attendance(self, caller: str, user_address: str, date: str, is_present: bool) -> AttendanceRecord:
        now = self._clock()
        with self._store.transaction() as tx:
            self._require_initialized(tx)
            if not self._may_mark(tx, caller=caller, user_address=user_address):
                raise NotAuthorized(f"{caller} may not mark attendance for {user_address}")
            if tx.get_account(user_address) is None:
                raise UserNotFound(f"Account {user_address} is not registered")
            if tx.get_record(user_address, date) is not None:
                raise AlreadyMarked(f"Attendance already marked for {user_address} on {date}")

            record = AttendanceRecord(
                user_address=user_address,
                date=date,
                check_in_time=now,
                check_out_time=CHECKOUT_UNSET,
                is_present=bool(is_present),
                marked_by=caller,
            )
            tx.add_record(record)
            tx.append_event(attendance_marked(record, timestamp=now))

        logger.info("Attendance marked for %s on %s by %s (present=%s)", user_address, date, caller, record.is_present)
        return record

    def mark_checkout(self, caller: str, date: str) -> AttendanceRecord:
        """Check the caller out of their own record. Emits no event."""

        now = self._clock()
        with self._store.transaction() as tx:
            self._require_initialized(tx)
            if tx.get_record(caller, date) is None:
                raise RecordNotFound(f"No attendance record for {caller} on {date}")
            record = tx.update_checkout(user_address=caller, date=date, check_out_time=now)

        logger.info("Checkout recorded for %s on %s", caller, date)
        return record

    def get_account(self, address: str) -> Account:
        with self._store.snapshot() as tx:
            self._require_initialized(tx)
            account = tx.get_account(address)
        if account is None:
            raise UserNotFound(f"Account {address} is not registered")
        return account

    def get_attendance(self, address: str, date: str) -> AttendanceRecord:
        with self._store.snapshot() as tx:
            self._require_initialized(tx)
            record = tx.get_record(address, date)
        if record is None:
            raise RecordNotFound(f"No attendance record for {address} on {date}")
        return record

    def get_daily_attendance(self, date: str) -> list[AttendanceRecord]:
        with self._store.snapshot() as tx:
            self._require_initialized(tx)
            return list(tx.list_records_for_date(date))

    def is_registered(self, address: str) -> bool:
        with self._store.snapshot() as tx:
            if tx.get_admin() is None:
                return False
            return tx.get_account(address) is not None

    def get_admin(self) -> Optional[str]:
        """Admin address, or None while the ledger is not initialized."""

        with self._store.snapshot() as tx:
            return tx.get_admin()

    def get_all_attendance_by_date(self, date: str, caller: str) -> list[AttendanceRecord]:
        with self._store.snapshot() as tx:
            self._require_initialized(tx)
            if not self._has_role(tx, caller, Role.ADMIN):
                raise NotAuthorized(f"{caller} is not the ledger admin")
            return list(tx.list_records_for_date(date))

    def list_events(self, *, since: int = 0, limit: int = DEFAULT_EVENTS_PAGE_LIMIT) -> list[LedgerEvent]:
        limit = max(0, min(int(limit), MAX_EVENTS_PAGE_LIMIT))
        with self._store.snapshot() as tx:
            self._require_initialized(tx)
            return list(tx.list_events(since=max(0, int(since)), limit=limit))

    def is_admin(self, address: str) -> bool:
        with self._store.snapshot() as tx:
            return self._has_role(tx, address, Role.ADMIN)

    def is_teacher(self, address: str) -> bool:
        with self._store.snapshot() as tx:
            return self._has_role(tx, address, Role.TEACHER)

    @staticmethod
    def _has_role(tx: LedgerSession, address: str, role: Role) -> bool:
        account = tx.get_account(address)
        return account is not None and account.role == role

    def _may_mark(self, tx: LedgerSession, *, caller: str, user_address: str) -> bool:
        if caller == user_address:
            return True
        return self._has_role(tx, caller, Role.ADMIN) or self._has_role(tx, caller, Role.TEACHER)

    @staticmethod
    def _require_initialized(tx: LedgerSession) -> str:
        admin = tx.get_admin()
        if admin is None:
            raise NotInitialized("Ledger is not initialized")
        return admin
