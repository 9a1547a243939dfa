from __future__ import annotations

from typing import ContextManager, Optional, Protocol, Sequence

from ..accounts.model import Account
from ..attendance.model import AttendanceRecord
from .events import LedgerEvent


class LedgerSession(Protocol):
    """Giao diện một giao dịch trên sổ điểm danh.

    Lưu ý (DIP): AttendanceLedger chỉ phụ thuộc vào interface này; mọi ghi trong
    một session được áp dụng trọn vẹn hoặc huỷ toàn bộ.
    """

    def get_admin(self) -> Optional[str]:
        raise NotImplementedError

    def create_ledger(self, *, admin_address: str, created_at: int) -> None:
        raise NotImplementedError

    def get_account(self, address: str) -> Optional[Account]:
        raise NotImplementedError

    def add_account(self, account: Account) -> None:
        raise NotImplementedError

    def get_record(self, user_address: str, date: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def add_record(self, record: AttendanceRecord) -> None:
        """Single write path for a new record: updates both date indices together."""

        raise NotImplementedError

    def update_checkout(self, *, user_address: str, date: str, check_out_time: int) -> AttendanceRecord:
        raise NotImplementedError

    def list_records_for_date(self, date: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def append_event(self, event: LedgerEvent) -> LedgerEvent:
        raise NotImplementedError

    def list_events(self, *, since: int, limit: int) -> Sequence[LedgerEvent]:
        raise NotImplementedError


class LedgerStore(Protocol):
    def transaction(self) -> ContextManager[LedgerSession]:
        """Serialized read-write session for one entry operation."""

        raise NotImplementedError

    def snapshot(self) -> ContextManager[LedgerSession]:
        """Read-only session for views."""

        raise NotImplementedError
