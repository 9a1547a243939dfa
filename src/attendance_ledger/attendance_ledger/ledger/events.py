from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..accounts.model import Account
from ..attendance.model import AttendanceRecord
from ..core.enums import EventKind


@dataclass(frozen=True)
class LedgerEvent:
    """Append-only notification for external observers.

    ``sequence`` is 0 until the store appends the event; after that it is the
    1-based position in the log.
    """

    kind: EventKind
    timestamp: int
    data: Mapping[str, Any]
    sequence: int = 0


def user_registered(account: Account, *, timestamp: int) -> LedgerEvent:
    return LedgerEvent(
        kind=EventKind.USER_REGISTERED,
        timestamp=timestamp,
        data={
            "address": account.address,
            "name": account.name,
            "role": account.role.code,
            "timestamp": timestamp,
        },
    )


def attendance_marked(record: AttendanceRecord, *, timestamp: int) -> LedgerEvent:
    return LedgerEvent(
        kind=EventKind.ATTENDANCE_MARKED,
        timestamp=timestamp,
        data={
            "user_address": record.user_address,
            "date": record.date,
            "check_in_time": record.check_in_time,
            "is_present": record.is_present,
            "marked_by": record.marked_by,
            "timestamp": timestamp,
        },
    )
