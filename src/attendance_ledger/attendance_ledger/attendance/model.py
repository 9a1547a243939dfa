from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import CHECKOUT_UNSET


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi điểm danh của một tài khoản trong một ngày."""

    user_address: str
    date: str
    check_in_time: int
    check_out_time: int
    is_present: bool
    marked_by: str

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time != CHECKOUT_UNSET
