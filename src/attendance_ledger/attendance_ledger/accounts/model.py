from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class Account:
    """Thực thể miền (domain): Tài khoản đã đăng ký.

    Lưu ý: tên và vai trò không đổi sau khi đăng ký; không có thao tác xoá.
    """

    address: str
    name: str
    role: Role
    registration_time: int
