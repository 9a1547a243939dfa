from __future__ import annotations

from enum import Enum

from .exceptions import InvalidRole


class Role(str, Enum):
    """Vai trò tài khoản trong sổ điểm danh.

    Mã số (``code``) là giá trị client gửi lên: 1 = student, 2 = teacher, 3 = admin.
    """

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"

    @property
    def code(self) -> int:
        return _ROLE_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> "Role":
        for role, value in _ROLE_CODES.items():
            if value == code:
                return role
        raise InvalidRole(f"Unknown role code: {code!r}")

    @classmethod
    def parse(cls, value: "Role | int | str") -> "Role":
        """Accept an enum member, a wire code or a role name."""

        if isinstance(value, Role):
            return value
        # bool is an int subclass; True must not silently become STUDENT.
        if isinstance(value, bool):
            raise InvalidRole(f"Invalid role: {value!r}")
        if isinstance(value, int):
            return cls.from_code(value)
        if isinstance(value, str):
            text = value.strip().lower()
            if text.isdigit():
                return cls.from_code(int(text))
            try:
                return cls(text)
            except ValueError:
                raise InvalidRole(f"Invalid role: {value!r}") from None
        raise InvalidRole(f"Invalid role: {value!r}")


_ROLE_CODES = {
    Role.STUDENT: 1,
    Role.TEACHER: 2,
    Role.ADMIN: 3,
}

SELF_REGISTRABLE_ROLES = frozenset({Role.STUDENT, Role.TEACHER})


class EventKind(str, Enum):
    """Loại sự kiện ghi vào event log."""

    USER_REGISTERED = "UserRegistered"
    ATTENDANCE_MARKED = "AttendanceMarked"
