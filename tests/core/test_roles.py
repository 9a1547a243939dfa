import pytest

from attendance_ledger.core.enums import Role
from attendance_ledger.core.exceptions import InvalidRole, ValidationError


def test_wire_codes():
    assert [r.code for r in (Role.STUDENT, Role.TEACHER, Role.ADMIN)] == [1, 2, 3]
    assert Role.from_code(2) is Role.TEACHER


@pytest.mark.parametrize(
    "value, expected",
    [
        (Role.TEACHER, Role.TEACHER),
        (1, Role.STUDENT),
        ("3", Role.ADMIN),
        ("Teacher", Role.TEACHER),
        (" student ", Role.STUDENT),
    ],
)
def test_parse(value, expected):
    assert Role.parse(value) is expected


@pytest.mark.parametrize("value", [0, 9, "", "guest", False, 1.0, None])
def test_parse_rejects(value):
    with pytest.raises(InvalidRole):
        Role.parse(value)


def test_invalid_role_is_a_validation_error():
    # the API layer answers 400 for the whole ValidationError family
    assert issubclass(InvalidRole, ValidationError)
    assert InvalidRole.status == 400
