"""Example: drive the ledger through the service layer (no Flask).

Controllers are only a thin layer; the business rules live in AttendanceLedger.
"""

from attendance_ledger.container import build_container
from attendance_ledger.core.enums import Role


def main():
    ledger = build_container(storage="memory").ledger

    ledger.initialize("0xadmin")
    ledger.register("0xstudent", "Alice", Role.STUDENT)
    ledger.register("0xteacher", "Bob", Role.TEACHER)

    ledger.mark_attendance("0xteacher", "0xstudent", "2024-01-10", True)
    ledger.mark_checkout("0xstudent", "2024-01-10")

    for record in ledger.get_all_attendance_by_date("2024-01-10", "0xadmin"):
        print(record)
    for event in ledger.list_events():
        print(event.sequence, event.kind.value, dict(event.data))


if __name__ == "__main__":
    main()
