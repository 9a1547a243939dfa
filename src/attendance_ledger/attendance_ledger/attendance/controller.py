from __future__ import annotations

from flask import Flask

from ..common.http import current_caller, json_body, ok, wallet_required
from ..common.validators import normalize_address, require_bool, require_field, require_text
from ..container import Container
from .model import AttendanceRecord


def record_to_json(record: AttendanceRecord) -> dict:
    return {
        "user_address": record.user_address,
        "date": record.date,
        "check_in_time": record.check_in_time,
        "check_out_time": record.check_out_time,
        "is_present": record.is_present,
        "marked_by": record.marked_by,
    }


def register(app: Flask, container: Container) -> None:
    ledger = container.ledger

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="mark_attendance")
    @wallet_required
    def mark_attendance():
        payload = json_body()
        user_address = normalize_address(require_field(payload, "user_address"))
        date = require_text(require_field(payload, "date"), "date")
        is_present = require_bool(require_field(payload, "is_present"), "is_present")

        record = ledger.mark_attendance(current_caller(), user_address, date, is_present)
        return ok(record_to_json(record), 201)

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="mark_checkout")
    @wallet_required
    def mark_checkout():
        date = require_text(require_field(json_body(), "date"), "date")
        record = ledger.mark_checkout(current_caller(), date)
        return ok(record_to_json(record))

    @app.route("/api/attendance/daily/<path:date>", methods=["GET"], endpoint="daily_attendance")
    def daily_attendance(date: str):
        return ok([record_to_json(r) for r in ledger.get_daily_attendance(date)])

    @app.route("/api/attendance/all/<path:date>", methods=["GET"], endpoint="all_attendance_by_date")
    @wallet_required
    def all_attendance_by_date(date: str):
        records = ledger.get_all_attendance_by_date(date, current_caller())
        return ok([record_to_json(r) for r in records])

    @app.route("/api/attendance/<address>/<path:date>", methods=["GET"], endpoint="user_attendance")
    def user_attendance(address: str, date: str):
        return ok(record_to_json(ledger.get_attendance(normalize_address(address), date)))
