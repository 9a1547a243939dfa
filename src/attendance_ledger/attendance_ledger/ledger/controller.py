from __future__ import annotations

from flask import Flask, current_app, request

from ..accounts.controller import account_to_json
from ..common.http import current_caller, ok, wallet_required
from ..common.validators import parse_non_negative_int
from ..container import Container
from .events import LedgerEvent


def event_to_json(event: LedgerEvent) -> dict:
    return {
        "sequence": event.sequence,
        "type": event.kind.value,
        "timestamp": event.timestamp,
        "data": dict(event.data),
    }


def register(app: Flask, container: Container) -> None:
    ledger = container.ledger

    @app.route("/api/ledger/initialize", methods=["POST"], endpoint="initialize_ledger")
    @wallet_required
    def initialize_ledger():
        admin = ledger.initialize(current_caller())
        return ok(account_to_json(admin), 201)

    @app.route("/api/ledger/admin", methods=["GET"], endpoint="ledger_admin")
    def ledger_admin():
        return ok(ledger.get_admin())

    @app.route("/api/events", methods=["GET"], endpoint="list_events")
    def list_events():
        since = parse_non_negative_int(request.args.get("since"), "since", default=0)
        limit = parse_non_negative_int(
            request.args.get("limit"), "limit", default=int(current_app.config["EVENTS_PAGE_LIMIT"])
        )
        return ok([event_to_json(e) for e in ledger.list_events(since=since, limit=limit)])
