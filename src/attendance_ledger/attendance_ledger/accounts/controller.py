from __future__ import annotations

from flask import Flask, session

from ..common.http import current_caller, json_body, ok, wallet_required
from ..common.validators import normalize_address, require_field, require_text
from ..core.constants import SESSION_ADDRESS_KEY
from ..container import Container
from .model import Account


def account_to_json(account: Account) -> dict:
    return {
        "address": account.address,
        "name": account.name,
        "user_type": account.role.code,
        "registration_time": account.registration_time,
    }


def register(app: Flask, container: Container) -> None:
    ledger = container.ledger

    @app.route("/api/wallet/connect", methods=["POST"], endpoint="wallet_connect")
    def wallet_connect():
        address = normalize_address(require_field(json_body(), "address"))
        session[SESSION_ADDRESS_KEY] = address
        return ok({"address": address})

    @app.route("/api/wallet/disconnect", methods=["POST"], endpoint="wallet_disconnect")
    def wallet_disconnect():
        session.pop(SESSION_ADDRESS_KEY, None)
        return ok()

    @app.route("/api/wallet", methods=["GET"], endpoint="wallet_status")
    def wallet_status():
        address = session.get(SESSION_ADDRESS_KEY)
        account = None
        if address and ledger.is_registered(address):
            account = account_to_json(ledger.get_account(address))
        return ok({"address": address, "account": account})

    @app.route("/api/accounts/register", methods=["POST"], endpoint="register_account")
    @wallet_required
    def register_account():
        payload = json_body()
        name = require_text(require_field(payload, "name"), "name")
        role = require_field(payload, "role")
        account = ledger.register(current_caller(), name, role)
        return ok(account_to_json(account), 201)

    @app.route("/api/accounts/<address>", methods=["GET"], endpoint="get_account")
    def get_account(address: str):
        return ok(account_to_json(ledger.get_account(normalize_address(address))))

    @app.route("/api/accounts/<address>/registered", methods=["GET"], endpoint="is_registered")
    def is_registered(address: str):
        return ok(ledger.is_registered(normalize_address(address)))
