from __future__ import annotations

import logging
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.constants import SESSION_ADDRESS_KEY
from ..core.exceptions import DomainError, ValidationError, WalletNotConnected

logger = logging.getLogger(__name__)


def ok(data: Any = None, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def fail(*, code: str, message: str, status: int, abort_code: int = 0):
    return (
        jsonify({"success": False, "error": {"code": code, "abort_code": abort_code, "message": message}}),
        status,
    )


def json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def current_caller() -> str:
    address = session.get(SESSION_ADDRESS_KEY)
    if not address:
        raise WalletNotConnected("Please connect your wallet first")
    return address


def wallet_required(view):
    """Reject the request unless a wallet address is bound to the session."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        current_caller()
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        logger.info("%s %s rejected: %s (%s)", request.method, request.path, exc.name, exc)
        return fail(code=exc.name, message=str(exc), status=exc.status, abort_code=exc.code)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return fail(code=type(exc).__name__, message=exc.description or "", status=exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        message = str(exc) if app.config.get("DEBUG") else "Internal server error"
        return fail(code="InternalError", message=message, status=500)
