from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Callable, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .accounts.controller import register as register_accounts
from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .container import STORAGE_MYSQL, build_container
from .core.constants import DEFAULT_EVENTS_PAGE_LIMIT
from .database.bootstrap import apply_schema, list_tables
from .ledger.controller import register as register_ledger

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(settings_module: Optional[str] = None, *, clock: Optional[Callable[[], int]] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["EVENTS_PAGE_LIMIT"] = int(getattr(settings, "EVENTS_PAGE_LIMIT", DEFAULT_EVENTS_PAGE_LIMIT))

    storage = str(getattr(settings, "LEDGER_STORAGE", "memory"))
    db_config = dict(getattr(settings, "DB_CONFIG", {}) or {})
    logger.info("Starting attendance ledger (settings=%s, storage=%s)", settings_module, storage)

    if storage.lower() == STORAGE_MYSQL and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info(
            "Schema ready on %s@%s:%s/%s (tables=%d)",
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
            len(list_tables(db_config)),
        )

    container = build_container(storage=storage, db_config=db_config, clock=clock)
    app.extensions["attendance_ledger"] = container

    register_error_handlers(app)
    register_accounts(app, container)
    register_attendance(app, container)
    register_ledger(app, container)

    return app
