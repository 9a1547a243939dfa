"""Initialize the ledger of this deployment with its administrator.

Usage: python scripts/init_ledger.py <admin-address>

Applies schema.sql first when LEDGER_STORAGE=mysql. With memory storage the
ledger only lives as long as this process, so this is mostly a smoke check.
"""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "attendance_ledger"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from attendance_ledger.common.validators import normalize_address
from attendance_ledger.container import STORAGE_MYSQL, build_container
from attendance_ledger.core.exceptions import DomainError
from attendance_ledger.database.bootstrap import apply_schema


def main(argv: list[str]) -> int:
    if len(argv) != 1:
        print(__doc__.strip())
        return 2

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    storage = str(getattr(settings, "LEDGER_STORAGE", "memory"))
    db_config = dict(getattr(settings, "DB_CONFIG", {}) or {})

    if storage.lower() == STORAGE_MYSQL:
        apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")

    container = build_container(storage=storage, db_config=db_config)
    try:
        admin = container.ledger.initialize(normalize_address(argv[0]))
    except DomainError as e:
        print(f"FAILED: {e.name}: {e}")
        return 1

    print(f"OK: Ledger initialized (storage={storage}, admin={admin.address})")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
