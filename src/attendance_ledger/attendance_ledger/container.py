from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .database.connection import DatabaseConnection, DBConfig
from .ledger.memory_store import InMemoryLedgerStore
from .ledger.mysql_store import MySQLLedgerStore
from .ledger.repository import LedgerStore
from .ledger.service import AttendanceLedger

STORAGE_MEMORY = "memory"
STORAGE_MYSQL = "mysql"


@dataclass(frozen=True)
class Container:
    store: LedgerStore
    ledger: AttendanceLedger
    conn: Optional[DatabaseConnection] = None


def build_container(
    *,
    storage: str = STORAGE_MEMORY,
    db_config: Optional[dict] = None,
    clock: Optional[Callable[[], int]] = None,
) -> Container:
    storage = (storage or STORAGE_MEMORY).strip().lower()

    conn: Optional[DatabaseConnection] = None
    if storage == STORAGE_MEMORY:
        store: LedgerStore = InMemoryLedgerStore()
    elif storage == STORAGE_MYSQL:
        if not db_config:
            raise ValueError("DB_CONFIG is required for mysql storage")
        conn = DatabaseConnection(DBConfig.from_dict(db_config))
        store = MySQLLedgerStore(conn)
    else:
        raise ValueError(f"Unsupported LEDGER_STORAGE: {storage!r}")

    return Container(store=store, ledger=AttendanceLedger(store, clock=clock), conn=conn)
