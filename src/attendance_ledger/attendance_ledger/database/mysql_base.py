from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_transaction(conn_factory: DatabaseConnection, *, readonly: bool = False, dictionary: bool = True):
    """One connection, one transaction: commit on success, rollback on any exception."""

    conn = conn_factory.connect()
    try:
        conn.start_transaction(isolation_level="READ COMMITTED", readonly=readonly)
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
