from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import DuplicateRecordError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cur)``; commit on success, roll back on any error.

    Everything executed inside one ``with`` block is a single transaction.
    """
    conn = conn_factory.connect()
    try:
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


@contextmanager
def unique_violation(message: str):
    """Re-raise MySQL duplicate-key errors as DuplicateRecordError."""
    try:
        yield
    except mysql.connector.IntegrityError as e:
        if getattr(e, "errno", None) == 1062:
            raise DuplicateRecordError(message) from e
        raise


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
