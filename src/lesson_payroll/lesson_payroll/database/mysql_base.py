from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
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


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def to_bool(value: Any) -> bool:
    """MySQL BOOLEAN columns come back as 0/1 ints (NULL treated as not done)."""
    return bool(value) if value is not None else False


def to_amd(value: Any) -> Optional[int]:
    """Normalize DECIMAL/INT money columns to whole AMD.

    mysql-connector returns DECIMAL as decimal.Decimal; NULL stays None.
    """

    if value is None:
        return None
    if isinstance(value, Decimal):
        return int(value.to_integral_value())
    return int(value)
