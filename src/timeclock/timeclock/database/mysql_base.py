from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection

Row = Dict[str, Any]


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection per store call: commit on success, roll back on error."""
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
    except Exception:
        conn.rollback()
        raise
    else:
        conn.commit()
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Row]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Row]:
    return list(cur.fetchall() or [])


def placeholders(count: int) -> str:
    """'%s,%s,%s' for IN clauses."""
    return ",".join(["%s"] * int(count))
