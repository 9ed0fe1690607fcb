from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

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


def is_duplicate_key(exc: Exception) -> bool:
    """True for a UNIQUE/PRIMARY KEY violation (MySQL error 1062)."""
    return isinstance(exc, mysql_errors.IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def build_where(clauses: Sequence[str]) -> str:
    return " AND ".join(clauses) if clauses else "1=1"


def like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
