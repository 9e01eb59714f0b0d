from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (connection, cursor) inside one transaction.

    Commits when the block exits normally, rolls back on any exception.
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


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def like_pattern(search: str) -> str:
    """Build a LIKE pattern matching `search` anywhere, escaping wildcards."""
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def in_clause(column: str, ids: Sequence[int]) -> Tuple[str, Tuple[int, ...]]:
    """Build `column IN (%s,...)` and its params; callers skip empty id lists."""
    values = tuple(int(i) for i in ids)
    return f"{column} IN ({','.join(['%s'] * len(values))})", values


def to_decimal_or_zero(value: Any) -> Decimal:
    return Decimal(value) if value is not None else Decimal("0")
