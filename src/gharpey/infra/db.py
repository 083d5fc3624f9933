"""Database access layer using psycopg2.

Provides:
- get_conn(): open a connection from DATABASE_URL
- txn(): context manager for one short transaction
- fetchone/fetchall: small query helpers used by the repositories
"""

import os
import re
from contextlib import contextmanager
from typing import Any, Iterator, Sequence
from urllib.parse import urlparse

import psycopg2
from psycopg2.extensions import connection as PgConnection, cursor as PgCursor

_DSN_PASSWORD_PATTERN = re.compile(r"(^|\s)password=")


def _dsn_has_password(dsn: str) -> bool:
    if "://" in dsn:
        return bool(urlparse(dsn).password)
    return bool(_DSN_PASSWORD_PATTERN.search(dsn))


def get_conn() -> PgConnection:
    """Open a new database connection from DATABASE_URL.

    Accepts both URL (``postgres://...``) and libpq key=value DSNs. When the
    DSN carries no password and DB_PASSWORD is set, the latter is used.

    Raises:
        RuntimeError: If DATABASE_URL is not set.
        psycopg2.Error: On connection failure.
    """
    dsn = os.environ.get("DATABASE_URL")
    if not dsn:
        raise RuntimeError("DATABASE_URL environment variable not set")

    db_password = os.environ.get("DB_PASSWORD")
    if db_password and not _dsn_has_password(dsn):
        return psycopg2.connect(dsn, password=db_password)
    return psycopg2.connect(dsn)


@contextmanager
def txn(conn: PgConnection | None = None) -> Iterator[PgCursor]:
    """Run the enclosed block as a single transaction.

    If conn is None a new connection is opened and closed on exit.
    Commits on success, rolls back and re-raises on exception.

    Example:
        with txn() as cur:
            cur.execute("UPDATE templates SET usage_count = usage_count + 1 WHERE id = %s", (tid,))
    """
    owns_conn = conn is None
    if owns_conn:
        conn = get_conn()

    try:
        with conn.cursor() as cur:
            yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        if owns_conn:
            conn.close()


def fetchone(
    cur: PgCursor,
    query: str,
    params: Sequence[Any] | None = None,
) -> tuple[Any, ...] | None:
    """Execute query and fetch one row (None when there is no result)."""
    cur.execute(query, params)
    return cur.fetchone()


def fetchall(
    cur: PgCursor,
    query: str,
    params: Sequence[Any] | None = None,
) -> list[tuple[Any, ...]]:
    """Execute query and fetch all rows."""
    cur.execute(query, params)
    return cur.fetchall()
