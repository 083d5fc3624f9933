"""DATABASE_URL handling for Alembic.

Kept apart from env.py so it can be imported (and tested) without an
active alembic context. The API connects with psycopg2 and accepts either a
URL or a libpq ``key=value`` DSN in DATABASE_URL; Alembic runs on a
SQLAlchemy engine and needs a ``postgresql+psycopg2://`` URL, so both forms
are converted here.
"""

from __future__ import annotations

import os
from urllib.parse import quote_plus, urlparse, urlunparse

SQLALCHEMY_SCHEME = "postgresql+psycopg2://"


def parse_libpq_dsn(dsn: str) -> dict[str, str]:
    """Split a libpq DSN into its keys. Single-quoted values may contain spaces."""
    tokens: dict[str, str] = {}
    i, n = 0, len(dsn)
    while i < n:
        while i < n and dsn[i] == " ":
            i += 1
        if i >= n:
            break

        eq = dsn.find("=", i)
        if eq == -1:
            break
        key = dsn[i:eq].strip()
        i = eq + 1

        if i < n and dsn[i] == "'":
            i += 1
            chars: list[str] = []
            while i < n and dsn[i] != "'":
                if dsn[i] == "\\" and i + 1 < n:
                    i += 1
                chars.append(dsn[i])
                i += 1
            i += 1  # closing quote
            tokens[key] = "".join(chars)
        else:
            end = dsn.find(" ", i)
            if end == -1:
                end = n
            tokens[key] = dsn[i:end]
            i = end
    return tokens


def libpq_dsn_to_url(dsn: str) -> str:
    """Convert a libpq DSN to a SQLAlchemy URL.

    ``host=/var/run/postgresql`` (a socket directory) becomes a ``?host=``
    query parameter; anything else becomes ``host:port``. DB_PASSWORD fills
    in a missing password.
    """
    tokens = parse_libpq_dsn(dsn)
    if not tokens.get("password"):
        tokens["password"] = os.environ.get("DB_PASSWORD", "")

    user = quote_plus(tokens.get("user", ""))
    password = quote_plus(tokens.get("password", ""))
    dbname = quote_plus(tokens.get("dbname", ""))
    host = tokens.get("host", "localhost")
    port = tokens.get("port", "5432")

    if host.startswith("/"):
        return f"{SQLALCHEMY_SCHEME}{user}:{password}@/{dbname}?host={quote_plus(host)}"
    return f"{SQLALCHEMY_SCHEME}{user}:{password}@{host}:{port}/{dbname}"


def _normalize_url(url: str) -> str:
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            url = SQLALCHEMY_SCHEME + url[len(prefix):]
            break

    db_password = os.environ.get("DB_PASSWORD", "")
    parsed = urlparse(url)
    if db_password and not parsed.password:
        netloc = f"{quote_plus(parsed.username or '')}:{quote_plus(db_password)}@{parsed.hostname}"
        if parsed.port:
            netloc += f":{parsed.port}"
        url = urlunparse(parsed._replace(netloc=netloc))
    return url


def database_url_from_env() -> str:
    """SQLAlchemy URL for the database named by DATABASE_URL.

    Raises:
        RuntimeError: If DATABASE_URL is not set.
    """
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is required to run migrations")
    if "://" in url:
        return _normalize_url(url)
    return libpq_dsn_to_url(url)
