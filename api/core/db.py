"""
Async database access helpers (raw SQL) using asyncpg.

The pool is owned by the FastAPI lifespan (see `api/main.py`): `connect()`
opens it on startup, yields a `Database` handle that is stored on
`app.state.db`, and closes it on shutdown. Request handlers receive the
handle through the `get_db` dependency.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from . import config

logger = logging.getLogger(__name__)

# Anything that means "the store could not answer", as opposed to "no row".
_STORAGE_FAILURES = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class StorageError(RuntimeError):
    def __init__(self, operation: str, message: str = "Database error") -> None:
        super().__init__(f"{message} during {operation}")
        self.operation = operation


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = config.env_str("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    """
    Storage handle passed explicitly to repositories.
    """

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def fetch_one(self, sql: str, *args: Any, operation: str = "fetch_one") -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        try:
            row = await self._pool.fetchrow(sql, *args)
        except _STORAGE_FAILURES as exc:
            raise StorageError(operation) from exc
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any, operation: str = "fetch_all") -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        try:
            rows = await self._pool.fetch(sql, *args)
        except _STORAGE_FAILURES as exc:
            raise StorageError(operation) from exc
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any, operation: str = "execute") -> str:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL) and return its status tag,
        e.g. "DELETE 1".
        """
        try:
            return await self._pool.execute(sql, *args)
        except _STORAGE_FAILURES as exc:
            raise StorageError(operation) from exc


def affected_rows(status: str) -> int:
    """
    Row count from a command status tag ("UPDATE 3" -> 3, "INSERT 0 1" -> 1).
    """
    tail = (status or "").rsplit(" ", 1)[-1]
    return int(tail) if tail.isdigit() else 0


@asynccontextmanager
async def connect(dsn: str | None = None) -> AsyncIterator[Database]:
    try:
        pool = await asyncpg.create_pool(
            dsn=dsn or database_url(),
            min_size=config.db_pool_min_size(),
            max_size=config.db_pool_max_size(),
            command_timeout=config.db_command_timeout_s(),
        )
    except _STORAGE_FAILURES as exc:
        raise StorageError("connect", "Failed to connect to database") from exc

    logger.info("db_pool_opened min_size=%s max_size=%s", config.db_pool_min_size(), config.db_pool_max_size())
    try:
        yield Database(pool)
    finally:
        await pool.close()
        logger.info("db_pool_closed")


def get_db(request: Request) -> Database:
    database = getattr(request.app.state, "db", None)
    if database is None:
        raise RuntimeError("Database is not initialized. It is opened by the app lifespan.")
    return database
