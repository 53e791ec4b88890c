"""
core/storage.py -- Engine setup and helpers shared by the record stores.

Both repositories (auth.store.UserStore, employees.store.EmployeeStore) build
their engine through create_store_engine() so SQLite connections get the same
pragmas, and wrap every round-trip in store_errors() so a dead database
surfaces as StoreUnavailable instead of a raw driver error.

Record ids are 24 lowercase hex characters -- the shape of a document-store
object id. They are opaque to callers; is_valid_id() lets the stores turn a
malformed id into a plain "not found" without querying.
"""

from __future__ import annotations

import logging
import re
import secrets
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from core.errors import StoreUnavailable

logger = logging.getLogger("registry.store")

_ID_RE = re.compile(r"^[0-9a-f]{24}$")


def new_id() -> str:
    """Return a fresh 24-hex-character record id (96 random bits)."""
    return secrets.token_hex(12)


def is_valid_id(value: object) -> bool:
    return isinstance(value, str) and _ID_RE.match(value) is not None


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode so readers never block on a writer.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool. In-memory databases silently keep their
    "memory" journal mode.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def create_store_engine(db_url: str) -> Engine:
    """Create an engine for db_url with the per-dialect settings the stores need."""
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    return engine


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Re-raise database connectivity failures as StoreUnavailable.

    Only OperationalError is translated (lost connection, locked or missing
    database file). Integrity and programming errors propagate unchanged.
    """
    try:
        yield
    except OperationalError as exc:
        logger.error("Store operation %s failed: %s", operation, exc.orig)
        raise StoreUnavailable() from exc
