"""Centralized database configuration

**DATABASE POLICY**: ReplyQ uses ONE SQLite database: replyq/data/replyq.db
(override with REPLYQ_DB_PATH). The only thing persisted is the identity cache.

Provides:
- Connection management with consistent settings
- Single source of truth for the database path
- Schema initialization (idempotent)
- Retry on transient lock contention
"""

from __future__ import annotations

import random
import sqlite3
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from functools import wraps
from pathlib import Path
from typing import Any, TypeVar

from replyq.config import (
    DB_CONNECT_TIMEOUT,
    DB_PATH,
    DB_RETRY_BASE_DELAY,
    DB_RETRY_JITTER,
    DB_RETRY_MAX,
    DB_RETRY_MAX_DELAY,
)
from replyq.observability.logging import get_logger
from replyq.observability.telemetry import counter

F = TypeVar("F", bound=Callable[..., Any])

logger = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""


def retry_on_db_lock(
    max_retries: int = DB_RETRY_MAX,
    base_delay: float = DB_RETRY_BASE_DELAY,
    max_delay: float = DB_RETRY_MAX_DELAY,
) -> Callable[[F], F]:
    """
    Decorator to retry database operations on SQLITE_BUSY errors

    Usage:
        @retry_on_db_lock()
        def my_database_operation():
            with get_db_connection() as conn:
                conn.execute("INSERT INTO ...")

    Side Effects:
        - Retries wrapped function up to max_retries times on database lock errors
        - Sleeps between retries (exponential backoff with jitter)
        - Logs warning messages for each retry attempt
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except sqlite3.OperationalError as e:
                    if "locked" not in str(e).lower() and "busy" not in str(e).lower():
                        raise
                    if attempt >= max_retries:
                        logger.error(
                            "Database lock retry exhausted after %d attempts: %s",
                            max_retries,
                            e,
                        )
                        raise

                    delay = min(base_delay * (2**attempt), max_delay)
                    sleep_time = delay + random.uniform(0, delay * DB_RETRY_JITTER)
                    logger.warning(
                        "Database locked (attempt %d/%d), retrying in %.2fs: %s",
                        attempt + 1,
                        max_retries,
                        sleep_time,
                        e,
                    )
                    time.sleep(sleep_time)
            return None

        return wrapper  # type: ignore[return-value]

    return decorator


def resolve_db_path(db_path: Path | str | None = None) -> Path:
    """Return the database path to use, defaulting to the configured one."""
    return Path(db_path) if db_path is not None else DB_PATH


def _create_connection(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), timeout=DB_CONNECT_TIMEOUT)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA synchronous=NORMAL")
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_db_connection(db_path: Path | str | None = None) -> Generator[sqlite3.Connection, None, None]:
    """
    Open a connection, commit on success, roll back on error, always close.

    Side Effects:
        - Creates the database directory and file if missing
    """
    conn = _create_connection(resolve_db_path(db_path))
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_database(db_path: Path | str | None = None) -> None:
    """
    Create tables if they don't exist (idempotent).

    Side Effects:
        - Executes CREATE TABLE IF NOT EXISTS against the database
        - Increments telemetry counter (database.initialized)
    """
    with get_db_connection(db_path) as conn:
        conn.execute(_SCHEMA)
    counter("database.initialized")
    logger.debug("Database schema ready at %s", resolve_db_path(db_path))
