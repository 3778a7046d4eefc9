"""
Persisted cache for the signed-in user's identity.

A single row keyed by a fixed key (not per user id): the cache is only valid
for one signed-in identity at a time. Reads and writes are independent, so two
concurrent resolutions simply overwrite each other (last write wins).
"""

from __future__ import annotations

from pathlib import Path

from replyq.config import IDENTITY_CACHE_KEY
from replyq.infrastructure.database import get_db_connection, init_database, retry_on_db_lock
from replyq.observability.logging import get_logger
from replyq.observability.telemetry import counter
from replyq.storage.models import IdentityRecord

logger = get_logger(__name__)


class IdentityCache:
    """Key-value backed store for IdentityRecord."""

    def __init__(self, db_path: Path | str | None = None, key: str = IDENTITY_CACHE_KEY):
        self.db_path = db_path
        self.key = key
        init_database(db_path)

    @retry_on_db_lock()
    def get(self) -> IdentityRecord | None:
        """Return the cached identity, or None when nothing usable is stored."""
        with get_db_connection(self.db_path) as conn:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (self.key,)).fetchone()

        if row is None or not row["value"]:
            counter("identity_cache.miss")
            return None

        counter("identity_cache.hit")
        return IdentityRecord(first_name=row["value"])

    @retry_on_db_lock()
    def put(self, record: IdentityRecord) -> None:
        """
        Store the identity under the fixed key.

        Side Effects:
            - Upserts one row in kv_store
        """
        with get_db_connection(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (self.key, record.first_name),
            )
        counter("identity_cache.write")
        logger.debug("Cached identity under key %s", self.key)

    @retry_on_db_lock()
    def clear(self) -> None:
        """Forget the cached identity (e.g. after the user signs out)."""
        with get_db_connection(self.db_path) as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (self.key,))
