"""Persistent recommendation cache keyed by finding fingerprint.

Entries live in a single D1 table and are never updated once written:
``put`` is insert-or-ignore, so concurrent CI runs racing on the same
fingerprint keep whichever recommendation landed first.
"""

import logging

from .clients.d1_client import D1Client
from .constants import RECOMMENDATIONS_TABLE

logger = logging.getLogger(__name__)

CREATE_TABLE_SQL = f"""
CREATE TABLE IF NOT EXISTS {RECOMMENDATIONS_TABLE} (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  cache_key TEXT UNIQUE,
  recommendation TEXT
);
"""

SELECT_SQL = f"SELECT recommendation FROM {RECOMMENDATIONS_TABLE} WHERE cache_key = ? LIMIT 1"

INSERT_SQL = (
    f"INSERT INTO {RECOMMENDATIONS_TABLE} (cache_key, recommendation) VALUES (?, ?) "
    "ON CONFLICT(cache_key) DO NOTHING"
)


class RecommendationCache:
    """Read-through / write-through cache over the recommendations table.

    Transport and authentication errors from the store propagate as
    ``ClientError``; they are never reported as a miss.
    """

    def __init__(self, store: D1Client) -> None:
        self.store = store
        self._table_ready = False
        self._hits = 0
        self._misses = 0
        self._writes = 0

    def ensure_table(self) -> None:
        """Create the table on first use. An existing table is fine."""
        if self._table_ready:
            return
        self.store.execute(CREATE_TABLE_SQL)
        self._table_ready = True

    def get(self, key: str) -> str | None:
        """Look up a recommendation.

        Args:
            key: Finding fingerprint

        Returns:
            The stored text, or None if there is no entry
        """
        self.ensure_table()
        rows = self.store.execute(SELECT_SQL, [key]).results
        if rows and rows[0].get("recommendation"):
            self._hits += 1
            return str(rows[0]["recommendation"])

        self._misses += 1
        return None

    def put(self, key: str, recommendation: str) -> bool:
        """Store a recommendation unless one already exists.

        Returns:
            True if a new entry was written, False if the key was already present
        """
        self.ensure_table()
        result = self.store.execute(INSERT_SQL, [key, recommendation])
        written = result.meta.changes > 0
        if written:
            self._writes += 1
        else:
            logger.debug(f"Cache entry {key[:8]} already present, keeping first write")
        return written

    def close(self) -> None:
        self.store.close()

    def stats(self) -> dict[str, int]:
        return {
            "hits": self._hits,
            "misses": self._misses,
            "writes": self._writes,
        }
