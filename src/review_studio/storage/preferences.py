"""SQLite persistence for user preferences.

Stores the handful of string preferences the studio keeps between
sessions: the user's Gemini and OpenAI keys, the selected model and the
painter theme. Values are read once at startup and rewritten whenever
the in-memory value changes.

Storage location: ~/.review_studio/preferences.db (see StorageSettings)
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Generator

from review_studio.core.config import get_settings
from review_studio.core.constants import PREFERENCE_KEYS
from review_studio.core.exceptions import PreferencesError
from review_studio.core.logging import get_logger


logger = get_logger(__name__)


class PreferenceStore:
    """Key-value preference store backed by SQLite.

    Only the keys in PREFERENCE_KEYS are accepted.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path | None = None) -> None:
        """Initialize the store.

        Args:
            db_path: Path to the database file. If None, uses StorageSettings.
        """
        if db_path is None:
            self.db_path = get_settings().storage.preferences_path
        else:
            self.db_path = Path(db_path)

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

        logger.info("Preference store initialized", path=str(self.db_path))

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as exc:
            raise PreferencesError(
                f"Cannot open preference database: {exc}",
                details={"path": str(self.db_path)},
            ) from exc
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS preferences (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (self.SCHEMA_VERSION,),
            )

    @staticmethod
    def _check_key(key: str) -> None:
        if key not in PREFERENCE_KEYS:
            raise PreferencesError(
                f"Unknown preference key: {key}",
                details={"allowed": list(PREFERENCE_KEYS)},
            )

    def get(self, key: str, default: str = "") -> str:
        """Read one preference.

        Args:
            key: Preference key.
            default: Value returned when the key was never written.

        Raises:
            PreferencesError: If the key is not a known preference.
        """
        self._check_key(key)
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT value FROM preferences WHERE key = ?",
                (key,),
            ).fetchone()
        return row[0] if row else default

    def set(self, key: str, value: str) -> bool:
        """Write one preference if it changed.

        Args:
            key: Preference key.
            value: New value.

        Returns:
            True if the stored value was rewritten.

        Raises:
            PreferencesError: If the key is not a known preference.
        """
        self._check_key(key)
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT value FROM preferences WHERE key = ?",
                (key,),
            ).fetchone()
            if row is not None and row[0] == value:
                return False
            conn.execute(
                """
                INSERT INTO preferences (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = excluded.updated_at
                """,
                (key, value, datetime.now().isoformat()),
            )

        # Never log values; two of the keys are credentials
        logger.debug("Preference saved", key=key)
        return True

    def delete(self, key: str) -> None:
        """Remove one preference."""
        self._check_key(key)
        with self._get_connection() as conn:
            conn.execute("DELETE FROM preferences WHERE key = ?", (key,))

    def load_all(self) -> dict[str, str]:
        """Read every known preference, empty string for unset keys."""
        with self._get_connection() as conn:
            rows = conn.execute("SELECT key, value FROM preferences").fetchall()
        stored = {key: value for key, value in rows if key in PREFERENCE_KEYS}
        return {key: stored.get(key, "") for key in PREFERENCE_KEYS}


# =============================================================================
# Singleton
# =============================================================================

_store_instance: PreferenceStore | None = None


def get_preference_store() -> PreferenceStore:
    """Get the global preference store instance."""
    global _store_instance

    if _store_instance is None:
        _store_instance = PreferenceStore()

    return _store_instance


__all__ = [
    "PreferenceStore",
    "get_preference_store",
]
