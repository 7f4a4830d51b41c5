"""
Key-value persistence port and its implementations.

The service stores two JSON blobs: the patient registry and the clinician
notification log. Repositories depend only on the ``KeyValueStore`` protocol,
so tests can swap the SQLite store for ``InMemoryKeyValueStore``.

IMPORTANT: Store instantiation should be done through the DI layer.
Use maternity_svc.core.dependencies.get_store() instead of instantiating directly.
"""
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from maternity_svc.core.config import DATABASE_BUSY_TIMEOUT, DATABASE_PATH
from maternity_svc.core.datetime_utils import format_iso, utc_now
from maternity_svc.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Get/set of JSON-serializable blobs under string keys."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


def _decode(key: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Stored value for key '{key}' is not valid JSON: {e}")
        raise PersistenceError(operation=f"read of '{key}'") from e


def _encode(key: str, value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise PersistenceError(operation=f"write of '{key}'") from e


class SqliteKeyValueStore:
    """
    SQLite-backed key-value store.

    Features:
    - WAL mode for concurrent readers alongside the single writer
    - Busy timeout to wait on lock contention instead of failing
    - One connection per operation; each write is a single upsert

    Usage:
        # Via dependency injection (recommended):
        from maternity_svc.core.dependencies import get_store
        store = get_store()

        # Direct instantiation (for testing):
        store = SqliteKeyValueStore(db_path="/tmp/test.db")
    """

    def __init__(self, db_path: Optional[str] = None, busy_timeout: Optional[int] = None):
        """
        Initialize the store and create its table.

        Args:
            db_path: Path to SQLite database file. Defaults to config DATABASE_PATH.
            busy_timeout: SQLite busy timeout in milliseconds. Defaults to config value.
        """
        self.db_path = db_path or DATABASE_PATH
        self.busy_timeout = busy_timeout if busy_timeout is not None else DATABASE_BUSY_TIMEOUT

        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _configure_connection(self, conn: sqlite3.Connection) -> None:
        conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout}")

    def _init_db(self) -> None:
        """Create the kv_store table and enable WAL mode."""
        conn = sqlite3.connect(self.db_path)
        try:
            self._configure_connection(conn)
            cursor = conn.cursor()

            cursor.execute("PRAGMA journal_mode = WAL")
            result = cursor.fetchone()
            if result and result[0].lower() == "wal":
                logger.info(f"SQLite WAL mode enabled for {self.db_path}")
            else:
                logger.warning(f"Failed to enable WAL mode, current mode: {result}")

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

        logger.info(
            f"Key-value store initialized: {self.db_path} "
            f"(busy_timeout={self.busy_timeout}ms)"
        )

    def get_connection(self) -> sqlite3.Connection:
        """Get a new connection with the busy timeout applied."""
        conn = sqlite3.connect(self.db_path)
        self._configure_connection(conn)
        return conn

    def get(self, key: str) -> Optional[Any]:
        """
        Read and decode the blob stored under key.

        Returns:
            The decoded JSON value, or None if the key was never written.

        Raises:
            PersistenceError: If the database cannot be read or holds invalid JSON.
        """
        try:
            conn = self.get_connection()
            try:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error(f"Error reading key '{key}': {e}")
            raise PersistenceError(operation=f"read of '{key}'") from e

        if row is None:
            return None
        return _decode(key, row[0])

    def set(self, key: str, value: Any) -> None:
        """
        Replace the blob stored under key (last write wins).

        Raises:
            PersistenceError: If the value is not JSON-serializable or the write fails.
        """
        payload = _encode(key, value)
        try:
            conn = self.get_connection()
            try:
                conn.execute("""
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                """, (key, payload, format_iso(utc_now())))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error(f"Error writing key '{key}': {e}")
            raise PersistenceError(operation=f"write of '{key}'") from e


class InMemoryKeyValueStore:
    """
    Dict-backed store for tests and throwaway sessions.

    Values are held as JSON text so callers never share mutable
    state with the store, matching the SQLite store's behavior.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        if raw is None:
            return None
        return _decode(key, raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = _encode(key, value)

    def raw(self, key: str) -> Optional[str]:
        """Return the stored JSON text for key, unparsed."""
        return self._data.get(key)
