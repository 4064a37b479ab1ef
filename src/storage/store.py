import json
import logging
import os
import sqlite3
from typing import Any

logger = logging.getLogger(__name__)

CURRENT_STORE_VERSION = 1

# Keys used by the player
KEY_QUEUE = "queue"
KEY_QUEUE_INDEX = "queue_index"
KEY_SHUFFLE = "shuffle"
KEY_REPEAT = "repeat"
KEY_LIBRARY = "library"
KEY_VOLUME = "volume"


def initialize_store(app_data_dir: str) -> sqlite3.Connection:
    os.makedirs(app_data_dir, exist_ok=True)
    sqlite_path = os.path.join(app_data_dir, "store.sqlite3")
    logger.info("Store file path: %s", sqlite_path)
    return open_store(sqlite_path)


def open_store(sqlite_path: str) -> sqlite3.Connection:
    db = sqlite3.connect(sqlite_path)
    db.row_factory = sqlite3.Row

    existing_version = int(db.execute("PRAGMA user_version").fetchone()[0])
    upgrade_store_if_needed(db, existing_version)

    return db


def upgrade_store_if_needed(db: sqlite3.Connection, existing_version: int) -> None:
    if existing_version >= CURRENT_STORE_VERSION:
        return

    logger.info("Existing store version: %d", existing_version)

    if existing_version <= 0:
        logger.info("Migrate store version 1...")
        db.execute("PRAGMA user_version=1")
        db.executescript("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT
            );
        """)
        db.commit()


class JsonStore:
    """
    Key/value store for JSON-serializable values.

    Never raises on storage problems: reads fall back to the caller's default,
    writes are logged and dropped so in-memory state stays authoritative.
    """

    def __init__(self, db: sqlite3.Connection | None):
        self.db = db

    @classmethod
    def open(cls, sqlite_path: str) -> "JsonStore":
        try:
            return cls(open_store(sqlite_path))
        except sqlite3.Error as e:
            logger.warning("Store unavailable (%s), running without persistence", e)
            return cls(None)

    def get(self, key: str, fallback: Any = None) -> Any:
        if self.db is None:
            return fallback
        try:
            row = self.db.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            logger.warning("Store read failed for %r: %s", key, e)
            return fallback
        if row is None or row["value"] is None:
            return fallback
        try:
            return json.loads(row["value"])
        except ValueError:
            logger.warning("Corrupted value for %r in store, using fallback", key)
            return fallback

    def set(self, key: str, value: Any) -> None:
        if self.db is None:
            return
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.warning("Value for %r is not JSON-serializable: %s", key, e)
            return
        try:
            self.db.execute(
                "INSERT INTO kv (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, payload),
            )
            self.db.commit()
        except sqlite3.Error as e:
            logger.warning("Store write failed for %r: %s", key, e)

    def delete(self, key: str) -> None:
        if self.db is None:
            return
        try:
            self.db.execute("DELETE FROM kv WHERE key = ?", (key,))
            self.db.commit()
        except sqlite3.Error as e:
            logger.warning("Store delete failed for %r: %s", key, e)

    def close(self) -> None:
        if self.db is not None:
            self.db.close()
            self.db = None
