"""Database initialization and JSON blob storage."""
import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = str(Path.home() / ".theory_tutor" / "tutor.db")

BANK_KEY = "bank_v1"
HISTORY_KEY = "history_v1"
SETTINGS_KEY = "settings_v1"

SCHEMA = """
CREATE TABLE IF NOT EXISTS blobs (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating the blob table if it doesn't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def load_json(db_path: str, key: str, fallback):
    """Load the blob stored under key, or fallback if it is missing or unreadable."""
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM blobs WHERE key = ?", (key,)).fetchone()
    conn.close()
    if row is None:
        logger.debug("No stored value for %s, using default", key)
        return fallback
    try:
        return json.loads(row["value"])
    except (TypeError, ValueError):
        logger.warning("Stored value for %s is not valid JSON, using default", key)
        return fallback


def save_json(db_path: str, key: str, value) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO blobs (key, value, updated_at) VALUES (?, ?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
        (key, json.dumps(value), datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()
