"""SQLite connection helpers and schema bootstrap."""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

from macrolens.domain.errors import PersistenceError

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    name TEXT NOT NULL DEFAULT '',
    calorie_goal INTEGER NOT NULL DEFAULT 2000,
    protein_goal INTEGER NOT NULL DEFAULT 150,
    carbs_goal INTEGER NOT NULL DEFAULT 200,
    fat_goal INTEGER NOT NULL DEFAULT 70
);
CREATE TABLE IF NOT EXISTS sessions (
    id TEXT PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES users(id),
    expires_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS food_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id),
    food_name TEXT,
    calories REAL,
    protein REAL,
    carbs REAL,
    fat REAL,
    image_url TEXT,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_food_logs_user_created
    ON food_logs (user_id, created_at);
CREATE TABLE IF NOT EXISTS plans (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id),
    prompt TEXT NOT NULL,
    venues_json TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_plans_user_created
    ON plans (user_id, created_at);
"""


def connect(db_path: Path) -> sqlite3.Connection:
    """Open a connection with row access by name and foreign keys on."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


@contextmanager
def db_conn(db_path: Path) -> Iterator[sqlite3.Connection]:
    """Yield a connection that commits on success and always closes."""
    conn = connect(db_path)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def init_db(db_path: Path) -> None:
    """Create tables and indexes if they do not exist."""
    try:
        with db_conn(db_path) as conn:
            conn.executescript(SCHEMA)
    except sqlite3.Error as exc:
        raise PersistenceError("Failed to initialize database", details=str(exc)) from exc


def to_db_timestamp(value: datetime) -> str:
    """Format a timestamp so that string order matches time order."""
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def from_db_timestamp(value: str) -> datetime:
    """Parse a stored timestamp as an aware UTC datetime."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
