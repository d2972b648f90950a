"""Opening the database and creating its schema."""

from __future__ import annotations

import os
import sqlite3

# SQL expression for the current UTC time, stored as ISO 8601 text.
NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%f+00:00', 'now')"

_UUID_SQL = (
    "lower(hex(randomblob(4)) || '-' || hex(randomblob(2)) || '-4' || "
    "substr(hex(randomblob(2)), 2) || '-' || "
    "substr('89ab', 1 + (abs(random()) % 4), 1) || "
    "substr(hex(randomblob(2)), 2) || '-' || hex(randomblob(6)))"
)

_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY DEFAULT ({_UUID_SQL}),
    username TEXT NOT NULL UNIQUE,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT,
    created_at TEXT NOT NULL DEFAULT ({NOW_SQL}),
    updated_at TEXT NOT NULL DEFAULT ({NOW_SQL})
);
CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY DEFAULT ({_UUID_SQL}),
    name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL DEFAULT 'TO_DO',
    user_id TEXT REFERENCES users (id) ON DELETE CASCADE,
    created_at TEXT NOT NULL DEFAULT ({NOW_SQL}),
    updated_at TEXT NOT NULL DEFAULT ({NOW_SQL})
);
CREATE INDEX IF NOT EXISTS tasks_user_id ON tasks (user_id);
"""


class DatabaseConfigError(Exception):
    """Raised when the database cannot be configured or opened."""


def connect(connection_string: str) -> sqlite3.Connection:
    """Open a database from a path, ':memory:', a 'sqlite:///' URL or a 'file:' URI."""
    if not connection_string:
        raise DatabaseConfigError(
            "CONNECTION_STRING must be set into production environment."
        )
    uri = False
    target = connection_string
    if target.startswith("sqlite:///"):
        target = target[len("sqlite:///"):] or ":memory:"
    elif target.startswith("file:"):
        uri = True
    try:
        connection = sqlite3.connect(
            target, uri=uri, check_same_thread=False, isolation_level=None
        )
    except sqlite3.Error as exc:
        raise DatabaseConfigError(f"Failed to open database: {exc}") from exc
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys = ON")
    return connection


def init_schema(connection: sqlite3.Connection) -> None:
    """Create the users and tasks tables if they do not exist yet."""
    connection.executescript(_SCHEMA)


def new_database() -> sqlite3.Connection:
    """Open the database named by CONNECTION_STRING and ensure its schema."""
    connection = connect(os.environ.get("CONNECTION_STRING", ""))
    init_schema(connection)
    return connection