"""Connection helpers for SQLite databases.

This module centralizes opening a sqlite3 connection and resolving the small
amount of configuration schemaplus needs from the environment, so the CLI and
library callers share the same defaults.
"""

from __future__ import annotations

import logging
import os
import sqlite3

from schemaplus.core.errors import ConnectError

logger = logging.getLogger(__name__)

DATABASE_ENV = "SCHEMAPLUS_DATABASE"
FOREIGN_KEYS_ENV = "SCHEMAPLUS_FOREIGN_KEYS"
TIMEOUT_ENV = "SCHEMAPLUS_TIMEOUT"
DEFAULT_TIMEOUT_SECONDS = 5.0


def _foreign_keys_enabled() -> bool:
    """Return False only if the environment explicitly disables foreign keys."""
    raw = os.getenv(FOREIGN_KEYS_ENV, "").strip().lower()
    return raw not in {"0", "false", "no", "off"}


def _timeout_seconds() -> float:
    """Return the busy timeout, honoring env override."""
    raw = os.getenv(TIMEOUT_ENV)
    if raw is None:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS


def resolve_database(database: str | None) -> str:
    """Return the database path from the argument or SCHEMAPLUS_DATABASE."""
    resolved = database or os.getenv(DATABASE_ENV)
    if not resolved:
        raise ConnectError(
            f"No database given. Pass --database or set {DATABASE_ENV}."
        )
    return resolved


def open_connection(
    database: str | None = None,
    *,
    foreign_keys: bool | None = None,
    timeout: float | None = None,
) -> sqlite3.Connection:
    """
    Open a sqlite3 connection configured for schema introspection.

    Foreign-key enforcement is switched on for the connection unless
    disabled here or through SCHEMAPLUS_FOREIGN_KEYS.

    Raises:
        ConnectError: If no database is configured or it cannot be opened.
    """
    path = resolve_database(database)
    if foreign_keys is None:
        foreign_keys = _foreign_keys_enabled()
    if timeout is None:
        timeout = _timeout_seconds()

    try:
        conn = sqlite3.connect(path, timeout=timeout)
        conn.row_factory = sqlite3.Row
        if foreign_keys:
            conn.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error as exc:
        raise ConnectError(f"Could not open SQLite database {path!r}: {exc}") from exc

    logger.debug("opened %s (foreign_keys=%s, timeout=%s)", path, foreign_keys, timeout)
    return conn
