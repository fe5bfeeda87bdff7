"""Application context management for the CLI."""

import sqlite3
from dataclasses import dataclass

from schemaplus.cli.common.exits import die
from schemaplus.core.connect import open_connection
from schemaplus.core.errors import ConnectError
from schemaplus.core.facade import SchemaPlusAdapter


@dataclass
class DbAppContext:
    """Application context holding the SQLite connection and schema adapter."""

    database: str | None
    connection: sqlite3.Connection
    adapter: SchemaPlusAdapter


def build_db_context(database: str | None) -> DbAppContext:
    """Open the database and return the context shared by `db` commands.

    Args:
        database: Database path; falls back to SCHEMAPLUS_DATABASE.

    Returns:
        DbAppContext: Context with an open connection and adapter.
    """
    try:
        connection = open_connection(database)
    except ConnectError as exc:
        die(str(exc), code=2)
    adapter = SchemaPlusAdapter.from_connection(connection)
    return DbAppContext(database=database, connection=connection, adapter=adapter)
