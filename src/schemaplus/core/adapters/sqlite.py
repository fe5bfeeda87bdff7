from __future__ import annotations

import logging
import sqlite3
from typing import Any, Mapping, Sequence

from schemaplus.core.ddl import quote_identifier
from schemaplus.core.indexes import create_index_sql
from schemaplus.core.models import IndexDefinition

logger = logging.getLogger(__name__)


class SqliteIntrospectionAdapter:
    """Adapter around a sqlite3 connection (generic index listing and primitive DDL)."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection

    def execute_query(
        self, sql: str, params: Sequence[Any] = ()
    ) -> list[Mapping[str, Any]]:
        """Run a query and return its rows as dicts keyed by column name."""
        cursor = self.connection.execute(sql, tuple(params))
        try:
            if cursor.description is None:
                return []
            names = [d[0] for d in cursor.description]
            return [dict(zip(names, row)) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def _execute(self, sql: str) -> None:
        logger.debug("executing: %s", sql)
        self.connection.execute(sql)

    def generic_list_indexes(self, table_name: str) -> list[IndexDefinition]:
        """List a table's indexes from PRAGMA index_list / index_info (no orders, no conditions)."""
        out: list[IndexDefinition] = []
        index_rows = self.execute_query(
            f"PRAGMA index_list({quote_identifier(table_name)})"
        )
        for row in index_rows:
            name = row["name"]
            info = self.execute_query(f"PRAGMA index_info({quote_identifier(name)})")
            columns = tuple(
                col["name"]
                for col in sorted(info, key=lambda c: c["seqno"])
                if col["name"] is not None
            )
            out.append(
                IndexDefinition(
                    name=name,
                    table_name=table_name,
                    columns=columns,
                    unique=bool(row["unique"]),
                )
            )
        return out

    def rename_table_primitive(self, old_name: str, new_name: str) -> None:
        """Rename a table with ALTER TABLE ... RENAME TO."""
        self._execute(
            f"ALTER TABLE {quote_identifier(old_name)} RENAME TO {quote_identifier(new_name)}"
        )

    def create_index_primitive(self, index: IndexDefinition) -> None:
        """Create an index from its structured definition."""
        self._execute(create_index_sql(index))

    def drop_index_primitive(self, name: str) -> None:
        """Drop an index by name."""
        self._execute(f"DROP INDEX {quote_identifier(name)}")

    def drop_table_primitive(self, name: str, *, if_exists: bool = False) -> None:
        """Drop a table by name."""
        clause = "IF EXISTS " if if_exists else ""
        self._execute(f"DROP TABLE {clause}{quote_identifier(name)}")

    def sqlite_version_info(self) -> tuple[int, ...]:
        """Return the SQLite library version, e.g. (3, 45, 1)."""
        row = self.connection.execute("SELECT sqlite_version()").fetchone()
        return tuple(int(part) for part in row[0].split("."))
