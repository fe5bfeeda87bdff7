"""Schema introspection facade for SQLite.

SchemaPlusAdapter composes the catalog reader, the DDL extractors and the
rename cascade behind one object. It is built explicitly from an engine
capability (or a sqlite3 connection); nothing is patched into shared classes.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Sequence

from schemaplus.core import foreign_keys, indexes, rename, views
from schemaplus.core.adapters.sqlite import SqliteIntrospectionAdapter
from schemaplus.core.catalog import CatalogReader
from schemaplus.core.errors import UnsupportedOperation
from schemaplus.core.introspection import SchemaIntrospection
from schemaplus.core.models import (
    ForeignKeyConstraint,
    IndexDefinition,
    ObjectType,
    RenameResult,
)

logger = logging.getLogger(__name__)

PARTIAL_INDEX_MIN_VERSION = (3, 8, 0)


class SchemaPlusAdapter:
    """Structured schema introspection over a single SQLite connection."""

    def __init__(self, introspection: SchemaIntrospection) -> None:
        self.introspection = introspection
        self.catalog = CatalogReader(introspection)

    @classmethod
    def from_connection(cls, connection: sqlite3.Connection) -> "SchemaPlusAdapter":
        """Build an adapter around an open sqlite3 connection."""
        return cls(SqliteIntrospectionAdapter(connection))

    def list_tables(self) -> list[str]:
        """Return user table names (views and sqlite_* internals excluded)."""
        return [
            name
            for name in self.catalog.names(ObjectType.TABLE)
            if not name.startswith("sqlite_")
        ]

    def list_foreign_keys(self, table_name: str) -> list[ForeignKeyConstraint]:
        """Return the foreign keys declared by `table_name`."""
        return foreign_keys.list_foreign_keys(self.catalog, table_name)

    def list_reverse_foreign_keys(self, table_name: str) -> list[ForeignKeyConstraint]:
        """Return the foreign keys in any table that reference `table_name`."""
        return foreign_keys.list_reverse_foreign_keys(self.catalog, table_name)

    def list_indexes(self, table_name: str) -> list[IndexDefinition]:
        """Return the indexes of `table_name`, including orders and conditions."""
        return indexes.list_indexes(self.introspection, self.catalog, table_name)

    def list_views(self) -> list[str]:
        """Return all view names."""
        return views.list_views(self.catalog)

    def view_definition(self, name: str) -> str | None:
        """Return a view's defining query, or None if it does not exist."""
        return views.view_definition(self.catalog, name)

    def rename_table(self, old_name: str, new_name: str) -> RenameResult:
        """Rename a table and rebuild its dependent indexes (see schemaplus.core.rename)."""
        return rename.rename_table(self.introspection, self.catalog, old_name, new_name)

    def drop_table(
        self, name: str, *, if_exists: bool = False, cascade: bool = False
    ) -> None:
        """Drop a table. SQLite has no DROP ... CASCADE, so `cascade` is ignored."""
        if cascade:
            logger.debug("ignoring cascade for drop of %s", name)
        self.introspection.drop_table_primitive(name, if_exists=if_exists)

    def supports_partial_indexes(self) -> bool:
        """Return True if the SQLite library understands `CREATE INDEX ... WHERE`."""
        return self.introspection.sqlite_version_info() >= PARTIAL_INDEX_MIN_VERSION

    def add_foreign_key(
        self,
        table_name: str,
        column_names: Sequence[str] | str,
        references_table_name: str,
        references_column_names: Sequence[str] | str,
        **options: Any,
    ) -> None:
        """Always raises: SQLite cannot add a constraint to an existing table."""
        raise UnsupportedOperation(
            "SQLite does not support altering a table to add foreign key constraints "
            f"(table {table_name!r} column {column_names!r})"
        )

    def remove_foreign_key(self, table_name: str, constraint_name: str) -> None:
        """Always raises: SQLite cannot drop a constraint from an existing table."""
        raise UnsupportedOperation(
            "SQLite does not support altering a table to remove foreign key constraints "
            f"(table {table_name!r} constraint {constraint_name!r})"
        )
