"""Interfaces for the engine capabilities schemaplus builds on.

The extractors in this package only parse text; everything that touches the
database goes through these protocols. The SQLite implementation lives in
`schemaplus.core.adapters.sqlite`, and tests substitute small fakes.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

from schemaplus.core.models import IndexDefinition


class QueryExecutor(Protocol):
    """Interface for running read queries against the catalog."""

    def execute_query(
        self, sql: str, params: Sequence[Any] = ()
    ) -> list[Mapping[str, Any]]:
        """Run `sql` with bound `params` and return rows as mappings."""
        ...


class SchemaIntrospection(QueryExecutor, Protocol):
    """
    Generic per-engine introspection and schema-change capability.

    Knows how to enumerate indexes and perform primitive structural changes,
    but nothing about the text stored in the catalog.
    """

    def generic_list_indexes(self, table_name: str) -> list[IndexDefinition]:
        """Return the table's indexes without orders or conditions."""
        ...

    def rename_table_primitive(self, old_name: str, new_name: str) -> None:
        """Rename a table without touching anything that depends on it."""
        ...

    def create_index_primitive(self, index: IndexDefinition) -> None:
        """Create an index from a structured definition."""
        ...

    def drop_index_primitive(self, name: str) -> None:
        """Drop an index by name."""
        ...

    def drop_table_primitive(self, name: str, *, if_exists: bool = False) -> None:
        """Drop a table by name."""
        ...

    def sqlite_version_info(self) -> tuple[int, ...]:
        """Return the engine library version as a tuple of ints."""
        ...
