"""Read access to SQLite's system catalog (`sqlite_master`)."""

from __future__ import annotations

import logging

from schemaplus.core.introspection import QueryExecutor
from schemaplus.core.models import CatalogEntry, ObjectType

logger = logging.getLogger(__name__)

_CATALOG_QUERY = "SELECT type, name, tbl_name, sql FROM sqlite_master WHERE type = ?"


class CatalogReader:
    """
    Lists catalog rows as CatalogEntry objects.

    The reader has no side effects and does not retry; errors raised by the
    executor (for example `sqlite3.Error`) propagate unchanged.
    """

    def __init__(self, executor: QueryExecutor) -> None:
        self.executor = executor

    def list(
        self,
        object_type: ObjectType | str,
        name: str | None = None,
        *,
        table_name: str | None = None,
    ) -> list[CatalogEntry]:
        """
        Return catalog entries of one type, in catalog order.

        Args:
            object_type: Kind of object to list.
            name: Optional exact object name filter.
            table_name: Optional exact owning-table filter.
        """
        object_type = ObjectType(object_type)
        sql = _CATALOG_QUERY
        params: list[str] = [object_type.value]
        if name is not None:
            sql += " AND name = ?"
            params.append(name)
        if table_name is not None:
            sql += " AND tbl_name = ?"
            params.append(table_name)
        sql += " ORDER BY rowid"

        rows = self.executor.execute_query(sql, params)
        logger.debug(
            "catalog lookup type=%s name=%s table=%s -> %d row(s)",
            object_type.value,
            name,
            table_name,
            len(rows),
        )
        return [
            CatalogEntry(
                object_type=ObjectType(row["type"]),
                name=row["name"],
                owning_table=row["tbl_name"],
                raw_sql=row["sql"],
            )
            for row in rows
        ]

    def names(self, object_type: ObjectType | str) -> list[str]:
        """Return the names of all catalog objects of one type."""
        return [entry.name for entry in self.list(object_type)]
