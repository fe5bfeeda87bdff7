"""Table rename cascade.

SQLite can rename a table, but the indexes that depend on it are stored as
creation text naming the table. This module renames the table and then
rebuilds every dependent index from its structured definition, so ordering
and partial-index predicates survive and no text is rewritten by substring
replacement.

Steps run strictly in sequence on a single connection:

  0) snapshot the table's indexes (read only, before any mutation)
  1) rename the table
  2) drop and recreate each snapshotted index against the new name
  3) report foreign keys elsewhere that still reference the old name

A failing step stops the cascade with RenameCascadeError. Completed steps are
not rolled back; callers needing atomicity wrap the call in a transaction and
must not run other schema changes on the same tables meanwhile.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from schemaplus.core.catalog import CatalogReader
from schemaplus.core.errors import RenameCascadeError
from schemaplus.core.foreign_keys import list_reverse_foreign_keys
from schemaplus.core.indexes import (
    default_index_name,
    has_expression_columns,
    list_indexes,
)
from schemaplus.core.introspection import SchemaIntrospection
from schemaplus.core.models import IndexDefinition, ObjectType, RenameResult

logger = logging.getLogger(__name__)


def _retarget(index: IndexDefinition, old_name: str, new_name: str) -> IndexDefinition:
    """Point an index at `new_name`, renaming it if it used the default name."""
    name = index.name
    if name == default_index_name(old_name, index.columns):
        name = default_index_name(new_name, index.columns)
    return replace(index, name=name, table_name=new_name)


def snapshot_indexes(
    introspection: SchemaIntrospection, reader: CatalogReader, table_name: str
) -> list[IndexDefinition]:
    """
    Return the structured definitions of the table's rebuildable indexes.

    Only indexes with stored creation text are included; SQLite's automatic
    indexes follow the table on their own. An index with any expression column
    is refused, since it cannot be rebuilt from column names.

    Raises:
        RenameCascadeError: If an index cannot be captured in structured form.
    """
    try:
        entries = [
            entry
            for entry in reader.list(ObjectType.INDEX, table_name=table_name)
            if entry.raw_sql is not None
        ]
        by_name = (
            {index.name: index for index in list_indexes(introspection, reader, table_name)}
            if entries
            else {}
        )
    except Exception as exc:  # noqa: BLE001
        raise RenameCascadeError("snapshot", table_name, str(exc)) from exc

    snapshot: list[IndexDefinition] = []
    for entry in entries:
        if has_expression_columns(entry.raw_sql):
            raise RenameCascadeError(
                "snapshot", entry.name, "index has expression columns that cannot be rebuilt"
            )
        index = by_name.get(entry.name)
        if index is None:
            raise RenameCascadeError(
                "snapshot", entry.name, "index is not reported by the engine"
            )
        if not index.columns:
            raise RenameCascadeError(
                "snapshot", entry.name, "index has no plain columns to rebuild"
            )
        snapshot.append(index)
    return snapshot


def rename_table(
    introspection: SchemaIntrospection,
    reader: CatalogReader,
    old_name: str,
    new_name: str,
) -> RenameResult:
    """
    Rename a table and rebuild the indexes that depend on it.

    Args:
        introspection: Engine capability used for the primitive changes.
        reader: Catalog reader on the same connection.
        old_name: Current table name.
        new_name: Table name to rename to.

    Returns:
        RenameResult listing the recreated indexes and any foreign keys in
        other tables that still reference `old_name`.

    Raises:
        RenameCascadeError: Identifying the step and object that failed.
    """
    snapshot = snapshot_indexes(introspection, reader, old_name)
    logger.info(
        "renaming %s -> %s (%d dependent index(es))", old_name, new_name, len(snapshot)
    )

    try:
        introspection.rename_table_primitive(old_name, new_name)
    except Exception as exc:  # noqa: BLE001
        raise RenameCascadeError("rename", old_name, str(exc)) from exc

    recreated: list[IndexDefinition] = []
    for index in snapshot:
        target = _retarget(index, old_name, new_name)
        try:
            introspection.drop_index_primitive(index.name)
        except Exception as exc:  # noqa: BLE001
            raise RenameCascadeError("drop_index", index.name, str(exc)) from exc
        try:
            introspection.create_index_primitive(target)
        except Exception as exc:  # noqa: BLE001
            raise RenameCascadeError("create_index", target.name, str(exc)) from exc
        logger.info("recreated index %s on %s", target.name, new_name)
        recreated.append(target)

    try:
        stale = list_reverse_foreign_keys(reader, old_name)
    except Exception as exc:  # noqa: BLE001
        raise RenameCascadeError("foreign_keys", old_name, str(exc)) from exc
    for fk in stale:
        logger.warning(
            "foreign key on %s%s still references %s; recreate %s to update it",
            fk.table_name,
            f" ({fk.constraint_name})" if fk.constraint_name else "",
            old_name,
            fk.table_name,
        )

    return RenameResult(
        old_name=old_name,
        new_name=new_name,
        recreated_indexes=tuple(recreated),
        stale_foreign_keys=tuple(stale),
    )
