"""Index metadata extraction and rebuilding.

SQLite's generic index introspection (`PRAGMA index_list` / `index_info`)
reports names, columns and uniqueness, but not per-column sort order,
explicit collations or the predicate of a partial index. These only exist in the stored creation text:

    CREATE [UNIQUE] INDEX <name> ON <table> (<column> [COLLATE x] [DESC], ...)
        [WHERE <predicate>]

This module reads them back from that text and can rebuild the statement
from a structured IndexDefinition.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Iterable, Mapping

from schemaplus.core.catalog import CatalogReader
from schemaplus.core.ddl import (
    Token,
    matching_paren,
    quote_identifier,
    split_items,
    tokenize,
)
from schemaplus.core.introspection import SchemaIntrospection
from schemaplus.core.models import IndexDefinition, ObjectType, SortOrder

logger = logging.getLogger(__name__)

_BARE_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _column_list_bounds(tokens: list[Token]) -> tuple[int, int] | None:
    """Return the token indexes of the parentheses around the indexed columns."""
    on_seen = False
    for idx, tok in enumerate(tokens):
        if tok.depth != 0:
            continue
        if tok.is_keyword("ON"):
            on_seen = True
        elif on_seen and tok.is_punct("("):
            close = matching_paren(tokens, idx)
            return None if close is None else (idx, close)
    return None


def _plain_column(item: list[Token]) -> tuple[str, str | None, bool] | None:
    """
    Parse `<identifier> [COLLATE <name>] [ASC | DESC]`.

    Returns (column, collation, descending), or None for an expression.
    """
    if not item or not item[0].is_identifier:
        return None
    rest = item[1:]
    collation = None
    if len(rest) >= 2 and rest[0].is_keyword("COLLATE") and rest[1].is_identifier:
        collation = rest[1].value
        rest = rest[2:]
    descending = False
    if len(rest) == 1 and rest[0].is_keyword("ASC", "DESC"):
        descending = rest[0].is_keyword("DESC")
        rest = []
    if rest:
        return None
    return item[0].value, collation, descending


def _column_items(sql: str) -> list[list[Token]]:
    tokens = tokenize(sql)
    bounds = _column_list_bounds(tokens)
    if bounds is None:
        return []
    return split_items(tokens, *bounds)


def find_desc_columns(sql: str) -> list[str]:
    """Return the columns an index creation statement sorts descending."""
    parsed = (_plain_column(item) for item in _column_items(sql))
    return [p[0] for p in parsed if p is not None and p[2]]


def find_collations(sql: str) -> dict[str, str]:
    """Return the explicit `COLLATE` name of each plain indexed column."""
    parsed = (_plain_column(item) for item in _column_items(sql))
    return {p[0]: p[1] for p in parsed if p is not None and p[1] is not None}


def has_expression_columns(sql: str) -> bool:
    """True if any indexed item is an expression rather than a plain column."""
    return any(_plain_column(item) is None for item in _column_items(sql))


def find_condition(sql: str) -> str | None:
    """Return the verbatim partial-index predicate, or None."""
    for tok in tokenize(sql):
        if tok.depth == 0 and tok.is_keyword("WHERE"):
            return sql[tok.end :].lstrip() or None
    return None


def augment_indexes(
    base_indexes: Iterable[IndexDefinition],
    raw_sql_by_name: Mapping[str, str | None],
) -> list[IndexDefinition]:
    """
    Add sort orders, collations and partial-index conditions to generic
    index definitions.

    The base index for a raw statement is only looked up (once) when the
    statement actually has a DESC column, a COLLATE or a WHERE clause. Column
    names match case-insensitively. Indexes without creation text, such as
    SQLite's automatic indexes, pass through as-is.

    Args:
        base_indexes: Definitions from the generic introspection capability.
        raw_sql_by_name: Stored creation text keyed by index name.

    Returns:
        The base definitions in their original order, augmented where the
        creation text carries extra metadata.
    """
    augmented = list(base_indexes)

    for name, sql in raw_sql_by_name.items():
        if not sql:
            continue

        desc_columns = {c.casefold() for c in find_desc_columns(sql)}
        collations = {c.casefold(): coll for c, coll in find_collations(sql).items()}
        condition = find_condition(sql)
        if not desc_columns and not collations and condition is None:
            continue

        position = next((i for i, idx in enumerate(augmented) if idx.name == name), None)
        if position is None:
            continue

        # index_info spells columns as the table does; the statement may not
        index = augmented[position]
        matched_collations = {
            column: collations[column.casefold()]
            for column in index.columns
            if column.casefold() in collations
        }
        orders = index.orders
        if desc_columns:
            orders = {
                column: SortOrder.DESC if column.casefold() in desc_columns else SortOrder.ASC
                for column in index.columns
            }
        augmented[position] = replace(
            index,
            orders=orders,
            collations=matched_collations or index.collations,
            condition=condition if condition is not None else index.condition,
        )
        logger.debug(
            "index %s: desc=%s collations=%s condition=%r",
            name,
            sorted(desc_columns),
            collations,
            condition,
        )

    return augmented


def _collation_sql(name: str) -> str:
    return name if _BARE_NAME_RE.fullmatch(name) else quote_identifier(name)


def create_index_sql(index: IndexDefinition) -> str:
    """Build a `CREATE INDEX` statement from a structured definition."""
    if not index.columns:
        raise ValueError(f"Index {index.name!r} has no columns to rebuild.")

    columns = []
    for column in index.columns:
        item = quote_identifier(column)
        collation = index.collation_of(column)
        if collation is not None:
            item += f" COLLATE {_collation_sql(collation)}"
        if index.order_of(column) is SortOrder.DESC:
            item += " DESC"
        columns.append(item)

    unique = "UNIQUE " if index.unique else ""
    sql = (
        f"CREATE {unique}INDEX {quote_identifier(index.name)} "
        f"ON {quote_identifier(index.table_name)} ({', '.join(columns)})"
    )
    if index.condition:
        sql += f" WHERE {index.condition}"
    return sql


def default_index_name(table_name: str, columns: Iterable[str]) -> str:
    """Return the conventional name `index_<table>_on_<col>_and_<col>`."""
    return f"index_{table_name}_on_{'_and_'.join(columns)}"


def list_indexes(
    introspection: SchemaIntrospection, reader: CatalogReader, table_name: str
) -> list[IndexDefinition]:
    """Return a table's indexes with orders and conditions read from the catalog."""
    base = introspection.generic_list_indexes(table_name)
    raw_sql_by_name = {
        entry.name: entry.raw_sql
        for entry in reader.list(ObjectType.INDEX, table_name=table_name)
    }
    return augment_indexes(base, raw_sql_by_name)
