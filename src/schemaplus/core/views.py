"""View listing and view body extraction."""

from __future__ import annotations

from schemaplus.core.catalog import CatalogReader
from schemaplus.core.ddl import tokenize
from schemaplus.core.models import ObjectType, ViewDefinition


def strip_view_header(sql: str) -> str:
    """
    Remove the `CREATE VIEW <name> AS` header from a view's creation text.

    The header ends at the first top-level `AS` keyword followed by
    whitespace; the remainder is returned verbatim. Text without a
    `CREATE ... VIEW` header is returned unchanged.
    """
    tokens = tokenize(sql)
    if not tokens or not tokens[0].is_keyword("CREATE"):
        return sql
    if not any(tok.is_keyword("VIEW") for tok in tokens[1:4]):
        return sql

    for tok in tokens:
        if tok.depth == 0 and tok.is_keyword("AS") and sql[tok.end : tok.end + 1].isspace():
            return sql[tok.end :].lstrip()
    return sql


def list_views(reader: CatalogReader) -> list[str]:
    """Return the names of all views."""
    return reader.names(ObjectType.VIEW)


def get_view(reader: CatalogReader, name: str) -> ViewDefinition:
    """Return the view's definition; `select_text` is None if it does not exist."""
    entries = reader.list(ObjectType.VIEW, name)
    if not entries or entries[0].raw_sql is None:
        return ViewDefinition(name=name)
    return ViewDefinition(name=name, select_text=strip_view_header(entries[0].raw_sql))


def view_definition(reader: CatalogReader, name: str) -> str | None:
    """Return the defining query of a view, or None if there is no such view."""
    return get_view(reader, name).select_text
