"""Foreign-key extraction from stored `CREATE TABLE` statements.

SQLite keeps table-level foreign keys only as text inside the table's own
creation statement. This module scans that text for every clause of the form

    [CONSTRAINT <name>] FOREIGN KEY (<columns>)
        REFERENCES <table> (<columns>)
        [ON UPDATE <action>] [ON DELETE <action>] [MATCH <name>]
        [[NOT] DEFERRABLE [INITIALLY DEFERRED | INITIALLY IMMEDIATE]]

terminated by `,` or `)`. Clauses that do not fit this shape are skipped,
never reported as errors.

Known limitation: the two column lists are unquoted differently. The
constrained list loses every backtick and its surrounding double quotes; the
referenced list loses every backtick and every double quote. Identifiers
that contain a quote character come out differently in the two lists.
"""

from __future__ import annotations

import logging
import re

from schemaplus.core.catalog import CatalogReader
from schemaplus.core.ddl import Token, TokenKind, matching_paren, tokenize
from schemaplus.core.models import (
    DeferrableMode,
    ForeignKeyConstraint,
    ObjectType,
    ReferentialAction,
)

logger = logging.getLogger(__name__)

_REFERENCED_QUOTES_RE = re.compile(r'[`"]')


def _constrained_columns(raw: str) -> list[str]:
    """Split the FOREIGN KEY column list."""
    return [part.strip().strip('"') for part in raw.replace("`", "").split(",")]


def _referenced_columns(raw: str) -> list[str]:
    """Split the REFERENCES column list."""
    return [part.strip() for part in _REFERENCED_QUOTES_RE.sub("", raw).split(",")]


def _constraint_name(tokens: list[Token], idx: int) -> str | None:
    """Return the `CONSTRAINT <name>` preceding the FOREIGN keyword, if any."""
    if idx >= 2 and tokens[idx - 2].is_keyword("CONSTRAINT") and tokens[idx - 1].is_identifier:
        return tokens[idx - 1].value
    return None


def _column_list(sql: str, tokens: list[Token], pos: int) -> tuple[str | None, int]:
    """Return the raw text of a parenthesized list at `pos` and the index after it."""
    if pos >= len(tokens) or not tokens[pos].is_punct("("):
        return None, pos
    close = matching_paren(tokens, pos)
    if close is None:
        return None, pos
    raw = sql[tokens[pos].end : tokens[close].start]
    if not raw.strip():
        return None, pos
    return raw, close + 1


def _action(tokens: list[Token], pos: int) -> tuple[ReferentialAction | None, int]:
    """Parse a referential action (`CASCADE`, `SET NULL`, ...) starting at `pos`."""
    if pos >= len(tokens) or tokens[pos].kind is not TokenKind.WORD:
        return None, pos
    words = [tokens[pos].text]
    pos += 1
    if words[0].upper() in ("SET", "NO") and pos < len(tokens) and tokens[pos].kind is TokenKind.WORD:
        words.append(tokens[pos].text)
        pos += 1
    value = " ".join(words).lower().replace(" ", "_")
    try:
        return ReferentialAction(value), pos
    except ValueError:
        return None, pos


def _keyword_at(tokens: list[Token], pos: int, *words: str) -> bool:
    return pos < len(tokens) and tokens[pos].is_keyword(*words)


def _parse_clause(
    sql: str, tokens: list[Token], start: int, table_name: str
) -> ForeignKeyConstraint | None:
    """Parse one FOREIGN KEY clause whose `FOREIGN` token sits at `start`."""
    name = _constraint_name(tokens, start)

    columns_raw, pos = _column_list(sql, tokens, start + 2)
    if columns_raw is None or not _keyword_at(tokens, pos, "REFERENCES"):
        return None
    pos += 1

    if pos >= len(tokens) or not tokens[pos].is_identifier:
        return None
    references_table_name = tokens[pos].value
    pos += 1
    # schema-qualified target: keep the table part
    while (
        pos + 1 < len(tokens)
        and tokens[pos].is_punct(".")
        and tokens[pos + 1].is_identifier
    ):
        references_table_name = tokens[pos + 1].value
        pos += 2

    references_raw, pos = _column_list(sql, tokens, pos)
    if references_raw is None:
        return None

    on_update = ReferentialAction.NO_ACTION
    on_delete = ReferentialAction.NO_ACTION
    deferrable = DeferrableMode.NOT_DEFERRABLE

    while pos < len(tokens):
        if _keyword_at(tokens, pos, "ON") and _keyword_at(tokens, pos + 1, "UPDATE", "DELETE"):
            is_update = tokens[pos + 1].is_keyword("UPDATE")
            action, pos = _action(tokens, pos + 2)
            if action is None:
                return None
            if is_update:
                on_update = action
            else:
                on_delete = action
        elif _keyword_at(tokens, pos, "MATCH") and pos + 1 < len(tokens):
            pos += 2
        elif _keyword_at(tokens, pos, "NOT") and _keyword_at(tokens, pos + 1, "DEFERRABLE"):
            deferrable = DeferrableMode.NOT_DEFERRABLE
            pos += 2
            if _keyword_at(tokens, pos, "INITIALLY") and _keyword_at(tokens, pos + 1, "DEFERRED", "IMMEDIATE"):
                pos += 2
        elif _keyword_at(tokens, pos, "DEFERRABLE"):
            deferrable = DeferrableMode.DEFERRABLE
            pos += 1
            if _keyword_at(tokens, pos, "INITIALLY") and _keyword_at(tokens, pos + 1, "DEFERRED"):
                deferrable = DeferrableMode.DEFERRABLE_INITIALLY_DEFERRED
                pos += 2
            elif _keyword_at(tokens, pos, "INITIALLY") and _keyword_at(tokens, pos + 1, "IMMEDIATE"):
                pos += 2
        else:
            break

    if pos >= len(tokens) or not (tokens[pos].is_punct(",") or tokens[pos].is_punct(")")):
        return None

    column_names = _constrained_columns(columns_raw)
    references_column_names = _referenced_columns(references_raw)
    if len(column_names) != len(references_column_names) or not all(column_names):
        logger.debug(
            "skipping foreign key on %s: column lists %r / %r do not line up",
            table_name,
            column_names,
            references_column_names,
        )
        return None

    return ForeignKeyConstraint(
        table_name=table_name,
        references_table_name=references_table_name,
        column_names=tuple(column_names),
        references_column_names=tuple(references_column_names),
        constraint_name=name,
        on_update=on_update,
        on_delete=on_delete,
        deferrable=deferrable,
    )


def extract_foreign_keys(
    table_sql: str | None, table_name: str
) -> list[ForeignKeyConstraint]:
    """
    Extract every foreign-key clause from a table's creation statement.

    Args:
        table_sql: Stored `CREATE TABLE` text (None is treated as empty).
        table_name: Name of the table the text belongs to.

    Returns:
        Constraints in order of appearance; an empty list when the text has
        no (parseable) FOREIGN KEY clause.
    """
    if not table_sql:
        return []

    tokens = tokenize(table_sql)
    constraints: list[ForeignKeyConstraint] = []
    for idx, tok in enumerate(tokens):
        if tok.is_keyword("FOREIGN") and _keyword_at(tokens, idx + 1, "KEY"):
            constraint = _parse_clause(table_sql, tokens, idx, table_name)
            if constraint is not None:
                constraints.append(constraint)

    logger.debug("table %s: %d foreign key(s)", table_name, len(constraints))
    return constraints


def list_foreign_keys(
    reader: CatalogReader, table_name: str | None = None
) -> list[ForeignKeyConstraint]:
    """Return the foreign keys declared by one table, or by every table when None."""
    constraints: list[ForeignKeyConstraint] = []
    for entry in reader.list(ObjectType.TABLE, table_name):
        constraints.extend(extract_foreign_keys(entry.raw_sql, entry.name))
    return constraints


def list_reverse_foreign_keys(
    reader: CatalogReader, table_name: str
) -> list[ForeignKeyConstraint]:
    """Return the foreign keys, in any table, that reference `table_name`."""
    return [
        fk
        for fk in list_foreign_keys(reader)
        if fk.references_table_name == table_name
    ]
