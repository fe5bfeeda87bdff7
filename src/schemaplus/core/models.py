"""Core schema models derived from the SQLite catalog.

These models are read-mostly projections of `sqlite_master` rows. They are
recomputed on every query, never cached, and carry no identity beyond the
catalog row they were parsed from. They are free of sqlite3 and CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class ObjectType(str, Enum):
    """Kind of schema object recorded in the catalog."""

    TABLE = "table"
    INDEX = "index"
    VIEW = "view"


class ReferentialAction(str, Enum):
    """
    Action taken on the referencing rows when a referenced row changes.

    Values are the lowercase, underscore-joined form of the SQL keywords
    (`SET NULL` -> `set_null`).
    """

    NO_ACTION = "no_action"
    RESTRICT = "restrict"
    CASCADE = "cascade"
    SET_NULL = "set_null"
    SET_DEFAULT = "set_default"


class DeferrableMode(str, Enum):
    """Whether constraint checking may be postponed until commit."""

    NOT_DEFERRABLE = "not_deferrable"
    DEFERRABLE = "deferrable"
    DEFERRABLE_INITIALLY_DEFERRED = "deferrable_initially_deferred"


class SortOrder(str, Enum):
    """Sort order of a single indexed column."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class CatalogEntry:
    """
    One row of the system catalog.

    Attributes:
        object_type: Kind of object (table, index or view).
        name: Object name.
        owning_table: Table the object belongs to (the table itself for tables).
        raw_sql: Original creation statement. None for engine-generated
                 indexes such as `sqlite_autoindex_*`.
    """

    object_type: ObjectType
    name: str
    owning_table: str
    raw_sql: str | None = None


@dataclass(frozen=True)
class ForeignKeyConstraint:
    """
    A foreign-key constraint parsed from a table's creation statement.

    Invariant: `len(column_names) == len(references_column_names)`.
    """

    table_name: str
    references_table_name: str
    column_names: tuple[str, ...]
    references_column_names: tuple[str, ...]
    constraint_name: str | None = None
    on_update: ReferentialAction = ReferentialAction.NO_ACTION
    on_delete: ReferentialAction = ReferentialAction.NO_ACTION
    deferrable: DeferrableMode = DeferrableMode.NOT_DEFERRABLE


@dataclass(frozen=True)
class IndexDefinition:
    """
    Structured index definition.

    `orders` only lists columns whose order was read from the creation text;
    any column missing from it sorts ascending. `collations` holds explicit
    `COLLATE` names; other columns use the table column's collation.
    `condition` is the verbatim predicate of a partial index.
    """

    name: str
    table_name: str
    columns: tuple[str, ...]
    unique: bool = False
    orders: Mapping[str, SortOrder] = field(default_factory=dict)
    collations: Mapping[str, str] = field(default_factory=dict)
    condition: str | None = None

    def order_of(self, column: str) -> SortOrder:
        """Return the sort order of `column` (ascending unless recorded otherwise)."""
        return self.orders.get(column, SortOrder.ASC)

    def collation_of(self, column: str) -> str | None:
        """Return the explicit collation of `column`, if the index names one."""
        return self.collations.get(column)


@dataclass(frozen=True)
class ViewDefinition:
    """A view name plus its defining query (None if the view does not exist)."""

    name: str
    select_text: str | None = None


@dataclass(frozen=True)
class RenameResult:
    """
    Outcome of a table rename cascade.

    Attributes:
        old_name: Table name before the rename.
        new_name: Table name after the rename.
        recreated_indexes: Indexes dropped and rebuilt against `new_name`,
                           in their final (possibly renamed) form.
        stale_foreign_keys: Constraints in other tables that still reference
                            `old_name`. SQLite keeps them as literal text in
                            the referencing table, so they cannot be rewritten
                            here.
    """

    old_name: str
    new_name: str
    recreated_indexes: tuple[IndexDefinition, ...] = ()
    stale_foreign_keys: tuple[ForeignKeyConstraint, ...] = ()
