"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from schemaplus.cli.common.tui_style import QUESTIONARY_STYLE_CONFIRM
from schemaplus.core.models import (
    ForeignKeyConstraint,
    IndexDefinition,
    RenameResult,
    SortOrder,
)

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


def _index_columns(index: IndexDefinition) -> str:
    """Render columns as `a COLLATE NOCASE DESC, b`."""
    parts = []
    for c in index.columns:
        part = c
        if index.collation_of(c):
            part += f" COLLATE {index.collation_of(c)}"
        if index.order_of(c) is SortOrder.DESC:
            part += " DESC"
        parts.append(part)
    return ", ".join(parts)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def print(self, msg: str) -> None:
        """Print a raw message without markup processing."""
        console.print(msg, markup=False, highlight=False)

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True if the user confirms, False otherwise.
        """
        # Questionary renders `instruction=...` inline next to the echoed answer
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            message,
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
            pointer="❯",
        )
        return bool(prompt.ask())

    def names_table(self, names: Iterable[str], title: str, column: str = "Name") -> None:
        """Render a single-column table of object names."""
        t = Table(title=title, show_lines=False)
        t.add_column(column, style="ok")

        for name in names:
            t.add_row(str(name))

        console.print(t)

    def foreign_keys_table(
        self, fks: Iterable[ForeignKeyConstraint], title: str = "Foreign keys"
    ) -> None:
        """Render foreign-key constraints, one row per constraint."""
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="meta")
        t.add_column("Table", style="ok")
        t.add_column("Columns")
        t.add_column("References", style="ok")
        t.add_column("On update", style="meta")
        t.add_column("On delete", style="meta")
        t.add_column("Deferrable", style="meta")

        for fk in fks:
            t.add_row(
                fk.constraint_name or "",
                fk.table_name,
                ", ".join(fk.column_names),
                f"{fk.references_table_name}({', '.join(fk.references_column_names)})",
                fk.on_update.value,
                fk.on_delete.value,
                fk.deferrable.value,
            )

        console.print(t)

    def indexes_table(
        self, indexes: Iterable[IndexDefinition], title: str = "Indexes"
    ) -> None:
        """Render index definitions including order and partial-index condition."""
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok")
        t.add_column("Table", style="meta")
        t.add_column("Columns")
        t.add_column("Unique")
        t.add_column("Condition", style="meta")

        for index in indexes:
            t.add_row(
                index.name,
                index.table_name,
                _index_columns(index),
                "yes" if index.unique else "no",
                escape(index.condition or ""),
            )

        console.print(t)

    def rename_result(self, result: RenameResult) -> None:
        """Render the outcome of a rename cascade, flagging stale foreign keys."""
        self.kv({"Renamed": f"{result.old_name} -> {result.new_name}"})
        if result.recreated_indexes:
            self.indexes_table(result.recreated_indexes, title="Recreated indexes")
        if result.stale_foreign_keys:
            self.warn(
                f"{len(result.stale_foreign_keys)} foreign key(s) still reference "
                f"'{result.old_name}'. Recreate the referencing table(s) to update them."
            )
            self.foreign_keys_table(result.stale_foreign_keys, title="Stale foreign keys")


out = Out()
