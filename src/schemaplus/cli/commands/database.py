"""Commands for inspecting a SQLite database schema."""

from __future__ import annotations

import sqlite3

import typer

from schemaplus.cli.common.context import DbAppContext, build_db_context
from schemaplus.cli.common.exits import exit_from_exc, ok_exit, warn_exit
from schemaplus.cli.common.options import DatabaseOpt, DryRunOpt, YesOpt
from schemaplus.cli.common.output import out
from schemaplus.core.errors import RenameCascadeError
from schemaplus.core.rename import snapshot_indexes

db_app = typer.Typer(
    help="SQLite schema introspection.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@db_app.callback()
def _init(ctx: typer.Context, database: str | None = DatabaseOpt):
    """Open the database for the invoked command."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    ctx.obj = build_db_context(database)
    ctx.call_on_close(ctx.obj.connection.close)


def _require_table(appctx: DbAppContext, table: str) -> None:
    """Exit with a usage error if `table` is not a table in the database."""
    try:
        tables = appctx.adapter.list_tables()
    except sqlite3.Error as exc:
        exit_from_exc(exc, message=f"Could not read the catalog: {exc}", code=1)

    if table not in tables:
        out.error(f"Table '{table}' does not exist.")
        raise typer.Exit(2)


@db_app.command("tables-list")
def tables_list(ctx: typer.Context):
    """List tables (views excluded)."""
    appctx: DbAppContext = ctx.obj

    try:
        tables = appctx.adapter.list_tables()
    except sqlite3.Error as exc:
        exit_from_exc(exc, message=f"Could not read the catalog: {exc}", code=1)

    if not tables:
        warn_exit("No tables found.")

    out.header("Tables")
    out.names_table(tables, title="Tables", column="Table")


@db_app.command("views-list")
def views_list(ctx: typer.Context):
    """List views."""
    appctx: DbAppContext = ctx.obj

    try:
        views = appctx.adapter.list_views()
    except sqlite3.Error as exc:
        exit_from_exc(exc, message=f"Could not read the catalog: {exc}", code=1)

    if not views:
        warn_exit("No views found.")

    out.header("Views")
    out.names_table(views, title="Views", column="View")


@db_app.command("view-show")
def view_show(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="View name"),
):
    """Print the defining query of a view."""
    appctx: DbAppContext = ctx.obj

    try:
        select_text = appctx.adapter.view_definition(name)
    except sqlite3.Error as exc:
        exit_from_exc(exc, message=f"Could not read the catalog: {exc}", code=1)

    if select_text is None:
        out.error(f"View '{name}' does not exist.")
        raise typer.Exit(1)

    out.print(select_text)


@db_app.command("fks-list")
def fks_list(
    ctx: typer.Context,
    table: str = typer.Argument(..., help="Table whose foreign keys to list"),
):
    """List the foreign keys declared by a table."""
    appctx: DbAppContext = ctx.obj
    _require_table(appctx, table)

    try:
        fks = appctx.adapter.list_foreign_keys(table)
    except sqlite3.Error as exc:
        exit_from_exc(exc, message=f"Could not read the catalog: {exc}", code=1)

    if not fks:
        warn_exit(f"Table '{table}' declares no foreign keys.")

    out.foreign_keys_table(fks, title=f"Foreign keys of {table}")


@db_app.command("fks-reverse")
def fks_reverse(
    ctx: typer.Context,
    table: str = typer.Argument(..., help="Referenced table"),
):
    """List foreign keys in other tables that reference a table."""
    appctx: DbAppContext = ctx.obj

    try:
        fks = appctx.adapter.list_reverse_foreign_keys(table)
    except sqlite3.Error as exc:
        exit_from_exc(exc, message=f"Could not read the catalog: {exc}", code=1)

    if not fks:
        warn_exit(f"No foreign keys reference '{table}'.")

    out.foreign_keys_table(fks, title=f"Foreign keys referencing {table}")


@db_app.command("indexes-list")
def indexes_list(
    ctx: typer.Context,
    table: str = typer.Argument(..., help="Table whose indexes to list"),
):
    """List a table's indexes with column order and partial-index condition."""
    appctx: DbAppContext = ctx.obj
    _require_table(appctx, table)

    try:
        indexes = appctx.adapter.list_indexes(table)
    except sqlite3.Error as exc:
        exit_from_exc(exc, message=f"Could not read the catalog: {exc}", code=1)

    if not indexes:
        warn_exit(f"Table '{table}' has no indexes.")

    out.indexes_table(indexes, title=f"Indexes of {table}")


@db_app.command("table-rename")
def table_rename(
    ctx: typer.Context,
    old_name: str = typer.Argument(..., help="Current table name"),
    new_name: str = typer.Argument(..., help="New table name"),
    dry_run: bool = DryRunOpt,
    yes: bool = YesOpt,
):
    """Rename a table and rebuild the indexes that depend on it."""
    appctx: DbAppContext = ctx.obj
    adapter = appctx.adapter
    _require_table(appctx, old_name)

    try:
        with out.status("Reading dependent indexes..."):
            plan = snapshot_indexes(adapter.introspection, adapter.catalog, old_name)
    except RenameCascadeError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    out.header("Rename plan")
    out.kv({"Table": f"{old_name} -> {new_name}", "Indexes to rebuild": len(plan)})
    if plan:
        out.indexes_table(plan, title="Indexes to rebuild")

    if dry_run:
        warn_exit("DRY RUN: no changes will be made.")

    if not yes and not out.confirm(f"Rename '{old_name}' to '{new_name}'?"):
        ok_exit("Cancelled.")

    # the cascade does not roll back on its own
    appctx.connection.execute("BEGIN")
    try:
        with out.status("Renaming table..."):
            result = adapter.rename_table(old_name, new_name)
    except RenameCascadeError as exc:
        appctx.connection.rollback()
        exit_from_exc(exc, message=str(exc), code=1)

    appctx.connection.commit()
    out.rename_result(result)
    out.success(f"Renamed '{old_name}' to '{new_name}'.")
