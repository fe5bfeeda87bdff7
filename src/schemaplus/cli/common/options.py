"""Common CLI options for the CLI."""

import typer

from schemaplus.core.connect import DATABASE_ENV

DatabaseOpt = typer.Option(
    None,
    "--database",
    "-d",
    envvar=DATABASE_ENV,
    help=f"Path to the SQLite database (or set {DATABASE_ENV})",
)

VerboseOpt = typer.Option(
    0,
    "--verbose",
    "-v",
    count=True,
    help="Show log output (-v info, -vv debug)",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Show which indexes would be rebuilt, but don't change anything",
)

YesOpt = typer.Option(False, "--yes", help="Skip confirmation prompt")
