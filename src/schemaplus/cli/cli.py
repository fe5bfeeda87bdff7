"""CLI application for SQLite schema introspection."""

import typer

from schemaplus.cli.commands.database import db_app
from schemaplus.cli.common.log import configure_logging
from schemaplus.cli.common.options import VerboseOpt

app = typer.Typer(
    help="schemaplus - structured schema introspection for SQLite",
    no_args_is_help=True,
)


@app.callback()
def _init(verbose: int = VerboseOpt):
    """Configure logging for every command."""
    configure_logging(verbose)


app.add_typer(
    db_app,
    name="db",
    help="Inspect foreign keys, indexes and views; rename tables safely.",
)


if __name__ == "__main__":
    app()
