import sqlite3

import pytest
from typer.testing import CliRunner

from schemaplus.cli.cli import app
from schemaplus.cli.common.output import Out
from schemaplus.core.facade import SchemaPlusAdapter

runner = CliRunner()


def _invoke(db_path: str, *args: str):
    return runner.invoke(app, ["db", "--database", db_path, *args])


def _index_names(db_path: str, table: str) -> set[str]:
    conn = sqlite3.connect(db_path)
    try:
        rows = conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'index' AND tbl_name = ? AND sql IS NOT NULL",
            (table,),
        ).fetchall()
    finally:
        conn.close()
    return {name for (name,) in rows}


def test_db_without_database_is_usage_error(monkeypatch):
    monkeypatch.delenv("SCHEMAPLUS_DATABASE", raising=False)

    result = runner.invoke(app, ["db", "tables-list"])

    assert result.exit_code == 2
    assert "SCHEMAPLUS_DATABASE" in result.output


def test_database_from_env(monkeypatch, db_path):
    monkeypatch.setenv("SCHEMAPLUS_DATABASE", db_path)

    result = runner.invoke(app, ["db", "tables-list"])

    assert result.exit_code == 0
    assert "parent" in result.output
    assert "child" in result.output


def test_views_and_view_show(db_path):
    listed = _invoke(db_path, "views-list")
    shown = _invoke(db_path, "view-show", "active_parents")
    missing = _invoke(db_path, "view-show", "nope")

    assert listed.exit_code == 0
    assert "active_parents" in listed.output
    assert shown.exit_code == 0
    assert shown.output.strip() == "SELECT id, code FROM parent WHERE active = 1"
    assert missing.exit_code == 1


def test_fks_commands(db_path):
    assert _invoke(db_path, "fks-list", "child").exit_code == 0
    assert _invoke(db_path, "fks-reverse", "parent").exit_code == 0
    assert _invoke(db_path, "fks-list", "missing").exit_code == 2

    empty = _invoke(db_path, "fks-list", "parent")
    assert empty.exit_code == 0
    assert "no foreign keys" in empty.output


def test_indexes_list(db_path):
    result = _invoke(db_path, "indexes-list", "parent")

    assert result.exit_code == 0
    assert "Indexes of parent" in result.output
    assert _invoke(db_path, "indexes-list", "missing").exit_code == 2


def test_table_rename_dry_run_changes_nothing(db_path):
    result = _invoke(db_path, "table-rename", "parent", "account", "--dry-run")

    assert result.exit_code == 0
    assert "DRY RUN" in result.output
    assert "index_parent_on_active" in _index_names(db_path, "parent")
    assert _index_names(db_path, "account") == set()


def test_table_rename_cancelled(monkeypatch, db_path):
    monkeypatch.setattr(Out, "confirm", lambda self, message, **kwargs: False)

    result = _invoke(db_path, "table-rename", "parent", "account")

    assert result.exit_code == 0
    assert "Cancelled" in result.output
    assert _index_names(db_path, "account") == set()


def test_table_rename_applies_cascade(db_path):
    result = _invoke(db_path, "table-rename", "parent", "account", "--yes")

    assert result.exit_code == 0
    assert _index_names(db_path, "parent") == set()
    assert _index_names(db_path, "account") == {
        "idx_parent_code_active",
        "index_account_on_active",
        "uniq_parent_code",
    }


@pytest.mark.parametrize("args", [("parent", "child"), ("missing", "x")])
def test_table_rename_failures_exit_non_zero(db_path, args):
    result = _invoke(db_path, "table-rename", *args, "--yes")

    assert result.exit_code in (1, 2)
    assert _index_names(db_path, "parent")


def test_catalog_errors_exit_cleanly(monkeypatch, db_path):
    def _locked(self):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(SchemaPlusAdapter, "list_tables", _locked)

    result = _invoke(db_path, "indexes-list", "parent")

    assert result.exit_code == 1
    assert "database is locked" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)
