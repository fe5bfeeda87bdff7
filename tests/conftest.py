from __future__ import annotations

import sqlite3
import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from schemaplus.core.facade import SchemaPlusAdapter  # noqa: E402

SCHEMA_SQL = """
CREATE TABLE parent (id INTEGER PRIMARY KEY, code TEXT UNIQUE, active INTEGER);
CREATE TABLE child (
    id INTEGER PRIMARY KEY,
    parent_id INTEGER,
    other_id INTEGER,
    CONSTRAINT fk_child_parent FOREIGN KEY ("parent_id") REFERENCES "parent"("id") ON DELETE CASCADE DEFERRABLE INITIALLY DEFERRED,
    FOREIGN KEY (other_id) REFERENCES parent (id) ON UPDATE SET NULL
);
CREATE INDEX "idx_parent_code_active" ON "parent" ("code" DESC, "active");
CREATE INDEX index_parent_on_active ON parent (active) WHERE "active" = 1;
CREATE UNIQUE INDEX uniq_parent_code ON parent (code);
CREATE VIEW active_parents AS SELECT id, code FROM parent WHERE active = 1;
"""


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    connection.row_factory = sqlite3.Row
    connection.executescript(SCHEMA_SQL)
    yield connection
    connection.close()


@pytest.fixture
def adapter(conn) -> SchemaPlusAdapter:
    return SchemaPlusAdapter.from_connection(conn)


@pytest.fixture
def db_path(tmp_path) -> str:
    path = tmp_path / "schema.db"
    connection = sqlite3.connect(path)
    connection.executescript(SCHEMA_SQL)
    connection.close()
    return str(path)
