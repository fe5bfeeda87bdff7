import pytest

from schemaplus.core.indexes import (
    augment_indexes,
    create_index_sql,
    default_index_name,
    find_collations,
    find_condition,
    find_desc_columns,
    has_expression_columns,
)
from schemaplus.core.models import IndexDefinition, SortOrder


def _base(name: str = "idx", columns: tuple[str, ...] = ("a", "b")) -> IndexDefinition:
    return IndexDefinition(name=name, table_name="t", columns=columns)


def test_find_desc_columns_reads_quoted_and_bare_identifiers():
    assert find_desc_columns('CREATE INDEX "idx" ON "t" ("a" DESC, "b")') == ["a"]
    assert find_desc_columns("CREATE INDEX idx ON t (a desc, `b` DESC)") == ["a", "b"]


def test_find_desc_columns_allows_collate_before_desc():
    sql = "CREATE INDEX idx ON t (name COLLATE NOCASE DESC, b)"

    assert find_desc_columns(sql) == ["name"]


def test_find_desc_columns_ignores_expressions_and_predicate():
    sql = "CREATE INDEX idx ON t (lower(name) DESC, b) WHERE x DESC"

    assert find_desc_columns(sql) == []


def test_find_condition_captures_predicate_verbatim():
    sql = 'CREATE INDEX idx ON t ("a") WHERE "active" = 1'

    assert find_condition(sql) == '"active" = 1'


def test_find_condition_is_case_insensitive_and_spans_lines():
    sql = "CREATE INDEX idx ON t (a)\nwhere deleted_at IS NULL\n  AND kind = 'x'"

    assert find_condition(sql) == "deleted_at IS NULL\n  AND kind = 'x'"


def test_find_condition_ignores_quoted_where():
    assert find_condition('CREATE INDEX "where" ON t ("where")') is None
    assert find_condition("CREATE INDEX idx ON t (a)") is None


def test_augment_builds_orders_for_every_column_when_desc_found():
    [index] = augment_indexes(
        [_base()], {"idx": 'CREATE INDEX "idx" ON "t" ("a" DESC, "b")'}
    )

    assert index.orders == {"a": SortOrder.DESC, "b": SortOrder.ASC}
    assert index.condition is None


def test_augment_sets_condition_without_touching_orders():
    [index] = augment_indexes(
        [_base()], {"idx": 'CREATE INDEX idx ON t (a, b) WHERE "active" = 1'}
    )

    assert index.orders == {}
    assert index.order_of("a") is SortOrder.ASC
    assert index.condition == '"active" = 1'


def test_augment_passes_through_indexes_without_text_or_features():
    auto = _base("sqlite_autoindex_t_1", ("code",))
    plain = _base("plain")

    result = augment_indexes(
        [auto, plain],
        {"sqlite_autoindex_t_1": None, "plain": "CREATE INDEX plain ON t (a, b)"},
    )

    assert result == [auto, plain]


def test_augment_ignores_text_for_unknown_indexes():
    base = [_base()]

    result = augment_indexes(base, {"other": "CREATE INDEX other ON u (a DESC)"})

    assert result == base


def test_augment_keeps_base_order():
    first, second = _base("first"), _base("second")

    result = augment_indexes(
        [first, second], {"second": "CREATE INDEX second ON t (a DESC, b)"}
    )

    assert [i.name for i in result] == ["first", "second"]
    assert result[1].order_of("a") is SortOrder.DESC


def test_create_index_sql_emits_order_and_condition():
    index = IndexDefinition(
        name="idx",
        table_name="t",
        columns=("a", "b"),
        unique=True,
        orders={"a": SortOrder.DESC, "b": SortOrder.ASC},
        condition='"active" = 1',
    )

    assert (
        create_index_sql(index)
        == 'CREATE UNIQUE INDEX "idx" ON "t" ("a" DESC, "b") WHERE "active" = 1'
    )


def test_create_index_sql_rejects_index_without_columns():
    with pytest.raises(ValueError, match="no columns"):
        create_index_sql(_base(columns=()))


def test_default_index_name():
    assert default_index_name("users", ["a", "b"]) == "index_users_on_a_and_b"


def test_find_collations_reads_explicit_collate():
    sql = 'CREATE UNIQUE INDEX ux ON t (name COLLATE NOCASE, "code" COLLATE "rtrim" DESC, b)'

    assert find_collations(sql) == {"name": "NOCASE", "code": "rtrim"}


@pytest.mark.parametrize(
    ("sql", "expected"),
    [
        ("CREATE INDEX ix ON t (a, lower(b))", True),
        ("CREATE INDEX ix ON t (a + b)", True),
        ("CREATE INDEX ix ON t (a COLLATE NOCASE ASC, b DESC)", False),
        ("CREATE INDEX ix ON t (a) WHERE lower(b) = 'x'", False),
    ],
)
def test_has_expression_columns(sql: str, expected: bool):
    assert has_expression_columns(sql) is expected


def test_augment_matches_column_names_case_insensitively():
    [index] = augment_indexes(
        [_base()], {"idx": "CREATE INDEX idx ON t (A DESC, B COLLATE NOCASE)"}
    )

    assert index.orders == {"a": SortOrder.DESC, "b": SortOrder.ASC}
    assert index.collations == {"b": "NOCASE"}


def test_create_index_sql_emits_collation_before_order():
    index = IndexDefinition(
        name="ux",
        table_name="t",
        columns=("name", "code"),
        unique=True,
        orders={"name": SortOrder.DESC, "code": SortOrder.ASC},
        collations={"name": "NOCASE", "code": "my coll"},
    )

    assert create_index_sql(index) == (
        'CREATE UNIQUE INDEX "ux" ON "t" ("name" COLLATE NOCASE DESC, "code" COLLATE "my coll")'
    )
