import logging

import pytest

from schemaplus.cli.common.log import configure_logging
from schemaplus.cli.common.output import _index_columns
from schemaplus.core.models import IndexDefinition, SortOrder


def test_index_columns_marks_descending_columns():
    index = IndexDefinition(
        name="idx",
        table_name="t",
        columns=("a", "b"),
        orders={"a": SortOrder.DESC, "b": SortOrder.ASC},
    )

    assert _index_columns(index) == "a DESC, b"


@pytest.mark.parametrize(
    ("verbosity", "level"),
    [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)],
)
def test_configure_logging_levels(verbosity: int, level: int):
    configure_logging(verbosity)

    assert logging.getLogger().level == level
