"""Error types raised by schemaplus."""

from __future__ import annotations


class SchemaPlusError(RuntimeError):
    """Base class for schemaplus errors."""


class ConnectError(SchemaPlusError):
    """Raised when a database connection cannot be configured or opened."""


class UnsupportedOperation(SchemaPlusError, NotImplementedError):
    """Raised for structural changes SQLite cannot apply to an existing table."""


class RenameCascadeError(SchemaPlusError):
    """
    Raised when a table rename cascade stops part way.

    Steps that completed before the failure are not rolled back; wrap the
    rename in a transaction when atomicity matters.

    Attributes:
        step: Step that failed (`snapshot`, `rename`, `drop_index`,
              `create_index` or `foreign_keys`).
        object_name: Table or index the failing step operated on.
    """

    def __init__(self, step: str, object_name: str, message: str) -> None:
        super().__init__(f"Rename cascade failed at {step} ({object_name!r}): {message}")
        self.step = step
        self.object_name = object_name
