# -----------------------------
# Store Errors
# -----------------------------


class VertexDBError(Exception):
    """Base class for every error raised by the store."""


class TableNotFoundError(VertexDBError, KeyError):
    """Raised when an operation names a table that does not exist."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Table '{table}' does not exist")

    def __str__(self) -> str:
        return str(self.args[0])


class TableAlreadyExistsError(VertexDBError, ValueError):
    """Raised when creating a table whose name is taken."""


class TriggerAlreadyExistsError(VertexDBError, ValueError):
    """Raised when a trigger name is already registered on a table."""


class TriggerNotFoundError(VertexDBError, KeyError):
    """Raised when dropping a trigger that is not registered."""

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidInputError(VertexDBError, ValueError):
    """Raised when an argument has the wrong shape."""


class SchemaValidationError(VertexDBError, ValueError):
    """Raised when a row violates a schema rule.

    Attributes:
        field: Name of the offending field
        rule: Rule that was violated (required, type, min, max, length, pattern)
    """

    def __init__(self, field: str, rule: str, message: str) -> None:
        self.field = field
        self.rule = rule
        super().__init__(message)


class ParseError(VertexDBError, ValueError):
    """Raised when JSON import data cannot be decoded."""


class RestoreError(VertexDBError, ValueError):
    """Raised when a backup has a malformed structure."""
