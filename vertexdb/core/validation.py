# Standard library
import re
from collections.abc import Iterable, Mapping
from typing import Any

# Local imports
from vertexdb.core.errors import InvalidInputError, SchemaValidationError
from vertexdb.core.models import Row, Schema
from vertexdb.core.utils import is_number, to_text

# -----------------------------
# Validation Constants
# -----------------------------

TYPE_CHECKS: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "boolean": (bool,),
    "object": (dict, list),
}

# -----------------------------
# Validation Functions
# -----------------------------


def validate_schema(schema: Any) -> None:
    """Validate a schema definition before it is attached to a table.

    Rule keys other than the six built-in ones are ignored.

    Args:
        schema: Mapping of field name to rule set

    Raises:
        InvalidInputError: If the definition is malformed
    """
    if not isinstance(schema, Mapping):
        msg = f"Schema must be a mapping, got {type(schema).__name__}"
        raise InvalidInputError(msg)

    for field, rules in schema.items():
        if not isinstance(rules, Mapping):
            msg = f"Rules for field '{field}' must be a mapping"
            raise InvalidInputError(msg)

        type_name = rules.get("type")
        if type_name is not None and type_name not in {"number", *TYPE_CHECKS}:
            msg = f"Unknown type '{type_name}' for field '{field}'"
            raise InvalidInputError(msg)


def validate_rows(rows: Iterable[Row], schema: Schema) -> None:
    """Check every row against the schema, stopping at the first violation.

    Fields are checked in declaration order. A missing or null value fails
    ``required`` and ``type``; the other rules are skipped for it.

    Args:
        rows: Rows to validate
        schema: Field rules keyed by field name

    Raises:
        SchemaValidationError: On the first rule violation in the batch
    """
    for row in rows:
        for field, rules in schema.items():
            _validate_field(row, field, rules)


def validate_row(row: Row, schema: Schema) -> None:
    """Validate a single row."""
    validate_rows([row], schema)


def _validate_field(row: Row, field: str, rules: Mapping[str, Any]) -> None:
    value: Any = row.get(field)

    type_name: str | None = rules.get("type")

    if value is None:
        if rules.get("required"):
            msg = f"Field '{field}' is required"
            raise SchemaValidationError(field, "required", msg)
        if type_name is not None:
            msg = f"Field '{field}' must be of type {type_name}"
            raise SchemaValidationError(field, "type", msg)
        return

    if type_name is not None and not _matches_type(value, type_name):
        msg = f"Field '{field}' must be of type {type_name}"
        raise SchemaValidationError(field, "type", msg)

    minimum = rules.get("min")
    if minimum is not None and is_number(value) and value < minimum:
        msg = f"Field '{field}' must be at least {minimum}"
        raise SchemaValidationError(field, "min", msg)

    maximum = rules.get("max")
    if maximum is not None and is_number(value) and value > maximum:
        msg = f"Field '{field}' must be at most {maximum}"
        raise SchemaValidationError(field, "max", msg)

    length = rules.get("length")
    if length is not None and len(to_text(value)) != length:
        msg = f"Field '{field}' must be exactly {length} characters long"
        raise SchemaValidationError(field, "length", msg)

    pattern = rules.get("pattern")
    if pattern is not None and not re.search(pattern, to_text(value)):
        msg = f"Field '{field}' does not match required pattern"
        raise SchemaValidationError(field, "pattern", msg)


def _matches_type(value: Any, type_name: str) -> bool:
    if type_name == "number":
        return is_number(value)
    return isinstance(value, TYPE_CHECKS[type_name])
