# Standard library
import json
import re
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

# Third-party
import polars as pl

# Local imports
from vertexdb.core.models import ColumnStats, Row, TableProfile

# -----------------------------
# Constants
# -----------------------------

APPROX_UNIQUE_THRESHOLD = 10_000
INTEGER_PREFIX = re.compile(r"^\s*([+-]?\d+)")

# -----------------------------
# Value helpers
# -----------------------------


def is_number(value: Any) -> bool:
    """True for ints and floats, but not for bools."""
    return isinstance(value, int | float) and not isinstance(value, bool)


def strict_equals(left: Any, right: Any) -> bool:
    """Equality that never treats a bool as equal to a number."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return bool(left == right)


def to_text(value: Any) -> str:
    """Stringify a value the way it would appear in JSON text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, dict | list):
        return json.dumps(value)
    return str(value)


def coerce_id(value: Any) -> int:
    """Read an integer id for auto-increment purposes; anything else counts as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else 0
    if isinstance(value, str):
        match = INTEGER_PREFIX.match(value)
        return int(match.group(1)) if match else 0
    return 0


def next_id(rows: Iterable[Row], field: str = "id") -> int:
    """Next auto-increment id: max(existing integer ids, 0) + 1."""
    return max([0, *(coerce_id(row.get(field)) for row in rows)]) + 1


# -----------------------------
# Timestamps
# -----------------------------


def now_iso() -> str:
    """Current UTC timestamp in ISO-8601 format."""
    return datetime.now(UTC).isoformat()


def backup_timestamp() -> str:
    """Current UTC timestamp as ``YYYY-MM-DD HH:MM:SS``."""
    return datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")


# -----------------------------
# Serialization
# -----------------------------


def serialize(value: Any, indent: int | None = 2) -> str:
    """Encode a value as JSON text."""
    return json.dumps(value, indent=indent, default=str)


def deserialize(text: str) -> Any:
    """Decode JSON text."""
    return json.loads(text)


# -----------------------------
# Schema and stats utilities
# -----------------------------


def rows_to_frame(rows: list[Row]) -> pl.DataFrame:
    """Build a Polars DataFrame from rows, scanning every row for the schema."""
    if not rows:
        return pl.DataFrame()
    return pl.from_dicts(rows, infer_schema_length=None)


def compute_stats(df: pl.DataFrame) -> TableProfile:
    """Compute column statistics for a Polars DataFrame.

    Returns:
        TableProfile with:
        - row_count: Total number of rows
        - column_count: Total number of columns
        - column_stats: Per-column statistics (dtype, nulls, unique count)
    """
    column_stats: dict[str, ColumnStats] = {}

    for col in df.columns:
        series: pl.Series = df[col]

        null_count: int = series.null_count()
        null_percentage: float = (
            (null_count / df.height * 100) if df.height > 0 else 0.0
        )

        # Unique count with approx fallback on large numeric/string columns
        if df.height > APPROX_UNIQUE_THRESHOLD and (
            series.dtype.is_numeric() or series.dtype == pl.String
        ):
            approx_val = series.approx_n_unique()
            unique_count: int = int(approx_val) if approx_val is not None else 0
        else:
            unique_count = series.n_unique()

        column_stats[col] = {
            "dtype": str(series.dtype),
            "null_count": null_count,
            "null_percentage": null_percentage,
            "unique_count": unique_count,
        }

    return {
        "row_count": df.height,
        "column_count": len(df.columns),
        "column_stats": column_stats,
    }
