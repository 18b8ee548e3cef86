# Standard library
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypedDict

# -----------------------------
# Constants
# -----------------------------

AUTO_INCREMENT = "AUTO_INCREMENT"

CREATED_AT = "created_at"
UPDATED_AT = "updated_at"
DELETED_AT = "deleted_at"

Row = dict[str, Any]


class Operator(StrEnum):
    """Comparison operators understood by the query evaluator."""

    EQ = "="
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    NEQ = "!="
    LIKE = "LIKE"
    IN = "IN"


OPERATORS: dict[str, str] = {op.name: op.value for op in Operator}


class RelationKind(StrEnum):
    HAS_ONE = "hasOne"
    HAS_MANY = "hasMany"
    BELONGS_TO = "belongsTo"


class TriggerStatus(StrEnum):
    PROCEED = "proceed"
    VETO = "veto"
    FAILED = "failed"


# -----------------------------
# TypedDict Definitions
# -----------------------------


class FieldRules(TypedDict, total=False):
    """Validation rules for a single schema field."""

    required: bool
    type: str
    min: float
    max: float
    length: int
    pattern: str | re.Pattern[str]


Schema = dict[str, FieldRules]


class TableSummary(TypedDict):
    name: str
    count: int


class BackupMetadata(TypedDict):
    tables: list[TableSummary]
    relationships: dict[str, list[dict[str, str]]]


class Backup(TypedDict):
    """Structural snapshot of every table and relationship."""

    timestamp: str
    data: dict[str, list[Row]]
    metadata: BackupMetadata


class TableStats(TypedDict):
    count: int
    columns: int


class StoreStats(TypedDict):
    tables: dict[str, TableStats]
    total_records: int
    last_modified: str
    indexes: list[str]
    relationships: list[tuple[str, list[dict[str, str]]]]


class Pagination(TypedDict):
    total: int
    per_page: int
    current_page: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class Page(TypedDict):
    data: list[Row]
    pagination: Pagination


class ColumnStats(TypedDict):
    """Statistics for a single column."""

    dtype: str
    null_count: int
    null_percentage: float
    unique_count: int


class TableProfile(TypedDict):
    """Complete table statistics."""

    row_count: int
    column_count: int
    column_stats: dict[str, ColumnStats]


# -----------------------------
# Domain Models
# -----------------------------


@dataclass(frozen=True)
class Relationship:
    """Declared edge between two tables. Never interpreted by joins."""

    table: str
    related_table: str
    kind: RelationKind
    foreign_key: str

    def to_dict(self) -> dict[str, str]:
        return {
            "table": self.related_table,
            "type": str(self.kind),
            "foreign_key": self.foreign_key,
        }


@dataclass(frozen=True)
class TriggerEvent:
    """Payload handed to a trigger callback.

    ``old`` is ``None`` for inserts and ``new`` is ``None`` for deletes.
    """

    operation: str
    old: Row | None
    new: Row | None


@dataclass(frozen=True)
class TriggerResult:
    """Outcome of one trigger callback invocation."""

    name: str
    status: TriggerStatus
    error: Exception | None = None

    @property
    def vetoed(self) -> bool:
        return self.status is TriggerStatus.VETO


TriggerCallback = Callable[[TriggerEvent], Any]
LogSink = Callable[[str], None]
