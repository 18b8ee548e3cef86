# Standard library
import operator
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from functools import cmp_to_key
from typing import Any

# Local imports
from vertexdb.core.errors import InvalidInputError
from vertexdb.core.models import DELETED_AT, Operator, Row
from vertexdb.core.utils import strict_equals, to_text

# -----------------------------
# Constants
# -----------------------------

ASC = "ASC"
DESC = "DESC"

_MISSING = object()

_ORDERING: dict[Operator, Callable[[Any, Any], bool]] = {
    Operator.GT: operator.gt,
    Operator.LT: operator.lt,
    Operator.GTE: operator.ge,
    Operator.LTE: operator.le,
}

# -----------------------------
# Query parts
# -----------------------------


@dataclass(frozen=True)
class Condition:
    """A single where-condition.

    ``conjunction`` records whether the condition was added with ``where`` or
    ``or_where``. The evaluator ANDs every condition regardless.
    """

    field: str
    operator: Operator
    value: Any
    conjunction: str = "AND"


@dataclass(frozen=True)
class OrderSpec:
    column: str
    direction: str = ASC


@dataclass(frozen=True)
class Query:
    """Immutable filter/sort/pagination intent.

    Every builder method returns a new Query, so a query can be shared or
    reused without one caller observing another caller's chain.
    """

    conditions: tuple[Condition, ...] = ()
    search_terms: tuple[tuple[str, str], ...] = ()
    order: OrderSpec | None = None
    limit_count: int | None = None
    offset: int = 0

    # -----------------------------
    # Builders
    # -----------------------------

    def where(self, field: str, value: Any, conjunction: str = "AND") -> "Query":
        condition = Condition(field, Operator.EQ, value, conjunction.upper())
        return replace(self, conditions=(*self.conditions, condition))

    def or_where(self, field: str, value: Any) -> "Query":
        return self.where(field, value, "OR")

    def where_operator(self, field: str, op: str, value: Any) -> "Query":
        """Add a condition using one of the symbolic operators.

        Raises:
            InvalidInputError: If the operator is unknown, or IN is given
                a value that is not a sequence
        """
        parsed: Operator = parse_operator(op)
        if parsed is Operator.IN:
            value = _as_sequence(value)
        condition = Condition(field, parsed, value)
        return replace(self, conditions=(*self.conditions, condition))

    def where_in(self, field: str, values: Sequence[Any]) -> "Query":
        return self.where_operator(field, Operator.IN, values)

    def where_like(self, field: str, pattern: str) -> "Query":
        return self.where_operator(field, Operator.LIKE, pattern)

    def search(self, terms: Mapping[str, Any]) -> "Query":
        """Replace the search terms with ``{column: term}`` pairs."""
        pairs = tuple((column, to_text(term)) for column, term in terms.items())
        return replace(self, search_terms=pairs)

    def order_by(self, column: str, direction: str = ASC) -> "Query":
        normalized: str = direction.upper()
        if normalized not in {ASC, DESC}:
            msg = f"Invalid sort direction '{direction}'. Use 'ASC' or 'DESC'."
            raise InvalidInputError(msg)
        return replace(self, order=OrderSpec(column, normalized))

    def limit(self, limit: int, offset: int = 0) -> "Query":
        return replace(self, limit_count=limit, offset=offset)

    def without_limit(self) -> "Query":
        return replace(self, limit_count=None, offset=0)


EMPTY_QUERY = Query()

# -----------------------------
# Evaluation
# -----------------------------


def parse_operator(op: str | Operator) -> Operator:
    try:
        return Operator(op.upper() if isinstance(op, str) else op)
    except ValueError:
        msg = f"Unknown operator '{op}'"
        raise InvalidInputError(msg) from None


def evaluate_condition(row: Row, condition: Condition) -> bool:
    actual: Any = row.get(condition.field, _MISSING)
    expected: Any = condition.value
    op: Operator = condition.operator

    if op is Operator.IN:
        return actual is not _MISSING and any(
            strict_equals(actual, candidate) for candidate in expected
        )
    if op is Operator.LIKE:
        needle: str = to_text(expected).replace("%", "")
        return actual is not _MISSING and needle in to_text(actual)
    if op is Operator.NEQ:
        return actual is _MISSING or not strict_equals(actual, expected)
    if op in _ORDERING:
        if actual is _MISSING or actual is None or expected is None:
            return False
        try:
            return bool(_ORDERING[op](actual, expected))
        except TypeError:
            # Incomparable types never match
            return False
    return actual is not _MISSING and strict_equals(actual, expected)


def matches_conditions(row: Row, conditions: Iterable[Condition]) -> bool:
    """True when the row satisfies every condition (logical AND)."""
    return all(evaluate_condition(row, condition) for condition in conditions)


def matches_search(row: Row, terms: Sequence[tuple[str, str]]) -> bool:
    """True when any (column, term) pair is a case-insensitive substring match."""
    if not terms:
        return True
    return any(
        term.lower() in to_text(row.get(column)).lower() for column, term in terms
    )


def is_visible(row: Row) -> bool:
    """False for rows carrying a soft-delete marker."""
    return row.get(DELETED_AT) is None


def apply_query(
    rows: Iterable[Row], query: Query = EMPTY_QUERY, *, soft_delete: bool = False
) -> list[Row]:
    """Filter, search, order and paginate rows.

    Steps run in a fixed order: soft-delete filter, where-conditions, search
    terms, ordering, then the limit/offset slice.

    Args:
        rows: Source rows (not modified)
        query: Query to apply
        soft_delete: Exclude rows marked as deleted

    Returns:
        New list of matching rows
    """
    results: list[Row] = list(rows)

    if soft_delete:
        results = [row for row in results if is_visible(row)]

    if query.conditions:
        results = [row for row in results if matches_conditions(row, query.conditions)]

    if query.search_terms:
        results = [row for row in results if matches_search(row, query.search_terms)]

    if query.order is not None:
        results = _sort_rows(results, query.order)

    if query.limit_count is not None:
        start: int = max(query.offset, 0)
        results = results[start : start + max(query.limit_count, 0)]

    return results


def _sort_rows(rows: list[Row], order: OrderSpec) -> list[Row]:
    column: str = order.column

    def compare(a: Row, b: Row) -> int:
        left: Any = a.get(column)
        right: Any = b.get(column)
        if left is None or right is None:
            # Missing values go last
            return (left is None) - (right is None)
        try:
            if left > right:
                return 1
            if left < right:
                return -1
        except TypeError:
            return 0
        return 0

    # sorted() is stable, including with reverse=True
    return sorted(rows, key=cmp_to_key(compare), reverse=order.direction == DESC)


def _as_sequence(values: Any) -> tuple[Any, ...]:
    if isinstance(values, str | bytes) or not isinstance(
        values, Sequence | set | frozenset
    ):
        msg = "Values must be a list"
        raise InvalidInputError(msg)
    return tuple(values)
