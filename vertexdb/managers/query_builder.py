# Standard library
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

# Local imports
from vertexdb.core.models import Page, Row
from vertexdb.core.query import ASC, EMPTY_QUERY, Query

if TYPE_CHECKING:
    import polars as pl

    from vertexdb.managers.manager import VertexDB

# -----------------------------
# Query Builder
# -----------------------------


@dataclass(frozen=True)
class QueryBuilder:
    """A Query bound to a store, for fluent chaining.

    Each chained call returns a new builder; terminal calls pass the query to
    the store. Reusing a builder re-runs the same query.

    Examples:
        >>> db.where("age", 25).order_by("name").get("users")
        >>> adults = db.where_operator("age", ">=", 18)
        >>> adults.update("users", {"adult": True})
    """

    store: "VertexDB"
    query: Query = EMPTY_QUERY

    def _with(self, query: Query) -> "QueryBuilder":
        return QueryBuilder(self.store, query)

    # -----------------------------
    # Chaining
    # -----------------------------

    def where(self, field: str, value: Any, conjunction: str = "AND") -> "QueryBuilder":
        return self._with(self.query.where(field, value, conjunction))

    def or_where(self, field: str, value: Any) -> "QueryBuilder":
        return self._with(self.query.or_where(field, value))

    def where_operator(self, field: str, operator: str, value: Any) -> "QueryBuilder":
        return self._with(self.query.where_operator(field, operator, value))

    def where_in(self, field: str, values: Sequence[Any]) -> "QueryBuilder":
        return self._with(self.query.where_in(field, values))

    def where_like(self, field: str, pattern: str) -> "QueryBuilder":
        return self._with(self.query.where_like(field, pattern))

    def search(self, terms: Mapping[str, Any]) -> "QueryBuilder":
        return self._with(self.query.search(terms))

    def order_by(self, column: str, direction: str = ASC) -> "QueryBuilder":
        return self._with(self.query.order_by(column, direction))

    def limit(self, limit: int, offset: int = 0) -> "QueryBuilder":
        return self._with(self.query.limit(limit, offset))

    # -----------------------------
    # Terminal reads
    # -----------------------------

    def get(self, table_name: str) -> list[Row]:
        return self.store.get(table_name, self.query)

    def get_one(self, table_name: str) -> Row | None:
        return self.store.get_one(table_name, self.query)

    def count(self, table_name: str) -> int:
        return self.store.count(table_name, self.query)

    def exists(self, table_name: str) -> bool:
        return self.store.exists(table_name, self.query)

    def distinct(self, table_name: str, column: str) -> list[Any]:
        return self.store.distinct(table_name, column, self.query)

    def avg(self, table_name: str, column: str) -> float:
        return self.store.avg(table_name, column, self.query)

    def sum(self, table_name: str, column: str) -> float:
        return self.store.sum(table_name, column, self.query)

    def min(self, table_name: str, column: str) -> Any:
        return self.store.min(table_name, column, self.query)

    def max(self, table_name: str, column: str) -> Any:
        return self.store.max(table_name, column, self.query)

    def group_by(self, table_name: str, column: str) -> dict[Any, list[Row]]:
        return self.store.group_by(table_name, column, self.query)

    def paginate(self, table_name: str, page: int = 1, per_page: int = 10) -> Page:
        return self.store.paginate(table_name, page, per_page, self.query)

    def to_json(self, table_name: str) -> str:
        return self.store.to_json(table_name, self.query)

    def to_frame(self, table_name: str) -> "pl.DataFrame":
        return self.store.to_frame(table_name, self.query)

    def show(self, table_name: str) -> None:
        self.store.show(table_name, self.query)

    # -----------------------------
    # Terminal writes
    # -----------------------------

    def update(self, table_name: str, data: Mapping[str, Any]) -> "VertexDB":
        return self.store.update(table_name, data, self.query)

    def delete(self, table_name: str) -> "VertexDB":
        return self.store.delete(table_name, self.query)
