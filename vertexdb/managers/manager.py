# Standard library
import math
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import AbstractContextManager
from typing import Any

# Third-party
import polars as pl

# Local imports
from vertexdb.core.config import StoreConfig
from vertexdb.core.errors import (
    InvalidInputError,
    ParseError,
    RestoreError,
)
from vertexdb.core.models import (
    AUTO_INCREMENT,
    CREATED_AT,
    DELETED_AT,
    OPERATORS,
    UPDATED_AT,
    Backup,
    LogSink,
    Page,
    RelationKind,
    Relationship,
    Row,
    Schema,
    StoreStats,
    TableProfile,
    TableStats,
    TriggerCallback,
)
from vertexdb.core.query import ASC, EMPTY_QUERY, Query, apply_query, matches_conditions
from vertexdb.core.utils import (
    backup_timestamp,
    deserialize,
    is_number,
    next_id,
    now_iso,
    serialize,
    strict_equals,
    to_text,
)
from vertexdb.core.validation import validate_rows, validate_schema
from vertexdb.managers.query_builder import QueryBuilder
from vertexdb.repositories.table_repository import Index, TableRepository, TableState
from vertexdb.services.display_service import DisplayService
from vertexdb.services.frame_service import FrameService
from vertexdb.services.index_service import IndexService
from vertexdb.services.log_service import OperationLogger
from vertexdb.services.snapshot_service import SnapshotService
from vertexdb.services.transaction_service import TransactionService
from vertexdb.services.trigger_service import TriggerService

# -----------------------------
# Record Store
# -----------------------------


class VertexDB:
    """In-memory record store - single API surface for table operations.

    Filtering is expressed with immutable queries. ``db.where(...)`` and the
    other chaining methods return a QueryBuilder bound to this store; store
    methods that read or mutate rows also accept a ``query`` directly.

    Examples:
        >>> db = VertexDB(timestamps=True)
        >>> db.create_table("users")
        >>> db.insert("users", {"id": VertexDB.AUTO_INCREMENT, "name": "Jane"})
        >>> db.where("name", "Jane").get_one("users")
    """

    AUTO_INCREMENT = AUTO_INCREMENT
    OPERATORS = OPERATORS

    def __init__(
        self,
        logging: bool | LogSink | None = None,
        timestamps: bool | None = None,
        soft_delete: bool | None = None,
    ) -> None:
        self.config: StoreConfig = StoreConfig.resolve(
            logging=logging, timestamps=timestamps, soft_delete=soft_delete
        )

        # Initialize repository
        self._table_repo = TableRepository()

        # Initialize services
        self._logger = OperationLogger(self.config.logging)
        self._trigger_service = TriggerService(self._table_repo, self._logger)
        self._index_service = IndexService(self._table_repo)
        self._snapshot_service = SnapshotService(self._table_repo)
        self._transaction_service = TransactionService(
            self._snapshot_service, self._logger
        )
        self._frame_service = FrameService()
        self._display_service = DisplayService()

        self._last_insert_id: Any = None
        self._last_error: Exception | None = None

    @property
    def timestamps(self) -> bool:
        return self.config.timestamps

    @property
    def soft_delete(self) -> bool:
        return self.config.soft_delete

    def set_logging(self, enable: bool | LogSink) -> "VertexDB":
        """Enable or disable logging, or route events to a sink callable."""
        self._logger.setting = enable
        return self

    # -----------------------------
    # Query Building
    # -----------------------------

    def query(self) -> QueryBuilder:
        """Start an empty query bound to this store."""
        return QueryBuilder(self)

    def where(self, field: str, value: Any, conjunction: str = "AND") -> QueryBuilder:
        return self.query().where(field, value, conjunction)

    def or_where(self, field: str, value: Any) -> QueryBuilder:
        return self.query().or_where(field, value)

    def where_operator(self, field: str, operator: str, value: Any) -> QueryBuilder:
        return self.query().where_operator(field, operator, value)

    def where_in(self, field: str, values: Sequence[Any]) -> QueryBuilder:
        return self.query().where_in(field, values)

    def where_like(self, field: str, pattern: str) -> QueryBuilder:
        return self.query().where_like(field, pattern)

    def search(self, terms: Mapping[str, Any]) -> QueryBuilder:
        return self.query().search(terms)

    def order_by(self, column: str, direction: str = ASC) -> QueryBuilder:
        return self.query().order_by(column, direction)

    def limit(self, limit: int, offset: int = 0) -> QueryBuilder:
        return self.query().limit(limit, offset)

    # -----------------------------
    # Table Lifecycle
    # -----------------------------

    def tables(self) -> list[str]:
        """Names of all tables, in creation order."""
        return self._table_repo.names()

    def create_table(self, table_name: str, schema: Schema | None = None) -> "VertexDB":
        """Create an empty table.

        Args:
            table_name: Unique table name
            schema: Optional field rules enforced on insert

        Raises:
            TableAlreadyExistsError: If the name is taken
            InvalidInputError: If the schema definition is malformed
        """
        if schema is not None:
            validate_schema(schema)
        self._table_repo.create(table_name, schema)
        self._logger.log(
            "create_table", {"table_name": table_name, "has_schema": schema is not None}
        )
        return self

    def drop_table(self, table_name: str) -> "VertexDB":
        """Drop a table with its schema, triggers, indexes and relationships."""
        self._table_repo.drop(table_name)
        self._logger.log("drop_table", {"table_name": table_name})
        return self

    def set_table(
        self,
        table_name: str,
        rows: list[Row],
        schema: Schema | None = None,
    ) -> "VertexDB":
        """Replace a table's rows, creating the table if needed.

        Rows are validated against ``schema`` when given (which then becomes
        the table's schema), otherwise against the table's stored schema.
        Missing timestamps are filled in when timestamps are enabled.

        Raises:
            InvalidInputError: If ``rows`` is not a list of mappings
            SchemaValidationError: If a row violates the schema
        """
        if not isinstance(rows, list) or not all(isinstance(r, Mapping) for r in rows):
            msg = "Data must be a list of rows"
            raise InvalidInputError(msg)

        if schema is not None:
            validate_schema(schema)
        effective: Schema | None = schema
        if effective is None and self._table_repo.has(table_name):
            effective = self._table_repo.require(table_name).schema
        if effective:
            validate_rows(rows, effective)

        new_rows: list[Row] = [dict(row) for row in rows]
        if self.timestamps:
            timestamp: str = now_iso()
            for row in new_rows:
                row[CREATED_AT] = row.get(CREATED_AT) or timestamp
                row[UPDATED_AT] = row.get(UPDATED_AT) or timestamp

        state: TableState = self._table_repo.get_or_create(table_name)
        state.rows = new_rows
        if schema is not None:
            state.schema = schema

        self._logger.log("set_table", {"table_name": table_name, "row_count": len(new_rows)})
        return self

    def exists(self, table_name: str, query: Query = EMPTY_QUERY) -> bool:
        """True if the table has at least one visible matching row.

        This is not a table-existence check: an empty or fully soft-deleted
        table reports False.
        """
        return self.count(table_name, query) > 0

    def add_column(
        self, table_name: str, column_name: str, default_value: Any = None
    ) -> "VertexDB":
        state: TableState = self._table_repo.require(table_name)
        state.rows = [{**row, column_name: default_value} for row in state.rows]
        self._logger.log(
            "add_column", {"table_name": table_name, "column_name": column_name}
        )
        return self

    def drop_column(self, table_name: str, column_name: str) -> "VertexDB":
        state: TableState = self._table_repo.require(table_name)
        state.rows = [
            {key: value for key, value in row.items() if key != column_name}
            for row in state.rows
        ]
        self._logger.log(
            "drop_column", {"table_name": table_name, "column_name": column_name}
        )
        return self

    def set_relation(
        self,
        table_name: str,
        related_table: str,
        kind: str | RelationKind,
        foreign_key: str,
    ) -> "VertexDB":
        """Declare a relationship. Stored as metadata only.

        Raises:
            TableNotFoundError: If ``table_name`` does not exist
            InvalidInputError: If ``kind`` is not hasOne, hasMany or belongsTo
        """
        state: TableState = self._table_repo.require(table_name)
        try:
            relation_kind = RelationKind(kind)
        except ValueError:
            msg = f"Invalid relationship type '{kind}'. Use hasOne, hasMany or belongsTo."
            raise InvalidInputError(msg) from None

        state.relationships.append(
            Relationship(table_name, related_table, relation_kind, foreign_key)
        )
        self._logger.log(
            "set_relation",
            {
                "table_name": table_name,
                "related_table": related_table,
                "type": str(relation_kind),
                "foreign_key": foreign_key,
            },
        )
        return self

    def get_schema(self, table_name: str) -> Schema | None:
        """Schema of a table; None for a table without one or an unknown table."""
        if not self._table_repo.has(table_name):
            return None
        return self._table_repo.require(table_name).schema

    def update_schema(self, table_name: str, schema: Schema) -> "VertexDB":
        """Replace a table's schema after checking existing rows against it.

        Raises:
            TableNotFoundError: If the table does not exist
            SchemaValidationError: If an existing row violates the new schema;
                the previous schema stays in place
        """
        state: TableState = self._table_repo.require(table_name)
        validate_schema(schema)
        validate_rows(state.rows, schema)
        state.schema = schema
        self._logger.log("update_schema", {"table_name": table_name})
        return self

    def truncate(self, table_name: str) -> "VertexDB":
        """Remove every row, bypassing triggers and conditions."""
        self._table_repo.put_rows(table_name, [])
        self._logger.log("truncate", {"table_name": table_name})
        return self

    # -----------------------------
    # Reads
    # -----------------------------

    def get(self, table_name: str, query: Query = EMPTY_QUERY) -> list[Row]:
        """Get visible rows matching the query.

        Args:
            table_name: Table to read
            query: Conditions, search, ordering and pagination

        Returns:
            Copies of the matching rows
        """
        state: TableState = self._table_repo.require(table_name)
        results: list[Row] = apply_query(state.rows, query, soft_delete=self.soft_delete)
        self._logger.log(
            "get", {"table_name": table_name, "result_count": len(results)}
        )
        return [dict(row) for row in results]

    def get_one(self, table_name: str, query: Query = EMPTY_QUERY) -> Row | None:
        results: list[Row] = self.get(table_name, query)
        return results[0] if results else None

    def raw(
        self, table_name: str, predicate: Callable[[Row], bool] | None = None
    ) -> list[Row]:
        """Every stored row, soft-deleted ones included, optionally filtered."""
        state: TableState = self._table_repo.require(table_name)
        return [dict(row) for row in state.rows if predicate is None or predicate(row)]

    def count(self, table_name: str, query: Query = EMPTY_QUERY) -> int:
        return len(self.get(table_name, query))

    def distinct(
        self, table_name: str, column: str, query: Query = EMPTY_QUERY
    ) -> list[Any]:
        values: list[Any] = []
        for row in self.get(table_name, query):
            value: Any = row.get(column)
            if not any(strict_equals(value, seen) for seen in values):
                values.append(value)
        return values

    def sum(self, table_name: str, column: str, query: Query = EMPTY_QUERY) -> float:
        """Sum of a column; non-numeric and missing values count as 0."""
        total: float = 0
        for row in self.get(table_name, query):
            value: Any = row.get(column)
            total += value if is_number(value) else 0
        return total

    def avg(self, table_name: str, column: str, query: Query = EMPTY_QUERY) -> float:
        """Average of a column over all matching rows, 0 for no rows."""
        rows: list[Row] = self.get(table_name, query)
        if not rows:
            return 0
        total: float = 0
        for row in rows:
            value: Any = row.get(column)
            total += value if is_number(value) else 0
        return total / len(rows)

    def min(self, table_name: str, column: str, query: Query = EMPTY_QUERY) -> Any:
        """Smallest non-null value, or None if there is none or the values
        cannot be compared with each other.
        """
        values: list[Any] = self._column_values(table_name, column, query)
        try:
            return min(values) if values else None
        except TypeError:
            return None

    def max(self, table_name: str, column: str, query: Query = EMPTY_QUERY) -> Any:
        """Largest non-null value; None under the same rules as ``min``."""
        values: list[Any] = self._column_values(table_name, column, query)
        try:
            return max(values) if values else None
        except TypeError:
            return None

    def group_by(
        self, table_name: str, column: str, query: Query = EMPTY_QUERY
    ) -> dict[Any, list[Row]]:
        """Group matching rows by a column value.

        Booleans and unhashable values are keyed by their text form, so
        ``True`` and ``1`` land in separate groups.
        """
        groups: dict[Any, list[Row]] = {}
        for row in self.get(table_name, query):
            key: Any = row.get(column)
            if isinstance(key, bool | dict | list):
                key = to_text(key)
            groups.setdefault(key, []).append(row)
        return groups

    def paginate(
        self,
        table_name: str,
        page: int = 1,
        per_page: int = 10,
        query: Query = EMPTY_QUERY,
    ) -> Page:
        """Get one page of matching rows with pagination info.

        Raises:
            InvalidInputError: If ``page`` or ``per_page`` is below 1
        """
        if page < 1 or per_page < 1:
            msg = "page and per_page must be at least 1"
            raise InvalidInputError(msg)

        total: int = self.count(table_name, query.without_limit())
        total_pages: int = math.ceil(total / per_page)
        offset: int = (page - 1) * per_page
        results: list[Row] = self.get(table_name, query.limit(per_page, offset))

        return {
            "data": results,
            "pagination": {
                "total": total,
                "per_page": per_page,
                "current_page": page,
                "total_pages": total_pages,
                "has_next_page": page < total_pages,
                "has_prev_page": page > 1,
            },
        }

    def _column_values(self, table_name: str, column: str, query: Query) -> list[Any]:
        return [
            row[column]
            for row in self.get(table_name, query)
            if row.get(column) is not None
        ]

    # -----------------------------
    # Mutations
    # -----------------------------

    def insert(self, table_name: str, data: Mapping[str, Any]) -> "VertexDB":
        """Insert one row.

        An ``id`` equal to AUTO_INCREMENT is replaced by the next integer id.
        The row is checked against the table schema, then insert triggers run;
        if any returns False the row is not stored.

        Raises:
            TableNotFoundError: If the table does not exist
            InvalidInputError: If ``data`` is not a mapping
            SchemaValidationError: If the row violates the table schema
        """
        state: TableState = self._table_repo.require(table_name)
        if not isinstance(data, Mapping):
            msg = "Row must be a mapping"
            raise InvalidInputError(msg)

        new_row: Row = dict(data)
        if new_row.get("id") == AUTO_INCREMENT:
            new_row["id"] = next_id(state.rows)

        if self.timestamps:
            timestamp: str = now_iso()
            new_row[CREATED_AT] = timestamp
            new_row[UPDATED_AT] = timestamp

        if state.schema:
            validate_rows([new_row], state.schema)

        inserted: bool = self._trigger_service.allows(table_name, "insert", None, new_row)
        if inserted:
            state.rows.append(new_row)
            self._last_insert_id = new_row.get("id")

        self._logger.log(
            "insert", {"table_name": table_name, "data": new_row, "inserted": inserted}
        )
        return self

    def get_last_insert_id(self) -> Any:
        """Id of the last successfully inserted row, or None."""
        if self._last_insert_id is None:
            return None
        self._logger.log("get_last_insert_id", {"id": self._last_insert_id})
        return self._last_insert_id

    def bulk_insert(self, table_name: str, rows: Sequence[Mapping[str, Any]]) -> "VertexDB":
        """Insert rows one by one. Not atomic: earlier rows stay on failure."""
        for row in rows:
            self.insert(table_name, row)
        return self

    def update(
        self,
        table_name: str,
        data: Mapping[str, Any],
        query: Query = EMPTY_QUERY,
    ) -> "VertexDB":
        """Merge ``data`` into every row matching the query's conditions.

        Only where-conditions select rows; search, ordering and limit are
        ignored. Update triggers see the old row and the merged candidate.
        """
        state: TableState = self._table_repo.require(table_name)
        if not isinstance(data, Mapping):
            msg = "Update data must be a mapping"
            raise InvalidInputError(msg)

        update_data: Row = dict(data)
        if self.timestamps:
            update_data[UPDATED_AT] = now_iso()

        updated_rows: list[Row] = []
        affected: int = 0
        for row in state.rows:
            if matches_conditions(row, query.conditions):
                candidate: Row = {**row, **update_data}
                if self._trigger_service.allows(table_name, "update", row, candidate):
                    updated_rows.append(candidate)
                    affected += 1
                    continue
            updated_rows.append(row)

        state.rows = updated_rows
        self._logger.log(
            "update", {"table_name": table_name, "data": update_data, "affected": affected}
        )
        return self

    def delete(self, table_name: str, query: Query = EMPTY_QUERY) -> "VertexDB":
        """Delete rows matching the query's conditions.

        With soft delete enabled, rows get a ``deleted_at`` timestamp instead
        of being removed. Delete triggers see the old row and None.
        """
        state: TableState = self._table_repo.require(table_name)

        remaining: list[Row] = []
        affected: int = 0
        for row in state.rows:
            if matches_conditions(row, query.conditions) and (
                self._trigger_service.allows(table_name, "delete", row, None)
            ):
                affected += 1
                if self.soft_delete:
                    remaining.append({**row, DELETED_AT: now_iso()})
                continue
            remaining.append(row)

        state.rows = remaining
        self._logger.log(
            "delete",
            {
                "table_name": table_name,
                "soft_delete": self.soft_delete,
                "affected": affected,
            },
        )
        return self

    # -----------------------------
    # Triggers
    # -----------------------------

    def create_trigger(
        self, table_name: str, trigger_name: str, callback: TriggerCallback
    ) -> "VertexDB":
        self._trigger_service.create_trigger(table_name, trigger_name, callback)
        return self

    def drop_trigger(self, table_name: str, trigger_name: str) -> "VertexDB":
        """Drop a trigger. Clears every trigger registered on the table."""
        self._trigger_service.drop_trigger(table_name, trigger_name)
        return self

    # -----------------------------
    # Indexes
    # -----------------------------

    def create_index(self, table_name: str, columns: Sequence[str]) -> "VertexDB":
        """Build an index of the table's current rows. Not kept up to date."""
        self._index_service.create_index(table_name, columns)
        self._logger.log("create_index", {"table_name": table_name, "columns": list(columns)})
        return self

    def get_index(self, table_name: str, columns: Sequence[str]) -> Index | None:
        return self._index_service.get_index(table_name, columns)

    # -----------------------------
    # Serialization
    # -----------------------------

    def backup(self) -> Backup:
        return self._snapshot_service.backup()

    def restore(self, backup: Backup) -> "VertexDB":
        """Restore tables and relationships from a backup.

        Raises:
            RestoreError: If the backup is malformed; the store is unchanged
        """
        try:
            self._snapshot_service.restore(backup)
        except RestoreError as err:
            self._last_error = err
            raise
        self._logger.log("restore", {"timestamp": backup.get("timestamp")})
        return self

    def to_json(self, table_name: str, query: Query = EMPTY_QUERY) -> str:
        """Export visible matching rows as indented JSON."""
        return serialize(self.get(table_name, query))

    def from_json(self, table_name: str, json_data: str) -> "VertexDB":
        """Replace a table's rows with a JSON array of objects.

        Raises:
            ParseError: If the text is not valid JSON or not an array of objects
        """
        try:
            rows: Any = deserialize(json_data)
        except (TypeError, ValueError) as err:
            self._last_error = err
            msg = "Invalid JSON data"
            raise ParseError(msg) from err

        if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
            err = InvalidInputError("JSON data must be an array of objects")
            self._last_error = err
            msg = "Invalid JSON data"
            raise ParseError(msg) from err

        return self.set_table(table_name, rows)

    def get_last_error(self) -> Exception | None:
        """Most recent JSON import or restore failure, or None."""
        return self._last_error

    # -----------------------------
    # Joins & Transactions
    # -----------------------------

    def join(
        self, table1: str, table2: str, key1: str, key2: str
    ) -> list[Row]:
        """Pair each row of ``table1`` with the first ``table2`` row whose
        ``key2`` equals its ``key1``.

        Matched rows come back with every field prefixed by its table name
        (``posts_id``, ``users_name``). Unmatched rows of ``table1`` come
        back as they are, without prefixes.
        """
        left_rows: list[Row] = self._table_repo.require(table1).rows
        right_rows: list[Row] = self._table_repo.require(table2).rows

        joined_rows: list[Row] = []
        for left in left_rows:
            match: Row | None = next(
                (
                    right
                    for right in right_rows
                    if key1 in left
                    and key2 in right
                    and strict_equals(right[key2], left[key1])
                ),
                None,
            )
            if match is None:
                joined_rows.append(dict(left))
                continue
            joined: Row = {f"{table1}_{key}": value for key, value in left.items()}
            joined.update({f"{table2}_{key}": value for key, value in match.items()})
            joined_rows.append(joined)
        return joined_rows

    def transaction(self, callback: Callable[["VertexDB"], Any]) -> "VertexDB":
        """Run ``callback(store)``; on any exception restore the prior state
        and re-raise.
        """
        with self._transaction_service.atomic():
            callback(self)
        return self

    def atomic(self) -> AbstractContextManager[None]:
        """Context-manager form of ``transaction``."""
        return self._transaction_service.atomic()

    # -----------------------------
    # Statistics & Frames
    # -----------------------------

    def get_stats(self) -> StoreStats:
        tables: dict[str, TableStats] = {}
        total_records: int = 0
        relationships: list[tuple[str, list[dict[str, str]]]] = []

        for state in self._table_repo.states():
            tables[state.name] = {
                "count": len(state.rows),
                "columns": len(state.rows[0]) if state.rows else 0,
            }
            total_records += len(state.rows)
            if state.relationships:
                relationships.append(
                    (state.name, [relation.to_dict() for relation in state.relationships])
                )

        return {
            "tables": tables,
            "total_records": total_records,
            "last_modified": backup_timestamp(),
            "indexes": self._index_service.index_keys(),
            "relationships": relationships,
        }

    def to_frame(self, table_name: str, query: Query = EMPTY_QUERY) -> pl.DataFrame:
        """Visible matching rows as a Polars DataFrame."""
        return self._frame_service.to_frame(self.get(table_name, query))

    def from_frame(
        self, table_name: str, frame: pl.DataFrame, schema: Schema | None = None
    ) -> "VertexDB":
        """Replace a table's rows with the rows of a Polars DataFrame."""
        return self.set_table(table_name, self._frame_service.from_frame(frame), schema)

    def profile(self, table_name: str) -> TableProfile:
        """Per-column dtype, null and unique counts of the visible rows."""
        return self._frame_service.profile(self.get(table_name))

    def show(self, table_name: str, query: Query = EMPTY_QUERY) -> None:
        """Print visible matching rows as a Rich table."""
        self._display_service.show_rows(table_name, self.get(table_name, query))

    def show_stats(self) -> None:
        self._display_service.show_stats(self.get_stats())

    def __iter__(self) -> Iterator[str]:
        return iter(self._table_repo.names())

    def __contains__(self, table_name: object) -> bool:
        return isinstance(table_name, str) and self._table_repo.has(table_name)

    def __repr__(self) -> str:
        return (
            f"VertexDB(tables={len(self._table_repo.names())}, "
            f"timestamps={self.timestamps}, soft_delete={self.soft_delete})"
        )
