# Standard library
from dataclasses import dataclass, field

# Local imports
from vertexdb.core.errors import TableAlreadyExistsError, TableNotFoundError
from vertexdb.core.models import Relationship, Row, Schema, TriggerCallback

# -----------------------------
# Table State
# -----------------------------

Index = dict[str, list[Row]]


@dataclass
class TableState:
    """Everything a table owns. Dropping the table drops all of it."""

    name: str
    rows: list[Row] = field(default_factory=list)
    schema: Schema | None = None
    triggers: dict[str, TriggerCallback] = field(default_factory=dict)
    indexes: dict[tuple[str, ...], Index] = field(default_factory=dict)
    relationships: list[Relationship] = field(default_factory=list)


# -----------------------------
# Table Repository
# -----------------------------


class TableRepository:
    """In-memory repository of named tables."""

    def __init__(self) -> None:
        self._tables: dict[str, TableState] = {}

    def has(self, name: str) -> bool:
        return name in self._tables

    def names(self) -> list[str]:
        """Table names in creation order."""
        return list(self._tables)

    def states(self) -> list[TableState]:
        return list(self._tables.values())

    def require(self, name: str) -> TableState:
        """Get a table's state.

        Raises:
            TableNotFoundError: If the table does not exist
        """
        state: TableState | None = self._tables.get(name)
        if state is None:
            raise TableNotFoundError(name)
        return state

    def create(self, name: str, schema: Schema | None = None) -> TableState:
        """Create an empty table.

        Raises:
            TableAlreadyExistsError: If the name is taken
        """
        if name in self._tables:
            msg = f"Table '{name}' already exists"
            raise TableAlreadyExistsError(msg)

        state = TableState(name=name, schema=schema)
        self._tables[name] = state
        return state

    def get_or_create(self, name: str) -> TableState:
        state: TableState | None = self._tables.get(name)
        if state is None:
            state = self.create(name)
        return state

    def drop(self, name: str) -> TableState:
        """Remove a table together with its schema, triggers, indexes and
        relationships.

        Raises:
            TableNotFoundError: If the table does not exist
        """
        state: TableState = self.require(name)
        del self._tables[name]
        return state

    def put_rows(self, name: str, rows: list[Row]) -> None:
        """Replace a table's rows."""
        self.require(name).rows = rows

    def retain(self, names: set[str]) -> list[str]:
        """Drop every table whose name is not in ``names``.

        Returns:
            Names of the dropped tables
        """
        dropped: list[str] = [name for name in self._tables if name not in names]
        for name in dropped:
            self.drop(name)
        return dropped
