# Standard library
from collections.abc import Sequence

# Local imports
from vertexdb.core.errors import InvalidInputError
from vertexdb.core.models import Row
from vertexdb.core.utils import to_text
from vertexdb.repositories.table_repository import Index, TableRepository, TableState

# -----------------------------
# Constants
# -----------------------------

KEY_SEPARATOR = "|"
COLUMN_SEPARATOR = "+"

# -----------------------------
# Index Service
# -----------------------------


class IndexService:
    """Builds column indexes on demand.

    Indexes are snapshots: they are never maintained on writes and never used
    by reads. Rebuild with ``create_index`` after mutating a table.
    """

    def __init__(self, table_repo: TableRepository) -> None:
        self.table_repo = table_repo

    def create_index(self, table_name: str, columns: Sequence[str]) -> Index:
        """Group the table's current rows by their composite column key.

        Args:
            table_name: Table to index
            columns: Ordered column names forming the key

        Returns:
            Mapping of composite key to the rows sharing it

        Raises:
            TableNotFoundError: If the table does not exist
            InvalidInputError: If no columns are given
        """
        state: TableState = self.table_repo.require(table_name)
        if isinstance(columns, str) or not columns:
            msg = "Index columns must be a non-empty list of column names"
            raise InvalidInputError(msg)

        key_columns: tuple[str, ...] = tuple(columns)
        index: Index = {}
        for row in state.rows:
            index.setdefault(composite_key(row, key_columns), []).append(dict(row))

        state.indexes[key_columns] = index
        return index

    def get_index(self, table_name: str, columns: Sequence[str]) -> Index | None:
        """Last index built for these columns, or None."""
        state: TableState = self.table_repo.require(table_name)
        return state.indexes.get(tuple(columns))

    def index_keys(self) -> list[str]:
        """Keys of every built index, as ``<table>:<col1+col2>``."""
        return [
            index_name(state.name, columns)
            for state in self.table_repo.states()
            for columns in state.indexes
        ]


def composite_key(row: Row, columns: Sequence[str]) -> str:
    return KEY_SEPARATOR.join(to_text(row.get(column)) for column in columns)


def index_name(table_name: str, columns: Sequence[str]) -> str:
    return f"{table_name}:{COLUMN_SEPARATOR.join(columns)}"
