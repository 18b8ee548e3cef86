# Local imports
from vertexdb.repositories.table_repository import TableRepository, TableState

__all__ = ["TableRepository", "TableState"]
