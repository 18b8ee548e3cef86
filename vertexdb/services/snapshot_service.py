# Standard library
import copy
from collections.abc import Mapping
from typing import Any

# Local imports
from vertexdb.core.errors import RestoreError
from vertexdb.core.models import (
    Backup,
    RelationKind,
    Relationship,
    Row,
    TableSummary,
)
from vertexdb.core.utils import backup_timestamp
from vertexdb.repositories.table_repository import TableRepository, TableState

# -----------------------------
# Snapshot Service
# -----------------------------


class SnapshotService:
    """Backup and restore of all tables and relationships.

    Schemas, triggers and indexes are not part of a snapshot. Restoring keeps
    them on tables that still exist; tables recreated from a snapshot come
    back without them.
    """

    def __init__(self, table_repo: TableRepository) -> None:
        self.table_repo = table_repo

    def backup(self) -> Backup:
        """Deep copy the current rows and relationships."""
        data: dict[str, list[Row]] = {}
        tables: list[TableSummary] = []
        relationships: dict[str, list[dict[str, str]]] = {}

        for state in self.table_repo.states():
            data[state.name] = copy.deepcopy(state.rows)
            tables.append({"name": state.name, "count": len(state.rows)})
            if state.relationships:
                relationships[state.name] = [
                    relation.to_dict() for relation in state.relationships
                ]

        return {
            "timestamp": backup_timestamp(),
            "data": data,
            "metadata": {"tables": tables, "relationships": relationships},
        }

    def restore(self, backup: Any) -> None:
        """Replace every table's rows and relationships with the backup's.

        The backup is fully checked before the store is touched.

        Raises:
            RestoreError: If the backup structure is malformed
        """
        data, relationships = _parse_backup(backup)

        self.table_repo.retain(set(data))
        for name, rows in data.items():
            state: TableState = self.table_repo.get_or_create(name)
            state.rows = copy.deepcopy(rows)
            state.relationships = relationships.get(name, [])


def _parse_backup(
    backup: Any,
) -> tuple[dict[str, list[Row]], dict[str, list[Relationship]]]:
    if not isinstance(backup, Mapping):
        msg = "Invalid backup data: expected a mapping"
        raise RestoreError(msg)

    data: Any = backup.get("data")
    if not isinstance(data, Mapping):
        msg = "Invalid backup data: 'data' must map table names to rows"
        raise RestoreError(msg)

    for name, rows in data.items():
        if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
            msg = f"Invalid backup data: rows of table '{name}' must be a list of objects"
            raise RestoreError(msg)

    metadata: Any = backup.get("metadata")
    raw_relationships: Any = (
        metadata.get("relationships", {}) if isinstance(metadata, Mapping) else None
    )
    if not isinstance(raw_relationships, Mapping):
        msg = "Invalid backup data: 'metadata.relationships' must be a mapping"
        raise RestoreError(msg)

    relationships: dict[str, list[Relationship]] = {}
    for table_name, entries in raw_relationships.items():
        if table_name not in data:
            msg = f"Invalid backup data: relationship on unknown table '{table_name}'"
            raise RestoreError(msg)
        try:
            relationships[table_name] = [
                Relationship(
                    table=table_name,
                    related_table=entry["table"],
                    kind=RelationKind(entry["type"]),
                    foreign_key=entry["foreign_key"],
                )
                for entry in entries
            ]
        except (KeyError, TypeError, ValueError) as err:
            msg = f"Invalid backup data: bad relationship on table '{table_name}'"
            raise RestoreError(msg) from err

    return dict(data), relationships
