# Standard library
import copy

# Local imports
from vertexdb.core.errors import TriggerAlreadyExistsError, TriggerNotFoundError
from vertexdb.core.models import (
    Row,
    TriggerCallback,
    TriggerEvent,
    TriggerResult,
    TriggerStatus,
)
from vertexdb.repositories.table_repository import TableRepository, TableState
from vertexdb.services.log_service import OperationLogger

# -----------------------------
# Trigger Service
# -----------------------------


class TriggerService:
    """Registers row-level triggers and runs them for the mutation pipeline."""

    def __init__(self, table_repo: TableRepository, logger: OperationLogger) -> None:
        self.table_repo = table_repo
        self.logger = logger

    def create_trigger(
        self, table_name: str, trigger_name: str, callback: TriggerCallback
    ) -> None:
        """Register a trigger on a table.

        Args:
            table_name: Table to attach to
            trigger_name: Name unique within the table
            callback: Called with a TriggerEvent; returning False vetoes

        Raises:
            TableNotFoundError: If the table does not exist
            TriggerAlreadyExistsError: If the name is taken on this table
        """
        state: TableState = self.table_repo.require(table_name)
        if trigger_name in state.triggers:
            msg = f"Trigger '{trigger_name}' already exists"
            raise TriggerAlreadyExistsError(msg)
        state.triggers[trigger_name] = callback

    def drop_trigger(self, table_name: str, trigger_name: str) -> None:
        """Drop triggers from a table.

        Note:
            The named trigger must exist, but the whole trigger set of the
            table is cleared.

        Raises:
            TriggerNotFoundError: If the table or the trigger is absent
        """
        if not self.table_repo.has(table_name) or (
            trigger_name not in self.table_repo.require(table_name).triggers
        ):
            msg = f"Trigger '{trigger_name}' on table '{table_name}' does not exist"
            raise TriggerNotFoundError(msg)
        self.table_repo.require(table_name).triggers.clear()

    def fire(
        self,
        table_name: str,
        operation: str,
        old: Row | None = None,
        new: Row | None = None,
    ) -> list[TriggerResult]:
        """Run every trigger of a table for one row.

        Callbacks receive deep copies of ``old`` and ``new``, so changes made
        to the event never reach the stored rows. All callbacks run, even
        after one has vetoed. A callback that raises is logged and counts as
        FAILED, which does not block the mutation.

        Returns:
            One TriggerResult per registered trigger, in registration order
        """
        state: TableState = self.table_repo.require(table_name)
        event = TriggerEvent(
            operation=operation, old=copy.deepcopy(old), new=copy.deepcopy(new)
        )
        results: list[TriggerResult] = []

        for trigger_name, callback in list(state.triggers.items()):
            try:
                outcome = callback(event)
            except Exception as err:  # noqa: BLE001
                self.logger.log(
                    f"{operation} trigger",
                    {
                        "table_name": table_name,
                        "trigger_name": trigger_name,
                        "error": repr(err),
                        "OLD": old,
                        "NEW": new,
                    },
                )
                results.append(TriggerResult(trigger_name, TriggerStatus.FAILED, err))
                continue

            status = TriggerStatus.VETO if outcome is False else TriggerStatus.PROCEED
            results.append(TriggerResult(trigger_name, status))

        return results

    def allows(
        self,
        table_name: str,
        operation: str,
        old: Row | None = None,
        new: Row | None = None,
    ) -> bool:
        """True unless some trigger vetoed the mutation."""
        results = self.fire(table_name, operation, old, new)
        return not any(result.vetoed for result in results)
