# Standard library
from collections.abc import Iterator
from contextlib import contextmanager

# Local imports
from vertexdb.core.models import Backup
from vertexdb.services.log_service import OperationLogger
from vertexdb.services.snapshot_service import SnapshotService

# -----------------------------
# Transaction Service
# -----------------------------


class TransactionService:
    """All-or-nothing execution via a store-wide snapshot.

    Nesting is not isolated: an inner rollback restores the inner snapshot and
    re-raises, and an outer rollback restores the outer one.
    """

    def __init__(self, snapshots: SnapshotService, logger: OperationLogger) -> None:
        self.snapshots = snapshots
        self.logger = logger

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Restore the pre-entry snapshot if the block raises."""
        snapshot: Backup = self.snapshots.backup()
        try:
            yield
        except Exception as err:
            self.snapshots.restore(snapshot)
            self.logger.log("transaction", {"status": "rollback", "error": str(err)})
            raise
        self.logger.log("transaction", {"status": "committed"})
