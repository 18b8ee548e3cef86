# Service layer exports
from vertexdb.services.display_service import DisplayService as DisplayService
from vertexdb.services.frame_service import FrameService as FrameService
from vertexdb.services.index_service import IndexService as IndexService
from vertexdb.services.log_service import OperationLogger as OperationLogger
from vertexdb.services.snapshot_service import SnapshotService as SnapshotService
from vertexdb.services.transaction_service import (
    TransactionService as TransactionService,
)
from vertexdb.services.trigger_service import TriggerService as TriggerService

__all__ = [
    "DisplayService",
    "FrameService",
    "IndexService",
    "OperationLogger",
    "SnapshotService",
    "TransactionService",
    "TriggerService",
]
