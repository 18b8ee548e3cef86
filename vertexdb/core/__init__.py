# Core module exports
from vertexdb.core.config import StoreConfig as StoreConfig
from vertexdb.core.errors import (
    InvalidInputError as InvalidInputError,
)
from vertexdb.core.errors import (
    ParseError as ParseError,
)
from vertexdb.core.errors import (
    RestoreError as RestoreError,
)
from vertexdb.core.errors import (
    SchemaValidationError as SchemaValidationError,
)
from vertexdb.core.errors import (
    TableAlreadyExistsError as TableAlreadyExistsError,
)
from vertexdb.core.errors import (
    TableNotFoundError as TableNotFoundError,
)
from vertexdb.core.errors import (
    TriggerAlreadyExistsError as TriggerAlreadyExistsError,
)
from vertexdb.core.errors import (
    TriggerNotFoundError as TriggerNotFoundError,
)
from vertexdb.core.errors import (
    VertexDBError as VertexDBError,
)
from vertexdb.core.models import AUTO_INCREMENT as AUTO_INCREMENT
from vertexdb.core.models import OPERATORS as OPERATORS
from vertexdb.core.models import Operator as Operator
from vertexdb.core.models import RelationKind as RelationKind
from vertexdb.core.models import TriggerEvent as TriggerEvent
from vertexdb.core.query import Query as Query
from vertexdb.core.query import apply_query as apply_query
from vertexdb.core.validation import validate_rows as validate_rows

__all__ = [
    "AUTO_INCREMENT",
    "OPERATORS",
    "InvalidInputError",
    "Operator",
    "ParseError",
    "Query",
    "RelationKind",
    "RestoreError",
    "SchemaValidationError",
    "StoreConfig",
    "TableAlreadyExistsError",
    "TableNotFoundError",
    "TriggerAlreadyExistsError",
    "TriggerEvent",
    "TriggerNotFoundError",
    "VertexDBError",
    "apply_query",
    "validate_rows",
]
