# Public API exports
from vertexdb.core import (
    AUTO_INCREMENT as AUTO_INCREMENT,
)
from vertexdb.core import (
    OPERATORS as OPERATORS,
)
from vertexdb.core import (
    InvalidInputError as InvalidInputError,
)
from vertexdb.core import (
    Operator as Operator,
)
from vertexdb.core import (
    ParseError as ParseError,
)
from vertexdb.core import (
    Query as Query,
)
from vertexdb.core import (
    RelationKind as RelationKind,
)
from vertexdb.core import (
    RestoreError as RestoreError,
)
from vertexdb.core import (
    SchemaValidationError as SchemaValidationError,
)
from vertexdb.core import (
    TableAlreadyExistsError as TableAlreadyExistsError,
)
from vertexdb.core import (
    TableNotFoundError as TableNotFoundError,
)
from vertexdb.core import (
    TriggerAlreadyExistsError as TriggerAlreadyExistsError,
)
from vertexdb.core import (
    TriggerEvent as TriggerEvent,
)
from vertexdb.core import (
    TriggerNotFoundError as TriggerNotFoundError,
)
from vertexdb.core import (
    VertexDBError as VertexDBError,
)
from vertexdb.managers import QueryBuilder as QueryBuilder
from vertexdb.managers import VertexDB as VertexDB

__all__ = [
    "AUTO_INCREMENT",
    "OPERATORS",
    "InvalidInputError",
    "Operator",
    "ParseError",
    "Query",
    "QueryBuilder",
    "RelationKind",
    "RestoreError",
    "SchemaValidationError",
    "TableAlreadyExistsError",
    "TableNotFoundError",
    "TriggerAlreadyExistsError",
    "TriggerEvent",
    "TriggerNotFoundError",
    "VertexDB",
    "VertexDBError",
]
