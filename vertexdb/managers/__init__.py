# Manager exports
from vertexdb.managers.manager import VertexDB as VertexDB
from vertexdb.managers.query_builder import QueryBuilder as QueryBuilder

__all__ = ["QueryBuilder", "VertexDB"]
