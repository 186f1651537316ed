"""Service-layer response models.

Typed Pydantic models returned by ``GremlinService`` and the import/export
operations.  MCP tools dump them with ``model_dump(exclude_none=True)``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class ServiceResult(BaseModel):
    """Common base for operation results."""

    success: bool = True
    message: str = ""


# ---------------------------------------------------------------------------
# Query
# ---------------------------------------------------------------------------


class ResultMetadata(BaseModel):
    """Shape summary of a normalized query result list."""

    total_count: int = 0
    vertex_count: int = 0
    edge_count: int = 0
    path_count: int = 0
    property_count: int = 0
    property_map_count: int = 0
    primitive_count: int = 0
    types: list[str] = Field(default_factory=list)


class QueryResult(BaseModel):
    """Result of ``run_gremlin_query``."""

    results: list[Any] = Field(default_factory=list)
    message: str = "Query executed successfully"
    metadata: ResultMetadata = Field(default_factory=ResultMetadata)


# ---------------------------------------------------------------------------
# Import / export
# ---------------------------------------------------------------------------


class ImportResult(ServiceResult):
    """Result of ``import_graph_data``."""

    imported_count: int | None = None
    details: Any = None


class ExportResult(ServiceResult):
    """Result of ``export_subgraph``."""

    format: str
    data: Any = None
    exported_count: int | None = None
