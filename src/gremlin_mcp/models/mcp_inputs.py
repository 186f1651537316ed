"""MCP tool input models.

Pydantic models for the inputs of the Gremlin MCP tools.  Each tool function
validates its arguments by constructing the corresponding model, so size
limits, format checks, and mutually exclusive options all live here as
declarative constraints.
"""

from __future__ import annotations

import json
from typing import Self

from pydantic import BaseModel, Field, field_validator, model_validator

from .validators import ExportFormat, ImportFormat

MAX_IMPORT_BYTES = 50 * 1024 * 1024
MAX_TRAVERSAL_QUERY_LENGTH = 10_000

# Rejected in export traversals; export is read-only
UNSAFE_QUERY_PATTERNS = (";", "--", "/*", "*/", "DROP", "DELETE")


class RunQueryParams(BaseModel):
    """Validated input for the ``run_gremlin_query`` MCP tool."""

    query: str = Field(min_length=1)

    @field_validator("query")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Query cannot be empty")
        return v.strip()


class ImportOptions(BaseModel):
    """Options for ``import_graph_data``."""

    clear_graph: bool = False
    batch_size: int = Field(default=100, ge=1, le=10_000)
    validate_schema: bool = False


class ImportDataParams(BaseModel):
    """Validated input for the ``import_graph_data`` MCP tool."""

    format: ImportFormat
    data: str = Field(min_length=1, max_length=MAX_IMPORT_BYTES)
    options: ImportOptions = Field(default_factory=ImportOptions)

    @model_validator(mode="after")
    def graphson_must_be_json(self) -> Self:
        if self.format == "graphson":
            try:
                json.loads(self.data)
            except json.JSONDecodeError as e:
                raise ValueError(f"GraphSON data must be valid JSON: {e}") from None
        return self


class ExportSubgraphParams(BaseModel):
    """Validated input for the ``export_subgraph`` MCP tool."""

    traversal_query: str = Field(min_length=1, max_length=MAX_TRAVERSAL_QUERY_LENGTH)
    format: ExportFormat
    include_properties: list[str] | None = Field(default=None, max_length=100)
    exclude_properties: list[str] | None = Field(default=None, max_length=100)
    max_depth: int | None = Field(default=None, ge=1, le=10)

    @field_validator("traversal_query")
    @classmethod
    def reject_unsafe_operations(cls, v: str) -> str:
        upper = v.upper()
        if any(pattern in upper for pattern in UNSAFE_QUERY_PATTERNS):
            raise ValueError("Query contains potentially unsafe operations")
        return v

    @field_validator("include_properties", "exclude_properties")
    @classmethod
    def no_empty_names(cls, v: list[str] | None) -> list[str] | None:
        if v is not None and any(not name.strip() for name in v):
            raise ValueError("Property name cannot be empty")
        return v

    @model_validator(mode="after")
    def include_xor_exclude(self) -> Self:
        if self.include_properties is not None and self.exclude_properties is not None:
            raise ValueError("Cannot specify both include_properties and exclude_properties")
        return self
