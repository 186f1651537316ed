"""Graph schema models.

Pydantic models describing the structural shape of a Gremlin graph as
discovered by the sampling schema generator: node types, relationship types,
relationship patterns, and generation metadata. All models are frozen; a
``GraphSchema`` is immutable once constructed.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .validators import NonNegativeInt, PositiveInt, normalize_names

DEFAULT_MAX_ENUM_VALUES = 10
DEFAULT_ENUM_CARDINALITY_THRESHOLD = 10
DEFAULT_SCHEMA_TIMEOUT_MS = 30_000
DEFAULT_BATCH_SIZE = 10
DEFAULT_ENUM_PROPERTY_BLACKLIST = frozenset({"id", "label", "lastUpdatedByUI"})


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Generation settings
# ---------------------------------------------------------------------------


class SchemaConfig(_Frozen):
    """Immutable settings for one schema generation pass.

    Resolved once from ``SchemaSettings`` at startup and passed by reference
    into the generator; core code never reads the environment.
    """

    include_sample_values: bool = False
    max_enum_values: PositiveInt = DEFAULT_MAX_ENUM_VALUES
    include_counts: bool = True
    enum_cardinality_threshold: NonNegativeInt = DEFAULT_ENUM_CARDINALITY_THRESHOLD
    enum_property_blacklist: Annotated[frozenset[str], BeforeValidator(normalize_names)] = (
        DEFAULT_ENUM_PROPERTY_BLACKLIST
    )
    timeout_ms: PositiveInt = DEFAULT_SCHEMA_TIMEOUT_MS
    batch_size: PositiveInt = DEFAULT_BATCH_SIZE

    def is_blacklisted(self, property_key: str) -> bool:
        return property_key in self.enum_property_blacklist


# ---------------------------------------------------------------------------
# Schema document
# ---------------------------------------------------------------------------


class Property(_Frozen):
    """A property observed on a vertex or edge label.

    ``enum`` is only present when the number of distinct sampled values is
    non-zero and within the configured enum cardinality threshold.
    """

    name: str
    type: list[str] = Field(default_factory=lambda: ["unknown"])
    sample_values: list[Any] | None = None
    cardinality: Literal["single"] | None = None
    enum: list[Any] | None = None


class NodeType(_Frozen):
    """One distinct vertex label and its observed properties."""

    labels: str
    properties: list[Property] = Field(default_factory=list)
    count: NonNegativeInt | None = None


class RelationshipType(_Frozen):
    """One distinct edge label and its observed properties."""

    type: str
    properties: list[Property] = Field(default_factory=list)
    count: NonNegativeInt | None = None


class RelationshipPattern(_Frozen):
    """A distinct (source vertex label, edge label, target vertex label) triple."""

    left_node: str = Field(min_length=1)
    right_node: str = Field(min_length=1)
    relation: str = Field(min_length=1)


class OptimizationSettings(_Frozen):
    """The ``SchemaConfig`` values actually used for a generation pass."""

    sample_values_included: bool
    max_enum_values: int
    counts_included: bool
    enum_cardinality_threshold: int
    timeout_ms: int
    batch_size: int

    @classmethod
    def from_config(cls, config: SchemaConfig) -> OptimizationSettings:
        return cls(
            sample_values_included=config.include_sample_values,
            max_enum_values=config.max_enum_values,
            counts_included=config.include_counts,
            enum_cardinality_threshold=config.enum_cardinality_threshold,
            timeout_ms=config.timeout_ms,
            batch_size=config.batch_size,
        )


class SchemaMetadata(_Frozen):
    """Generation metadata stamped by the assembler."""

    generated_at: str
    generation_time_ms: float = Field(ge=0)
    node_count: NonNegativeInt
    relationship_count: NonNegativeInt
    pattern_count: NonNegativeInt
    optimization_settings: OptimizationSettings
    schema_size_bytes: NonNegativeInt | None = None


class GraphSchema(_Frozen):
    """Complete schema document for a graph."""

    nodes: list[NodeType]
    relationships: list[RelationshipType]
    relationship_patterns: list[RelationshipPattern]
    metadata: SchemaMetadata

    def to_payload(self) -> dict[str, Any]:
        """Serialise for MCP responses, omitting unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)
