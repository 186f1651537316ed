"""Pydantic models: schema document, tool inputs, and service responses."""

from .schema import (
    GraphSchema,
    NodeType,
    OptimizationSettings,
    Property,
    RelationshipPattern,
    RelationshipType,
    SchemaConfig,
    SchemaMetadata,
)

__all__ = [
    "GraphSchema",
    "NodeType",
    "OptimizationSettings",
    "Property",
    "RelationshipPattern",
    "RelationshipType",
    "SchemaConfig",
    "SchemaMetadata",
]
