"""Compose discovery and analysis results into a validated ``GraphSchema``."""

import json
import logging
import time
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from ..errors import SchemaValidationError
from ..models.schema import (
    GraphSchema,
    NodeType,
    OptimizationSettings,
    RelationshipPattern,
    RelationshipType,
    SchemaConfig,
)

logger = logging.getLogger(__name__)


def _payload_size(data: dict[str, Any]) -> int:
    return len(json.dumps(data, default=str, separators=(",", ":")).encode("utf-8"))


def assemble_schema(
    nodes: list[NodeType],
    relationships: list[RelationshipType],
    patterns: list[RelationshipPattern],
    config: SchemaConfig,
    started_at: float,
) -> GraphSchema:
    """
    Build the schema document and stamp its metadata.

    Args:
        nodes: One entry per vertex label
        relationships: One entry per edge label
        patterns: Distinct relationship patterns
        config: Settings used for this generation pass
        started_at: ``time.perf_counter()`` reading taken when generation began

    Raises:
        SchemaValidationError: The assembled data does not fit the schema shape,
            which points at a driver/version incompatibility.
    """
    data: dict[str, Any] = {
        "nodes": nodes,
        "relationships": relationships,
        "relationship_patterns": patterns,
        "metadata": {
            "generated_at": datetime.now(UTC).isoformat(),
            "generation_time_ms": round((time.perf_counter() - started_at) * 1000, 1),
            "node_count": len(nodes),
            "relationship_count": len(relationships),
            "pattern_count": len(patterns),
            "optimization_settings": OptimizationSettings.from_config(config),
        },
    }

    try:
        schema = GraphSchema.model_validate(data)
        size = _payload_size(schema.to_payload())
        schema = schema.model_copy(
            update={"metadata": schema.metadata.model_copy(update={"schema_size_bytes": size})}
        )
    except (ValidationError, TypeError, ValueError) as e:
        logger.error(f"Schema validation failed: {e}")
        raise SchemaValidationError("Schema validation failed", details=str(e)) from e

    logger.info(
        f"Schema assembled: {len(nodes)} node types, {len(relationships)} relationship types, "
        f"{len(patterns)} patterns ({schema.metadata.generation_time_ms}ms)"
    )
    return schema
