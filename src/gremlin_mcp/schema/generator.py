"""
Schema generation pipeline.

    discover labels + counts
        -> concurrently:
            vertex labels  (batched: property keys, then each property sampled)
            edge labels    (batched: property keys, then each property sampled)
            relationship patterns (one bulk traversal)
        -> assemble + validate

The whole pipeline runs under a deadline (``SchemaConfig.timeout_ms``). On
expiry every in-flight sub-task is cancelled and ``SchemaTimeoutError`` is
raised. Generation is all-or-nothing: any sub-operation failure propagates
unchanged and no partial schema is produced.
"""

import asyncio
import logging
import time

from ..errors import SchemaTimeoutError
from ..graph.base import TraversalExecutor
from ..models.schema import GraphSchema, NodeType, Property, RelationshipType, SchemaConfig
from ..models.validators import ElementKind
from .analyzer import analyze_property
from .assembler import assemble_schema
from .batching import run_batched
from .discovery import discover_counts, discover_labels, discover_property_keys
from .patterns import mine_relationship_patterns

logger = logging.getLogger(__name__)


async def analyze_label_properties(
    executor: TraversalExecutor,
    element: ElementKind,
    label: str,
    config: SchemaConfig,
) -> list[Property]:
    """Describe every sampled property of one label, in discovery order."""
    keys = await discover_property_keys(executor, element, label)
    properties = []
    for key in keys:
        properties.append(await analyze_property(executor, element, label, key, config))
    return properties


async def analyze_vertex_labels(
    executor: TraversalExecutor,
    labels: list[str],
    config: SchemaConfig,
    counts: dict[str, int],
) -> list[NodeType]:
    logger.info(f"Analyzing {len(labels)} vertex labels with batch size {config.batch_size}")

    async def analyze(label: str) -> NodeType:
        properties = await analyze_label_properties(executor, "vertex", label, config)
        count = counts.get(label, 0) if config.include_counts else None
        return NodeType(labels=label, properties=properties, count=count)

    return await run_batched(labels, config.batch_size, analyze)


async def analyze_edge_labels(
    executor: TraversalExecutor,
    labels: list[str],
    config: SchemaConfig,
    counts: dict[str, int],
) -> list[RelationshipType]:
    logger.info(f"Analyzing {len(labels)} edge labels with batch size {config.batch_size}")

    async def analyze(label: str) -> RelationshipType:
        properties = await analyze_label_properties(executor, "edge", label, config)
        count = counts.get(label, 0) if config.include_counts else None
        return RelationshipType(type=label, properties=properties, count=count)

    return await run_batched(labels, config.batch_size, analyze)


async def _generate(executor: TraversalExecutor, config: SchemaConfig, started_at: float) -> GraphSchema:
    labels = await discover_labels(executor)
    counts = await discover_counts(executor, config)

    branches = [
        asyncio.ensure_future(analyze_vertex_labels(executor, labels.vertex_labels, config, counts.vertex_counts)),
        asyncio.ensure_future(analyze_edge_labels(executor, labels.edge_labels, config, counts.edge_counts)),
        asyncio.ensure_future(mine_relationship_patterns(executor)),
    ]
    try:
        nodes, relationships, patterns = await asyncio.gather(*branches)
    except BaseException:
        for branch in branches:
            branch.cancel()
        await asyncio.gather(*branches, return_exceptions=True)
        raise

    return assemble_schema(nodes, relationships, patterns, config, started_at)


async def generate_schema(executor: TraversalExecutor, config: SchemaConfig | None = None) -> GraphSchema:
    """
    Run the full, uncached schema generation pipeline under a deadline.

    Args:
        executor: Working traversal capability (already connected)
        config: Generation settings; defaults to ``SchemaConfig()``

    Raises:
        SchemaTimeoutError: The deadline expired.
        GremlinConnectionError | GremlinQueryError: A traversal failed.
        SchemaValidationError: The assembled document failed validation.
    """
    config = config or SchemaConfig()
    started_at = time.perf_counter()

    try:
        return await asyncio.wait_for(_generate(executor, config, started_at), timeout=config.timeout_ms / 1000.0)
    except TimeoutError:
        logger.warning(f"Schema generation timed out after {config.timeout_ms}ms")
        raise SchemaTimeoutError(config.timeout_ms) from None
