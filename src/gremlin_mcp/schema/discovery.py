"""
Label, property-key, and count discovery.

Labels come from two independent traversals run concurrently. Property keys
are probed on a bounded sample of each label (``PROPERTY_KEY_SAMPLE_SIZE``)
rather than every element, trading completeness for bounded cost on large
graphs. Any failure aborts discovery; there is no partial result.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from ..graph.base import TraversalExecutor, run_traversal
from ..graph.queries import (
    EDGE_COUNTS_QUERY,
    EDGE_LABELS_QUERY,
    VERTEX_COUNTS_QUERY,
    VERTEX_LABELS_QUERY,
    property_keys_query,
)
from ..models.schema import SchemaConfig
from ..models.validators import ElementKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphLabels:
    """Distinct vertex and edge labels, in discovery order."""

    vertex_labels: list[str] = field(default_factory=list)
    edge_labels: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class LabelCounts:
    """Per-label element counts; empty when counts are disabled."""

    vertex_counts: dict[str, int] = field(default_factory=dict)
    edge_counts: dict[str, int] = field(default_factory=dict)


def _as_strings(values: list[Any]) -> list[str]:
    labels: list[str] = []
    for value in values:
        if value is None:
            continue
        label = str(value)
        if label and label not in labels:
            labels.append(label)
    return labels


def _as_count_map(rows: list[Any]) -> dict[str, int]:
    # groupCount() yields one map; some providers stream one entry per row
    counts: dict[str, int] = {}
    for row in rows:
        if isinstance(row, dict):
            for key, value in row.items():
                counts[str(key)] = int(value)
    return counts


async def discover_labels(executor: TraversalExecutor) -> GraphLabels:
    """Fetch distinct vertex and edge labels concurrently."""
    logger.info("Fetching graph labels (vertices and edges)")

    vertex_rows, edge_rows = await asyncio.gather(
        run_traversal(executor, VERTEX_LABELS_QUERY, "get vertex labels"),
        run_traversal(executor, EDGE_LABELS_QUERY, "get edge labels"),
    )
    labels = GraphLabels(vertex_labels=_as_strings(vertex_rows), edge_labels=_as_strings(edge_rows))

    logger.info(f"Found {len(labels.vertex_labels)} vertex labels: {labels.vertex_labels}")
    logger.info(f"Found {len(labels.edge_labels)} edge labels: {labels.edge_labels}")
    return labels


async def discover_counts(executor: TraversalExecutor, config: SchemaConfig) -> LabelCounts:
    """Fetch per-label element counts, or nothing if counts are disabled."""
    if not config.include_counts:
        return LabelCounts()

    vertex_rows, edge_rows = await asyncio.gather(
        run_traversal(executor, VERTEX_COUNTS_QUERY, "get vertex counts"),
        run_traversal(executor, EDGE_COUNTS_QUERY, "get edge counts"),
    )
    return LabelCounts(vertex_counts=_as_count_map(vertex_rows), edge_counts=_as_count_map(edge_rows))


async def discover_property_keys(executor: TraversalExecutor, element: ElementKind, label: str) -> list[str]:
    """Distinct property keys seen on a bounded sample of ``label``."""
    rows = await run_traversal(
        executor,
        property_keys_query(element, label),
        f"get properties for {element} {label}",
    )
    return _as_strings(rows)
