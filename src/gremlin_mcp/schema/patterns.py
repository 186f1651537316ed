"""
Relationship pattern mining.

One bulk traversal over all edges projects (out-vertex label, in-vertex label,
edge label) rows, deduplicated and capped server-side. A single query costs
one round trip instead of one per edge label.
"""

import logging
from typing import Any

from ..graph.base import TraversalExecutor, run_traversal
from ..graph.queries import RELATIONSHIP_PATTERNS_QUERY
from ..models.schema import RelationshipPattern

logger = logging.getLogger(__name__)


def _field(row: dict[str, Any], key: str) -> str | None:
    value = row.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def filter_patterns(rows: list[Any]) -> list[RelationshipPattern]:
    """
    Keep rows whose three fields are non-empty strings, deduplicated in order.

    Rows that are not maps or that miss a field are dropped.
    """
    patterns: list[RelationshipPattern] = []
    seen: set[tuple[str, str, str]] = set()

    for row in rows:
        if not isinstance(row, dict):
            continue
        left, right, relation = _field(row, "from"), _field(row, "to"), _field(row, "label")
        if left is None or right is None or relation is None:
            continue
        key = (left, right, relation)
        if key in seen:
            continue
        seen.add(key)
        patterns.append(RelationshipPattern(left_node=left, right_node=right, relation=relation))

    return patterns


async def mine_relationship_patterns(executor: TraversalExecutor) -> list[RelationshipPattern]:
    """Derive distinct (source label, edge label, target label) triples from the graph."""
    rows = await run_traversal(executor, RELATIONSHIP_PATTERNS_QUERY, "get relationship patterns")
    logger.info(f"Retrieved {len(rows)} raw relationship patterns")

    patterns = filter_patterns(rows)
    logger.info(f"Filtered to {len(patterns)} valid relationship patterns")
    return patterns
