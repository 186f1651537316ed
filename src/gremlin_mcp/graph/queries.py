"""
Gremlin traversal scripts used by schema discovery and import.

Labels and property keys come from the graph itself (or from user data on
import), so every string is rendered through ``gremlin_literal`` before being
formatted into a script.

Sampling bounds:
    PROPERTY_KEY_SAMPLE_SIZE   - elements per label probed for property keys
    PROPERTY_VALUE_SAMPLE_SIZE - elements per label sampled for property values
    RELATIONSHIP_PATTERN_LIMIT - distinct (out label, edge label, in label) rows
"""

from typing import Any

from ..models.validators import ElementKind

PROPERTY_KEY_SAMPLE_SIZE = 100
PROPERTY_VALUE_SAMPLE_SIZE = 50
RELATIONSHIP_PATTERN_LIMIT = 1000

PING_QUERY = "g.V().limit(1).count()"
VERTEX_LABELS_QUERY = "g.V().label().dedup()"
EDGE_LABELS_QUERY = "g.E().label().dedup()"
VERTEX_COUNTS_QUERY = "g.V().groupCount().by(label)"
EDGE_COUNTS_QUERY = "g.E().groupCount().by(label)"
RELATIONSHIP_PATTERNS_QUERY = (
    "g.E().project('from','to','label')"
    ".by(__.outV().label())"
    ".by(__.inV().label())"
    ".by(__.label())"
    f".dedup().limit({RELATIONSHIP_PATTERN_LIMIT})"
)
CLEAR_GRAPH_QUERY = "g.V().drop().iterate()"


def gremlin_literal(value: Any) -> str:
    """Render a value as a single-quoted Gremlin string literal."""
    text = str(value)
    text = text.replace("\\", "\\\\").replace("'", "\\'")
    text = text.replace("\n", "\\n").replace("\r", "\\r")
    return f"'{text}'"


def _elements(element: ElementKind, label: str) -> str:
    root = "g.V()" if element == "vertex" else "g.E()"
    return f"{root}.hasLabel({gremlin_literal(label)})"


def property_keys_query(element: ElementKind, label: str) -> str:
    """Distinct property keys seen on a bounded sample of one label."""
    return f"{_elements(element, label)}.limit({PROPERTY_KEY_SAMPLE_SIZE}).properties().key().dedup()"


def property_values_query(element: ElementKind, label: str, key: str, max_enum_values: int) -> str:
    """
    Distinct values of one property over a bounded sample of one label.

    Capped at ``max_enum_values + 1`` so callers can tell "exactly at the cap"
    apart from "more values exist".
    """
    return (
        f"{_elements(element, label)}.limit({PROPERTY_VALUE_SAMPLE_SIZE})"
        f".values({gremlin_literal(key)}).dedup().limit({max_enum_values + 1})"
    )


# ── Import statements ───────────────────────────────────────────────────


def add_vertex_query(label: str, properties: dict[str, Any]) -> str:
    query = f"g.addV({gremlin_literal(label)})"
    for key, value in properties.items():
        query += f".property({gremlin_literal(key)}, {gremlin_literal(value)})"
    return query


def add_edge_query(label: str, out_id: Any, in_id: Any, properties: dict[str, Any]) -> str:
    query = f"g.V({gremlin_literal(out_id)}).addE({gremlin_literal(label)}).to(__.V({gremlin_literal(in_id)}))"
    for key, value in properties.items():
        query += f".property({gremlin_literal(key)}, {gremlin_literal(value)})"
    return query
