"""
Normalization of gremlinpython results into plain Python values.

This is the single boundary where driver-native types are inspected. Every
traversal result passes through ``normalize_results`` before any schema or
service logic sees it:

    Vertex          -> {"id", "label", "type": "vertex", "properties": {key: [values]}}
    Edge            -> {"id", "label", "type": "edge", "inV", "outV", "properties": {key: value}}
    Path            -> {"labels", "objects", "type": "path"}
    (Vertex)Property-> {"key", "value", "type": "property"}
    dict            -> dict with enum keys (T.label, Direction.OUT) rendered as names
    set / tuple     -> list
"""

from collections.abc import Iterable
from enum import Enum
from typing import Any

from gremlin_python.structure.graph import Edge, Path, Property, Vertex, VertexProperty

from ..models.responses import ResultMetadata


def _normalize_key(key: Any) -> Any:
    if isinstance(key, Enum):
        return key.name
    if isinstance(key, (str, int, float, bool)) or key is None:
        return key
    # Unhashable-after-normalization keys (vertices, lists) become strings
    return str(normalize_result(key))


def _element_id(element: Any) -> Any:
    if isinstance(element, (Vertex, Edge)):
        return normalize_result(element.id)
    return normalize_result(element)


def _vertex_properties(properties: Any) -> dict[str, list[Any]]:
    grouped: dict[str, list[Any]] = {}
    if isinstance(properties, dict):
        for key, values in properties.items():
            items = values if isinstance(values, list) else [values]
            grouped[str(key)] = [normalize_result(getattr(v, "value", v)) for v in items]
        return grouped
    for prop in properties or []:
        grouped.setdefault(str(prop.key), []).append(normalize_result(prop.value))
    return grouped


def _edge_properties(properties: Any) -> dict[str, Any]:
    if isinstance(properties, dict):
        return {str(k): normalize_result(getattr(v, "value", v)) for k, v in properties.items()}
    return {str(prop.key): normalize_result(prop.value) for prop in properties or []}


def normalize_result(item: Any) -> Any:
    """Map one driver result item to plain, JSON-friendly Python values."""
    if item is None or isinstance(item, (str, int, float, bool)):
        return item

    if isinstance(item, VertexProperty):
        return {"key": item.key, "value": normalize_result(item.value), "type": "property"}

    if isinstance(item, Property):
        return {"key": item.key, "value": normalize_result(item.value), "type": "property"}

    if isinstance(item, Vertex):
        return {
            "id": normalize_result(item.id),
            "label": item.label,
            "type": "vertex",
            "properties": _vertex_properties(getattr(item, "properties", None)),
        }

    if isinstance(item, Edge):
        return {
            "id": normalize_result(item.id),
            "label": item.label,
            "type": "edge",
            "inV": _element_id(item.inV),
            "outV": _element_id(item.outV),
            "properties": _edge_properties(getattr(item, "properties", None)),
        }

    if isinstance(item, Path):
        return {
            "labels": [sorted(str(label) for label in labels) for labels in item.labels],
            "objects": [normalize_result(obj) for obj in item.objects],
            "type": "path",
        }

    if isinstance(item, Enum):
        return item.name

    if isinstance(item, dict):
        return {_normalize_key(k): normalize_result(v) for k, v in item.items()}

    if isinstance(item, (list, tuple, set, frozenset)):
        return [normalize_result(v) for v in item]

    return item


def normalize_results(items: Iterable[Any] | None) -> list[Any]:
    """Normalize a driver result list (``None`` becomes ``[]``)."""
    if items is None:
        return []
    return [normalize_result(item) for item in items]


def calculate_result_metadata(results: list[Any]) -> ResultMetadata:
    """Summarise the kinds of items in a normalized result list."""
    meta = ResultMetadata(total_count=len(results))
    types: list[str] = []

    def seen(kind: str) -> None:
        if kind not in types:
            types.append(kind)

    for result in results:
        if isinstance(result, dict):
            kind = result.get("type")
            if kind == "vertex":
                meta.vertex_count += 1
            elif kind == "edge":
                meta.edge_count += 1
            elif kind == "path":
                meta.path_count += 1
            elif kind == "property":
                meta.property_count += 1
            else:
                meta.property_map_count += 1
                kind = "property_map"
            seen(kind)
        elif isinstance(result, list):
            seen("array")
        else:
            meta.primitive_count += 1
            seen(type(result).__name__)

    meta.types = types
    return meta
