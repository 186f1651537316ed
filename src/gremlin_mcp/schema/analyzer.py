"""
Sampling property analyzer.

For one element label and one property key, samples a bounded set of distinct
values and derives:
- ``type``: the Python type names observed (``["unknown"]`` for an empty sample)
- ``sample_values``: up to ``MAX_SAMPLE_VALUES`` examples, when enabled
- ``enum`` + ``cardinality``: when the distinct count is within the enum
  cardinality threshold

Blacklisted keys short-circuit to ``type: ["unknown"]`` without a query.
A key absent from the sample is indistinguishable from one that never occurs
on the label; both yield ``["unknown"]`` with no enum.
"""

from typing import Any

from ..graph.base import TraversalExecutor, run_traversal
from ..graph.queries import property_values_query
from ..models.schema import Property, SchemaConfig
from ..models.validators import ElementKind

MAX_SAMPLE_VALUES = 5
UNKNOWN_TYPE = "unknown"


def _distinct(values: list[Any]) -> list[Any]:
    """Order-preserving dedup that tolerates unhashable values and keeps 1 and True apart."""
    seen: set[tuple[str, str]] = set()
    unique: list[Any] = []
    for value in values:
        marker = (type(value).__name__, repr(value))
        if marker not in seen:
            seen.add(marker)
            unique.append(value)
    return unique


def value_type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def analyze_property_values(property_key: str, values: list[Any], config: SchemaConfig) -> Property:
    """Build a ``Property`` descriptor from already-sampled values."""
    if config.is_blacklisted(property_key):
        return Property(name=property_key, type=[UNKNOWN_TYPE])

    unique_values = _distinct(values)[: config.max_enum_values + 1]

    types: list[str] = []
    for value in unique_values:
        name = value_type_name(value)
        if name not in types:
            types.append(name)

    fields: dict[str, Any] = {"name": property_key, "type": types or [UNKNOWN_TYPE]}

    if config.include_sample_values and unique_values:
        fields["sample_values"] = unique_values[:MAX_SAMPLE_VALUES]

    if 0 < len(unique_values) <= config.enum_cardinality_threshold:
        fields["enum"] = unique_values
        fields["cardinality"] = "single"

    return Property(**fields)


async def analyze_property(
    executor: TraversalExecutor,
    element: ElementKind,
    label: str,
    property_key: str,
    config: SchemaConfig,
) -> Property:
    """Sample one property of one label and describe it."""
    if config.is_blacklisted(property_key):
        return Property(name=property_key, type=[UNKNOWN_TYPE])

    values = await run_traversal(
        executor,
        property_values_query(element, label, property_key, config.max_enum_values),
        f"get values for property {property_key} of {element} {label}",
    )
    return analyze_property_values(property_key, values, config)
