"""
Unit tests for the sampling property analyzer.

Covers type inference, enum classification at the cardinality boundary,
sample values, and the blacklist short-circuit.
"""

import pytest
from conftest import FakeTraversalExecutor

from gremlin_mcp.graph.queries import property_values_query
from gremlin_mcp.models.schema import SchemaConfig
from gremlin_mcp.schema.analyzer import analyze_property, analyze_property_values


class TestAnalyzePropertyValues:
    """Pure analysis of already-sampled values."""

    def test_low_cardinality_becomes_enum(self):
        prop = analyze_property_values("status", ["active", "inactive"], SchemaConfig())

        assert prop.name == "status"
        assert prop.type == ["str"]
        assert prop.enum == ["active", "inactive"]
        assert prop.cardinality == "single"

    def test_exactly_at_threshold_is_enum(self):
        config = SchemaConfig(enum_cardinality_threshold=3, max_enum_values=5)
        prop = analyze_property_values("tier", ["a", "b", "c"], config)

        assert prop.enum == ["a", "b", "c"]

    def test_one_over_threshold_is_not_enum(self):
        config = SchemaConfig(enum_cardinality_threshold=3, max_enum_values=5)
        prop = analyze_property_values("tier", ["a", "b", "c", "d"], config)

        assert prop.enum is None
        assert prop.cardinality is None
        assert prop.type == ["str"]

    def test_sample_truncated_to_max_enum_values_plus_one(self):
        config = SchemaConfig(max_enum_values=2, enum_cardinality_threshold=10)
        prop = analyze_property_values("n", [1, 2, 3, 4, 5], config)

        # Three values kept (cap + 1), all within the threshold
        assert prop.enum == [1, 2, 3]

    def test_mixed_types_listed_in_first_seen_order(self):
        prop = analyze_property_values("code", ["x", 7, "y", 2.5], SchemaConfig())

        assert prop.type == ["str", "int", "float"]

    def test_duplicates_collapse(self):
        prop = analyze_property_values("flag", [True, True, 1, 1], SchemaConfig())

        # bool and int stay distinct
        assert prop.enum == [True, 1]
        assert prop.type == ["bool", "int"]

    def test_empty_sample_is_unknown_without_enum(self):
        prop = analyze_property_values("missing", [], SchemaConfig())

        assert prop.type == ["unknown"]
        assert prop.enum is None
        assert prop.sample_values is None

    def test_zero_threshold_never_produces_enum(self):
        config = SchemaConfig(enum_cardinality_threshold=0)
        prop = analyze_property_values("status", ["active"], config)

        assert prop.enum is None
        assert prop.type == ["str"]

    def test_sample_values_only_when_enabled(self):
        values = ["a", "b", "c", "d", "e", "f", "g"]

        without = analyze_property_values("k", values, SchemaConfig())
        with_samples = analyze_property_values("k", values, SchemaConfig(include_sample_values=True))

        assert without.sample_values is None
        assert with_samples.sample_values == ["a", "b", "c", "d", "e"]

    def test_blacklisted_key_is_unknown(self):
        prop = analyze_property_values("id", ["v1"], SchemaConfig())

        assert prop.type == ["unknown"]
        assert prop.enum is None


class TestAnalyzeProperty:
    """Analysis that samples through a traversal executor."""

    @pytest.mark.asyncio
    async def test_samples_values_with_capped_query(self):
        config = SchemaConfig(max_enum_values=4)
        query = property_values_query("vertex", "person", "status", 4)
        executor = FakeTraversalExecutor({query: ["active", "inactive"]})

        prop = await analyze_property(executor, "vertex", "person", "status", config)

        assert executor.calls == [query]
        assert query.endswith(".dedup().limit(5)")
        assert prop.enum == ["active", "inactive"]

    @pytest.mark.asyncio
    async def test_blacklisted_key_issues_no_traversal(self, fake_executor):
        config = SchemaConfig(enum_property_blacklist=["secret"])

        prop = await analyze_property(fake_executor, "edge", "knows", "secret", config)

        assert fake_executor.calls == []
        assert prop.type == ["unknown"]

    @pytest.mark.asyncio
    async def test_untyped_failure_becomes_connection_error(self):
        from gremlin_mcp.errors import GremlinConnectionError

        query = property_values_query("vertex", "person", "age", 10)
        executor = FakeTraversalExecutor({query: RuntimeError("socket closed")})

        with pytest.raises(GremlinConnectionError) as exc_info:
            await analyze_property(executor, "vertex", "person", "age", SchemaConfig())

        assert "get values for property age of vertex person" in str(exc_info.value)
        assert exc_info.value.details["query"] == query
