"""
Tests for graph import and export.

Tests cover:
- GraphSON and CSV statement building
- Batching and clear_graph on import
- Schema cache invalidation after writes
- Export filters and formats
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from gremlin_mcp.graph.queries import CLEAR_GRAPH_QUERY
from gremlin_mcp.models.mcp_inputs import ExportSubgraphParams, ImportDataParams, ImportOptions
from gremlin_mcp.models.responses import QueryResult

GRAPHSON = [
    {
        "@type": "g:Vertex",
        "@value": {
            "id": {"@type": "g:Int64", "@value": 1},
            "label": "person",
            "properties": {
                "name": [{"@type": "g:VertexProperty", "@value": {"id": 0, "value": "alice", "label": "name"}}],
                "age": [{"@type": "g:VertexProperty", "@value": {"id": 1, "value": {"@type": "g:Int32", "@value": 30}}}],
            },
        },
    },
    {
        "@type": "g:Edge",
        "@value": {
            "id": 9,
            "label": "knows",
            "outV": {"@type": "g:Int64", "@value": 1},
            "inV": {"@type": "g:Int64", "@value": 2},
            "properties": {"weight": {"@type": "g:Property", "@value": {"key": "weight", "value": 0.5}}},
        },
    },
    {"@type": "g:Unknown", "@value": {}},
]


@pytest.fixture
def service():
    svc = MagicMock()
    svc.execute_query = AsyncMock(return_value=QueryResult())
    svc.invalidate_schema_cache = MagicMock()
    return svc


def _submitted(service) -> list[str]:
    return [call.args[0] for call in service.execute_query.await_args_list]


class TestStatementBuilding:
    def test_graphson_vertex(self):
        from gremlin_mcp.services.data_operations import build_graphson_statement

        assert build_graphson_statement(GRAPHSON[0]) == "g.addV('person').property('name', 'alice').property('age', '30')"

    def test_graphson_edge(self):
        from gremlin_mcp.services.data_operations import build_graphson_statement

        assert (
            build_graphson_statement(GRAPHSON[1])
            == "g.V('1').addE('knows').to(__.V('2')).property('weight', '0.5')"
        )

    def test_unknown_items_skipped(self):
        from gremlin_mcp.services.data_operations import build_graphson_statement

        assert build_graphson_statement(GRAPHSON[2]) is None
        assert build_graphson_statement("not a map") is None

    def test_csv_rows(self):
        from gremlin_mcp.services.data_operations import build_csv_statements

        statements = build_csv_statements('name,city\nalice,"Paris, FR"\nbob,\nbroken\n')

        assert statements == [
            "g.addV('csvVertex').property('name', 'alice').property('city', 'Paris, FR')",
            "g.addV('csvVertex').property('name', 'bob')",
        ]

    def test_csv_needs_header_and_row(self):
        from gremlin_mcp.services.data_operations import build_csv_statements

        with pytest.raises(ValueError):
            build_csv_statements("name,age")

    def test_values_are_escaped(self):
        from gremlin_mcp.services.data_operations import build_csv_statements

        statements = build_csv_statements("name\no'brien")

        assert statements == ["g.addV('csvVertex').property('name', 'o\\'brien')"]


class TestImportGraphData:
    @pytest.mark.asyncio
    async def test_graphson_import(self, service):
        from gremlin_mcp.services.data_operations import import_graph_data

        params = ImportDataParams(format="graphson", data=json.dumps(GRAPHSON))

        result = await import_graph_data(service, params)

        assert result.success is True
        assert result.imported_count == 2
        assert len(_submitted(service)) == 1
        assert "; " in _submitted(service)[0]
        service.invalidate_schema_cache.assert_called_once()

    @pytest.mark.asyncio
    async def test_batches_by_batch_size(self, service):
        from gremlin_mcp.services.data_operations import import_graph_data

        rows = "\n".join(f"v{i}" for i in range(5))
        params = ImportDataParams(format="csv", data=f"name\n{rows}", options=ImportOptions(batch_size=2))

        result = await import_graph_data(service, params)

        assert result.imported_count == 5
        assert [s.count("addV") for s in _submitted(service)] == [2, 2, 1]

    @pytest.mark.asyncio
    async def test_clear_graph_runs_first(self, service):
        from gremlin_mcp.services.data_operations import import_graph_data

        params = ImportDataParams(format="csv", data="name\nalice", options=ImportOptions(clear_graph=True))

        await import_graph_data(service, params)

        assert _submitted(service)[0] == CLEAR_GRAPH_QUERY

    @pytest.mark.asyncio
    async def test_non_array_graphson_fails(self, service):
        from gremlin_mcp.services.data_operations import import_graph_data

        result = await import_graph_data(service, ImportDataParams(format="graphson", data='{"a": 1}'))

        assert result.success is False
        assert "must be an array" in result.message
        service.execute_query.assert_not_awaited()
        service.invalidate_schema_cache.assert_not_called()

    @pytest.mark.asyncio
    async def test_query_failure_reported_and_cache_invalidated(self, service):
        from gremlin_mcp.errors import GremlinQueryError
        from gremlin_mcp.services.data_operations import import_graph_data

        service.execute_query.side_effect = GremlinQueryError("bad statement", details="597")

        result = await import_graph_data(service, ImportDataParams(format="csv", data="name\nalice"))

        assert result.success is False
        assert "Import failed" in result.message
        assert result.details == "597"
        service.invalidate_schema_cache.assert_called_once()


class TestExportSubgraph:
    @pytest.mark.asyncio
    async def test_json_with_include_filter(self, service):
        from gremlin_mcp.services.data_operations import export_subgraph

        service.execute_query.return_value = QueryResult(results=[{"name": "alice", "age": 30}, 7])
        params = ExportSubgraphParams(traversal_query="g.V().valueMap()", format="json", include_properties=["name"])

        result = await export_subgraph(service, params)

        assert result.data == [{"name": "alice"}, 7]
        assert result.exported_count == 2

    @pytest.mark.asyncio
    async def test_graphson_with_exclude_filter(self, service):
        from gremlin_mcp.services.data_operations import export_subgraph

        service.execute_query.return_value = QueryResult(results=[{"name": "alice", "secret": "x"}])
        params = ExportSubgraphParams(traversal_query="g.V()", format="graphson", exclude_properties=["secret"])

        result = await export_subgraph(service, params)

        assert result.data == [{"@type": "g:Vertex", "@value": {"name": "alice"}}]

    @pytest.mark.asyncio
    async def test_csv(self, service):
        from gremlin_mcp.services.data_operations import export_subgraph

        service.execute_query.return_value = QueryResult(
            results=[{"name": "alice", "city": "Paris, FR"}, {"name": "bob", "age": None}]
        )
        params = ExportSubgraphParams(traversal_query="g.V()", format="csv")

        result = await export_subgraph(service, params)

        assert result.data == 'name,city,age\nalice,"Paris, FR",\nbob,,'

    @pytest.mark.asyncio
    async def test_empty_result(self, service):
        from gremlin_mcp.services.data_operations import export_subgraph

        result = await export_subgraph(service, ExportSubgraphParams(traversal_query="g.V()", format="csv"))

        assert result.success is True
        assert result.exported_count == 0
        assert result.data == []

    @pytest.mark.asyncio
    async def test_query_failure(self, service):
        from gremlin_mcp.errors import GremlinConnectionError
        from gremlin_mcp.services.data_operations import export_subgraph

        service.execute_query.side_effect = GremlinConnectionError("down")

        result = await export_subgraph(service, ExportSubgraphParams(traversal_query="g.V()", format="json"))

        assert result.success is False
        assert "Export failed" in result.message
