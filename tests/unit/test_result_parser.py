"""Tests for driver result normalization and result metadata."""

from gremlin_python.process.traversal import T
from gremlin_python.structure.graph import Edge, Path, Property, Vertex, VertexProperty

from gremlin_mcp.utils.result_parser import calculate_result_metadata, normalize_result, normalize_results


class TestNormalizeResult:
    def test_primitives_pass_through(self):
        assert normalize_results(["a", 1, 2.5, True, None]) == ["a", 1, 2.5, True, None]

    def test_none_result_list(self):
        assert normalize_results(None) == []

    def test_vertex(self):
        vertex = Vertex(1, "person")
        vertex.properties = [VertexProperty(10, "name", "alice", vertex), VertexProperty(11, "name", "al", vertex)]

        assert normalize_result(vertex) == {
            "id": 1,
            "label": "person",
            "type": "vertex",
            "properties": {"name": ["alice", "al"]},
        }

    def test_edge(self):
        edge = Edge(7, Vertex(1, "person"), "works_at", Vertex(2, "company"))

        result = normalize_result(edge)

        assert result["type"] == "edge"
        assert result["label"] == "works_at"
        assert result["outV"] == 1
        assert result["inV"] == 2

    def test_property(self):
        prop = Property("since", 2019, None)

        assert normalize_result(prop) == {"key": "since", "value": 2019, "type": "property"}

    def test_path(self):
        path = Path([{"a"}, set()], [Vertex(1, "person"), "knows"])

        result = normalize_result(path)

        assert result["type"] == "path"
        assert result["labels"] == [["a"], []]
        assert result["objects"][0]["label"] == "person"
        assert result["objects"][1] == "knows"

    def test_enum_keys_become_names(self):
        result = normalize_result({T.id: 1, T.label: "person", "name": ["alice"]})

        assert result == {"id": 1, "label": "person", "name": ["alice"]}

    def test_sets_become_lists(self):
        result = normalize_result({"tags": {"x"}, "pair": (1, 2)})

        assert result == {"tags": ["x"], "pair": [1, 2]}


class TestCalculateResultMetadata:
    def test_counts_by_kind(self):
        results = [
            {"type": "vertex", "id": 1},
            {"type": "vertex", "id": 2},
            {"type": "edge", "id": 3},
            {"type": "path"},
            {"type": "property", "key": "k", "value": 1},
            {"name": "alice"},
            [1, 2],
            5,
            "x",
        ]

        meta = calculate_result_metadata(results)

        assert meta.total_count == 9
        assert meta.vertex_count == 2
        assert meta.edge_count == 1
        assert meta.path_count == 1
        assert meta.property_count == 1
        assert meta.property_map_count == 1
        assert meta.primitive_count == 2
        assert meta.types == ["vertex", "edge", "path", "property", "property_map", "array", "int", "str"]

    def test_empty(self):
        meta = calculate_result_metadata([])

        assert meta.total_count == 0
        assert meta.types == []
