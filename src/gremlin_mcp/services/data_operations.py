"""
Graph data import and export.

Import:
    graphson - JSON array of ``g:Vertex`` / ``g:Edge`` typed values
    csv      - header row plus data rows; each row becomes a ``csvVertex``
    Statements are sent in batches joined with ``; `` and the schema cache is
    invalidated afterwards, since labels and properties may have changed.

Export:
    Runs a read-only traversal, optionally filters map keys, and formats the
    rows as json, graphson (``g:Vertex``-wrapped) or csv.

Both operations report failures in their result model instead of raising.
"""

import csv
import io
import json
import logging
from typing import Any

from ..errors import GremlinMcpError
from ..graph.queries import CLEAR_GRAPH_QUERY, add_edge_query, add_vertex_query
from ..models.mcp_inputs import ExportSubgraphParams, ImportDataParams, ImportOptions
from ..models.responses import ExportResult, ImportResult
from .gremlin_service import GremlinService

logger = logging.getLogger(__name__)

CSV_VERTEX_LABEL = "csvVertex"


# ── GraphSON helpers ────────────────────────────────────────────────────


def graphson_value(obj: Any) -> Any:
    """Unwrap GraphSON typed values (``{"@type": ..., "@value": ...}``) to plain values."""
    if isinstance(obj, dict) and "@value" in obj:
        inner = obj["@value"]
        if isinstance(inner, dict) and "value" in inner and obj.get("@type") in ("g:VertexProperty", "g:Property"):
            return graphson_value(inner["value"])
        return graphson_value(inner)
    return obj


def _vertex_properties(properties: Any) -> dict[str, Any]:
    props: dict[str, Any] = {}
    if not isinstance(properties, dict):
        return props
    for name, values in properties.items():
        if isinstance(values, list):
            if not values:
                continue
            props[name] = graphson_value(values[0])
        else:
            props[name] = graphson_value(values)
    return props


def build_graphson_statement(item: Any) -> str | None:
    """Translate one GraphSON element into an ``addV``/``addE`` statement, or None."""
    if not isinstance(item, dict):
        return None
    kind = item.get("@type")
    value = item.get("@value")
    if not isinstance(value, dict):
        return None

    if kind == "g:Vertex":
        label = str(value.get("label") or "vertex")
        return add_vertex_query(label, _vertex_properties(value.get("properties")))

    if kind == "g:Edge":
        label = str(value.get("label") or "edge")
        properties = value.get("properties") or {}
        props = {k: graphson_value(v) for k, v in properties.items()} if isinstance(properties, dict) else {}
        return add_edge_query(label, graphson_value(value.get("outV", "")), graphson_value(value.get("inV", "")), props)

    return None


def build_csv_statements(data: str) -> list[str]:
    """One ``addV('csvVertex')`` per data row; rows with the wrong width are skipped."""
    rows = [row for row in csv.reader(io.StringIO(data.strip())) if row]
    if len(rows) < 2:
        raise ValueError("CSV data must have at least a header and one data row")

    headers = [h.strip() for h in rows[0]]
    statements = []
    for row in rows[1:]:
        values = [v.strip() for v in row]
        if len(values) != len(headers):
            continue
        props = {header: value for header, value in zip(headers, values, strict=True) if header and value}
        statements.append(add_vertex_query(CSV_VERTEX_LABEL, props))
    return statements


async def _submit_batches(service: GremlinService, statements: list[str], options: ImportOptions) -> int:
    imported = 0
    for i in range(0, len(statements), options.batch_size):
        batch = statements[i : i + options.batch_size]
        await service.execute_query("; ".join(batch))
        imported += len(batch)
        logger.debug(f"Imported batch of {len(batch)} statements ({imported}/{len(statements)})")
    return imported


async def import_graph_data(service: GremlinService, params: ImportDataParams) -> ImportResult:
    """Import GraphSON or CSV data into the graph."""
    try:
        if params.format == "graphson":
            items = json.loads(params.data)
            if not isinstance(items, list):
                raise ValueError("GraphSON data must be an array")
            statements = [s for s in (build_graphson_statement(item) for item in items) if s]
        else:
            statements = build_csv_statements(params.data)
    except ValueError as e:
        logger.error(f"Import failed: {e}")
        return ImportResult(success=False, message=f"Import failed: {e}")

    try:
        if params.options.clear_graph:
            logger.info("Clearing graph before import")
            await service.execute_query(CLEAR_GRAPH_QUERY)
        imported = await _submit_batches(service, statements, params.options)
    except GremlinMcpError as e:
        logger.error(f"Import failed: {e}")
        return ImportResult(success=False, message=f"Import failed: {e}", details=e.details)
    finally:
        # Earlier batches may have landed even when a later one failed
        if params.options.clear_graph or statements:
            service.invalidate_schema_cache()

    return ImportResult(message=f"Successfully imported {imported} items", imported_count=imported)


# ── Export ──────────────────────────────────────────────────────────────


def filter_properties(results: list[Any], params: ExportSubgraphParams) -> list[Any]:
    """Apply include/exclude key filters to map results; other results pass through."""
    if params.include_properties is None and params.exclude_properties is None:
        return results

    filtered = []
    for result in results:
        if not isinstance(result, dict):
            filtered.append(result)
        elif params.include_properties is not None:
            filtered.append({k: result[k] for k in params.include_properties if k in result})
        else:
            filtered.append({k: v for k, v in result.items() if k not in params.exclude_properties})
    return filtered


def format_as_graphson(results: list[Any]) -> list[dict[str, Any]]:
    return [{"@type": "g:Vertex", "@value": result} for result in results]


def format_as_csv(results: list[Any]) -> str:
    """Render map results as CSV; the header is the union of keys in first-seen order."""
    rows = [r for r in results if isinstance(r, dict)]
    if not rows:
        return ""

    headers: list[str] = []
    for row in rows:
        for key in row:
            if str(key) not in headers:
                headers.append(str(key))

    def cell(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            return json.dumps(value, default=str)
        return str(value)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        lookup = {str(k): v for k, v in row.items()}
        writer.writerow([cell(lookup.get(h)) for h in headers])
    return buffer.getvalue().rstrip("\n")


async def export_subgraph(service: GremlinService, params: ExportSubgraphParams) -> ExportResult:
    """Run ``traversal_query`` and export the rows in the requested format."""
    try:
        result = await service.execute_query(params.traversal_query)
    except GremlinMcpError as e:
        logger.error(f"Export failed: {e}")
        return ExportResult(success=False, message=f"Export failed: {e}", format=params.format)

    if not result.results:
        return ExportResult(
            message="No data found for the given traversal", data=[], format=params.format, exported_count=0
        )

    rows = filter_properties(result.results, params)
    if params.format == "csv":
        data: Any = format_as_csv(rows)
    elif params.format == "graphson":
        data = format_as_graphson(rows)
    else:
        data = rows

    return ExportResult(
        message=f"Successfully exported {len(rows)} items", data=data, format=params.format, exported_count=len(rows)
    )
