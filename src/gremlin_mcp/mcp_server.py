#!/usr/bin/env python3
"""FastMCP server exposing Gremlin graph access and schema introspection.

Tool inputs are validated by constructing the pydantic models in
``models.mcp_inputs``; validation and graph errors come back to the client as
``{"success": False, "error": ...}`` instead of protocol errors.
"""

import json
import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from fastmcp import Context, FastMCP
from pydantic import ValidationError

from .cache.schema_cache import SchemaCache
from .config import Settings, settings
from .errors import GremlinMcpError
from .graph.client import GremlinClient
from .models.mcp_inputs import ExportSubgraphParams, ImportDataParams, ImportOptions, RunQueryParams
from .services import data_operations
from .services.gremlin_service import GremlinService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Log to stderr; stdout carries the stdio transport."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_service(config: Settings) -> GremlinService:
    """Wire a client, schema config, and cache from settings."""
    client = GremlinClient.from_settings(config.gremlin)
    return GremlinService(
        client,
        schema_config=config.schema_discovery.to_schema_config(),
        cache=SchemaCache(ttl_seconds=config.schema_discovery.cache_ttl_seconds),
    )


@dataclass
class MCPServerContext:
    """Application context for the MCP server."""

    client: GremlinClient
    service: GremlinService


@asynccontextmanager
async def mcp_server_lifespan(server: FastMCP) -> AsyncIterator[MCPServerContext]:
    """Create the service on startup and close the Gremlin client on shutdown."""
    service = build_service(settings)
    logger.info(f"Gremlin endpoint: {service.client.url} (traversal source '{service.client.traversal_source}')")

    try:
        yield MCPServerContext(client=service.client, service=service)
    finally:
        logger.info("Shutting down Gremlin MCP server...")
        await service.client.close()


mcp = FastMCP(settings.server.name, lifespan=mcp_server_lifespan)


def _service(ctx: Context) -> GremlinService:
    return ctx.request_context.lifespan_context.service


# =============================================================================
# RESOURCES
# =============================================================================


@mcp.resource("gremlin://status", mime_type="text/plain")
async def status_resource(ctx: Context) -> str:
    """Connection status of the Gremlin server."""
    health = await _service(ctx).health_check()
    return health["details"]


@mcp.resource("gremlin://schema", mime_type="application/json")
async def schema_resource(ctx: Context) -> str:
    """Graph schema (vertex/edge labels, properties, relationship patterns) as JSON."""
    try:
        schema = await _service(ctx).get_schema()
    except GremlinMcpError as e:
        return json.dumps({"success": False, "error": str(e)})
    return json.dumps(schema.to_payload(), indent=2)


# =============================================================================
# GRAPH TOOLS
# =============================================================================


@mcp.tool()
async def get_graph_status(ctx: Context) -> dict[str, Any]:
    """Check connectivity to the Gremlin server.

    Returns:
        {status: "Available"} or {success: false, error}
    """
    try:
        status = await _service(ctx).get_status()
    except GremlinMcpError as e:
        return {"success": False, "error": str(e)}
    return {"status": status}


@mcp.tool()
async def get_graph_schema(ctx: Context) -> dict[str, Any]:
    """Get the graph structure: vertex labels, edge labels, their properties and types,
    enum values for low-cardinality properties, and (source)-[edge]->(target) patterns.

    Served from a cache that expires after the configured TTL.
    """
    try:
        schema = await _service(ctx).get_schema()
    except GremlinMcpError as e:
        return {"success": False, "error": str(e)}
    return schema.to_payload()


@mcp.tool()
async def run_gremlin_query(query: str, ctx: Context) -> dict[str, Any]:
    """Execute a Gremlin traversal script.

    Args:
        query: Gremlin script, e.g. "g.V().hasLabel('person').limit(10)"

    Returns:
        {results, message, metadata} with vertices, edges and paths as plain maps
    """
    try:
        params = RunQueryParams(query=query)
    except ValidationError as e:
        return {"success": False, "error": str(e)}

    try:
        result = await _service(ctx).execute_query(params.query)
    except GremlinMcpError as e:
        return {"success": False, "error": str(e)}
    return result.model_dump()


@mcp.tool()
async def refresh_schema_cache(ctx: Context) -> dict[str, Any]:
    """Regenerate the cached graph schema now, ignoring its TTL."""
    service = _service(ctx)
    try:
        schema = await service.refresh_schema_cache()
    except GremlinMcpError as e:
        return {"success": False, "error": str(e)}
    return {
        "success": True,
        "message": "Schema cache refreshed",
        "metadata": schema.metadata.model_dump(exclude_none=True),
        "cache": service.cache.stats(),
    }


# =============================================================================
# IMPORT / EXPORT
# =============================================================================


@mcp.tool()
async def import_graph_data(
    format: str,
    data: str,
    ctx: Context,
    options: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Import graph data.

    Args:
        format: "graphson" (array of g:Vertex / g:Edge values) or "csv" (header row + rows)
        data: The serialized data
        options: {clear_graph: bool, batch_size: int, validate_schema: bool}

    Returns:
        {success, message, imported_count}
    """
    try:
        params = ImportDataParams(format=format, data=data, options=ImportOptions(**(options or {})))
    except ValidationError as e:
        return {"success": False, "error": str(e)}

    result = await data_operations.import_graph_data(_service(ctx), params)
    return result.model_dump(exclude_none=True)


@mcp.tool()
async def export_subgraph(
    traversal_query: str,
    format: str,
    ctx: Context,
    include_properties: list[str] | None = None,
    exclude_properties: list[str] | None = None,
    max_depth: int | None = None,
) -> dict[str, Any]:
    """Export the results of a read-only traversal.

    Args:
        traversal_query: Gremlin traversal selecting the subgraph
        format: "json", "graphson" or "csv"
        include_properties: Keep only these keys in map results
        exclude_properties: Drop these keys from map results (not with include_properties)
        max_depth: Traversal depth hint, 1-10

    Returns:
        {success, message, format, data, exported_count}
    """
    try:
        params = ExportSubgraphParams(
            traversal_query=traversal_query,
            format=format,
            include_properties=include_properties,
            exclude_properties=exclude_properties,
            max_depth=max_depth,
        )
    except ValidationError as e:
        return {"success": False, "error": str(e)}

    result = await data_operations.export_subgraph(_service(ctx), params)
    return result.model_dump(exclude_none=True)


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================


def main():
    """Main entry point for the Gremlin MCP server."""
    configure_logging(settings.server.log_level)
    logger.info(f"Starting {settings.server.name} ({settings.server.transport} transport)")

    if settings.server.transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(transport="http", host=settings.server.host, port=settings.server.port)


if __name__ == "__main__":
    main()
