"""Gremlin service: status, cached schema, and query execution over one client."""

import logging
from typing import Any

from ..cache.schema_cache import SchemaCache
from ..errors import GremlinMcpError
from ..graph.client import GremlinClient
from ..models.responses import QueryResult
from ..models.schema import GraphSchema, SchemaConfig
from ..schema.generator import generate_schema
from ..utils.result_parser import calculate_result_metadata

logger = logging.getLogger(__name__)


class GremlinService:
    """Operations exposed by the MCP tools and resources."""

    def __init__(
        self,
        client: GremlinClient,
        schema_config: SchemaConfig | None = None,
        cache: SchemaCache | None = None,
    ):
        self.client = client
        self.schema_config = schema_config or SchemaConfig()
        self.cache = cache or SchemaCache()

    async def get_status(self) -> str:
        """
        Connection status string.

        Raises:
            GremlinConnectionError: The server cannot be reached.
        """
        return await self.client.status()

    async def health_check(self) -> dict[str, Any]:
        """Status as a dict; never raises."""
        try:
            status = await self.get_status()
        except GremlinMcpError as e:
            logger.warning(f"Gremlin health check failed: {e}")
            return {"healthy": False, "details": str(e)}
        return {"healthy": True, "details": status}

    async def _generate_schema(self) -> GraphSchema:
        await self.client.ensure_connection()
        return await generate_schema(self.client, self.schema_config)

    async def get_schema(self) -> GraphSchema:
        """Cached schema, regenerated when the TTL has expired."""
        return await self.cache.get(self._generate_schema)

    def get_cached_schema(self) -> GraphSchema | None:
        """Cached schema without generating, or None."""
        return self.cache.peek()

    async def refresh_schema_cache(self) -> GraphSchema:
        """Force regeneration; errors propagate and nothing is cached on failure."""
        return await self.cache.refresh(self._generate_schema)

    def invalidate_schema_cache(self) -> None:
        self.cache.invalidate()

    async def execute_query(self, query: str) -> QueryResult:
        """
        Run an ad-hoc Gremlin script.

        Raises:
            GremlinQueryError: The server rejected the script.
            GremlinConnectionError: The server cannot be reached.
        """
        await self.client.ensure_connection()
        results = await self.client.submit(query)
        return QueryResult(results=results, metadata=calculate_result_metadata(results))
