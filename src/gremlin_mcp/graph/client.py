"""
Gremlin graph client.

Wraps the gremlinpython driver ``Client`` behind an async interface:
- Driver calls run in worker threads (``asyncio.to_thread``) so the event loop
  never blocks on the websocket transport
- Connections idle longer than ``idle_timeout`` are closed and recreated on
  next use
- Every result list is normalized to plain Python values before it is returned

The client satisfies the ``TraversalExecutor`` protocol consumed by schema
generation.
"""

import asyncio
import logging
import time
from typing import Any

from gremlin_python.driver.client import Client
from gremlin_python.driver.protocol import GremlinServerError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..errors import GremlinConnectionError, GremlinMcpError, GremlinQueryError
from ..utils.result_parser import normalize_results
from .queries import PING_QUERY

logger = logging.getLogger(__name__)

STATUS_AVAILABLE = "Available"


class GremlinClient:
    """
    Async facade over a gremlinpython connection pool.

    A single instance is shared by every MCP tool and by schema generation;
    concurrent ``submit`` calls are bounded by the driver's ``pool_size``.
    """

    def __init__(
        self,
        url: str = "ws://localhost:8182/gremlin",
        traversal_source: str = "g",
        username: str | None = None,
        password: str | None = None,
        idle_timeout: float = 300,
        pool_size: int = 8,
        connect_retries: int = 3,
        host: str | None = None,
        port: int | None = None,
    ):
        self.url = url
        self.traversal_source = traversal_source
        self.username = username
        self.password = password
        self.idle_timeout = idle_timeout
        self.pool_size = pool_size
        self.connect_retries = connect_retries
        self.host = host
        self.port = port

        self._client: Client | None = None
        self._last_used: float = 0.0
        self._in_flight = 0
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, config) -> "GremlinClient":
        """Build a client from ``GremlinSettings``."""
        return cls(
            url=config.url,
            traversal_source=config.traversal_source,
            username=config.username,
            password=config.password.get_secret_value() if config.password else None,
            idle_timeout=config.idle_timeout,
            pool_size=config.pool_size,
            connect_retries=config.connect_retries,
            host=config.host,
            port=config.port,
        )

    @property
    def connected(self) -> bool:
        return self._client is not None

    # ── Lifecycle ────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Open the connection pool and verify it with a ping traversal."""
        async with self._lock:
            if self._client is not None:
                return
            await self._connect_with_retry()

    async def ensure_connection(self) -> None:
        """
        Connect if needed, recycling the connection when it has been idle too long.

        A connection with traversals in flight is never considered idle.
        """
        async with self._lock:
            now = time.monotonic()
            idle = self._in_flight == 0 and now - self._last_used >= self.idle_timeout
            if self._client is not None and idle:
                logger.info(f"Gremlin connection idle for {round(now - self._last_used)}s, refreshing")
                await self._close_client()
            if self._client is None:
                await self._connect_with_retry()
            self._last_used = now

    async def close(self) -> None:
        """Close the connection pool. Safe to call more than once."""
        async with self._lock:
            await self._close_client()

    async def _connect_with_retry(self) -> None:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(GremlinConnectionError),
            stop=stop_after_attempt(self.connect_retries),
            wait=wait_exponential(multiplier=1, min=1, max=5),
            reraise=True,
        ):
            with attempt:
                await self._connect()

    async def _connect(self) -> None:
        logger.info(f"Connecting to Gremlin server at {self.url} (traversal source '{self.traversal_source}')")
        try:
            client = await asyncio.to_thread(self._create_client)
        except Exception as e:
            raise GremlinConnectionError(
                "Failed to create Gremlin client", details=str(e), host=self.host, port=self.port
            ) from e

        try:
            await asyncio.to_thread(self._submit_blocking, client, PING_QUERY)
        except Exception as e:
            await asyncio.to_thread(client.close)
            raise GremlinConnectionError(
                "Connection test failed", details=str(e), host=self.host, port=self.port
            ) from e

        self._client = client
        self._last_used = time.monotonic()
        logger.info("Gremlin connection established")

    def _create_client(self) -> Client:
        return Client(
            self.url,
            self.traversal_source,
            pool_size=self.pool_size,
            username=self.username or "",
            password=self.password or "",
        )

    async def _close_client(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        try:
            await asyncio.to_thread(client.close)
            logger.debug("Gremlin connection closed")
        except Exception as e:
            logger.warning(f"Error closing Gremlin connection: {e}")

    # ── Query execution ─────────────────────────────────────────────────

    @staticmethod
    def _submit_blocking(client: Client, query: str) -> list[Any]:
        return client.submit(query).all().result()

    async def submit(self, query: str) -> list[Any]:
        """
        Evaluate a Gremlin script and return normalized results.

        Raises:
            GremlinQueryError: The server rejected or failed to evaluate the script.
            GremlinConnectionError: Not connected, or the transport failed.
        """
        client = self._client
        if client is None:
            raise GremlinConnectionError("Gremlin client not initialized", host=self.host, port=self.port)

        logger.debug(f"Executing Gremlin query: {query}")
        self._in_flight += 1
        self._last_used = time.monotonic()
        try:
            raw = await asyncio.to_thread(self._submit_blocking, client, query)
        except GremlinServerError as e:
            raise GremlinQueryError("Query execution failed", query=query, details=str(e)) from e
        except GremlinMcpError:
            raise
        except Exception as e:
            raise GremlinConnectionError(
                "Traversal failed in transit", details=str(e), host=self.host, port=self.port
            ) from e
        finally:
            self._in_flight -= 1
            self._last_used = time.monotonic()

        return normalize_results(raw)

    async def status(self) -> str:
        """Return ``"Available"`` if the server answers a ping traversal."""
        await self.ensure_connection()
        await self.submit(PING_QUERY)
        return STATUS_AVAILABLE
