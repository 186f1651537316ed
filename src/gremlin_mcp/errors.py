"""Typed errors for Gremlin connectivity, queries, and schema generation.

Callers distinguish the kind by class to decide whether to retry, surface the
failure, or fall back to a stale cached schema.
"""

from typing import Any


class GremlinMcpError(Exception):
    """Base class for all errors raised by the Gremlin MCP server."""

    prefix = "Gremlin MCP error"

    def __init__(self, message: str, details: Any = None):
        self.details = details
        self.reason = message
        super().__init__(f"{self.prefix}: {message}")


class GremlinConnectionError(GremlinMcpError):
    """Raised when the graph database cannot be reached or a traversal fails in transit."""

    prefix = "Connection error"

    def __init__(
        self,
        message: str,
        details: Any = None,
        host: str | None = None,
        port: int | None = None,
    ):
        self.host = host
        self.port = port
        super().__init__(message, details)


class GremlinQueryError(GremlinMcpError):
    """Raised when the server rejects or fails to evaluate a query."""

    prefix = "Query failed"

    def __init__(self, message: str, query: str | None = None, details: Any = None):
        self.query = query
        super().__init__(message, details)


class SchemaTimeoutError(GremlinMcpError):
    """Raised when whole-schema generation exceeds its deadline."""

    prefix = "Operation timed out"

    def __init__(self, timeout_ms: int):
        self.timeout_ms = timeout_ms
        super().__init__(f"Schema generation timed out after {timeout_ms}ms")


class SchemaValidationError(GremlinMcpError):
    """Raised when an assembled schema fails structural validation.

    Not retryable: it signals a driver/version incompatibility rather than a
    transient fault.
    """

    prefix = "Schema error"
