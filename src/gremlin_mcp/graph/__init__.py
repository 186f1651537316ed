"""
Graph layer for the Gremlin MCP server.

- ``GremlinClient``: idle-aware async facade over the gremlinpython driver
- ``TraversalExecutor``: the capability schema discovery depends on
- ``queries``: traversal scripts and literal escaping
"""

from .base import TraversalExecutor, run_traversal
from .client import STATUS_AVAILABLE, GremlinClient

__all__ = [
    "GremlinClient",
    "STATUS_AVAILABLE",
    "TraversalExecutor",
    "run_traversal",
]
