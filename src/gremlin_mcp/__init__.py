"""
Gremlin MCP server.

Exposes any Gremlin-compatible graph database over MCP:
- Connection status and health
- Sampling-based schema introspection with a TTL cache
- Ad-hoc Gremlin query execution
- GraphSON/CSV import and JSON/GraphSON/CSV export
"""

__version__ = "0.1.0"
