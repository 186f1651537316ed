"""Traversal execution capability consumed by schema discovery."""

from typing import Any, Protocol, runtime_checkable

from ..errors import GremlinConnectionError, GremlinMcpError


@runtime_checkable
class TraversalExecutor(Protocol):
    """Anything that can evaluate a Gremlin traversal script.

    Implementations return results already normalized to plain Python values
    (see ``utils.result_parser``); schema code never inspects driver types.
    """

    async def submit(self, query: str) -> list[Any]: ...


async def run_traversal(executor: TraversalExecutor, query: str, action: str) -> list[Any]:
    """
    Submit a traversal, wrapping untyped failures as connectivity errors.

    Args:
        executor: Traversal capability
        query: Gremlin script
        action: What the traversal does, used in the error message
            (e.g. "get vertex labels")

    Raises:
        GremlinMcpError: Typed errors from the executor propagate unchanged.
        GremlinConnectionError: Any other failure.
    """
    try:
        return await executor.submit(query)
    except GremlinMcpError:
        raise
    except Exception as e:
        raise GremlinConnectionError(f"Failed to {action}", details={"query": query, "error": str(e)}) from e
