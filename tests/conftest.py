import asyncio
import os
import sys

import pytest

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

from gremlin_mcp.graph import queries  # noqa: E402


class FakeTraversalExecutor:
    """
    In-memory stand-in for ``GremlinClient.submit``.

    ``responses`` maps a query string to a result list, an exception instance
    (raised), or an async callable (awaited; used for slow traversals).
    Unknown queries return an empty list. Every submitted query is recorded.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def submit(self, query: str):
        self.calls.append(query)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            response = self.responses.get(query, [])
            if isinstance(response, BaseException):
                raise response
            if callable(response):
                response = await response()
            # Yield so concurrent submits actually interleave
            await asyncio.sleep(0)
            return list(response)
        finally:
            self.in_flight -= 1


def slow(result, seconds: float):
    """Async response factory that takes ``seconds`` before returning ``result``."""

    async def respond():
        await asyncio.sleep(seconds)
        return result

    return respond


def person_company_responses(max_enum_values: int = 10) -> dict:
    """Traversal results for a graph of three people working at one company."""
    return {
        queries.VERTEX_LABELS_QUERY: ["person", "company"],
        queries.EDGE_LABELS_QUERY: ["works_at"],
        queries.VERTEX_COUNTS_QUERY: [{"person": 3, "company": 1}],
        queries.EDGE_COUNTS_QUERY: [{"works_at": 2}],
        queries.property_keys_query("vertex", "person"): ["name", "age", "status"],
        queries.property_keys_query("vertex", "company"): ["name"],
        queries.property_keys_query("edge", "works_at"): ["since"],
        queries.property_values_query("vertex", "person", "name", max_enum_values): ["alice", "bob", "carol"],
        queries.property_values_query("vertex", "person", "age", max_enum_values): [30, 41],
        queries.property_values_query("vertex", "person", "status", max_enum_values): ["active", "inactive"],
        queries.property_values_query("vertex", "company", "name", max_enum_values): ["acme"],
        queries.property_values_query("edge", "works_at", "since", max_enum_values): [2019, 2021],
        queries.RELATIONSHIP_PATTERNS_QUERY: [
            {"from": "person", "to": "company", "label": "works_at"},
            {"from": "person", "to": "company", "label": "works_at"},
            {"from": "person", "to": None, "label": "works_at"},
        ],
    }


@pytest.fixture
def fake_executor():
    """Executor with no canned responses; every query returns []."""
    return FakeTraversalExecutor()


@pytest.fixture
def person_company_executor():
    return FakeTraversalExecutor(person_company_responses())
