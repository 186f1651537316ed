"""
Schema introspection engine.

Discovers a graph's structural shape with a bounded set of exploratory
traversals and assembles it into a ``GraphSchema``:
- ``discovery``: vertex/edge labels, property keys, counts
- ``analyzer``: sampling-based type and enum inference per property
- ``patterns``: distinct (source, edge, target) label triples
- ``batching``: bounded-concurrency batch runner
- ``assembler``: metadata stamping and validation
- ``generator``: the timeout-guarded pipeline
"""

from .generator import generate_schema

__all__ = ["generate_schema"]
