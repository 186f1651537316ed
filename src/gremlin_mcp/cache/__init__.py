"""In-process TTL cache for the generated graph schema."""

from .schema_cache import SchemaCache, SchemaCacheEntry

__all__ = ["SchemaCache", "SchemaCacheEntry"]
