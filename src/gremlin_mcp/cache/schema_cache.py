"""
In-process TTL cache for the generated graph schema.

Holds at most one ``SchemaCacheEntry`` (schema + generation timestamp):
- Configurable TTL (default 5 minutes)
- ``peek`` for generation-free reads, ignoring the TTL
- Explicit invalidation and forced refresh

The entry is replaced wholesale, never mutated, and every read or write of it
goes through one lock. Regeneration is single-flight: concurrent callers that
find the entry stale wait for one generation instead of each starting their own.
A failed generation leaves the previous entry (or emptiness) untouched, and a
generation that was running when ``invalidate`` was called returns its result to
its own caller but never stores it.
"""

import asyncio
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from ..models.schema import GraphSchema

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0

SchemaGenerator = Callable[[], Awaitable[GraphSchema]]


@dataclass(frozen=True)
class SchemaCacheEntry:
    """A generated schema, the clock reading taken when it was stored, and the
    invalidation epoch it was generated under."""

    schema: GraphSchema
    timestamp: float
    epoch: int = 0


class SchemaCache:
    """
    Single-entry schema cache with TTL expiry.

    Owned by the service that creates it; not a module-level singleton.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            ttl_seconds: How long a generated schema is served without regenerating
            clock: Monotonic time source (injectable for tests)
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entry: SchemaCacheEntry | None = None
        # Bumped by every invalidate; a generation started under an older epoch is never stored
        self._epoch = 0
        self._entry_lock = threading.Lock()
        self._generation_lock = asyncio.Lock()
        self._stats = {"hits": 0, "misses": 0, "generations": 0, "failures": 0, "discarded": 0}

    # ── Entry access ────────────────────────────────────────────────────

    def _read(self) -> SchemaCacheEntry | None:
        with self._entry_lock:
            return self._entry

    def _snapshot(self) -> tuple[SchemaCacheEntry | None, int]:
        with self._entry_lock:
            return self._entry, self._epoch

    def _store(self, schema: GraphSchema, epoch: int) -> bool:
        """Store ``schema`` unless the cache was invalidated after ``epoch`` was taken."""
        with self._entry_lock:
            if self._epoch != epoch:
                return False
            self._entry = SchemaCacheEntry(schema=schema, timestamp=self._clock(), epoch=epoch)
            return True

    def _is_fresh(self, entry: SchemaCacheEntry | None) -> bool:
        return entry is not None and self._clock() - entry.timestamp < self.ttl_seconds

    # ── Public API ──────────────────────────────────────────────────────

    async def get(self, generate: SchemaGenerator) -> GraphSchema:
        """
        Return the cached schema if still within TTL, otherwise generate and store one.

        Raises:
            Whatever ``generate`` raises; nothing is cached on failure.
        """
        entry, epoch = self._snapshot()
        if self._is_fresh(entry):
            self._stats["hits"] += 1
            logger.debug("Using cached schema")
            return entry.schema

        self._stats["misses"] += 1
        logger.debug("Schema cache miss" if entry is None else "Cached schema expired")
        return await self._regenerate(generate, epoch, force=False)

    def peek(self) -> GraphSchema | None:
        """Return the cached schema regardless of age, or None. Never generates."""
        entry = self._read()
        return entry.schema if entry is not None else None

    def invalidate(self) -> None:
        """Drop the cached entry and discard any generation still in flight. Idempotent."""
        logger.info("Invalidating schema cache")
        with self._entry_lock:
            self._entry = None
            self._epoch += 1

    async def refresh(self, generate: SchemaGenerator) -> GraphSchema:
        """Invalidate and force exactly one generation, regardless of freshness."""
        logger.info("Refreshing schema cache")
        self.invalidate()
        _, epoch = self._snapshot()
        return await self._regenerate(generate, epoch, force=True)

    async def _regenerate(self, generate: SchemaGenerator, epoch: int, force: bool) -> GraphSchema:
        async with self._generation_lock:
            if not force:
                # Another caller may have regenerated while we waited for the lock;
                # only an entry generated since this call's epoch counts
                entry, current_epoch = self._snapshot()
                if self._is_fresh(entry) and entry.epoch >= epoch:
                    self._stats["hits"] += 1
                    return entry.schema
                epoch = current_epoch

            logger.info("Generating fresh schema")
            try:
                schema = await generate()
            except BaseException:
                self._stats["failures"] += 1
                raise

            self._stats["generations"] += 1
            if not self._store(schema, epoch):
                self._stats["discarded"] += 1
                logger.info("Schema cache invalidated during generation; result not cached")
            return schema

    # ── Stats ───────────────────────────────────────────────────────────

    def stats(self) -> dict[str, Any]:
        """Cache counters plus the current entry age in seconds (None when empty)."""
        entry = self._read()
        return {
            "ttl_seconds": self.ttl_seconds,
            "populated": entry is not None,
            "age_seconds": round(self._clock() - entry.timestamp, 3) if entry is not None else None,
            **self._stats,
        }
