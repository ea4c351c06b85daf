"""Dedup registry — bounded, persisted record of digests already produced.

The whole registry is one JSON document (``RegistryDocument``) under a single
key of an injected ``KeyValueStore``. Every ``record`` reads, updates and
rewrites that document in one ``set`` call.

Persistence is best-effort: an unavailable store or a corrupt document reads
as an empty registry, and failed writes are logged and dropped.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from markforge.engine.constants import REGISTRY_CAPACITY, REGISTRY_KEY
from markforge.models.records import HashRecord, RegistryDocument
from markforge.storage import KeyValueStore, MemoryKeyValueStore

logger = logging.getLogger(__name__)


class DedupRegistry:
    """FIFO-bounded set of digests with parallel ``HashRecord`` metadata."""

    def __init__(
        self,
        store: KeyValueStore | None = None,
        capacity: int = REGISTRY_CAPACITY,
        key: str = REGISTRY_KEY,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.store = store if store is not None else MemoryKeyValueStore()
        self.capacity = capacity
        self.key = key

    def _load(self) -> RegistryDocument:
        try:
            raw = self.store.get(self.key)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Registry store unavailable: %s", e)
            return RegistryDocument()
        if not raw:
            return RegistryDocument()
        try:
            doc = RegistryDocument.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Ignoring corrupt registry document under %r: %s", self.key, e)
            return RegistryDocument()

        # A document written under a larger capacity keeps only its newest entries.
        if len(doc.hashes) > self.capacity:
            doc.hashes = doc.hashes[-self.capacity:]
            doc.records = doc.records[-self.capacity:]
        return doc

    def has(self, digest: str) -> bool:
        return digest in self._load().hashes

    def record(self, entry: HashRecord) -> None:
        """Append ``entry`` unless its digest is already present."""
        doc = self._load()
        if entry.digest in doc.hashes:
            return

        doc.hashes.append(entry.digest)
        doc.records.append(entry)

        overflow = len(doc.hashes) - self.capacity
        if overflow > 0:
            doc.hashes = doc.hashes[overflow:]
            doc.records = doc.records[overflow:]
            logger.debug("Evicted %d oldest registry entries", overflow)

        try:
            self.store.set(self.key, doc.model_dump_json())
        except OSError as e:
            logger.warning("Failed to store logo hash %s: %s", entry.digest[:12], e)

    def for_brand(self, name: str) -> list[HashRecord]:
        target = name.lower()
        return [r for r in self._load().records if r.brand_name.lower() == target]

    def records(self) -> list[HashRecord]:
        return list(self._load().records)

    def clear(self) -> None:
        try:
            self.store.remove(self.key)
        except OSError as e:
            logger.warning("Failed to clear registry %r: %s", self.key, e)

    def __len__(self) -> int:
        return len(self._load().hashes)


# Singleton
_registry: DedupRegistry | None = None


def get_registry() -> DedupRegistry:
    """Get or create the process-wide registry from settings."""
    global _registry
    if _registry is None:
        from markforge.config import settings
        from markforge.storage import FileKeyValueStore

        _registry = DedupRegistry(
            store=FileKeyValueStore(settings.registry_dir),
            capacity=settings.registry_capacity,
            key=settings.registry_key,
        )
    return _registry
