"""
In-memory storage implementation for development and tests.

Works without any external services. Data lives for the lifetime of
the process.
"""

from __future__ import annotations

import asyncio
import copy
from typing import Any

from bugbounty.storage.base import Collections, DuplicateKeyError, MetadataStorage


DEFAULT_UNIQUE_INDEXES: dict[str, tuple[str, ...]] = {
    Collections.USERS: ("email",),
}


class InMemoryMetadataStorage(MetadataStorage):
    """In-memory document storage with unique indexes."""

    def __init__(self, unique_indexes: dict[str, tuple[str, ...]] | None = None):
        self._data: dict[str, dict[str, dict[str, Any]]] = {}
        self._unique = DEFAULT_UNIQUE_INDEXES if unique_indexes is None else unique_indexes
        self._lock = asyncio.Lock()

    def _check_unique(self, collection: str, id: str, data: dict[str, Any]) -> None:
        for field in self._unique.get(collection, ()):
            value = data.get(field)
            if value is None:
                continue
            for other_id, doc in self._data.get(collection, {}).items():
                if other_id != id and doc.get(field) == value:
                    raise DuplicateKeyError(collection, field, value)

    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        async with self._lock:
            self._check_unique(collection, id, data)
            self._data.setdefault(collection, {})[id] = copy.deepcopy(data)

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        doc = self._data.get(collection, {}).get(id)
        return copy.deepcopy(doc) if doc is not None else None

    async def delete(self, collection: str, id: str) -> bool:
        async with self._lock:
            if id in self._data.get(collection, {}):
                del self._data[collection][id]
                return True
            return False

    async def delete_many(self, collection: str, filters: dict[str, Any]) -> int:
        async with self._lock:
            docs = self._data.get(collection, {})
            doomed = [doc_id for doc_id, doc in docs.items() if _matches(doc, filters)]
            for doc_id in doomed:
                del docs[doc_id]
            return len(doomed)

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        results = self._data.get(collection, {}).values()
        if filters:
            results = [doc for doc in results if _matches(doc, filters)]
        return [copy.deepcopy(doc) for doc in results]

    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        async with self._lock:
            doc = self._data.get(collection, {}).get(id)
            if doc is None:
                return None
            merged = {**doc, **updates}
            self._check_unique(collection, id, merged)
            self._data[collection][id] = copy.deepcopy(merged)
            return copy.deepcopy(merged)


def _matches(doc: dict[str, Any], filters: dict[str, Any]) -> bool:
    return all(doc.get(key) == value for key, value in filters.items())


def create_local_storage() -> MetadataStorage:
    """Create the in-memory metadata storage used in development."""
    return InMemoryMetadataStorage()
