"""
Storage abstraction layer.

All persistence goes through this interface. This allows swapping
implementations (in-memory → PostgreSQL, etc.) without changing
application code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class StorageError(Exception):
    """Base exception for storage failures."""


class DuplicateKeyError(StorageError):
    """A unique index rejected a write."""

    def __init__(self, collection: str, field: str, value: Any):
        self.collection = collection
        self.field = field
        self.value = value
        super().__init__(f"Duplicate value for {collection}.{field}")


class MetadataStorage(ABC):
    """
    Storage for structured data (users, programs, reports).

    Documents are plain dicts keyed by id inside a named collection.
    Implementations must enforce their declared unique indexes and
    raise DuplicateKeyError on violation.
    """

    @abstractmethod
    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        """Save a document to a collection."""

    @abstractmethod
    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        """Get a document by ID."""

    @abstractmethod
    async def delete(self, collection: str, id: str) -> bool:
        """Delete a document."""

    @abstractmethod
    async def delete_many(self, collection: str, filters: dict[str, Any]) -> int:
        """Delete every document matching the filters, return the count."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Query documents with optional equality filters."""

    @abstractmethod
    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        """Partial update of a document, return the stored result."""


class Collections:
    """Standard collection/table names."""

    USERS = "users"
    PROGRAMS = "programs"
    REPORTS = "reports"
