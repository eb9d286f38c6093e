"""
Storage abstractions.

The persistence collaborator: anything implementing MetadataStorage can
back the API (the bundled implementation is in-memory).
"""

from bugbounty.storage.base import (
    MetadataStorage,
    Collections,
    StorageError,
    DuplicateKeyError,
)
from bugbounty.storage.local import InMemoryMetadataStorage, create_local_storage

__all__ = [
    "MetadataStorage",
    "Collections",
    "StorageError",
    "DuplicateKeyError",
    "InMemoryMetadataStorage",
    "create_local_storage",
]
