"""
Abstract Storage Backend for StorePay.

Backs the collaborator stores (orders, transactions, settings, gateway
settings, webhooks) the payment core reads and writes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    Simple document CRUD keyed by (collection, key). Records must be
    JSON-serializable dicts.
    """

    @abstractmethod
    async def save(self, collection: str, key: str, data: dict[str, Any]) -> None:
        """Insert or replace the record at ``key``."""
        ...

    @abstractmethod
    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        """Return the record or None if not found."""
        ...

    @abstractmethod
    async def delete(self, collection: str, key: str) -> bool:
        """Delete a record. True if it existed."""
        ...

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """
        Query data with optional filters.

        Args:
            collection: Collection/table name
            filters: Key-value pairs to filter by (exact match)
            limit: Maximum records to return
            offset: Number of records to skip

        Returns:
            Matching records in insertion order, each with a ``_key`` field
        """
        ...

    @abstractmethod
    async def update(self, collection: str, key: str, data: dict[str, Any]) -> bool:
        """
        Merge ``data`` into an existing record.

        Returns:
            True if updated, False if not found
        """
        ...

    @abstractmethod
    async def count(self, collection: str, filters: dict[str, Any] | None = None) -> int:
        """Count records, optionally filtered."""
        ...

    @abstractmethod
    async def clear(self, collection: str) -> int:
        """Clear a collection and return the number of records removed."""
        ...

    async def health_check(self) -> bool:
        return True


# Storage backend registry for dependency injection
_STORAGE_BACKENDS: dict[str, type[StorageBackend]] = {}


def register_storage_backend(name: str, backend_class: type[StorageBackend]) -> None:
    """Register a storage backend by name."""
    _STORAGE_BACKENDS[name] = backend_class


def get_storage_backend(name: str) -> type[StorageBackend] | None:
    """Get a registered storage backend by name."""
    return _STORAGE_BACKENDS.get(name)


def list_storage_backends() -> list[str]:
    """List all registered storage backend names."""
    return list(_STORAGE_BACKENDS.keys())
