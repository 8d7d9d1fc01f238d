"""
Storage backends for StorePay.

Provides pluggable persistence for the commerce collaborator stores.

Configuration via environment:
    STOREPAY_STORAGE_BACKEND=memory

Example:
    >>> from storepay.storage import get_storage, CommerceStore
    >>>
    >>> store = CommerceStore(get_storage())
    >>> order = await store.get_order("o1")
"""

from __future__ import annotations

import os

from storepay.storage.base import (
    StorageBackend,
    get_storage_backend,
    list_storage_backends,
    register_storage_backend,
)
from storepay.storage.memory import InMemoryStorage
from storepay.storage.stores import CommerceStore


def get_storage(backend_name: str | None = None) -> StorageBackend:
    """
    Get storage backend from environment or by name.

    Args:
        backend_name: Backend name, or None to read from STOREPAY_STORAGE_BACKEND env

    Returns:
        StorageBackend instance

    Raises:
        ValueError: If backend name is unknown
    """
    if backend_name is None:
        backend_name = os.environ.get("STOREPAY_STORAGE_BACKEND", "memory")

    backend_class = get_storage_backend(backend_name)

    if backend_class is None:
        available = list_storage_backends()
        raise ValueError(
            f"Unknown storage backend: '{backend_name}'. Available: {', '.join(available)}"
        )

    return backend_class()


__all__ = [
    "StorageBackend",
    "InMemoryStorage",
    "CommerceStore",
    "get_storage",
    "get_storage_backend",
    "list_storage_backends",
    "register_storage_backend",
]
