"""
In-Memory Storage Backend.

Default backend, keeps every collection in process memory. Suitable for
development and tests.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from storepay.storage.base import StorageBackend, register_storage_backend


class InMemoryStorage(StorageBackend):
    """
    In-memory storage backend.

    Records are deep-copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, dict[str, Any]]] = {}

    def _collection(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._data.setdefault(collection, {})

    @staticmethod
    def _matches(record: dict[str, Any], filters: dict[str, Any] | None) -> bool:
        if not filters:
            return True
        return all(record.get(k) == v for k, v in filters.items())

    async def save(self, collection: str, key: str, data: dict[str, Any]) -> None:
        self._collection(collection)[key] = deepcopy(data)

    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        data = self._collection(collection).get(key)
        return deepcopy(data) if data is not None else None

    async def delete(self, collection: str, key: str) -> bool:
        return self._collection(collection).pop(key, None) is not None

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        results = []
        for key, data in self._collection(collection).items():
            if not self._matches(data, filters):
                continue
            result = deepcopy(data)
            result["_key"] = key
            results.append(result)

        results = results[offset:]
        if limit is not None:
            results = results[:limit]
        return results

    async def update(self, collection: str, key: str, data: dict[str, Any]) -> bool:
        coll = self._collection(collection)
        if key not in coll:
            return False
        coll[key].update(deepcopy(data))
        return True

    async def count(self, collection: str, filters: dict[str, Any] | None = None) -> int:
        if filters:
            return len(await self.query(collection, filters))
        return len(self._collection(collection))

    async def clear(self, collection: str) -> int:
        coll = self._collection(collection)
        count = len(coll)
        coll.clear()
        return count


# Register as default backend
register_storage_backend("memory", InMemoryStorage)
