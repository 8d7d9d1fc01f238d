"""
Commerce collaborator stores on top of a StorageBackend.

The payment core only reads orders and issues partial updates to them,
appends transactions, and reads settings, gateway settings and webhook
subscriptions. The ``save_*`` helpers exist for seeding and tests.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from storepay.core.logging import get_logger
from storepay.core.types import (
    GatewaySettings,
    Order,
    StoreSettings,
    Transaction,
    Webhook,
)
from storepay.storage.base import StorageBackend

ORDERS = "orders"
TRANSACTIONS = "transactions"
SETTINGS = "settings"
GATEWAY_SETTINGS = "gateway_settings"
WEBHOOKS = "webhooks"

_SETTINGS_KEY = "store"


def _serialize(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: v.isoformat() if isinstance(v, datetime) else v for k, v in fields.items()}


class CommerceStore:
    """Orders, transactions, settings and webhook registry for one shop."""

    def __init__(self, storage: StorageBackend) -> None:
        self._storage = storage
        self._logger = get_logger("store")

    @property
    def storage(self) -> StorageBackend:
        return self._storage

    # Orders

    async def get_order(self, order_id: str) -> Order | None:
        data = await self._storage.get(ORDERS, order_id)
        return Order.from_dict(data) if data else None

    async def update_order(self, order_id: str, fields: dict[str, Any]) -> bool:
        updated = await self._storage.update(ORDERS, order_id, _serialize(fields))
        if not updated:
            self._logger.warning(f"Order {order_id} not found for update")
        return updated

    async def save_order(self, order: Order) -> None:
        await self._storage.save(ORDERS, order.id, order.to_dict())

    # Transactions

    async def add_transaction(self, order_id: str, transaction: Transaction) -> str:
        """Append a transaction. No dedup: every call inserts a new record."""
        transaction.order_id = order_id
        key = uuid.uuid4().hex
        await self._storage.save(TRANSACTIONS, key, transaction.to_dict())
        return key

    async def list_transactions(self, order_id: str) -> list[Transaction]:
        rows = await self._storage.query(TRANSACTIONS, {"order_id": order_id})
        return [Transaction.from_dict(row) for row in rows]

    # Settings

    async def get_settings(self) -> StoreSettings:
        return StoreSettings.from_dict(await self._storage.get(SETTINGS, _SETTINGS_KEY))

    async def save_settings(self, settings: StoreSettings) -> None:
        await self._storage.save(SETTINGS, _SETTINGS_KEY, settings.to_dict())

    async def get_gateway_settings(self, gateway: str) -> GatewaySettings:
        data = await self._storage.get(GATEWAY_SETTINGS, gateway)
        return GatewaySettings(gateway=gateway, options=data or {})

    async def save_gateway_settings(self, settings: GatewaySettings) -> None:
        await self._storage.save(GATEWAY_SETTINGS, settings.gateway, dict(settings.options))

    # Webhooks

    async def list_webhooks(self) -> list[Webhook]:
        return [Webhook.from_dict(row) for row in await self._storage.query(WEBHOOKS)]

    async def save_webhook(self, webhook: Webhook) -> None:
        await self._storage.save(WEBHOOKS, webhook.id, webhook.to_dict())
