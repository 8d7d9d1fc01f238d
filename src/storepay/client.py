"""StorePay - Payment core entry point."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from storepay.core.config import Config
from storepay.core.events import EventName
from storepay.core.logging import configure_logging, get_logger
from storepay.core.types import (
    GatewayId,
    NotificationRequest,
    NotificationResponder,
    Order,
)
from storepay.gateways import default_adapters
from storepay.payment.coordinator import PaymentCoordinator
from storepay.storage import get_storage
from storepay.storage.base import StorageBackend
from storepay.storage.stores import CommerceStore
from storepay.webhooks.dispatcher import WebhookDispatcher


class StorePay:
    """
    Main client for the payment core.

    Wires the commerce store, the gateway adapters, the payment coordinator
    and the webhook dispatcher around one storage backend and one HTTP client.
    """

    def __init__(
        self,
        config: Config | None = None,
        storage: StorageBackend | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize StorePay.

        Args:
            config: Configuration (default: Config.from_env())
            storage: Storage backend (default: the configured backend)
            http_client: Shared HTTP client for providers and webhooks. When
                omitted one is created and closed by ``close()``.
        """
        self._config = config or Config.from_env()

        configure_logging(level=self._config.log_level)
        self._logger = get_logger("client")
        self._logger.info(f"Initializing StorePay (env: {self._config.env})")

        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=self._config.http_timeout)

        self._storage = storage or get_storage(self._config.storage_backend)
        self._store = CommerceStore(self._storage)

        self._coordinator = PaymentCoordinator(
            self._config,
            self._store,
            default_adapters(self._config, self._store, self._http_client),
        )
        self._dispatcher = WebhookDispatcher(self._config, self._store, self._http_client)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def store(self) -> CommerceStore:
        return self._store

    @property
    def payments(self) -> PaymentCoordinator:
        return self._coordinator

    @property
    def webhooks(self) -> WebhookDispatcher:
        return self._dispatcher

    async def __aenter__(self) -> StorePay:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        await self._coordinator.close()
        await self._dispatcher.close()
        if self._owns_http_client:
            await self._http_client.aclose()

    async def get_payment_form_settings(self, order_id: str) -> dict[str, Any]:
        """Checkout form settings for an order's gateway."""
        return await self._coordinator.get_form_settings(order_id)

    async def handle_payment_notification(
        self,
        request: NotificationRequest,
        response: NotificationResponder,
        gateway: GatewayId | str,
    ) -> asyncio.Task[None]:
        """Acknowledge a provider callback and verify it in the background."""
        return await self._coordinator.handle_notification(request, response, gateway)

    async def process_order_payment(self, order: Order) -> bool:
        """Charge an order server-side. True if paid (or already paid)."""
        return await self._coordinator.process_order_payment(order)

    async def trigger_webhook(self, event: EventName | str, payload: Any) -> None:
        """Deliver an event to its webhook subscribers. Never raises."""
        await self._dispatcher.trigger(event, payload)
