"""
Base gateway adapter interface.

Every payment provider adapter (LiqPay, PayPal, Stripe, Razorpay) implements
this interface. Adapters declare the capabilities they support:

- FORM_SETTINGS: build the data a storefront needs to start checkout
- INBOUND_NOTIFICATION: acknowledge a provider callback, then verify it and
  update the order in a background task
- SERVER_CHARGE: charge the order synchronously against the provider API

The PaymentCoordinator looks adapters up by gateway id and refuses to call a
capability the adapter does not declare.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any

import httpx

from storepay.core.exceptions import (
    NetworkError,
    StorePayError,
    UnsupportedGatewayError,
    VerificationError,
)
from storepay.core.logging import get_logger
from storepay.core.types import (
    Capability,
    GatewayId,
    GatewaySettings,
    NotificationRequest,
    NotificationResponder,
    Order,
    PaymentContext,
    StoreSettings,
    Transaction,
    utcnow,
)

if TYPE_CHECKING:
    from storepay.core.config import Config
    from storepay.storage.stores import CommerceStore


class GatewayAdapter(ABC):
    """Abstract base class for payment gateway adapters."""

    capabilities: frozenset[Capability] = frozenset({Capability.FORM_SETTINGS})

    def __init__(
        self,
        config: Config,
        store: CommerceStore,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._background_tasks: set[asyncio.Task[None]] = set()
        self._closed = False
        self._logger = get_logger(f"gateways.{self.gateway_id.value}")

    @property
    @abstractmethod
    def gateway_id(self) -> GatewayId:
        """Return the gateway identifier this adapter handles."""
        ...

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def unsupported(self, capability: Capability) -> UnsupportedGatewayError:
        return UnsupportedGatewayError(
            "Invalid gateway", gateway=self.gateway_id.value, capability=capability.value
        )

    @abstractmethod
    def get_form_settings(self, context: PaymentContext) -> dict[str, Any]:
        """
        Build provider checkout configuration for the storefront.

        Pure: performs no I/O.

        Raises:
            ValidationError: If a field the provider requires is missing
        """
        ...

    async def handle_notification(
        self,
        request: NotificationRequest,
        response: NotificationResponder,
        gateway_settings: GatewaySettings,
    ) -> asyncio.Task[None]:
        """
        Acknowledge an inbound notification, then verify it in the background.

        The response is written before any verification happens: providers
        enforce a short acknowledgement timeout. The returned task's outcome
        is never reported to the provider.

        Returns:
            The scheduled verification task
        """
        if not self.supports(Capability.INBOUND_NOTIFICATION):
            raise self.unsupported(Capability.INBOUND_NOTIFICATION)

        await response.send(200)
        return self._schedule(self._run_verification(request, gateway_settings))

    async def verify_notification(
        self, request: NotificationRequest, gateway_settings: GatewaySettings
    ) -> None:
        """
        Verify a notification and apply it to the order.

        Raises:
            VerificationError: If the notification cannot be trusted
        """
        raise self.unsupported(Capability.INBOUND_NOTIFICATION)

    async def process_payment(
        self,
        order: Order,
        gateway_settings: GatewaySettings,
        settings: StoreSettings,
    ) -> bool:
        """Charge the order server-side. Returns True if the charge succeeded."""
        raise self.unsupported(Capability.SERVER_CHARGE)

    async def close(self) -> None:
        """Wait for pending notification verifications, then release the HTTP client."""
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
        self._closed = True
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client. Never creates one after ``close()``."""
        if self._http_client is None:
            if self._closed:
                raise NetworkError(f"{self.gateway_id.value} adapter is closed")
            self._http_client = httpx.AsyncClient(timeout=self._config.http_timeout)
            self._owns_http_client = True
        return self._http_client

    def _schedule(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(coro)
        # The loop only keeps weak references to tasks
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def _run_verification(
        self, request: NotificationRequest, gateway_settings: GatewaySettings
    ) -> None:
        try:
            await self.verify_notification(request, gateway_settings)
        except VerificationError as e:
            self._logger.warning(f"Payment notification rejected: {e}")
        except StorePayError as e:
            self._logger.error(f"Payment notification failed: {e}")
        except Exception:
            # Nobody awaits this task, so log instead of losing the error
            self._logger.exception("Unexpected error while processing payment notification")

    async def _mark_paid(self, order_id: str) -> None:
        await self._store.update_order(order_id, {"paid": True, "date_paid": utcnow()})
        self._logger.info(f"Order {order_id} marked as paid")

    async def _record_transaction(self, order_id: str, transaction: Transaction) -> None:
        await self._store.add_transaction(order_id, transaction)
        self._logger.info(
            f"Transaction {transaction.transaction_id} recorded for order {order_id} "
            f"(status={transaction.status}, success={transaction.success})"
        )
