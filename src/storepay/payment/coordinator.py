"""PaymentCoordinator - Routes payment operations to gateway adapters."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from storepay.core.exceptions import (
    ConfigurationError,
    OrderNotFoundError,
    UnsupportedGatewayError,
)
from storepay.core.logging import get_logger
from storepay.core.types import (
    Capability,
    GatewayId,
    NotificationRequest,
    NotificationResponder,
    Order,
    PaymentContext,
)
from storepay.gateways.base import GatewayAdapter

if TYPE_CHECKING:
    from storepay.core.config import Config
    from storepay.storage.stores import CommerceStore


class PaymentCoordinator:
    """
    Selects an adapter by gateway id, loads the order and settings context,
    and dispatches to the requested capability.

    The coordinator owns one idempotency check: an order that is already
    paid is never charged again.
    """

    def __init__(
        self,
        config: Config,
        store: CommerceStore,
        adapters: list[GatewayAdapter] | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._adapters: dict[str, GatewayAdapter] = {}
        self._logger = get_logger("coordinator")
        for adapter in adapters or []:
            self.register_adapter(adapter)

    def register_adapter(self, adapter: GatewayAdapter) -> None:
        self._adapters[adapter.gateway_id.value] = adapter

    def unregister_adapter(self, gateway: GatewayId | str) -> None:
        self._adapters.pop(_gateway_key(gateway), None)

    def get_adapters(self) -> list[GatewayAdapter]:
        return list(self._adapters.values())

    def get_adapter(self, gateway: GatewayId | str | None, capability: Capability) -> GatewayAdapter:
        """
        Look up the adapter for ``gateway`` and check it supports ``capability``.

        Raises:
            UnsupportedGatewayError: Unknown gateway or missing capability
        """
        key = _gateway_key(gateway) if gateway else None
        adapter = self._adapters.get(key) if key else None
        if adapter is None:
            raise UnsupportedGatewayError("Invalid gateway", gateway=key)
        if not adapter.supports(capability):
            raise adapter.unsupported(capability)
        return adapter

    async def get_form_settings(self, order_id: str) -> dict[str, Any]:
        """
        Build checkout form settings for an order.

        Raises:
            OrderNotFoundError: The order does not exist
            ConfigurationError: The order has no payment method or gateway
            UnsupportedGatewayError: No adapter for the order's gateway
            ValidationError: The adapter is missing a mandatory field
        """
        order, settings = await asyncio.gather(
            self._store.get_order(order_id),
            self._store.get_settings(),
        )

        if order is None:
            raise OrderNotFoundError("Order not found.", order_id=order_id)
        if not order.payment_method_id or not order.payment_method_gateway:
            raise ConfigurationError(
                "Order payment method is missing.", details={"order_id": order_id}
            )

        gateway = order.payment_method_gateway
        adapter = self.get_adapter(gateway, Capability.FORM_SETTINGS)
        gateway_settings = await self._store.get_gateway_settings(gateway)

        context = PaymentContext(
            gateway=gateway,
            gateway_settings=gateway_settings,
            order=order,
            amount=order.grand_total,
            currency=settings.currency_code,
        )
        return adapter.get_form_settings(context)

    async def handle_notification(
        self,
        request: NotificationRequest,
        response: NotificationResponder,
        gateway: GatewayId | str,
    ) -> asyncio.Task[None]:
        """
        Dispatch an inbound provider notification.

        The order is resolved later by the adapter, from inside the payload.
        For gateways that cannot receive notifications a 400 is sent and
        UnsupportedGatewayError raised, before any acknowledgement.

        Returns:
            The background verification task
        """
        try:
            adapter = self.get_adapter(gateway, Capability.INBOUND_NOTIFICATION)
        except UnsupportedGatewayError as e:
            self._logger.warning(f"Notification for unsupported gateway: {e}")
            await response.send(400)
            raise

        gateway_settings = await self._store.get_gateway_settings(adapter.gateway_id.value)
        return await adapter.handle_notification(request, response, gateway_settings)

    async def process_order_payment(self, order: Order) -> bool:
        """
        Charge an order server-side.

        Returns True straight away, without any store or network call, when
        the order is already paid.

        Raises:
            UnsupportedGatewayError: The order's gateway cannot charge
            ValidationError: The adapter is missing a mandatory field
        """
        if order.paid:
            return True

        adapter = self.get_adapter(order.payment_method_gateway, Capability.SERVER_CHARGE)
        gateway_settings, settings = await asyncio.gather(
            self._store.get_gateway_settings(adapter.gateway_id.value),
            self._store.get_settings(),
        )
        success = await adapter.process_payment(order, gateway_settings, settings)
        self._logger.info(f"Order {order.id} charge via {adapter.gateway_id.value}: success={success}")
        return success

    async def close(self) -> None:
        for adapter in self._adapters.values():
            await adapter.close()


def _gateway_key(gateway: GatewayId | str) -> str:
    return gateway.value if isinstance(gateway, GatewayId) else str(gateway)
