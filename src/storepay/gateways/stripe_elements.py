"""StripeElementsAdapter - Client-side Elements with server-side charges."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import httpx

from storepay.core.exceptions import ChargeError, ValidationError
from storepay.core.types import (
    Capability,
    GatewayId,
    GatewaySettings,
    Order,
    PaymentContext,
    StoreSettings,
    Transaction,
)
from storepay.gateways.base import GatewayAdapter

SUCCEEDED = "succeeded"
DEFAULT_CURRENCY = "USD"
MINOR_UNITS = Decimal(100)


def to_minor_units(amount: Decimal) -> int:
    """12.34 -> 1234"""
    return int((amount * MINOR_UNITS).quantize(Decimal(1), rounding=ROUND_HALF_UP))


class StripeElementsAdapter(GatewayAdapter):
    """
    Adapter for Stripe Elements.

    The storefront tokenizes the card with the publishable key; the order's
    ``payment_token`` is then charged once through the Charges API.
    """

    capabilities = frozenset({Capability.FORM_SETTINGS, Capability.SERVER_CHARGE})

    @property
    def gateway_id(self) -> GatewayId:
        return GatewayId.STRIPE_ELEMENTS

    def get_form_settings(self, context: PaymentContext) -> dict[str, Any]:
        order = context.order
        if not order or not order.id:
            raise ValidationError("Invalid order information.")
        if not context.gateway_settings.get("public_key"):
            raise ValidationError("Gateway settings are incomplete.", details={"field": "public_key"})

        return {
            "order_id": order.id,
            "amount": order.grand_total,
            "currency": order.currency or DEFAULT_CURRENCY,
            "email": order.email,
            "public_key": context.gateway_settings.get("public_key"),
        }

    async def process_payment(
        self,
        order: Order,
        gateway_settings: GatewaySettings,
        settings: StoreSettings,
    ) -> bool:
        """
        Charge the order's payment token.

        Exactly one transaction is recorded for every charge Stripe returns,
        successful or not. The order is marked paid only on success. Errors
        raised by the charge call are logged and reported as False.

        Raises:
            ValidationError: Missing order id, total or secret key (before any I/O)
        """
        if not order or not order.id:
            raise ValidationError("Invalid order information.")
        if order.grand_total is None:
            raise ValidationError("Order total is required.", details={"order_id": order.id})
        secret_key = gateway_settings.get("secret_key")
        if not secret_key:
            raise ValidationError("Gateway settings are incomplete.", details={"field": "secret_key"})

        try:
            charge = await self._create_charge(order, secret_key, settings.currency_code)

            outcome = charge.get("outcome") or {}
            succeeded = charge.get("status") == SUCCEEDED or charge.get("paid") is True

            if succeeded:
                await self._mark_paid(order.id)

            await self._record_transaction(
                order.id,
                Transaction(
                    transaction_id=charge.get("id"),
                    amount=Decimal(str(charge.get("amount", 0))) / MINOR_UNITS,
                    currency=charge.get("currency"),
                    status=charge.get("status"),
                    details=outcome.get("seller_message") or "",
                    success=succeeded,
                ),
            )
            return succeeded
        except Exception as e:
            self._logger.error(f"Payment processing error for order {order.id}: {e}")
            return False

    async def _create_charge(self, order: Order, secret_key: str, currency: str) -> dict[str, Any]:
        url = f"{self._config.stripe_api_base.rstrip('/')}/v1/charges"
        descriptor = f"Order #{order.number}"
        form = {
            "amount": str(to_minor_units(order.grand_total)),  # type: ignore[arg-type]
            "currency": currency.lower(),
            "description": descriptor,
            "statement_descriptor": descriptor,
            "metadata[order_id]": order.id,
        }
        if order.payment_token:
            form["source"] = order.payment_token

        client = await self._get_http_client()
        try:
            response = await client.post(url, data=form, auth=(secret_key, ""))
        except httpx.HTTPError as e:
            raise ChargeError(f"Charge request failed: {e}", url=url) from e

        if not response.is_success:
            try:
                error = response.json().get("error", {})
            except ValueError:
                error = {}
            raise ChargeError(
                error.get("message") or f"Charge failed with status {response.status_code}",
                status_code=response.status_code,
                url=url,
                details={"code": error.get("code")} if error.get("code") else None,
            )

        return response.json()
