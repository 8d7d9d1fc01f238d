"""RazorpayCheckoutAdapter - Client-side checkout configuration only."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from storepay.core.exceptions import ValidationError
from storepay.core.types import GatewayId, PaymentContext
from storepay.gateways.base import GatewayAdapter


class RazorpayCheckoutAdapter(GatewayAdapter):
    """Adapter for Razorpay Checkout. Supports form settings only."""

    @property
    def gateway_id(self) -> GatewayId:
        return GatewayId.RAZORPAY_CHECKOUT

    def get_form_settings(self, context: PaymentContext) -> dict[str, Any]:
        order = context.order
        amount = context.amount
        settings = context.gateway_settings

        if not order or not order.id:
            raise ValidationError("Invalid order information.")
        if not amount or isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
            raise ValidationError("Invalid payment amount.")
        if not context.currency:
            raise ValidationError("Currency must be specified.")
        if not settings.get("key_id") or not settings.get("key_secret"):
            raise ValidationError("Gateway settings are incomplete.")

        return {
            "order_id": order.id,
            "amount": amount,
            "currency": context.currency,
            "key_id": settings.get("key_id"),
            "key_secret": settings.get("key_secret"),
        }
