"""LiqPayAdapter - Signed redirect-form checkout with server callbacks."""

from __future__ import annotations

from typing import Any

from storepay.core.exceptions import InvalidSignatureError, ValidationError, VerificationError
from storepay.core.signing import (
    decode_liqpay_data,
    encode_liqpay_data,
    liqpay_signature,
    verify_liqpay_signature,
)
from storepay.core.types import (
    Capability,
    GatewayId,
    GatewaySettings,
    NotificationRequest,
    PaymentContext,
    Transaction,
    to_decimal,
)
from storepay.gateways.base import GatewayAdapter

API_VERSION = "3"
SUCCESS_STATUS = "success"


class LiqPayAdapter(GatewayAdapter):
    """
    Adapter for LiqPay.

    Checkout is a form POST of ``data`` (base64 JSON) and ``signature``.
    LiqPay calls ``server_url`` back with the same pair once the payment
    settles.
    """

    capabilities = frozenset({Capability.FORM_SETTINGS, Capability.INBOUND_NOTIFICATION})

    @property
    def gateway_id(self) -> GatewayId:
        return GatewayId.LIQPAY

    def get_form_settings(self, context: PaymentContext) -> dict[str, Any]:
        settings = context.gateway_settings
        params = {
            "sandbox": "0",
            "action": "pay",
            "version": API_VERSION,
            "amount": context.amount,
            "currency": context.currency,
            "description": f"Order: {context.order.number}",
            "order_id": context.order.id,
            "public_key": settings.get("public_key"),
            "language": settings.get("language"),
            "server_url": settings.get("server_url"),
        }
        self._validate_form_params(params)

        private_key = settings.get("private_key")
        if not private_key:
            raise ValidationError("Private key is required.")

        data = encode_liqpay_data(params)
        return {
            "data": data,
            "signature": liqpay_signature(private_key, data),
            "language": settings.get("language"),
        }

    @staticmethod
    def _validate_form_params(params: dict[str, Any]) -> None:
        for name in ("version", "amount", "currency", "description"):
            if not params.get(name):
                raise ValidationError(f"{name.capitalize()} is required.", details={"field": name})

    async def verify_notification(
        self, request: NotificationRequest, gateway_settings: GatewaySettings
    ) -> None:
        data = request.body.get("data")
        signature = request.body.get("signature")
        if not data:
            raise VerificationError("Missing data field", gateway=self.gateway_id.value)

        private_key = gateway_settings.get("private_key") or ""
        signature_valid = verify_liqpay_signature(private_key, data, signature)

        try:
            payload = decode_liqpay_data(data)
        except ValidationError as e:
            raise VerificationError(e.message, gateway=self.gateway_id.value) from e

        payment_success = payload.get("status") == SUCCESS_STATUS

        if not signature_valid:
            raise InvalidSignatureError(
                "Signature mismatch",
                gateway=self.gateway_id.value,
                details={"order_id": payload.get("order_id")},
            )
        if not payment_success:
            raise VerificationError(
                f"Payment not successful (status={payload.get('status')})",
                gateway=self.gateway_id.value,
                details={"order_id": payload.get("order_id")},
            )

        order_id = str(payload.get("order_id") or "")
        if not order_id:
            raise VerificationError("Missing order_id", gateway=self.gateway_id.value)

        await self._mark_paid(order_id)
        await self._record_transaction(
            order_id,
            Transaction(
                transaction_id=_as_str(payload.get("transaction_id")),
                amount=to_decimal(payload.get("amount")),
                currency=payload.get("currency"),
                status=payload.get("status"),
                details=f"{payload.get('paytype')}, {payload.get('sender_card_mask2')}",
                success=True,
            ),
        )


def _as_str(value: Any) -> str | None:
    return str(value) if value is not None else None
