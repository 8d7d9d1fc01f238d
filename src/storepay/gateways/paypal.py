"""PayPalCheckoutAdapter - Checkout button settings and IPN verification."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import httpx

from storepay.core.exceptions import VerificationError
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

VERIFY_COMMAND = "_notify-validate"
VERIFIED = "VERIFIED"
COMPLETED = "Completed"

_TRUE_VALUES = ("1", "true", "yes", "on")


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


class PayPalCheckoutAdapter(GatewayAdapter):
    """
    Adapter for PayPal Checkout with Instant Payment Notification (IPN).

    An IPN is trusted only after the full field set has been echoed back to
    PayPal over a fresh connection and PayPal answered with the literal body
    ``VERIFIED``.
    """

    capabilities = frozenset({Capability.FORM_SETTINGS, Capability.INBOUND_NOTIFICATION})

    @property
    def gateway_id(self) -> GatewayId:
        return GatewayId.PAYPAL_CHECKOUT

    def get_form_settings(self, context: PaymentContext) -> dict[str, Any]:
        settings = context.gateway_settings
        return {
            "order_id": context.order.id,
            "amount": context.amount,
            "currency": context.currency,
            "env": settings.get("env"),
            "client": settings.get("client"),
            "size": settings.get("size"),
            "shape": settings.get("shape"),
            "color": settings.get("color"),
            "notify_url": settings.get("notify_url"),
        }

    def _allow_sandbox(self, gateway_settings: GatewaySettings) -> bool:
        if "allow_sandbox" in gateway_settings:
            return _truthy(gateway_settings.get("allow_sandbox"))
        return self._config.paypal_allow_sandbox

    def verification_url(self, sandbox: bool) -> str:
        host = self._config.paypal_sandbox_host if sandbox else self._config.paypal_live_host
        return f"https://{host}{self._config.paypal_verify_path}"

    async def verify_ipn(
        self, params: Mapping[str, Any], gateway_settings: GatewaySettings
    ) -> None:
        """
        Echo the IPN back to PayPal.

        Raises:
            VerificationError: Empty payload, sandbox IPN while sandbox is
                disabled, transport failure, or any body other than VERIFIED
        """
        if not params:
            raise VerificationError("Params are empty", gateway=self.gateway_id.value)

        sandbox = _truthy(params.get("test_ipn"))
        if sandbox and not self._allow_sandbox(gateway_settings):
            raise VerificationError(
                "Sandbox is disabled, but test_ipn was received", gateway=self.gateway_id.value
            )

        fields = [("cmd", VERIFY_COMMAND)]
        fields.extend((k, v) for k, v in params.items() if k != "cmd")
        body = urlencode(fields).encode("utf-8")
        url = self.verification_url(sandbox)

        client = await self._get_http_client()
        try:
            response = await client.post(
                url,
                content=body,
                headers={
                    "Content-Type": "application/x-www-form-urlencoded",
                    "Content-Length": str(len(body)),
                },
            )
        except httpx.HTTPError as e:
            raise VerificationError(
                f"Request error: {e}", gateway=self.gateway_id.value, details={"url": url}
            ) from e

        if response.text != VERIFIED:
            raise VerificationError(
                f"IPN Verification status: {response.text}",
                gateway=self.gateway_id.value,
                details={"status_code": response.status_code},
            )

    async def verify_notification(
        self, request: NotificationRequest, gateway_settings: GatewaySettings
    ) -> None:
        params = dict(request.body)
        order_id = params.get("custom")
        payment_completed = params.get("payment_status") == COMPLETED

        await self.verify_ipn(params, gateway_settings)

        if not payment_completed:
            self._logger.info(
                f"IPN verified for order {order_id} with status {params.get('payment_status')}, "
                "nothing to do"
            )
            return
        if not order_id:
            raise VerificationError("Missing custom order id", gateway=self.gateway_id.value)

        await self._mark_paid(order_id)
        await self._record_transaction(
            order_id,
            Transaction(
                transaction_id=params.get("txn_id"),
                amount=to_decimal(params.get("mc_gross")),
                currency=params.get("mc_currency"),
                status=params.get("payment_status"),
                details=(
                    f"{params.get('first_name')} {params.get('last_name')}, "
                    f"{params.get('payer_email')}"
                ),
                success=True,
            ),
        )
