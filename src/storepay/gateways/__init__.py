"""
Payment gateway adapters.

Each adapter translates one provider's wire protocol into the
coordinator's uniform contract.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from storepay.gateways.base import GatewayAdapter
from storepay.gateways.liqpay import LiqPayAdapter
from storepay.gateways.paypal import PayPalCheckoutAdapter
from storepay.gateways.razorpay import RazorpayCheckoutAdapter
from storepay.gateways.stripe_elements import StripeElementsAdapter

if TYPE_CHECKING:
    from storepay.core.config import Config
    from storepay.storage.stores import CommerceStore

ADAPTER_CLASSES: tuple[type[GatewayAdapter], ...] = (
    LiqPayAdapter,
    PayPalCheckoutAdapter,
    StripeElementsAdapter,
    RazorpayCheckoutAdapter,
)


def default_adapters(
    config: Config,
    store: CommerceStore,
    http_client: httpx.AsyncClient | None = None,
) -> list[GatewayAdapter]:
    """Instantiate every built-in adapter around a shared HTTP client."""
    return [cls(config, store, http_client) for cls in ADAPTER_CLASSES]


__all__ = [
    "GatewayAdapter",
    "LiqPayAdapter",
    "PayPalCheckoutAdapter",
    "StripeElementsAdapter",
    "RazorpayCheckoutAdapter",
    "default_adapters",
]
