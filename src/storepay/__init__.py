"""
StorePay - Multi-provider payment core and outbound webhooks for a shop.

Usage:
    >>> from storepay import StorePay, EventName
    >>>
    >>> async with StorePay() as pay:
    ...     form = await pay.get_payment_form_settings("order-1")
    ...     await pay.trigger_webhook(EventName.ORDER_UPDATED, {"id": "order-1"})
"""

from storepay.client import StorePay
from storepay.core.config import Config
from storepay.core.events import EventName
from storepay.core.exceptions import (
    ChargeError,
    ConfigurationError,
    DeliveryError,
    InvalidSignatureError,
    NetworkError,
    OrderNotFoundError,
    StorePayError,
    UnsupportedGatewayError,
    ValidationError,
    VerificationError,
)
from storepay.core.types import (
    Capability,
    DeferredResponse,
    GatewayId,
    GatewaySettings,
    NotificationRequest,
    Order,
    PaymentContext,
    StoreSettings,
    Transaction,
    Webhook,
)
from storepay.gateways import (
    GatewayAdapter,
    LiqPayAdapter,
    PayPalCheckoutAdapter,
    RazorpayCheckoutAdapter,
    StripeElementsAdapter,
)
from storepay.payment.coordinator import PaymentCoordinator
from storepay.webhooks.dispatcher import WebhookDispatcher

__version__ = "0.1.0"
__all__ = [
    # Main Client
    "StorePay",
    "PaymentCoordinator",
    "WebhookDispatcher",
    # Adapters
    "GatewayAdapter",
    "LiqPayAdapter",
    "PayPalCheckoutAdapter",
    "StripeElementsAdapter",
    "RazorpayCheckoutAdapter",
    # Types
    "Capability",
    "DeferredResponse",
    "EventName",
    "GatewayId",
    "GatewaySettings",
    "NotificationRequest",
    "Order",
    "PaymentContext",
    "StoreSettings",
    "Transaction",
    "Webhook",
    # Config
    "Config",
    # Exceptions
    "StorePayError",
    "ConfigurationError",
    "OrderNotFoundError",
    "ValidationError",
    "UnsupportedGatewayError",
    "VerificationError",
    "InvalidSignatureError",
    "NetworkError",
    "ChargeError",
    "DeliveryError",
]
