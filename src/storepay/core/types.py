"""
Type definitions for StorePay.

This module contains the enums, data classes and protocols shared by the
gateway adapters, the payment coordinator and the webhook dispatcher.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Protocol, TypeAlias

# Type alias for flexible amount input
AmountType: TypeAlias = Decimal | int | float | str


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_dt(val: str | datetime | None) -> datetime | None:
    if val is None:
        return None
    if isinstance(val, datetime):
        return val
    if isinstance(val, str):
        return datetime.fromisoformat(val.replace("Z", "+00:00"))
    return None


def to_decimal(value: AmountType | None) -> Decimal | None:
    """Convert provider amounts ("12.50", 12.5, 1250) to Decimal, None if unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


class GatewayId(str, Enum):
    """Payment gateways known to the registry."""

    LIQPAY = "liqpay"
    PAYPAL_CHECKOUT = "paypal-checkout"
    STRIPE_ELEMENTS = "stripe-elements"
    RAZORPAY_CHECKOUT = "razorpay-checkout"


class Capability(str, Enum):
    """Operations an adapter may implement."""

    FORM_SETTINGS = "form_settings"
    INBOUND_NOTIFICATION = "inbound_notification"
    SERVER_CHARGE = "server_charge"


@dataclass
class Order:
    """Order fields the payment core reads. Owned by the order store."""

    id: str
    number: int | str | None = None
    grand_total: Decimal | None = None
    currency: str | None = None
    payment_method_id: str | None = None
    payment_method_gateway: str | None = None
    paid: bool = False
    date_paid: datetime | None = None
    payment_token: str | None = None
    email: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Order:
        return cls(
            id=str(data["id"]),
            number=data.get("number"),
            grand_total=to_decimal(data.get("grand_total")),
            currency=data.get("currency"),
            payment_method_id=data.get("payment_method_id"),
            payment_method_gateway=data.get("payment_method_gateway"),
            paid=bool(data.get("paid", False)),
            date_paid=parse_dt(data.get("date_paid")),
            payment_token=data.get("payment_token"),
            email=data.get("email"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "number": self.number,
            "grand_total": str(self.grand_total) if self.grand_total is not None else None,
            "currency": self.currency,
            "payment_method_id": self.payment_method_id,
            "payment_method_gateway": self.payment_method_gateway,
            "paid": self.paid,
            "date_paid": self.date_paid.isoformat() if self.date_paid else None,
            "payment_token": self.payment_token,
            "email": self.email,
        }


@dataclass
class Transaction:
    """
    A provider-reported payment attempt for an order.

    Append-only: the core never updates or reconciles existing records.
    """

    transaction_id: str | None
    amount: Decimal | None
    currency: str | None
    status: str | None
    details: str
    success: bool
    order_id: str | None = None
    created_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transaction:
        return cls(
            transaction_id=data.get("transaction_id"),
            amount=to_decimal(data.get("amount")),
            currency=data.get("currency"),
            status=data.get("status"),
            details=data.get("details") or "",
            success=bool(data.get("success", False)),
            order_id=data.get("order_id"),
            created_at=parse_dt(data.get("created_at")) or utcnow(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "transaction_id": self.transaction_id,
            "order_id": self.order_id,
            "amount": str(self.amount) if self.amount is not None else None,
            "currency": self.currency,
            "status": self.status,
            "details": self.details,
            "success": self.success,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class GatewaySettings:
    """Opaque per-gateway credential bag. Fetched per dispatch, never cached."""

    gateway: str
    options: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.options[key]

    def __contains__(self, key: object) -> bool:
        return key in self.options


@dataclass
class StoreSettings:
    """Global shop settings used by the payment core."""

    currency_code: str = "USD"
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> StoreSettings:
        data = dict(data or {})
        currency_code = data.pop("currency_code", None) or "USD"
        return cls(currency_code=currency_code, extra=data)

    def to_dict(self) -> dict[str, Any]:
        return {"currency_code": self.currency_code, **self.extra}


@dataclass
class Webhook:
    """A third-party subscriber registered for a set of events."""

    id: str
    url: str
    secret: str | None = None
    enabled: bool = True
    events: frozenset[str] = frozenset()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Webhook:
        return cls(
            id=str(data.get("id", "")),
            url=data.get("url") or "",
            secret=str(data["secret"]) if data.get("secret") else None,
            enabled=bool(data.get("enabled", False)),
            events=frozenset(data.get("events") or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "secret": self.secret,
            "enabled": self.enabled,
            "events": sorted(self.events),
        }

    def subscribes_to(self, event: str) -> bool:
        return self.enabled and event in self.events


@dataclass
class PaymentContext:
    """Everything an adapter needs to build checkout form settings."""

    gateway: str
    gateway_settings: GatewaySettings
    order: Order
    amount: Decimal | None
    currency: str | None


@dataclass
class NotificationRequest:
    """Provider-native inbound notification body as parsed by the web layer."""

    body: Mapping[str, Any]
    headers: Mapping[str, str] = field(default_factory=dict)


class NotificationResponder(Protocol):
    """The HTTP response side of an inbound notification."""

    async def send(self, status_code: int) -> None:
        """Write the status and close the response."""
        ...


class DeferredResponse:
    """
    Responder whose status a web framework can await.

    The notification handler calls ``send`` once; the framework awaits
    ``wait()`` and returns the status to the provider while verification
    continues in the background.
    """

    def __init__(self) -> None:
        self._sent: asyncio.Future[int] | None = None

    def _future(self) -> asyncio.Future[int]:
        if self._sent is None:
            self._sent = asyncio.get_running_loop().create_future()
        return self._sent

    @property
    def is_sent(self) -> bool:
        return self._sent is not None and self._sent.done()

    @property
    def status_code(self) -> int | None:
        return self._sent.result() if self.is_sent else None

    async def send(self, status_code: int) -> None:
        future = self._future()
        if future.done():
            raise RuntimeError("Response already sent")
        future.set_result(status_code)

    async def wait(self) -> int:
        return await self._future()
