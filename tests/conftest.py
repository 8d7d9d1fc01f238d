from collections.abc import Callable
from decimal import Decimal

import httpx
import pytest

from storepay.core.config import Config
from storepay.core.signing import encode_liqpay_data, liqpay_signature
from storepay.core.types import (
    GatewayId,
    GatewaySettings,
    NotificationRequest,
    Order,
    StoreSettings,
)
from storepay.gateways import default_adapters
from storepay.payment.coordinator import PaymentCoordinator
from storepay.storage.memory import InMemoryStorage
from storepay.storage.stores import CommerceStore

LIQPAY_PRIVATE_KEY = "liqpay-private"
STRIPE_SECRET_KEY = "sk_test_123"


class RecordingTransport:
    """Records every outbound request and answers with ``handler``."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.handler = handler
        self.log: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.log.append(f"request:{request.url}")
        if self.handler is None:
            return httpx.Response(200)
        return self.handler(request)


class RecordingResponse:
    """NotificationResponder that remembers what was sent."""

    def __init__(self, log: list[str] | None = None) -> None:
        self.status_codes: list[int] = []
        self.log = log if log is not None else []

    async def send(self, status_code: int) -> None:
        self.status_codes.append(status_code)
        self.log.append(f"ack:{status_code}")


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def store(storage: InMemoryStorage) -> CommerceStore:
    return CommerceStore(storage)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def http_client(transport: RecordingTransport) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(transport))


@pytest.fixture
def coordinator(config: Config, store: CommerceStore, http_client: httpx.AsyncClient) -> PaymentCoordinator:
    return PaymentCoordinator(config, store, default_adapters(config, store, http_client))


@pytest.fixture
def responder(transport: RecordingTransport) -> RecordingResponse:
    # Shares the transport log so tests can check ack/verify ordering
    return RecordingResponse(transport.log)


def make_order(**overrides) -> Order:
    fields = {
        "id": "o1",
        "number": 1001,
        "grand_total": Decimal("12.50"),
        "currency": "USD",
        "payment_method_id": "pm1",
        "payment_method_gateway": GatewayId.LIQPAY.value,
        "paid": False,
        "payment_token": "tok_visa",
        "email": "buyer@example.com",
    }
    fields.update(overrides)
    return Order(**fields)


async def seed_shop(store: CommerceStore, order: Order | None = None) -> Order:
    order = order or make_order()
    await store.save_order(order)
    await store.save_settings(StoreSettings(currency_code="UAH"))
    await store.save_gateway_settings(
        GatewaySettings(
            gateway=GatewayId.LIQPAY.value,
            options={
                "public_key": "liqpay-public",
                "private_key": LIQPAY_PRIVATE_KEY,
                "language": "uk",
                "server_url": "https://shop.example/api/v1/notifications/liqpay",
            },
        )
    )
    await store.save_gateway_settings(
        GatewaySettings(
            gateway=GatewayId.STRIPE_ELEMENTS.value,
            options={"public_key": "pk_test_123", "secret_key": STRIPE_SECRET_KEY},
        )
    )
    await store.save_gateway_settings(
        GatewaySettings(
            gateway=GatewayId.PAYPAL_CHECKOUT.value,
            options={"env": "production", "client": {"production": "AbC"}},
        )
    )
    return order


def liqpay_notification(private_key: str = LIQPAY_PRIVATE_KEY, **payload) -> NotificationRequest:
    fields = {
        "order_id": "o1",
        "status": "success",
        "transaction_id": 123456,
        "amount": 12.5,
        "currency": "UAH",
        "paytype": "card",
        "sender_card_mask2": "4731****1234",
    }
    fields.update(payload)
    data = encode_liqpay_data(fields)
    return NotificationRequest(body={"data": data, "signature": liqpay_signature(private_key, data)})
