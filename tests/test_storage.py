"""Unit tests for storage backends and the commerce store."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from conftest import make_order
from storepay.core.types import GatewaySettings, StoreSettings, Transaction, Webhook
from storepay.storage import get_storage, list_storage_backends
from storepay.storage.memory import InMemoryStorage


class TestInMemoryStorage:
    @pytest.mark.asyncio
    async def test_crud(self, storage) -> None:
        await storage.save("things", "a", {"n": 1})

        assert await storage.get("things", "a") == {"n": 1}
        assert await storage.update("things", "a", {"m": 2}) is True
        assert await storage.get("things", "a") == {"n": 1, "m": 2}
        assert await storage.delete("things", "a") is True
        assert await storage.get("things", "a") is None
        assert await storage.delete("things", "a") is False

    @pytest.mark.asyncio
    async def test_update_missing(self, storage) -> None:
        assert await storage.update("things", "nope", {"m": 2}) is False

    @pytest.mark.asyncio
    async def test_records_are_copied(self, storage) -> None:
        data = {"tags": ["a"]}
        await storage.save("things", "a", data)
        data["tags"].append("b")

        fetched = await storage.get("things", "a")
        fetched["tags"].append("c")

        assert await storage.get("things", "a") == {"tags": ["a"]}

    @pytest.mark.asyncio
    async def test_query_filters_and_paginates(self, storage) -> None:
        for i in range(5):
            await storage.save("things", f"k{i}", {"even": i % 2 == 0, "i": i})

        evens = await storage.query("things", {"even": True})
        assert [r["i"] for r in evens] == [0, 2, 4]
        assert evens[0]["_key"] == "k0"

        page = await storage.query("things", limit=2, offset=1)
        assert [r["i"] for r in page] == [1, 2]

        assert await storage.count("things") == 5
        assert await storage.count("things", {"even": False}) == 2
        assert await storage.clear("things") == 5
        assert await storage.count("things") == 0

    @pytest.mark.asyncio
    async def test_health_check(self, storage) -> None:
        assert await storage.health_check() is True


class TestGetStorage:
    def test_memory_registered(self) -> None:
        assert "memory" in list_storage_backends()
        assert isinstance(get_storage("memory"), InMemoryStorage)

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="Unknown storage backend"):
            get_storage("cassandra")


class TestCommerceStore:
    @pytest.mark.asyncio
    async def test_order_round_trip(self, store) -> None:
        await store.save_order(make_order())

        order = await store.get_order("o1")

        assert order.grand_total == Decimal("12.50")
        assert order.payment_method_gateway == "liqpay"
        assert order.paid is False
        assert await store.get_order("missing") is None

    @pytest.mark.asyncio
    async def test_partial_update(self, store) -> None:
        await store.save_order(make_order())
        paid_at = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        assert await store.update_order("o1", {"paid": True, "date_paid": paid_at}) is True

        order = await store.get_order("o1")
        assert order.paid is True
        assert order.date_paid == paid_at
        assert order.email == "buyer@example.com"

    @pytest.mark.asyncio
    async def test_update_missing_order(self, store) -> None:
        assert await store.update_order("missing", {"paid": True}) is False

    @pytest.mark.asyncio
    async def test_transactions_are_appended(self, store) -> None:
        tx = Transaction(
            transaction_id="t1",
            amount=Decimal("12.5"),
            currency="UAH",
            status="success",
            details="card",
            success=True,
        )

        first = await store.add_transaction("o1", tx)
        second = await store.add_transaction("o1", tx)
        await store.add_transaction("o2", tx)

        assert first != second
        transactions = await store.list_transactions("o1")
        assert len(transactions) == 2
        assert all(t.order_id == "o1" for t in transactions)
        assert transactions[0].amount == Decimal("12.5")

    @pytest.mark.asyncio
    async def test_settings(self, store) -> None:
        assert (await store.get_settings()).currency_code == "USD"

        await store.save_settings(StoreSettings(currency_code="UAH"))

        assert (await store.get_settings()).currency_code == "UAH"

    @pytest.mark.asyncio
    async def test_gateway_settings(self, store) -> None:
        missing = await store.get_gateway_settings("liqpay")
        assert missing.gateway == "liqpay"
        assert missing.options == {}

        await store.save_gateway_settings(GatewaySettings("liqpay", {"public_key": "pk"}))

        settings = await store.get_gateway_settings("liqpay")
        assert settings["public_key"] == "pk"
        assert "private_key" not in settings

    @pytest.mark.asyncio
    async def test_webhooks(self, store) -> None:
        await store.save_webhook(Webhook(id="w1", url="https://a.example", events=frozenset({"order.created"})))

        webhooks = await store.list_webhooks()

        assert len(webhooks) == 1
        assert webhooks[0].subscribes_to("order.created") is True
        assert webhooks[0].subscribes_to("order.updated") is False
