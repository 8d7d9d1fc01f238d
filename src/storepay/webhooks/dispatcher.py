"""
Outbound webhook dispatcher.

Signs event payloads and POSTs them to every enabled subscriber of the
event, one subscriber at a time. Delivery failures are logged per
destination and never reach the code that raised the event.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from storepay.core.events import EventName, event_value
from storepay.core.exceptions import DeliveryError
from storepay.core.logging import get_logger
from storepay.core.signing import canonical_json, sign_webhook_payload
from storepay.core.types import Webhook

if TYPE_CHECKING:
    from storepay.core.config import Config
    from storepay.storage.stores import CommerceStore

EVENT_HEADER = "X-Hook-Event"
SIGNATURE_HEADER = "X-Hook-Signature"


class WebhookDispatcher:
    """
    Delivers events to registered webhook subscribers.

    Deliveries within one ``trigger`` call are strictly sequential. There
    are no retries: each matching subscriber receives at most one POST.
    """

    def __init__(
        self,
        config: Config,
        store: CommerceStore,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._logger = get_logger("webhooks")

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._config.webhook_timeout)
            self._owns_http_client = True
        return self._http_client

    async def close(self) -> None:
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def trigger(self, event: EventName | str, payload: Any) -> None:
        """
        Send ``payload`` to every enabled webhook subscribed to ``event``.

        Never raises.
        """
        name = event_value(event)
        try:
            webhooks = await self._store.list_webhooks()
        except Exception as e:
            self._logger.error(f"Could not load webhooks for {name}: {e}")
            return

        for webhook in self.subscribers(webhooks, name):
            await self.deliver(webhook, name, payload)

    @staticmethod
    def subscribers(webhooks: list[Webhook], event: str) -> list[Webhook]:
        return [w for w in webhooks if w.subscribes_to(event)]

    async def deliver(self, webhook: Webhook, event: EventName | str, payload: Any) -> bool:
        """
        POST one signed event to one subscriber.

        Returns:
            True if the subscriber answered with a 2xx status
        """
        name = event_value(event)
        if not webhook.enabled:
            self._logger.debug(f"Webhook {webhook.id} is disabled, skipping {name}")
            return False
        if not webhook.url:
            self._logger.debug(f"Webhook {webhook.id} has no url, skipping {name}")
            return False

        try:
            await self._send(webhook, name, payload)
        except DeliveryError as e:
            self._logger.error(f"Webhook {webhook.id} delivery of {name} failed: {e.message}")
            return False
        except Exception:
            self._logger.exception(f"Unexpected error delivering {name} to webhook {webhook.id}")
            return False

        self._logger.debug(f"Webhook {webhook.id} delivered {name}")
        return True

    async def _send(self, webhook: Webhook, event: str, payload: Any) -> None:
        try:
            body = canonical_json(payload)
        except (TypeError, ValueError) as e:
            raise DeliveryError(f"Payload is not serializable: {e}", url=webhook.url) from e

        headers = {
            "Content-Type": "application/json",
            "Accept-Encoding": "gzip, deflate",
            EVENT_HEADER: event,
            SIGNATURE_HEADER: sign_webhook_payload(webhook.secret, body),
        }

        client = await self._get_http_client()
        try:
            # Redirects are never followed
            response = await client.post(
                webhook.url,
                content=body.encode("utf-8"),
                headers=headers,
                follow_redirects=False,
                timeout=self._config.webhook_timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise DeliveryError(f"Error sending webhook: {e}", url=webhook.url) from e

        if not response.is_success:
            raise DeliveryError(
                f"Webhook failed with status: {response.status_code}",
                status_code=response.status_code,
                url=webhook.url,
            )
