"""
Exception hierarchy for StorePay.

All package-specific exceptions inherit from StorePayError for easy catching.
"""

from __future__ import annotations

from typing import Any


class StorePayError(Exception):
    """
    Base exception for all StorePay errors.

    Example:
        >>> try:
        ...     await coordinator.get_form_settings(order_id)
        ... except StorePayError as e:
        ...     print(f"Checkout failed: {e}")
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(StorePayError):
    """
    Configuration is missing or invalid.

    Raised when:
    - An order has no payment method or gateway assigned
    - Gateway settings could not be found
    """

    pass


class OrderNotFoundError(StorePayError):
    """The referenced order does not exist in the order store."""

    def __init__(
        self,
        message: str,
        order_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.order_id = order_id


class ValidationError(StorePayError):
    """
    Input validation error.

    Raised when a field the provider requires (amount, currency, keys, ...)
    is absent. Always raised before any network or crypto call.
    """

    pass


class UnsupportedGatewayError(StorePayError):
    """
    No adapter exists for the gateway, or the adapter lacks the capability.
    """

    def __init__(
        self,
        message: str = "Invalid gateway",
        gateway: str | None = None,
        capability: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.gateway = gateway
        self.capability = capability

    def __str__(self) -> str:
        if self.capability:
            return f"{self.message} ({self.gateway}: {self.capability})"
        return f"{self.message} ({self.gateway})"


class VerificationError(StorePayError):
    """
    An inbound payment notification could not be verified.

    Raised only inside the background task that runs after the provider
    has been acknowledged; logged, never returned to the HTTP caller.
    """

    def __init__(
        self,
        message: str,
        gateway: str = "unknown",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.gateway = gateway

    def __str__(self) -> str:
        return f"[{self.gateway}] {self.message}"


class InvalidSignatureError(VerificationError):
    """Raised when a notification signature does not match."""

    pass


class NetworkError(StorePayError):
    """
    Network or API communication error.

    Raised when:
    - HTTP request fails (timeout, connection error)
    - A provider API returns a non-2xx response
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
        self.url = url

    def is_server_error(self) -> bool:
        """Check if this is a server-side error."""
        return self.status_code is not None and 500 <= self.status_code < 600


class ChargeError(NetworkError):
    """The provider rejected or failed a server-side charge."""

    pass


class DeliveryError(NetworkError):
    """
    Webhook delivery to a subscriber failed.

    Confined to the webhook dispatcher: logged per destination, never
    retried and never propagated to the code that raised the event.
    """

    pass
