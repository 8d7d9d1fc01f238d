"""
Configuration management for StorePay.

Handles loading configuration from environment variables and validation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any

_TRUE_VALUES = ("1", "true", "yes", "on")


def _get_env_var(name: str, default: str | None = None, required: bool = False) -> str | None:
    """Get environment variable with optional default."""
    value = os.environ.get(name, default)
    if required and not value:
        raise ValueError(f"Required environment variable {name} is not set")
    return value


def _get_env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class Config:
    """Payment core configuration."""

    log_level: str = "INFO"
    env: str = "development"
    storage_backend: str = "memory"

    # Timeouts (seconds). Bounded, never retried.
    http_timeout: float = 30.0
    webhook_timeout: float = 10.0

    # PayPal IPN verification endpoint
    paypal_live_host: str = "www.paypal.com"
    paypal_sandbox_host: str = "www.sandbox.paypal.com"
    paypal_verify_path: str = "/cgi-bin/webscr"
    paypal_allow_sandbox: bool = False

    # Stripe charges API
    stripe_api_base: str = "https://api.stripe.com"

    def __post_init__(self) -> None:
        if self.http_timeout <= 0:
            raise ValueError("http_timeout must be positive")
        if self.webhook_timeout <= 0:
            raise ValueError("webhook_timeout must be positive")
        if not self.paypal_verify_path.startswith("/"):
            raise ValueError("paypal_verify_path must start with '/'")

    @classmethod
    def from_env(cls, **overrides: Any) -> Config:
        """Load configuration from environment variables."""
        log_level = overrides.get("log_level") or _get_env_var(
            "STOREPAY_LOG_LEVEL", default="INFO"
        )
        env = overrides.get("env") or _get_env_var("STOREPAY_ENV", default="development")
        storage_backend = overrides.get("storage_backend") or _get_env_var(
            "STOREPAY_STORAGE_BACKEND", default="memory"
        )

        http_timeout = overrides.get("http_timeout") or float(
            _get_env_var("STOREPAY_HTTP_TIMEOUT", default=str(cls.http_timeout))  # type: ignore
        )
        webhook_timeout = overrides.get("webhook_timeout") or float(
            _get_env_var("STOREPAY_WEBHOOK_TIMEOUT", default=str(cls.webhook_timeout))  # type: ignore
        )

        allow_sandbox = overrides.get("paypal_allow_sandbox")
        if allow_sandbox is None:
            allow_sandbox = _get_env_bool("STOREPAY_PAYPAL_ALLOW_SANDBOX")

        return cls(
            log_level=log_level,  # type: ignore
            env=env,  # type: ignore
            storage_backend=storage_backend,  # type: ignore
            http_timeout=http_timeout,
            webhook_timeout=webhook_timeout,
            paypal_live_host=overrides.get("paypal_live_host", cls.paypal_live_host),
            paypal_sandbox_host=overrides.get("paypal_sandbox_host", cls.paypal_sandbox_host),
            paypal_verify_path=overrides.get("paypal_verify_path", cls.paypal_verify_path),
            paypal_allow_sandbox=allow_sandbox,
            stripe_api_base=overrides.get(
                "stripe_api_base",
                _get_env_var("STOREPAY_STRIPE_API_BASE", default=cls.stripe_api_base),
            ),
        )

    def with_updates(self, **updates: Any) -> Config:
        """Create a new Config with updated values."""
        current = {f.name: getattr(self, f.name) for f in fields(self)}
        current.update(updates)
        return Config(**current)

    def is_production(self) -> bool:
        return self.env.lower() == "production"
