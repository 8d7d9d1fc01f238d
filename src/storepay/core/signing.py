"""
Signature codec for provider and webhook payloads.

Pure functions, no I/O:

- LiqPay: ``base64(SHA1(private_key + data + private_key))`` over the
  base64-encoded JSON ``data`` field.
- Outbound webhooks: hex HMAC-SHA256 over the serialized body keyed by the
  subscriber secret, or an empty string when no secret is configured.
"""

from __future__ import annotations

import base64
import binascii
import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import constant_time, hashes, hmac

from storepay.core.exceptions import ValidationError


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def canonical_json(payload: Any) -> str:
    """Compact JSON (no whitespace, unicode kept) used for signing and sending."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=_json_default)


# ---------------------------------------------------------------------------
# LiqPay
# ---------------------------------------------------------------------------


def sha1_base64(value: str) -> str:
    """Base64 of the SHA-1 digest of ``value`` (UTF-8)."""
    digest = hashes.Hash(hashes.SHA1())
    digest.update(value.encode("utf-8"))
    return base64.b64encode(digest.finalize()).decode("ascii")


def liqpay_signature(private_key: str, data: str) -> str:
    """Sign the base64 ``data`` field of a LiqPay request or callback."""
    return sha1_base64(private_key + data + private_key)


def verify_liqpay_signature(private_key: str, data: str, signature: str | None) -> bool:
    """True iff ``signature`` equals the recomputed LiqPay signature."""
    if not signature:
        return False
    expected = liqpay_signature(private_key, data)
    return constant_time.bytes_eq(expected.encode("ascii"), signature.encode("utf-8"))


def encode_liqpay_data(params: dict[str, Any]) -> str:
    """Serialize checkout params into the base64 ``data`` field."""
    return base64.b64encode(canonical_json(params).encode("utf-8")).decode("ascii")


def decode_liqpay_data(data: str) -> dict[str, Any]:
    """
    Decode a base64 ``data`` field back into its JSON object.

    Raises:
        ValidationError: If the field is not base64 JSON
    """
    try:
        decoded = base64.b64decode(data, validate=True).decode("utf-8")
        payload = json.loads(decoded)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError(f"Invalid LiqPay data field: {e}") from e
    if not isinstance(payload, dict):
        raise ValidationError("Invalid LiqPay data field: expected a JSON object")
    return payload


# ---------------------------------------------------------------------------
# Outbound webhooks
# ---------------------------------------------------------------------------


def _hmac_sha256(secret: str, body: str | bytes) -> hmac.HMAC:
    h = hmac.HMAC(secret.encode("utf-8"), hashes.SHA256())
    h.update(body.encode("utf-8") if isinstance(body, str) else body)
    return h


def sign_webhook_payload(secret: str | None, body: str | bytes) -> str:
    """Hex HMAC-SHA256 of ``body`` keyed by ``secret``; empty string when unsigned."""
    if not secret:
        return ""
    return _hmac_sha256(secret, body).finalize().hex()


def verify_webhook_signature(secret: str, body: str | bytes, signature: str) -> bool:
    """
    Check a webhook signature the way a subscriber would.

    Args:
        secret: Shared webhook secret
        body: Raw request body as received
        signature: Value of the signature header

    Returns:
        True if valid
    """
    try:
        expected = bytes.fromhex(signature)
    except ValueError:
        return False
    try:
        _hmac_sha256(secret, body).verify(expected)
    except InvalidSignature:
        return False
    return True
