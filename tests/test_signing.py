"""Unit tests for the signature codec."""

import base64
import hashlib
import hmac

import pytest

from storepay.core.exceptions import ValidationError
from storepay.core.signing import (
    canonical_json,
    decode_liqpay_data,
    encode_liqpay_data,
    liqpay_signature,
    sign_webhook_payload,
    verify_liqpay_signature,
    verify_webhook_signature,
)


def reference_liqpay_signature(secret: str, data: str) -> str:
    digest = hashlib.sha1((secret + data + secret).encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


class TestLiqPaySignature:
    """Tests for base64(SHA1(secret + data + secret))."""

    def test_matches_reference(self) -> None:
        data = encode_liqpay_data({"order_id": "o1", "status": "success"})
        assert liqpay_signature("secret", data) == reference_liqpay_signature("secret", data)

    def test_verify_accepts_valid_signature(self) -> None:
        data = encode_liqpay_data({"order_id": "o1", "amount": 10})
        signature = reference_liqpay_signature("secret", data)

        assert verify_liqpay_signature("secret", data, signature) is True

    def test_verify_rejects_tampered_data(self) -> None:
        data = encode_liqpay_data({"order_id": "o1", "amount": 10})
        signature = liqpay_signature("secret", data)
        first = "B" if data[0] == "A" else "A"
        tampered = first + data[1:]

        assert verify_liqpay_signature("secret", tampered, signature) is False

    def test_verify_rejects_wrong_secret(self) -> None:
        data = encode_liqpay_data({"order_id": "o1"})
        signature = liqpay_signature("secret", data)

        assert verify_liqpay_signature("other", data, signature) is False

    @pytest.mark.parametrize("signature", [None, ""])
    def test_verify_rejects_missing_signature(self, signature) -> None:
        data = encode_liqpay_data({"order_id": "o1"})
        assert verify_liqpay_signature("secret", data, signature) is False


class TestLiqPayData:
    """Tests for the base64 JSON data field."""

    def test_data_is_compact_base64_json(self) -> None:
        data = encode_liqpay_data({"version": "3", "amount": 12.5})
        assert base64.b64decode(data) == b'{"version":"3","amount":12.5}'

    def test_decode(self) -> None:
        data = base64.b64encode(b'{"status":"success"}').decode()
        assert decode_liqpay_data(data) == {"status": "success"}

    @pytest.mark.parametrize(
        "data",
        ["not base64!", base64.b64encode(b"not json").decode(), base64.b64encode(b"[1]").decode()],
    )
    def test_decode_rejects_garbage(self, data) -> None:
        with pytest.raises(ValidationError):
            decode_liqpay_data(data)


class TestWebhookSignature:
    """Tests for hex HMAC-SHA256 webhook signatures."""

    def test_signature_matches_hmac_sha256(self) -> None:
        body = canonical_json({"x": 1})
        expected = hmac.new(b"abc", b'{"x":1}', hashlib.sha256).hexdigest()

        assert body == '{"x":1}'
        assert sign_webhook_payload("abc", body) == expected

    @pytest.mark.parametrize("secret", [None, ""])
    def test_unsigned_when_no_secret(self, secret) -> None:
        assert sign_webhook_payload(secret, '{"x":1}') == ""

    def test_verify_round_trip(self) -> None:
        signature = sign_webhook_payload("abc", b'{"x":1}')

        assert verify_webhook_signature("abc", b'{"x":1}', signature) is True
        assert verify_webhook_signature("abc", b'{"x":2}', signature) is False
        assert verify_webhook_signature("abc", b'{"x":1}', "zz-not-hex") is False


class TestCanonicalJson:
    def test_keeps_unicode_and_decimals(self) -> None:
        from decimal import Decimal

        assert canonical_json({"name": "Київ", "total": Decimal("12.50"), "qty": Decimal("2")}) == (
            '{"name":"Київ","total":12.5,"qty":2}'
        )

    def test_rejects_unknown_types(self) -> None:
        with pytest.raises(TypeError):
            canonical_json({"x": object()})
