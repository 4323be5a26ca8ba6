"""Unit tests for the AES payload encryption shared with Laravel."""

from base64 import b64decode
from datetime import datetime, timezone

import pytest

from signflow.integrations.laravel import (
    LaravelConfigurationError,
    decrypt_from_laravel,
    encrypt_for_laravel,
    generate_laravel_token,
)

KEY = "0123456789abcdef0123456789abcdef"


class TestEncryption:
    def test_round_trip(self):
        payload = {"username": "svc", "password": "pässword"}
        assert decrypt_from_laravel(encrypt_for_laravel(payload, KEY), KEY) == payload

    def test_is_deterministic_for_fixed_key_and_iv(self):
        assert encrypt_for_laravel({"a": 1}, KEY) == encrypt_for_laravel({"a": 1}, KEY)

    def test_ciphertext_is_padded_to_block_size(self):
        raw = b64decode(encrypt_for_laravel({"a": 1}, KEY))
        assert len(raw) % 16 == 0

    @pytest.mark.parametrize("key", [None, "", "short"])
    def test_rejects_unusable_keys(self, key):
        with pytest.raises(LaravelConfigurationError):
            encrypt_for_laravel({"a": 1}, key)


class TestLaravelToken:
    def test_token_wraps_key_and_js_timestamp(self):
        now = datetime(2026, 5, 4, 3, 2, 1, 123456, tzinfo=timezone.utc)
        token = generate_laravel_token(KEY, now=now)
        assert decrypt_from_laravel(token, KEY) == {"key": KEY, "timestamp": "2026-05-04T03:02:01.123Z"}
