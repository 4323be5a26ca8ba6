"""Unit tests for hashing and token helpers."""

import hashlib

from signflow.core.security import (
    generate_api_token,
    generate_token,
    hash_password,
    hash_string,
    verify_password,
)


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert hashed.startswith("$2")
        assert verify_password("s3cret-pass", hashed)
        assert not verify_password("wrong", hashed)


class TestTokens:
    def test_hash_string_is_sha512_hex(self):
        assert hash_string("abc") == hashlib.sha512(b"abc").hexdigest()
        assert hash_string(b"abc") == hash_string("abc")
        assert len(hash_string("abc")) == 128

    def test_generate_token_length_and_uniqueness(self):
        tokens = {generate_token() for _ in range(50)}
        assert len(tokens) == 50
        assert all(len(t) == 32 for t in tokens)
        assert len(generate_token(12)) == 12

    def test_generate_api_token_prefix(self):
        token = generate_api_token()
        assert token.startswith("api_")
        assert len(token) == 36
