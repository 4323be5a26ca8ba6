"""
AES payload encryption shared with the Laravel backend.

Both ends use the raw UTF-8 bytes of the shared key as the AES-CBC key and its
first 16 bytes as the IV, with PKCS#7 padding and Base64 output. The ciphertext
is byte-for-byte what CryptoJS produces for ``AES.encrypt(JSON.stringify(data),
Utf8.parse(key), {iv: Utf8.parse(key)})``.
"""

from __future__ import annotations

import json
from base64 import b64decode, b64encode
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import LaravelConfigurationError

_VALID_KEY_SIZES = (16, 24, 32)


def _key_and_iv(encryption_key: Optional[str]) -> tuple[bytes, bytes]:
    if not encryption_key:
        raise LaravelConfigurationError("LARAVEL_ENCRYPTION_KEY is not defined")
    key = encryption_key.encode("utf-8")
    if len(key) not in _VALID_KEY_SIZES:
        raise LaravelConfigurationError(
            f"LARAVEL_ENCRYPTION_KEY must be 16, 24 or 32 bytes long, got {len(key)}"
        )
    return key, key[:16]


def encrypt_for_laravel(data: Dict[str, Any], encryption_key: Optional[str]) -> str:
    """Encrypt ``data`` as compact JSON.

    Args:
        data: JSON-serializable payload
        encryption_key: Shared key (also the IV source)

    Returns:
        Base64 ciphertext
    """
    key, iv = _key_and_iv(encryption_key)
    plaintext = json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return b64encode(ciphertext).decode("ascii")


def decrypt_from_laravel(ciphertext: str, encryption_key: Optional[str]) -> Dict[str, Any]:
    """Inverse of :func:`encrypt_for_laravel`."""
    key, iv = _key_and_iv(encryption_key)

    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(b64decode(ciphertext)) + decryptor.finalize()

    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    plaintext = unpadder.update(padded) + unpadder.finalize()
    return json.loads(plaintext.decode("utf-8"))


def _iso_timestamp(now: datetime) -> str:
    # JavaScript Date.toISOString(): millisecond precision, UTC, "Z" suffix
    now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def generate_laravel_token(encryption_key: Optional[str], now: Optional[datetime] = None) -> str:
    """Short-lived ``X-TOKEN`` header value: the encrypted key plus a timestamp."""
    now = now or datetime.now(timezone.utc)
    return encrypt_for_laravel({"key": encryption_key, "timestamp": _iso_timestamp(now)}, encryption_key)
