"""
Hashing and token helpers.

- User passwords are hashed with bcrypt through passlib.
- API tokens are never stored in clear; only their SHA-512 hex digest is persisted
  and looked up.
- Recipient signing tokens and template direct-link tokens are random URL-safe
  strings.
"""

import hashlib
import secrets
from typing import Union

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


def hash_string(value: Union[str, bytes]) -> str:
    """SHA-512 hex digest, used to store and look up API tokens."""
    if isinstance(value, str):
        value = value.encode()
    return hashlib.sha512(value).hexdigest()


def generate_token(length: int = 32) -> str:
    """Random URL-safe token for recipients and direct links."""
    return secrets.token_urlsafe(length)[:length]


def generate_api_token() -> str:
    return f"api_{secrets.token_hex(16)}"
