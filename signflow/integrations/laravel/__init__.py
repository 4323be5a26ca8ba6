"""Laravel backend bridge: SSO login, encrypted payloads, signed-document hand-off."""

from .client import SIGNED_DOCUMENT_STORED_MESSAGE, LaravelClient, get_laravel_client
from .crypto import decrypt_from_laravel, encrypt_for_laravel, generate_laravel_token
from .errors import LaravelApiError, LaravelAuthError, LaravelConfigurationError
from .token_cache import TokenCache, backend_token_cache

__all__ = [
    "SIGNED_DOCUMENT_STORED_MESSAGE",
    "LaravelApiError",
    "LaravelAuthError",
    "LaravelClient",
    "LaravelConfigurationError",
    "TokenCache",
    "backend_token_cache",
    "decrypt_from_laravel",
    "encrypt_for_laravel",
    "generate_laravel_token",
    "get_laravel_client",
]
