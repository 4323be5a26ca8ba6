"""Notify e-mail delivery transport."""

from .client import EmailRecipient, NotifyClient, SendEmailResult, get_notify_client
from .errors import NotifyConfigurationError

__all__ = [
    "EmailRecipient",
    "NotifyClient",
    "NotifyConfigurationError",
    "SendEmailResult",
    "get_notify_client",
]
