"""Document notification e-mails: templates, rendering and delivery."""

from .mailer import (
    DEFAULT_EMAIL_SETTINGS,
    DocumentMailer,
    MailDelivery,
    extract_email_settings,
    get_document_mailer,
)
from .render import RenderedEmail, render_email
from .templates import TEMPLATES, EmailTemplate

__all__ = [
    "DEFAULT_EMAIL_SETTINGS",
    "DocumentMailer",
    "EmailTemplate",
    "MailDelivery",
    "RenderedEmail",
    "TEMPLATES",
    "extract_email_settings",
    "get_document_mailer",
    "render_email",
]
