"""
Document notification e-mails sent through Notify.

``DocumentMailer`` decides who receives which message and honours the
per-document e-mail settings; it never touches the database. Callers get back
one ``MailDelivery`` per attempted message so they can record audit entries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from signflow.core.database.entities import Document, DocumentMeta, Recipient, User
from signflow.core.models.domain import RecipientRole, SendStatus
from signflow.integrations.notify import EmailRecipient, NotifyClient, SendEmailResult

from .render import RenderedEmail, render_email

logger = logging.getLogger(__name__)

DEFAULT_EMAIL_SETTINGS: Dict[str, bool] = {
    "recipientSigningRequest": True,
    "recipientRemoved": True,
    "recipientSigned": True,
    "documentPending": True,
    "documentCompleted": True,
    "documentDeleted": True,
    "documentRejected": True,
    "ownerDocumentCompleted": True,
}


def extract_email_settings(meta: Optional[DocumentMeta]) -> Dict[str, bool]:
    """Per-document e-mail switches, every unset switch defaulting to on."""
    settings = dict(DEFAULT_EMAIL_SETTINGS)
    stored = meta.email_settings if meta is not None else None
    if isinstance(stored, dict):
        for key, value in stored.items():
            if key in settings and isinstance(value, bool):
                settings[key] = value
    return settings


@dataclass(frozen=True)
class MailDelivery:
    email_type: str
    to: EmailRecipient
    result: SendEmailResult
    recipient_id: Optional[int] = None
    recipient_role: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.result.success

    def audit_data(self) -> Dict[str, Any]:
        return {
            "emailType": self.email_type,
            "recipientEmail": self.to.email,
            "recipientName": self.to.name or "",
            "recipientId": self.recipient_id,
            "recipientRole": self.recipient_role,
            "isResending": False,
        }


def _details(document: Document) -> Dict[str, Any]:
    return dict(document.document_details or {})


def _document_name(document: Document) -> str:
    return _details(document).get("documentName") or document.title


class DocumentMailer:
    """Sends document lifecycle e-mails.

    Args:
        notify_client: Transport used for delivery.
        webapp_url: Public base URL of the web app, used for links.
    """

    def __init__(self, notify_client: NotifyClient, webapp_url: str) -> None:
        self.notify = notify_client
        self.webapp_url = webapp_url.rstrip("/")

    def signing_url(self, token: str) -> str:
        return f"{self.webapp_url}/sign/{token}"

    def owner_document_url(self, document: Document, team_url: Optional[str] = None) -> str:
        if team_url:
            return f"{self.webapp_url}/t/{team_url}/documents/{document.id}"
        return f"{self.webapp_url}/documents/{document.id}"

    async def _deliver(
        self,
        email_type: str,
        to: EmailRecipient,
        rendered: RenderedEmail,
        *,
        recipient: Optional[Recipient] = None,
        role: Optional[str] = None,
    ) -> MailDelivery:
        result = await self.notify.send_email(to, rendered.subject, rendered.html)
        if not result.success:
            logger.warning("%s e-mail to %s was not delivered: %s", email_type, to.email, result.message)
        return MailDelivery(
            email_type=email_type,
            to=to,
            result=result,
            recipient_id=recipient.id if recipient is not None else None,
            recipient_role=role or (recipient.role if recipient is not None else None),
        )

    async def send_document_cancelled(
        self,
        document: Document,
        recipients: Iterable[Recipient],
        inviter: User,
        meta: Optional[DocumentMeta] = None,
    ) -> List[MailDelivery]:
        """Tell every recipient that already received the document that it was cancelled."""
        if not extract_email_settings(meta)["documentDeleted"]:
            return []
        deliveries = []
        for recipient in recipients:
            if recipient.send_status != SendStatus.SENT.value:
                continue
            rendered = render_email(
                "document_cancelled",
                inviter_name=inviter.name or inviter.email,
                document_name=document.title,
                company_name=_details(document).get("companyName"),
            )
            to = EmailRecipient(email=recipient.email, name=recipient.name)
            deliveries.append(await self._deliver("DOCUMENT_CANCELLED", to, rendered, recipient=recipient))
        return deliveries

    async def send_document_completed(
        self,
        document: Document,
        recipients: List[Recipient],
        owner: User,
        meta: Optional[DocumentMeta] = None,
        *,
        team_url: Optional[str] = None,
        document_url: Optional[str] = None,
    ) -> List[MailDelivery]:
        """Send the completed notice to the owner and recipients.

        The owner gets a separate copy when owner notices are on and either the
        owner is not among the recipients or recipient notices are off.
        """
        email_settings = extract_email_settings(meta)
        details = _details(document)
        owner_link = self.owner_document_url(document, team_url)
        deliveries = []

        owner_is_recipient = any(r.email == owner.email for r in recipients)
        if email_settings["ownerDocumentCompleted"] and (
            not owner_is_recipient or not email_settings["documentCompleted"]
        ):
            rendered = render_email(
                "document_completed",
                recipient_name=owner.name,
                document_name=_document_name(document),
                resident_name=details.get("residentName"),
                company_name=details.get("companyName"),
                action_url=owner_link,
            )
            to = EmailRecipient(email=owner.email, name=owner.name or "")
            deliveries.append(await self._deliver("DOCUMENT_COMPLETED", to, rendered, role="OWNER"))

        if not email_settings["documentCompleted"]:
            return deliveries

        for recipient in recipients:
            if recipient.email == owner.email:
                link = owner_link
            else:
                link = document_url or f"{self.signing_url(recipient.token)}/complete"
            rendered = render_email(
                "document_completed",
                recipient_name=recipient.name,
                document_name=_document_name(document),
                resident_name=details.get("residentName"),
                company_name=details.get("companyName"),
                action_url=link,
            )
            to = EmailRecipient(email=recipient.email, name=recipient.name)
            deliveries.append(await self._deliver("DOCUMENT_COMPLETED", to, rendered, recipient=recipient))
        return deliveries

    async def send_document_pending(
        self, document: Document, recipient: Recipient, meta: Optional[DocumentMeta] = None
    ) -> Optional[MailDelivery]:
        """Confirm a signature to ``recipient`` while other signers are outstanding."""
        if not extract_email_settings(meta)["documentPending"]:
            return None
        details = _details(document)
        rendered = render_email(
            "document_pending",
            recipient_name=recipient.name,
            document_name=_document_name(document),
            resident_name=details.get("residentName"),
            company_name=details.get("companyName"),
        )
        to = EmailRecipient(email=recipient.email, name=recipient.name)
        return await self._deliver("DOCUMENT_PENDING", to, rendered, recipient=recipient)

    async def send_signing_request(
        self,
        document: Document,
        recipient: Recipient,
        inviter: User,
        meta: Optional[DocumentMeta] = None,
    ) -> Optional[MailDelivery]:
        """Invite ``recipient`` to act on the document. CC recipients are never invited."""
        if recipient.role == RecipientRole.CC.value:
            return None
        if not extract_email_settings(meta)["recipientSigningRequest"]:
            return None
        details = _details(document)
        subject_line = (meta.subject if meta is not None and meta.subject else None) or (
            f'Please sign "{_document_name(document)}"'
        )
        rendered = render_email(
            "document_invite",
            subject_line=subject_line.replace("{signer.name}", recipient.name or "")
            .replace("{signer.email}", recipient.email)
            .replace("{document.name}", document.title),
            inviter_name=inviter.name or inviter.email,
            recipient_name=recipient.name,
            document_name=_document_name(document),
            resident_name=details.get("residentName"),
            company_name=details.get("companyName"),
            facility_administrator=details.get("facilityAdministrator"),
            role=recipient.role,
            action_url=self.signing_url(recipient.token),
            token_expiration=recipient.expired.strftime("%m/%d/%Y") if recipient.expired else None,
        )
        to = EmailRecipient(email=recipient.email, name=recipient.name)
        return await self._deliver(f"SIGNING_REQUEST_{recipient.role}", to, rendered, recipient=recipient)

    async def send_recipient_signed(
        self,
        document: Document,
        recipient: Recipient,
        owner: User,
        meta: Optional[DocumentMeta] = None,
    ) -> Optional[MailDelivery]:
        """Tell the owner that ``recipient`` signed, unless the owner signed themselves."""
        if not extract_email_settings(meta)["recipientSigned"]:
            return None
        if owner.email == recipient.email:
            return None
        rendered = render_email(
            "recipient_signed",
            recipient_name=recipient.name,
            recipient_email=recipient.email,
            document_name=_document_name(document),
            company_name=_details(document).get("companyName"),
        )
        to = EmailRecipient(email=owner.email, name=owner.name or "")
        return await self._deliver("RECIPIENT_SIGNED", to, rendered, role="OWNER")

    async def send_document_rejected(
        self,
        document: Document,
        recipient: Recipient,
        owner: User,
        meta: Optional[DocumentMeta] = None,
        *,
        team_url: Optional[str] = None,
    ) -> Optional[MailDelivery]:
        """Tell the owner that ``recipient`` rejected the document."""
        if not extract_email_settings(meta)["documentRejected"]:
            return None
        rendered = render_email(
            "document_rejected",
            recipient_name=recipient.name or recipient.email,
            document_name=document.title,
            rejection_reason=recipient.rejection_reason,
            company_name=_details(document).get("companyName"),
            action_url=self.owner_document_url(document, team_url),
        )
        to = EmailRecipient(email=owner.email, name=owner.name or "")
        return await self._deliver("DOCUMENT_REJECTED", to, rendered, role="OWNER")

    async def send_rejection_confirmed(
        self,
        document: Document,
        recipient: Recipient,
        owner: User,
        meta: Optional[DocumentMeta] = None,
    ) -> Optional[MailDelivery]:
        """Confirm to ``recipient`` that their rejection was recorded."""
        if not extract_email_settings(meta)["documentRejected"]:
            return None
        details = _details(document)
        rendered = render_email(
            "document_rejection_confirmed",
            recipient_name=recipient.name or recipient.email,
            document_name=document.title,
            owner_name=details.get("facilityAdministrator") or owner.name or owner.email,
            rejection_reason=recipient.rejection_reason,
            company_name=details.get("companyName"),
        )
        to = EmailRecipient(email=recipient.email, name=recipient.name)
        return await self._deliver("DOCUMENT_REJECTION_CONFIRMED", to, rendered, recipient=recipient)


def get_document_mailer() -> DocumentMailer:
    from signflow.integrations.notify import get_notify_client
    from signflow.server.core.config import settings

    return DocumentMailer(get_notify_client(), settings.webapp_url)
