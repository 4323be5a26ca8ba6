"""
Built-in HTML e-mail templates for document notifications.

Each template is a set of ``str.format`` strings. Placeholders receive
HTML-escaped values, except the ``*_html`` fragments that ``render_email``
assembles itself (buttons, optional paragraphs).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from signflow.core.models.domain import RecipientRole

BRAND_NAME = "Caring Data"


@dataclass(frozen=True)
class EmailTemplate:
    name: str
    subject: str
    preview: str
    body: str
    text: str


LAYOUT = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>{subject}</title></head>
<body style="margin:0 auto;background:#ffffff;font-family:Helvetica,Arial,sans-serif;">
<span style="display:none;">{preview}</span>
<div style="max-width:576px;margin:32px auto 8px;padding:16px;border:1px solid #e2e8f0;border-radius:8px;">
{body}
</div>
<hr style="max-width:576px;margin:48px auto 0;">
<div style="max-width:576px;margin:0 auto;padding:16px 24px;text-align:center;font-size:12px;color:#71717a;">
{footer}
</div>
</body>
</html>"""

FOOTER = (
    '<p><span style="font-weight:500;">' + BRAND_NAME + "</span> is a secure platform used by "
    '<span style="font-weight:500;">{company_name}</span> to manage communication and documentation. '
    "We prioritize your privacy and security.</p>"
    "<p>Visit www.caringdata.com to learn more.</p>"
)

BUTTON = (
    '<p style="margin-top:24px;text-align:center;">'
    '<a href="{href}" style="display:inline-block;padding:12px 24px;border-radius:8px;'
    'background:#0f766e;color:#ffffff;font-size:14px;text-decoration:none;">{label}</a></p>'
)

# role -> (button label, hint shown above the button)
INVITE_ACTIONS: Dict[RecipientRole, tuple[str, str]] = {
    RecipientRole.SIGNER: ("Accept Invite and Sign", ""),
    RecipientRole.VIEWER: ("View Document", "Continue by viewing the document."),
    RecipientRole.APPROVER: ("Approve Document", "Continue by approving the document."),
    RecipientRole.ASSISTANT: ("Assist Document", "Continue by assisting with the document."),
    RecipientRole.CC: ("", ""),
}

DOCUMENT_CANCELLED = EmailTemplate(
    name="document_cancelled",
    subject="Document Cancelled",
    preview="{inviter_name} has cancelled the document {document_name}, you don't need to sign it anymore.",
    body=(
        '<p style="text-align:center;font-size:18px;font-weight:600;">'
        "{inviter_name} has cancelled the document<br>&quot;{document_name}&quot;</p>"
        '<p style="text-align:center;color:#94a3b8;">All signatures have been voided.</p>'
        '<p style="text-align:center;color:#94a3b8;">You don\'t need to sign it anymore.</p>'
    ),
    text=(
        '{inviter_name} has cancelled the document "{document_name}".\n'
        "All signatures have been voided.\n"
        "You don't need to sign it anymore."
    ),
)

DOCUMENT_COMPLETED = EmailTemplate(
    name="document_completed",
    subject="Document Completed - {document_name}",
    preview="Completed Document",
    body=(
        "<p>Dear {recipient_name},</p>"
        "<p>We are pleased to inform you that all required signatures have been completed. "
        "The following document is now ready for download:</p>"
        "<p>Regarding: {resident_name}</p>"
        "<p>Document: {document_name}</p>"
        "<p>You can download the final copy by clicking the button below</p>"
        "{action_html}"
    ),
    text=(
        "Dear {recipient_name},\n"
        "We are pleased to inform you that all required signatures have been completed. "
        "The following document is now ready for download:\n"
        "Regarding: {resident_name}\n"
        "Document: {document_name}\n"
        "Download: {action_url}"
    ),
)

DOCUMENT_PENDING = EmailTemplate(
    name="document_pending",
    subject="Waiting for others to complete signing.",
    preview="Pending Document",
    body=(
        "<p>Dear {recipient_name},</p>"
        '<p style="text-align:center;font-weight:600;">“{document_name}” has been signed</p>'
        "<p>Document: {document_name}</p>"
        "<p>Regarding: {resident_name}</p>"
        "<p>Status: We're still waiting for other signers to sign this document.<br>"
        "We'll notify you as soon as it's ready.</p>"
    ),
    text=(
        "Dear {recipient_name},\n"
        "“{document_name}” has been signed\n"
        "Document: {document_name}\n"
        "Regarding: {resident_name}\n"
        "Status: We're still waiting for other signers to sign this document. "
        "We'll notify you as soon as it's ready."
    ),
)

DOCUMENT_INVITE = EmailTemplate(
    name="document_invite",
    subject="{subject_line}",
    preview="{inviter_name} has invited you to sign {document_name}",
    body=(
        "<p>Dear {recipient_name},</p>"
        "<p><strong>{facility_administrator}</strong> from <strong>{company_name}</strong> "
        "has requested your electronic signature on the following document:</p>"
        "<p>{document_name}</p>"
        "<p>In regards to: {resident_name}</p>"
        '<p style="text-align:center;color:#94a3b8;">{action_hint}</p>'
        "{action_html}"
        '<p style="text-align:center;font-size:12px;color:#dc2626;">This link is valid until {token_expiration}</p>'
    ),
    text=(
        "Dear {recipient_name},\n"
        "{facility_administrator} from {company_name} has requested your electronic signature "
        "on the following document:\n"
        "{document_name}\n"
        "In regards to: {resident_name}\n"
        "{action_label}: {action_url}\n"
        "This link is valid until {token_expiration}"
    ),
)

RECIPIENT_SIGNED = EmailTemplate(
    name="recipient_signed",
    subject='{recipient_reference} has signed "{document_name}"',
    preview='{recipient_reference} has signed "{document_name}"',
    body=(
        '<p style="text-align:center;font-size:18px;font-weight:600;">'
        "{recipient_reference} has signed &quot;{document_name}&quot;</p>"
        "<p>{recipient_reference} has completed signing the document.</p>"
    ),
    text='{recipient_reference} has signed "{document_name}"\n{recipient_reference} has completed signing the document.',
)

DOCUMENT_REJECTED = EmailTemplate(
    name="document_rejected",
    subject='Document "{document_name}" - Rejected by {recipient_name}',
    preview='{recipient_name} has rejected the document "{document_name}".',
    body=(
        "<p>{recipient_name} has rejected the document &quot;{document_name}&quot;.</p>"
        "{reason_html}"
        "<p>You can view the document and its status by clicking the button below.</p>"
        "{action_html}"
    ),
    text=(
        '{recipient_name} has rejected the document "{document_name}".\n'
        "{reason_text}"
        "View the document: {action_url}"
    ),
)

DOCUMENT_REJECTION_CONFIRMED = EmailTemplate(
    name="document_rejection_confirmed",
    subject='Document "{document_name}" - Rejection Confirmed',
    preview='You have rejected the document "{document_name}".',
    body=(
        "<p>Dear {recipient_name},</p>"
        "<p>This email confirms that you have rejected the document "
        "<strong>&quot;{document_name}&quot;</strong> sent by {owner_name}.</p>"
        "{reason_html}"
        "<p>The document owner has been notified of this rejection. No further action is required "
        "from you at this time.</p>"
    ),
    text=(
        "Dear {recipient_name},\n"
        'This email confirms that you have rejected the document "{document_name}" sent by {owner_name}.\n'
        "{reason_text}"
        "The document owner has been notified of this rejection. No further action is required from you at this time."
    ),
)

TEMPLATES: Dict[str, EmailTemplate] = {
    t.name: t
    for t in (
        DOCUMENT_CANCELLED,
        DOCUMENT_COMPLETED,
        DOCUMENT_PENDING,
        DOCUMENT_INVITE,
        RECIPIENT_SIGNED,
        DOCUMENT_REJECTED,
        DOCUMENT_REJECTION_CONFIRMED,
    )
}
