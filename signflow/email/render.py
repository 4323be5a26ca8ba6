from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Any, Dict

from signflow.core.models.domain import RecipientRole

from .templates import BUTTON, FOOTER, INVITE_ACTIONS, LAYOUT, TEMPLATES


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


class _Context(dict):
    """Placeholders without a value render as empty strings."""

    def __missing__(self, key: str) -> str:
        return ""


def _plain(context: Dict[str, Any]) -> _Context:
    return _Context({k: "" if v is None else str(v) for k, v in context.items()})


def _derive(name: str, values: _Context) -> None:
    values.setdefault("recipient_reference", values.get("recipient_name") or values.get("recipient_email", ""))
    if name == "document_invite":
        role = values.get("role") or RecipientRole.SIGNER.value
        label, hint = INVITE_ACTIONS.get(RecipientRole(role), ("", ""))
        values.setdefault("action_label", label)
        values.setdefault("action_hint", hint)
        values.setdefault("subject_line", f'Please sign "{values.get("document_name", "")}"')
        if not values.get("token_expiration"):
            values["token_expiration"] = "N/A"
    elif name == "document_completed":
        values.setdefault("action_label", "Download")
    elif name == "document_rejected":
        values.setdefault("action_label", "View Document")


def render_email(name: str, **context: Any) -> RenderedEmail:
    """Render the built-in template ``name`` into subject, HTML and plain text.

    Args:
        name: Key in :data:`signflow.email.templates.TEMPLATES`.
        **context: Placeholder values. ``None`` renders as an empty string.

    Raises:
        ValueError: If ``name`` is not a known template.
    """
    template = TEMPLATES.get(name)
    if template is None:
        raise ValueError(f"Unknown email template: {name}")

    raw = _plain(context)
    _derive(name, raw)
    escaped = _Context({k: html.escape(v) for k, v in raw.items()})

    if raw.get("action_url") and raw.get("action_label"):
        escaped["action_html"] = BUTTON.format(href=escaped["action_url"], label=escaped["action_label"])
    if raw.get("rejection_reason"):
        escaped["reason_html"] = (
            f'<p style="color:#94a3b8;">Reason for rejection: {escaped["rejection_reason"]}</p>'
        )
        raw["reason_text"] = f"Reason for rejection: {raw['rejection_reason']}\n"

    subject = template.subject.format_map(raw)
    preview = template.preview.format_map(raw)
    body = template.body.format_map(escaped)
    document = LAYOUT.format(
        subject=html.escape(subject),
        preview=html.escape(preview),
        body=body,
        footer=FOOTER.format_map(escaped),
    )
    return RenderedEmail(subject=subject, html=document, text=template.text.format_map(raw))
