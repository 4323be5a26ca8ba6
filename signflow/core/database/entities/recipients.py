"""
Recipient, field and signature entity models.

Recipients and fields belong either to a document or to a template (exactly
one of ``document_id`` / ``template_id`` is set). Template recipients are
placeholders that are copied into real recipients when a document is generated.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Text
from sqlmodel import Field as SQLField

from signflow.core.models.domain import ReadStatus, RecipientRole, SendStatus, SigningStatus

from ..base import Base, utc_now


class RecipientBase(Base):
    """Base fields for recipients."""

    email: str = SQLField(max_length=255, index=True)
    name: str = SQLField(default="", max_length=255)
    role: str = SQLField(default=RecipientRole.SIGNER.value, max_length=16)
    signing_order: Optional[int] = SQLField(default=None)


class Recipient(RecipientBase, table=True):
    """Document or template recipient.

    Table: recipients
    """

    __tablename__ = "recipients"

    id: Optional[int] = SQLField(default=None, primary_key=True)
    document_id: Optional[int] = SQLField(default=None, foreign_key="documents.id", index=True)
    template_id: Optional[int] = SQLField(default=None, foreign_key="templates.id", index=True)

    token: str = SQLField(max_length=128, index=True)
    read_status: str = SQLField(default=ReadStatus.NOT_OPENED.value, max_length=16)
    signing_status: str = SQLField(default=SigningStatus.NOT_SIGNED.value, max_length=16)
    send_status: str = SQLField(default=SendStatus.NOT_SENT.value, max_length=16)
    rejection_reason: Optional[str] = SQLField(default=None)

    signed_at: Optional[datetime] = SQLField(default=None, index=True)
    expired: Optional[datetime] = SQLField(default=None)
    document_deleted_at: Optional[datetime] = SQLField(default=None)

    def __repr__(self) -> str:
        return f"Recipient(id={self.id}, email={self.email}, role={self.role})"


class Field(Base, table=True):
    """Placed form field, in percent of the page size.

    Table: fields
    """

    __tablename__ = "fields"

    id: Optional[int] = SQLField(default=None, primary_key=True)
    secondary_id: str = SQLField(default_factory=lambda: uuid.uuid4().hex, max_length=64, unique=True)
    document_id: Optional[int] = SQLField(default=None, foreign_key="documents.id", index=True)
    template_id: Optional[int] = SQLField(default=None, foreign_key="templates.id", index=True)
    recipient_id: int = SQLField(foreign_key="recipients.id", index=True)

    type: str = SQLField(max_length=32)
    page: int = SQLField(default=1)
    position_x: float = SQLField(default=0)
    position_y: float = SQLField(default=0)
    width: float = SQLField(default=0)
    height: float = SQLField(default=0)
    custom_text: str = SQLField(default="", sa_type=Text)
    inserted: bool = SQLField(default=False)
    field_meta: Optional[Dict[str, Any]] = SQLField(default=None, sa_type=JSON)

    def __repr__(self) -> str:
        return f"Field(id={self.id}, type={self.type}, page={self.page})"


class Signature(Base, table=True):
    """Table: signatures"""

    __tablename__ = "signatures"

    id: Optional[int] = SQLField(default=None, primary_key=True)
    recipient_id: int = SQLField(foreign_key="recipients.id", index=True)
    field_id: int = SQLField(foreign_key="fields.id", unique=True)
    signature_image_as_base64: Optional[str] = SQLField(default=None, sa_type=Text)
    typed_signature: Optional[str] = SQLField(default=None)
    created: datetime = SQLField(default_factory=utc_now)
