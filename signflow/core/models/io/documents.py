"""
Document, recipient and field I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, HttpUrl

from signflow.core.models.domain import DocumentStatus, FieldType, RecipientRole

from .common import ApiModel


class DocumentMetaInput(ApiModel):
    """Signing and e-mail preferences supplied when creating a document."""

    subject: Optional[str] = None
    message: Optional[str] = None
    timezone: Optional[str] = None
    date_format: Optional[str] = None
    redirect_url: Optional[str] = None
    signing_order: Optional[str] = None
    language: Optional[str] = None
    typed_signature_enabled: Optional[bool] = None
    distribution_method: Optional[str] = None
    email_settings: Optional[Dict[str, Any]] = None


class DocumentRead(ApiModel):
    """Schema for reading a document from the API."""

    id: int
    external_id: Optional[str] = None
    user_id: int
    team_id: Optional[int] = None
    title: str
    status: DocumentStatus
    document_data_id: str
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    document_url: Optional[str] = None


class DocumentListResponse(ApiModel):
    documents: List[DocumentRead]
    total_pages: int


class RecipientRead(ApiModel):
    id: int
    document_id: Optional[int] = None
    template_id: Optional[int] = None
    email: str
    name: str
    role: RecipientRole
    signing_order: Optional[int] = None
    token: str
    signed_at: Optional[datetime] = None
    read_status: str
    signing_status: str
    send_status: str
    signing_url: Optional[str] = None


class FieldRead(ApiModel):
    """Placed field; coordinates are percentages of the page size."""

    id: int
    document_id: Optional[int] = None
    template_id: Optional[int] = None
    recipient_id: int
    type: FieldType
    page_number: int
    page_x: float
    page_y: float
    page_width: float
    page_height: float
    custom_text: str = ""
    field_meta: Optional[Dict[str, Any]] = None
    inserted: bool = False

    @classmethod
    def from_entity(cls, field: Any) -> "FieldRead":
        return cls(
            id=field.id,
            document_id=field.document_id,
            template_id=field.template_id,
            recipient_id=field.recipient_id,
            type=field.type,
            page_number=field.page,
            page_x=field.position_x,
            page_y=field.position_y,
            page_width=field.width,
            page_height=field.height,
            custom_text=field.custom_text,
            field_meta=field.field_meta,
            inserted=field.inserted,
        )


class UserSummaryRead(ApiModel):
    id: int
    name: Optional[str] = None
    email: str


class AdminDocumentRead(DocumentRead):
    """Admin listing row: the document with its owner and recipients."""

    user: Optional[UserSummaryRead] = None
    recipients: List[RecipientRead] = Field(default_factory=list)


class DocumentDetailRead(DocumentRead):
    recipients: List[RecipientRead] = Field(default_factory=list)
    fields: List[FieldRead] = Field(default_factory=list)


class DeletedDocumentRead(DocumentRead):
    """Partial document returned after a delete."""

    deleted_at: Optional[datetime] = None


class RecipientCreate(ApiModel):
    name: str = ""
    email: str
    role: RecipientRole = RecipientRole.SIGNER
    signing_order: Optional[int] = None


class RecipientUpdate(ApiModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[RecipientRole] = None
    signing_order: Optional[int] = None


class DocumentCreate(ApiModel):
    """Create a document from a base64 PDF payload."""

    title: str
    document_data: str = Field(description="Base64-encoded PDF")
    external_id: Optional[str] = None
    team_id: Optional[int] = None
    form_key: Optional[str] = None
    resident_id: Optional[str] = None
    document_details: Optional[Dict[str, Any]] = None
    recipients: List[RecipientCreate] = Field(default_factory=list)
    meta: Optional[DocumentMetaInput] = None


class FieldCreate(ApiModel):
    recipient_id: int
    type: FieldType
    page_number: int
    page_x: float
    page_y: float
    page_width: float
    page_height: float
    field_meta: Optional[Dict[str, Any]] = None


class FieldUpdate(ApiModel):
    recipient_id: Optional[int] = None
    type: Optional[FieldType] = None
    page_number: Optional[int] = None
    page_x: Optional[float] = None
    page_y: Optional[float] = None
    page_width: Optional[float] = None
    page_height: Optional[float] = None
    field_meta: Optional[Dict[str, Any]] = None


class ResidentInfoRead(ApiModel):
    resident_id: str


class DocumentCompleteRequest(ApiModel):
    """Recipient completion; ``file_url`` locates the signed copy handed to Laravel."""

    document_id: int
    file_url: Optional[HttpUrl] = None


class DocumentRejectRequest(ApiModel):
    """Recipient rejection with an optional reason shown to the owner."""

    document_id: int
    reason: Optional[str] = Field(default=None, max_length=500)
