"""
Template I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from signflow.core.models.domain import DocumentVisibility, RecipientRole, TemplateType

from .common import ApiModel
from .documents import DocumentMetaInput, FieldRead, RecipientRead, UserSummaryRead


class TemplateRead(ApiModel):
    id: int
    external_id: Optional[str] = None
    type: TemplateType
    title: str
    user_id: int
    team_id: Optional[int] = None
    template_document_data_id: str
    visibility: DocumentVisibility
    public_title: str = ""
    public_description: str = ""
    form_key: str = ""
    created_at: datetime
    updated_at: datetime


class TemplateMetaRead(ApiModel):
    subject: Optional[str] = None
    message: Optional[str] = None
    timezone: Optional[str] = None
    date_format: Optional[str] = None
    redirect_url: Optional[str] = None
    signing_order: Optional[str] = None
    language: Optional[str] = None
    typed_signature_enabled: bool = True
    distribution_method: Optional[str] = None
    email_settings: Optional[Dict[str, Any]] = None


class DirectLinkRead(ApiModel):
    token: str
    enabled: bool
    direct_template_recipient_id: int


class TemplateDetailRead(TemplateRead):
    recipients: List[RecipientRead] = Field(default_factory=list)
    fields: List[FieldRead] = Field(default_factory=list)
    template_meta: Optional[TemplateMetaRead] = None
    direct_link: Optional[DirectLinkRead] = None
    user: Optional[UserSummaryRead] = None


class TemplateListResponse(ApiModel):
    templates: List[TemplateRead]
    total_pages: int


class TemplateCreate(ApiModel):
    title: str
    template_document_data_id: str
    team_id: Optional[int] = None
    form_key: str = ""


class TemplateUpdate(ApiModel):
    title: Optional[str] = None
    external_id: Optional[str] = None
    type: Optional[TemplateType] = None
    visibility: Optional[DocumentVisibility] = None
    public_title: Optional[str] = None
    public_description: Optional[str] = None


class TemplateExternalUpdate(ApiModel):
    data: Optional[TemplateUpdate] = None
    meta: Optional[DocumentMetaInput] = None


class TemplateRecipientInput(ApiModel):
    """Final recipient replacing one of the template's placeholders."""

    id: int
    name: str = ""
    email: str
    signing_order: Optional[int] = None
    expired: Optional[datetime] = None


class TemplateRecipientSet(ApiModel):
    """Desired placeholder recipient; matched to an existing one by id or email."""

    id: Optional[int] = None
    name: str = ""
    email: str
    role: RecipientRole = RecipientRole.SIGNER
    signing_order: Optional[int] = None


class TemplateRecipientsUpdate(ApiModel):
    recipients: List[TemplateRecipientSet]


class GenerateDocumentFromTemplate(ApiModel):
    title: Optional[str] = None
    external_id: Optional[str] = None
    team_id: Optional[int] = None
    recipients: List[TemplateRecipientInput]
    meta: Optional[DocumentMetaInput] = None
    custom_document_data_id: Optional[str] = None
    form_key: Optional[str] = None
    resident_id: Optional[str] = None
    document_details: Optional[Dict[str, Any]] = None
