"""
Document entity models.

A document is an instantiated, signable PDF. Its payload lives in
``DocumentData`` so several documents created from the same template can share
the original bytes while keeping their own signed copy. ``DocumentMeta`` holds
per-document signing and e-mail preferences.

Soft deletion sets ``deleted_at`` and flips ``activity_status`` to INACTIVE;
every list and detail lookup filters on both.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Text
from sqlmodel import Field

from signflow.core.models.domain import (
    DocumentDataType,
    DocumentDistributionMethod,
    DocumentSigningOrder,
    DocumentSource,
    DocumentStatus,
    DocumentVisibility,
    EntityStatus,
)

from ..base import Base, utc_now


def _uuid() -> str:
    return uuid.uuid4().hex


class DocumentData(Base, table=True):
    """PDF payload of a document or template.

    Table: document_data
    """

    __tablename__ = "document_data"

    id: str = Field(default_factory=_uuid, primary_key=True, max_length=64)
    type: str = Field(default=DocumentDataType.BYTES_64.value, max_length=16)
    data: str = Field(sa_type=Text, description="Current payload (signed copy once completed)")
    initial_data: str = Field(sa_type=Text, description="Payload as uploaded")


class DocumentBase(Base):
    """Base fields for documents."""

    title: str = Field(max_length=255)
    status: str = Field(default=DocumentStatus.DRAFT.value, max_length=16, index=True)
    source: str = Field(default=DocumentSource.DOCUMENT.value, max_length=32)
    visibility: str = Field(default=DocumentVisibility.EVERYONE.value, max_length=32)
    external_id: Optional[str] = Field(default=None, max_length=255)

    # Integration with the resident/forms backend
    form_key: Optional[str] = Field(default=None, max_length=255)
    resident_id: Optional[str] = Field(default=None, max_length=255, index=True)
    document_details: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)


class Document(DocumentBase, table=True):
    """Signable document.

    Table: documents
    """

    __tablename__ = "documents"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    team_id: Optional[int] = Field(default=None, foreign_key="teams.id", index=True)
    template_id: Optional[int] = Field(default=None, index=True)
    document_data_id: str = Field(foreign_key="document_data.id", max_length=64)

    activity_status: str = Field(default=EntityStatus.ACTIVE.value, max_length=16, index=True)
    deleted_at: Optional[datetime] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None)
    document_url: Optional[str] = Field(default=None, description="Location of the signed copy, set by Laravel")

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now}, index=True)

    def __repr__(self) -> str:
        return f"Document(id={self.id}, title={self.title!r}, status={self.status})"


class DocumentMeta(Base, table=True):
    """Signing and e-mail preferences for one document.

    Table: document_meta
    """

    __tablename__ = "document_meta"

    id: str = Field(default_factory=_uuid, primary_key=True, max_length=64)
    document_id: int = Field(foreign_key="documents.id", unique=True, index=True)
    subject: Optional[str] = Field(default=None)
    message: Optional[str] = Field(default=None, sa_type=Text)
    timezone: Optional[str] = Field(default="Etc/UTC", max_length=64)
    date_format: Optional[str] = Field(default="yyyy-MM-dd hh:mm a", max_length=64)
    redirect_url: Optional[str] = Field(default=None)
    signing_order: str = Field(default=DocumentSigningOrder.PARALLEL.value, max_length=16)
    typed_signature_enabled: bool = Field(default=True)
    language: str = Field(default="en", max_length=8)
    distribution_method: str = Field(default=DocumentDistributionMethod.EMAIL.value, max_length=16)
    email_settings: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
