"""
Template entity models.

A template is a reusable form: a PDF plus placeholder recipients and fields.
Templates can be opened publicly through a direct link, and are addressable by
an ``external_id`` assigned by the forms backend.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Text
from sqlmodel import Field

from signflow.core.models.domain import (
    DocumentDistributionMethod,
    DocumentSigningOrder,
    DocumentVisibility,
    EntityStatus,
    TemplateType,
)

from ..base import Base, utc_now


class TemplateBase(Base):
    """Base fields for templates."""

    title: str = Field(max_length=255)
    type: str = Field(default=TemplateType.PRIVATE.value, max_length=16)
    visibility: str = Field(default=DocumentVisibility.EVERYONE.value, max_length=32)
    external_id: Optional[str] = Field(default=None, max_length=255, index=True)
    public_title: str = Field(default="", max_length=255)
    public_description: str = Field(default="", sa_type=Text)
    form_key: str = Field(default="", max_length=255)


class Template(TemplateBase, table=True):
    """Reusable document template.

    Table: templates
    """

    __tablename__ = "templates"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    team_id: Optional[int] = Field(default=None, foreign_key="teams.id", index=True)
    template_document_data_id: str = Field(foreign_key="document_data.id", max_length=64)

    activity_status: str = Field(default=EntityStatus.ACTIVE.value, max_length=16)
    deleted_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Template(id={self.id}, title={self.title!r})"


class TemplateMeta(Base, table=True):
    """Default document meta applied to documents generated from a template.

    Table: template_meta
    """

    __tablename__ = "template_meta"

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True, max_length=64)
    template_id: int = Field(foreign_key="templates.id", unique=True, index=True)
    subject: Optional[str] = Field(default=None)
    message: Optional[str] = Field(default=None, sa_type=Text)
    timezone: Optional[str] = Field(default="Etc/UTC", max_length=64)
    date_format: Optional[str] = Field(default="yyyy-MM-dd hh:mm a", max_length=64)
    redirect_url: Optional[str] = Field(default=None)
    signing_order: Optional[str] = Field(default=DocumentSigningOrder.PARALLEL.value, max_length=16)
    typed_signature_enabled: bool = Field(default=True)
    language: str = Field(default="en", max_length=8)
    distribution_method: str = Field(default=DocumentDistributionMethod.EMAIL.value, max_length=16)
    email_settings: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)


class TemplateDirectLink(Base, table=True):
    """Public link that lets anyone sign a template as one of its recipients.

    Table: template_direct_links
    """

    __tablename__ = "template_direct_links"

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True, max_length=64)
    template_id: int = Field(foreign_key="templates.id", unique=True, index=True)
    token: str = Field(max_length=128, unique=True, index=True)
    enabled: bool = Field(default=True)
    direct_template_recipient_id: int
    created_at: datetime = Field(default_factory=utc_now)
