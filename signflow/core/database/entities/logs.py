"""
Audit and application log entity models.

``DocumentAuditLog`` records who did what to a document. It keeps no foreign key
to ``documents`` so the entry written for a hard delete outlives the document.
``Log`` is a free-form application log for integration failures.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Text
from sqlmodel import Field

from ..base import Base, utc_now


class DocumentAuditLog(Base, table=True):
    """Table: document_audit_logs"""

    __tablename__ = "document_audit_logs"

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True, max_length=64)
    document_id: int = Field(index=True)
    type: str = Field(max_length=64)
    data: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)

    name: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    user_id: Optional[int] = Field(default=None)
    user_agent: Optional[str] = Field(default=None)
    ip_address: Optional[str] = Field(default=None, max_length=64)

    created_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"DocumentAuditLog(document_id={self.document_id}, type={self.type})"


class Log(Base, table=True):
    """Table: logs"""

    __tablename__ = "logs"

    id: Optional[int] = Field(default=None, primary_key=True)
    action: str = Field(max_length=128, index=True)
    message: Optional[str] = Field(default=None, sa_type=Text)
    data: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    request_metadata: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    user_id: Optional[int] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
