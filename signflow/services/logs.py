"""
Document audit logs and application logs.

Audit entries are added to the caller's session and flushed; they commit
together with the change they describe. ``create_log`` records integration
failures and commits on its own so the entry survives a rolled-back operation.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from signflow.core.database.entities import DocumentAuditLog, Log, User
from signflow.core.models.domain import AuditLogType

logger = logging.getLogger(__name__)


class RequestMetadata(BaseModel):
    """Caller details recorded on audit entries."""

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    @classmethod
    def from_request(cls, request: Request) -> "RequestMetadata":
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            ip_address = forwarded.split(",")[0].strip()
        else:
            ip_address = request.client.host if request.client else None
        return cls(ip_address=ip_address, user_agent=request.headers.get("user-agent"))


class AuditActor(BaseModel):
    """Who performed an audited action when it was not a registered user (e.g. a recipient)."""

    name: Optional[str] = None
    email: Optional[str] = None
    id: Optional[int] = None


async def create_log(
    session: AsyncSession,
    action: str,
    message: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None,
    metadata: Optional[RequestMetadata] = None,
    user_id: Optional[int] = None,
) -> Log:
    """Persist an application log row and commit it."""
    log = Log(
        action=action,
        message=message,
        data=data,
        request_metadata=metadata.model_dump() if metadata is not None else None,
        user_id=user_id,
    )
    session.add(log)
    await session.commit()
    await session.refresh(log)
    logger.debug(f"Recorded log {log.id} action={action}")
    return log


async def create_document_audit_log(
    session: AsyncSession,
    document_id: int,
    type: AuditLogType | str,
    data: Optional[Dict[str, Any]] = None,
    user: Optional[User | AuditActor] = None,
    request_metadata: Optional[RequestMetadata] = None,
) -> DocumentAuditLog:
    """Add an audit entry for ``document_id`` to the session without committing."""
    entry = DocumentAuditLog(
        document_id=document_id,
        type=type.value if isinstance(type, AuditLogType) else type,
        data=data or {},
        name=user.name if user is not None else None,
        email=user.email if user is not None else None,
        user_id=user.id if user is not None else None,
        user_agent=request_metadata.user_agent if request_metadata is not None else None,
        ip_address=request_metadata.ip_address if request_metadata is not None else None,
    )
    session.add(entry)
    await session.flush()
    return entry
