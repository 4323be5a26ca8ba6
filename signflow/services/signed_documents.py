"""Hand signed documents over to the Laravel backend."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from signflow.core.database.entities import Document, Recipient
from signflow.integrations.laravel import LaravelApiError, LaravelClient

from .logs import RequestMetadata, create_log

logger = logging.getLogger(__name__)

ALL_RECIPIENTS_SIGNED = "AllRecipientsSigned"


def build_signed_document_payload(
    document: Document, file_url: str, recipient: Optional[Recipient], all_signed: bool = False
) -> Dict[str, Any]:
    details = document.document_details or {}
    return {
        "clientName": str(details.get("companyName") or ""),
        "documensoId": str(document.id),
        "documentKey": str(document.form_key or ""),
        "residentId": str(document.resident_id or ""),
        "fileUrl": file_url,
        "recipient": ALL_RECIPIENTS_SIGNED if all_signed else (recipient.email if recipient is not None else None),
        "formType": str(details.get("formType") or ""),
        "module": str(details.get("module") or ""),
    }


async def store_signed_document(
    session: AsyncSession,
    laravel: LaravelClient,
    document: Document,
    file_url: str,
    recipient: Optional[Recipient],
    all_signed: bool = False,
    request_metadata: Optional[RequestMetadata] = None,
) -> Dict[str, Any]:
    """POST the signed copy's location to Laravel.

    When every recipient has signed and Laravel returns a ``fileUrl``, it is
    stored on the document.

    Returns:
        ``{"file_url": ...}`` as reported by Laravel (may be ``None``).

    Raises:
        LaravelApiError: "Could not store the signed document." on any failure,
            after a ``LARAVEL_STORE_SIGNED_DOCUMENT_ERROR`` log row is written.
    """
    payload = build_signed_document_payload(document, file_url, recipient, all_signed)
    try:
        data = await laravel.post_signed_document(payload)
    except LaravelApiError as e:
        logger.error(f"Error storing signed document {document.id}: {e}", exc_info=True)
        await create_log(
            session,
            action="LARAVEL_STORE_SIGNED_DOCUMENT_ERROR",
            message="Error while storing signed document to Laravel",
            data={
                "documentId": document.id,
                "recipientEmail": recipient.email if recipient is not None else None,
                "error": str(e),
                "response": e.details,
            },
            metadata=request_metadata,
            user_id=document.user_id,
        )
        raise LaravelApiError(
            "Could not store the signed document.", status_code=e.status_code, details=e.details
        ) from e

    stored_url = data.get("fileUrl")
    if all_signed and stored_url:
        document.document_url = stored_url
        session.add(document)
        await session.commit()
        await create_log(
            session,
            action="DOCUMENT_URL_UPDATED",
            message="Document URL updated successfully",
            data={"documentId": document.id, "fileUrl": stored_url},
            metadata=request_metadata,
            user_id=document.user_id,
        )
    return {"file_url": stored_url}
