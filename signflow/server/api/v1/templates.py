"""
Template Endpoints.

Owner-scoped template management, public direct-link lookup, lookup and update
by the forms backend's external id, and generation of documents from a
template. Changes to externally managed templates are pushed back to the
resident service.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Query

from signflow.core.database.entities import Recipient
from signflow.core.database.repositories import RecipientRepository
from signflow.core.models.io import (
    DirectLinkRead,
    DocumentDetailRead,
    FieldRead,
    GenerateDocumentFromTemplate,
    RecipientRead,
    TemplateCreate,
    TemplateDetailRead,
    TemplateExternalUpdate,
    TemplateListResponse,
    TemplateMetaRead,
    TemplateRead,
    TemplateRecipientsUpdate,
    UserSummaryRead,
)
from signflow.core.logging_config import get_logger
from signflow.server.services.deps import (
    ApiCallerDep,
    RequestMetadataDep,
    ResidentServiceDep,
    SessionDep,
)
from signflow.services import templates as template_service
from signflow.services.templates import TemplateWithDetails

from .documents import recipient_read

logger = get_logger(__name__)

router = APIRouter()


def _detail(details: TemplateWithDetails) -> TemplateDetailRead:
    data = TemplateDetailRead.model_validate(details.template)
    data.recipients = [RecipientRead.model_validate(r) for r in details.recipients]
    data.fields = [FieldRead.from_entity(f) for f in details.fields]
    if details.meta is not None:
        data.template_meta = TemplateMetaRead.model_validate(details.meta)
    if details.direct_link is not None:
        data.direct_link = DirectLinkRead.model_validate(details.direct_link)
    if details.user is not None:
        data.user = UserSummaryRead.model_validate(details.user)
    return data


def _signers_payload(recipients: List[Recipient]) -> List[Dict[str, Any]]:
    return [
        {
            "email": r.email,
            "name": r.name,
            "role": r.role,
            "signingOrder": r.signing_order,
            "documensoSignerId": r.id,
        }
        for r in recipients
    ]


@router.get("", response_model=TemplateListResponse, summary="List Templates")
async def list_templates(
    caller: ApiCallerDep,
    session: SessionDep,
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=10, ge=1, le=100, alias="perPage"),
) -> TemplateListResponse:
    result = await template_service.find_templates(
        session, caller.user_id, caller.team_id, page=page, per_page=per_page
    )
    return TemplateListResponse(templates=result.data, total_pages=result.total_pages)


@router.post("", response_model=TemplateRead, summary="Create Template")
async def create_template(body: TemplateCreate, caller: ApiCallerDep, session: SessionDep) -> TemplateRead:
    template = await template_service.create_template(
        session,
        body.title,
        caller.user_id,
        body.template_document_data_id,
        team_id=caller.team_id if caller.team_id is not None else body.team_id,
        form_key=body.form_key,
    )
    return TemplateRead.model_validate(template)


@router.get(
    "/direct/{token}",
    response_model=TemplateDetailRead,
    summary="Get Template by Direct Link",
    description="Public lookup of a template through its enabled direct-link token.",
)
async def get_template_by_direct_link(token: str, session: SessionDep) -> TemplateDetailRead:
    return _detail(await template_service.get_template_by_direct_link_token(session, token))


@router.get(
    "/external/{external_id}",
    response_model=TemplateDetailRead,
    summary="Get Template by External ID",
)
async def get_template_by_external_id(
    external_id: str, caller: ApiCallerDep, session: SessionDep
) -> TemplateDetailRead:
    return _detail(await template_service.get_template_by_external_id(session, external_id))


@router.patch(
    "/external/{external_id}",
    response_model=TemplateRead,
    summary="Update Template by External ID",
    description="Update template columns and default meta. Meta defaults are also pushed to the resident service.",
)
async def update_template_by_external_id(
    external_id: str,
    body: TemplateExternalUpdate,
    caller: ApiCallerDep,
    session: SessionDep,
    resident_service: ResidentServiceDep,
) -> TemplateRead:
    details = await template_service.get_template_by_external_id(session, external_id)
    template = await template_service.update_template_by_external_id(
        session, details.template.id, data=body.data, meta=body.meta
    )

    meta = body.meta.model_dump(exclude_none=True) if body.meta is not None else {}
    settings_payload = {
        "defaultLanguage": meta.get("language"),
        "defaultTimezone": meta.get("timezone"),
        "defaultEmailSubject": meta.get("subject"),
        "defaultEmailMessage": meta.get("message"),
    }
    settings_payload = {k: v for k, v in settings_payload.items() if v is not None}
    if settings_payload:
        await resident_service.update_form_template_settings(external_id, settings_payload)
        logger.debug(f"Pushed template settings for {external_id}: {sorted(settings_payload)}")

    return TemplateRead.model_validate(template)


@router.get(
    "/external/{external_id}/default-config",
    summary="Get Default Form Configuration",
    description="Default form configuration the resident service holds for an external template.",
)
async def get_default_form_config(
    external_id: str, caller: ApiCallerDep, resident_service: ResidentServiceDep
) -> Any:
    return await resident_service.get_default_form_config(external_id)


@router.get(
    "/{template_id}",
    response_model=TemplateDetailRead,
    summary="Get Template",
    responses={404: {"description": "Template not found"}},
)
async def get_template(template_id: int, caller: ApiCallerDep, session: SessionDep) -> TemplateDetailRead:
    return _detail(await template_service.get_template_by_id(session, template_id, caller.user_id, caller.team_id))


@router.delete("/{template_id}", response_model=TemplateRead, summary="Delete Template")
async def delete_template(template_id: int, caller: ApiCallerDep, session: SessionDep) -> TemplateRead:
    template = await template_service.delete_template(session, template_id, caller.user_id, caller.team_id)
    return TemplateRead.model_validate(template)


@router.put(
    "/{template_id}/recipients",
    response_model=List[RecipientRead],
    summary="Set Template Recipients",
    description="Replace the template's placeholder recipients. External templates sync their signers.",
)
async def set_template_recipients(
    template_id: int,
    body: TemplateRecipientsUpdate,
    caller: ApiCallerDep,
    session: SessionDep,
    resident_service: ResidentServiceDep,
) -> List[RecipientRead]:
    details = await template_service.get_template_by_id(session, template_id, caller.user_id, caller.team_id)
    recipients = await template_service.set_template_recipients(session, template_id, body.recipients)
    if details.template.external_id:
        await resident_service.set_template_signers(details.template.external_id, _signers_payload(recipients))
    return [RecipientRead.model_validate(r) for r in recipients]


@router.post(
    "/{template_id}/generate-document",
    response_model=DocumentDetailRead,
    summary="Generate Document from Template",
)
async def generate_document(
    template_id: int,
    body: GenerateDocumentFromTemplate,
    caller: ApiCallerDep,
    session: SessionDep,
    metadata: RequestMetadataDep,
) -> DocumentDetailRead:
    """
    Create a document from a template.

    Each entry of ``recipients`` replaces one of the template's placeholder
    recipients. ``title`` and ``meta`` override the template defaults.
    """
    override: Dict[str, Any] = body.meta.model_dump(exclude_none=True) if body.meta is not None else {}
    if body.title:
        override["title"] = body.title

    document = await template_service.create_document_from_template(
        session,
        template_id,
        caller.user_id,
        caller.team_id if caller.team_id is not None else body.team_id,
        body.recipients,
        external_id=body.external_id,
        custom_document_data_id=body.custom_document_data_id,
        override=override,
        form_key=body.form_key,
        resident_id=body.resident_id,
        document_details=body.document_details,
        request_metadata=metadata,
    )

    data = DocumentDetailRead.model_validate(document)
    data.recipients = [recipient_read(r) for r in await RecipientRepository(session).list_for_document(document.id)]
    return data
