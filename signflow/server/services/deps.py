"""
Request Dependencies.

Provides the database session, the authenticated API caller and the outbound
integration clients to API endpoints.

API tokens are sent in the ``Authorization`` header, either raw or as
``Bearer <token>``. A token issued to a team acts as the team owner within that
team.
"""

from dataclasses import dataclass
from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from signflow.core.database import get_session
from signflow.core.database.entities import Team, User
from signflow.core.database.repositories import ApiTokenRepository
from signflow.core.errors import AppError, AppErrorCode
from signflow.core.models.domain import Role
from signflow.email import DocumentMailer, get_document_mailer
from signflow.integrations.laravel import LaravelClient, get_laravel_client
from signflow.integrations.notify import NotifyClient, get_notify_client
from signflow.integrations.resident import ResidentServiceClient, get_resident_client
from signflow.services.logs import RequestMetadata

SessionDep = Annotated[AsyncSession, Depends(get_session)]


@dataclass
class ApiCaller:
    """The user a request acts as, and the team scope of its token."""

    user: User
    team_id: Optional[int] = None

    @property
    def user_id(self) -> int:
        return self.user.id


def _bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    value = authorization.strip()
    if value.lower().startswith("bearer "):
        value = value[7:].strip()
    return value or None


async def get_api_caller(
    session: SessionDep,
    authorization: Annotated[Optional[str], Header()] = None,
) -> ApiCaller:
    token = _bearer(authorization)
    if token is None:
        raise AppError(AppErrorCode.UNAUTHORIZED, "Missing API token")

    api_token = await ApiTokenRepository(session).get_valid_token(token)
    if api_token is None:
        raise AppError(AppErrorCode.UNAUTHORIZED, "Invalid or expired API token")

    if api_token.team_id is not None:
        team = await session.get(Team, api_token.team_id)
        user = await session.get(User, team.owner_user_id) if team is not None else None
        if user is None:
            raise AppError(AppErrorCode.UNAUTHORIZED, "Invalid or expired API token")
        return ApiCaller(user=user, team_id=team.id)

    user = await session.get(User, api_token.user_id) if api_token.user_id is not None else None
    if user is None or user.disabled:
        raise AppError(AppErrorCode.UNAUTHORIZED, "Invalid or expired API token")
    return ApiCaller(user=user)


ApiCallerDep = Annotated[ApiCaller, Depends(get_api_caller)]


async def get_admin_caller(caller: ApiCallerDep) -> ApiCaller:
    if Role.ADMIN.value not in (caller.user.roles or []):
        raise AppError(AppErrorCode.UNAUTHORIZED, "You are not authorized to access this resource")
    return caller


AdminCallerDep = Annotated[ApiCaller, Depends(get_admin_caller)]


def get_request_metadata(request: Request) -> RequestMetadata:
    return RequestMetadata.from_request(request)


RequestMetadataDep = Annotated[RequestMetadata, Depends(get_request_metadata)]


async def get_notify() -> AsyncGenerator[NotifyClient, None]:
    client = get_notify_client()
    try:
        yield client
    finally:
        await client.aclose()


async def get_mailer() -> AsyncGenerator[DocumentMailer, None]:
    mailer = get_document_mailer()
    try:
        yield mailer
    finally:
        await mailer.notify.aclose()


async def get_laravel() -> AsyncGenerator[LaravelClient, None]:
    client = get_laravel_client()
    try:
        yield client
    finally:
        await client.aclose()


async def get_resident_service() -> AsyncGenerator[ResidentServiceClient, None]:
    client = get_resident_client()
    try:
        yield client
    finally:
        await client.aclose()


NotifyDep = Annotated[NotifyClient, Depends(get_notify)]
MailerDep = Annotated[DocumentMailer, Depends(get_mailer)]
LaravelDep = Annotated[LaravelClient, Depends(get_laravel)]
ResidentServiceDep = Annotated[ResidentServiceClient, Depends(get_resident_service)]
