"""Shared fixtures for unit tests.

Every test gets a fresh in-memory SQLite database with the full schema, a
session on it, and a ``factory`` for inserting rows. Outbound HTTP goes through
``httpx.MockTransport`` so nothing leaves the process.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, AsyncGenerator, Dict, List, Optional
from unittest.mock import patch

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel.pool import StaticPool

from signflow.core.database import create_all
from signflow.core.database.entities import (
    ApiToken,
    Document,
    DocumentData,
    DocumentMeta,
    Field,
    Recipient,
    Subscription,
    Team,
    TeamMember,
    Template,
    TemplateDirectLink,
    TemplateMeta,
    User,
)
from signflow.core.models.domain import (
    DocumentStatus,
    FieldType,
    RecipientRole,
    Role,
    SubscriptionStatus,
    TeamMemberRole,
)
from signflow.core.security import generate_token, hash_string
from signflow.email import DocumentMailer
from signflow.integrations.notify import NotifyClient

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
NOTIFY_ENDPOINT = "http://mock-notify/api/"
WEBAPP_URL = "http://localhost:3000"


@pytest_asyncio.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with maker() as session:
        yield session


class DataFactory:
    """Inserts rows with sensible defaults; keyword arguments override columns."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _save(self, entity):
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def user(self, email: str = "owner@example.com", name: Optional[str] = "Owner", **kwargs) -> User:
        return await self._save(User(email=email, name=name, **kwargs))

    async def admin(self, email: str = "admin@example.com", name: str = "Admin") -> User:
        return await self.user(email=email, name=name, roles=[Role.USER.value, Role.ADMIN.value])

    async def api_token(self, user: Optional[User] = None, team: Optional[Team] = None, **kwargs) -> str:
        """Create a token row and return the clear token."""
        clear = f"api_{generate_token(24)}"
        await self._save(
            ApiToken(
                name="test",
                token=hash_string(clear),
                user_id=user.id if user is not None else None,
                team_id=team.id if team is not None else None,
                **kwargs,
            )
        )
        return clear

    async def team(self, owner: User, url: str = "acme", name: str = "Acme") -> Team:
        team = await self._save(Team(name=name, url=url, owner_user_id=owner.id))
        await self.member(team, owner, TeamMemberRole.ADMIN)
        return team

    async def member(self, team: Team, user: User, role: TeamMemberRole = TeamMemberRole.MEMBER) -> TeamMember:
        return await self._save(TeamMember(team_id=team.id, user_id=user.id, role=role.value))

    async def document_data(self, data: str = "JVBERi0xLjQK") -> DocumentData:
        return await self._save(DocumentData(data=data, initial_data=data))

    async def document(
        self,
        user: User,
        title: str = "Lease Agreement",
        status: DocumentStatus = DocumentStatus.PENDING,
        team: Optional[Team] = None,
        **kwargs,
    ) -> Document:
        data = await self.document_data()
        return await self._save(
            Document(
                title=title,
                status=status.value,
                user_id=user.id,
                team_id=team.id if team is not None else None,
                document_data_id=data.id,
                **kwargs,
            )
        )

    async def meta(self, document: Document, **kwargs) -> DocumentMeta:
        return await self._save(DocumentMeta(document_id=document.id, **kwargs))

    async def recipient(
        self,
        document: Optional[Document] = None,
        email: str = "signer@example.com",
        name: str = "Signer",
        role: RecipientRole = RecipientRole.SIGNER,
        template: Optional[Template] = None,
        **kwargs,
    ) -> Recipient:
        kwargs.setdefault("token", generate_token())
        return await self._save(
            Recipient(
                document_id=document.id if document is not None else None,
                template_id=template.id if template is not None else None,
                email=email,
                name=name,
                role=role.value,
                **kwargs,
            )
        )

    async def field(
        self,
        recipient: Recipient,
        type: FieldType = FieldType.SIGNATURE,
        document: Optional[Document] = None,
        template: Optional[Template] = None,
        **kwargs,
    ) -> Field:
        for key, value in (("page", 1), ("position_x", 10), ("position_y", 20), ("width", 15), ("height", 5)):
            kwargs.setdefault(key, value)
        return await self._save(
            Field(
                document_id=document.id if document is not None else None,
                template_id=template.id if template is not None else None,
                recipient_id=recipient.id,
                type=type.value,
                **kwargs,
            )
        )

    async def template(self, user: User, title: str = "Admission Form", team: Optional[Team] = None, **kwargs) -> Template:
        data = await self.document_data()
        return await self._save(
            Template(
                title=title,
                user_id=user.id,
                team_id=team.id if team is not None else None,
                template_document_data_id=data.id,
                **kwargs,
            )
        )

    async def template_meta(self, template: Template, **kwargs) -> TemplateMeta:
        return await self._save(TemplateMeta(template_id=template.id, **kwargs))

    async def direct_link(self, template: Template, recipient: Recipient, enabled: bool = True) -> TemplateDirectLink:
        return await self._save(
            TemplateDirectLink(
                template_id=template.id,
                token=generate_token(),
                enabled=enabled,
                direct_template_recipient_id=recipient.id,
            )
        )

    async def subscription(
        self,
        user: Optional[User] = None,
        team: Optional[Team] = None,
        status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
        created_at: Optional[datetime] = None,
    ) -> Subscription:
        extra: Dict[str, Any] = {"created_at": created_at} if created_at is not None else {}
        return await self._save(
            Subscription(
                status=status.value,
                plan_id="plan_basic",
                price_id="price_basic",
                user_id=user.id if user is not None else None,
                team_id=team.id if team is not None else None,
                **extra,
            )
        )


@pytest.fixture
def factory(session: AsyncSession) -> DataFactory:
    return DataFactory(session)


class NotifyOutbox:
    """Records every message posted to the mock Notify endpoint."""

    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code
        self.messages: List[Dict[str, Any]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.messages.append(json.loads(request.content))
        return httpx.Response(self.status_code, json={"ok": self.status_code < 400})

    def to(self) -> List[str]:
        return [m["mailTo"] for m in self.messages]


@pytest.fixture
def notify_outbox() -> NotifyOutbox:
    return NotifyOutbox()


@pytest.fixture
def notify_client(notify_outbox: NotifyOutbox) -> NotifyClient:
    return NotifyClient(
        NOTIFY_ENDPOINT,
        "notify-login",
        "notify-password",
        client=httpx.AsyncClient(transport=httpx.MockTransport(notify_outbox.handler)),
    )


@pytest.fixture
def mailer(notify_client: NotifyClient) -> DocumentMailer:
    return DocumentMailer(notify_client, WEBAPP_URL)


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession, mailer: DocumentMailer, notify_client: NotifyClient):
    """HTTP client against the app, sharing the test session and mocked integrations."""
    from signflow.core.database import get_session
    from signflow.server.main import app
    from signflow.server.services.deps import get_mailer, get_notify

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_notify] = lambda: notify_client

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("signflow.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


def auth(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return auth
