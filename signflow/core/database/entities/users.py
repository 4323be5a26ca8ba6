"""
User, API token and subscription entity models.

Users own documents and templates either personally or through a team. API
tokens authenticate the public v1 API and may belong to a user or a team.
Subscriptions back the admin signing-volume leaderboard.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON
from sqlmodel import Field

from signflow.core.models.domain import Role, SubscriptionStatus

from ..base import Base, utc_now


class User(Base, table=True):
    """Application user.

    Table: users
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: Optional[str] = Field(default=None, max_length=255)
    email: str = Field(max_length=255, unique=True, index=True)
    email_verified: Optional[datetime] = Field(default=None)
    password: Optional[str] = Field(default=None, description="bcrypt hash")
    roles: List[str] = Field(default_factory=lambda: [Role.USER.value], sa_type=JSON)
    disabled: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN.value in (self.roles or [])

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email})"


class ApiToken(Base, table=True):
    """API token; only the SHA-512 digest of the secret is stored.

    Table: api_tokens
    """

    __tablename__ = "api_tokens"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    token: str = Field(max_length=128, unique=True, index=True)
    expires: Optional[datetime] = Field(default=None)
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
    team_id: Optional[int] = Field(default=None, foreign_key="teams.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)


class Subscription(Base, table=True):
    """Billing subscription of a user or a team.

    Table: subscriptions
    """

    __tablename__ = "subscriptions"

    id: Optional[int] = Field(default=None, primary_key=True)
    status: str = Field(default=SubscriptionStatus.INACTIVE.value, max_length=16, index=True)
    plan_id: str = Field(max_length=255)
    price_id: str = Field(max_length=255)
    period_end: Optional[datetime] = Field(default=None)
    cancel_at_period_end: bool = Field(default=False)
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
    team_id: Optional[int] = Field(default=None, foreign_key="teams.id", index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
