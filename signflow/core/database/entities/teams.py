"""
Team entity models.

A team groups users under a shared URL. Documents and templates with a
``team_id`` are visible to every member of that team.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from signflow.core.models.domain import TeamMemberRole

from ..base import Base, utc_now


class Team(Base, table=True):
    """Table: teams"""

    __tablename__ = "teams"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    url: str = Field(max_length=255, unique=True, index=True)
    owner_user_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"Team(id={self.id}, url={self.url})"


class TeamMember(Base, table=True):
    """Table: team_members"""

    __tablename__ = "team_members"
    __table_args__ = (UniqueConstraint("user_id", "team_id", name="uq_team_members_user_team"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="teams.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    role: str = Field(default=TeamMemberRole.MEMBER.value, max_length=16)
    created_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"TeamMember(team_id={self.team_id}, user_id={self.user_id}, role={self.role})"
