"""
Team member I/O models.
"""

from __future__ import annotations

from typing import Optional

from signflow.core.models.domain import TeamMemberRole

from .common import ApiModel


class TeamMemberRead(ApiModel):
    id: int
    user_id: int
    email: str
    name: Optional[str] = None
    role: TeamMemberRole


class TeamMemberUpdate(ApiModel):
    role: TeamMemberRole
