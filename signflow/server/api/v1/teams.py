"""
Team Member Endpoints.

Any member may list a team's members; role changes and removals require the
caller to be a team admin.
"""

from typing import List

from fastapi import APIRouter

from signflow.core.models.io import TeamMemberRead, TeamMemberUpdate
from signflow.server.services.deps import ApiCallerDep, SessionDep
from signflow.services import teams as team_service

router = APIRouter()


@router.get("/{team_id}/members", response_model=List[TeamMemberRead], summary="List Team Members")
async def list_members(team_id: int, caller: ApiCallerDep, session: SessionDep) -> List[TeamMemberRead]:
    return await team_service.find_team_members(session, team_id, caller.user_id)


@router.patch(
    "/{team_id}/members/{member_id}",
    response_model=TeamMemberRead,
    summary="Update Team Member Role",
    responses={401: {"description": "Caller is not a team admin"}},
)
async def update_member(
    team_id: int, member_id: int, body: TeamMemberUpdate, caller: ApiCallerDep, session: SessionDep
) -> TeamMemberRead:
    member = await team_service.update_team_member_role(session, team_id, member_id, caller.user_id, body.role)
    members = await team_service.find_team_members(session, team_id, caller.user_id)
    return next(m for m in members if m.id == member.id)


@router.delete("/{team_id}/members/{member_id}", summary="Remove Team Member")
async def remove_member(team_id: int, member_id: int, caller: ApiCallerDep, session: SessionDep):
    member = await team_service.remove_team_member(session, team_id, member_id, caller.user_id)
    return {"id": member.id, "removed": True}
