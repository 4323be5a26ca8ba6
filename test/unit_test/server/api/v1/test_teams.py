"""Route tests for /api/v1/team/{team_id}/members."""

import pytest


@pytest.fixture
async def team_setup(factory, owner):
    team = await factory.team(owner.user)
    member_user = await factory.user(email="member@example.com", name="Member")
    member = await factory.member(team, member_user)
    return team, member, member_user


class TestTeamMembers:
    async def test_list(self, client, owner, team_setup):
        team, _, _ = team_setup
        r = await client.get(f"/api/v1/team/{team.id}/members", headers=owner.headers)
        assert r.status_code == 200
        assert [(m["email"], m["role"]) for m in r.json()] == [
            ("owner@example.com", "ADMIN"),
            ("member@example.com", "MEMBER"),
        ]
        assert "userId" in r.json()[0]

    async def test_update_role(self, client, owner, team_setup):
        team, member, _ = team_setup
        r = await client.patch(
            f"/api/v1/team/{team.id}/members/{member.id}", headers=owner.headers, json={"role": "MANAGER"}
        )
        assert r.status_code == 200
        assert r.json()["role"] == "MANAGER"
        assert r.json()["email"] == "member@example.com"

    async def test_member_cannot_manage(self, client, factory, team_setup):
        team, member, member_user = team_setup
        token = await factory.api_token(member_user)
        r = await client.delete(
            f"/api/v1/team/{team.id}/members/{member.id}", headers={"Authorization": f"Bearer {token}"}
        )
        assert r.status_code == 401

    async def test_remove(self, client, owner, team_setup):
        team, member, _ = team_setup
        r = await client.delete(f"/api/v1/team/{team.id}/members/{member.id}", headers=owner.headers)
        assert r.status_code == 200
        assert r.json() == {"id": member.id, "removed": True}

    async def test_outsider_sees_not_found(self, client, factory, team_setup):
        team, _, _ = team_setup
        outsider = await factory.user(email="out@example.com")
        token = await factory.api_token(outsider)
        r = await client.get(f"/api/v1/team/{team.id}/members", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 404
