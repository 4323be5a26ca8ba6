"""Fixtures for the v1 route tests: an owner with an API token."""

from dataclasses import dataclass
from typing import Dict

import pytest

from signflow.core.database.entities import User


@dataclass
class Caller:
    user: User
    token: str

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture
async def owner(factory) -> Caller:
    user = await factory.user()
    return Caller(user=user, token=await factory.api_token(user))


@pytest.fixture
async def admin(factory) -> Caller:
    user = await factory.admin()
    return Caller(user=user, token=await factory.api_token(user))
