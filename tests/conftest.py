"""Shared fixtures: a fresh in-memory SQLite database per test."""
import uuid

import pytest
import pytest_asyncio

from db import create_all, dispose_engine, get_db, init_engine
from db.authz import ActingUser
from db.repositories import organizations as orgs_repo
from db.repositories import profiles as profiles_repo


@pytest_asyncio.fixture
async def database():
    init_engine("sqlite+aiosqlite://")
    await create_all()
    yield
    await dispose_engine()


async def signup(name: str) -> uuid.UUID:
    """Create a profile the way first login does and return its user id."""
    user_id = uuid.uuid4()
    async with get_db(user_id) as session:
        await profiles_repo.ensure_profile(
            session, user_id, f"{name.lower().replace(' ', '.')}-{user_id.hex[:6]}@example.com", name
        )
    return user_id


async def new_tenant(name: str = "Acme") -> ActingUser:
    """Sign up an owner and give them a fresh organization."""
    user_id = await signup(f"{name} Owner")
    async with get_db(user_id) as session:
        org = await orgs_repo.create(session, user_id, {"name": name})
    return ActingUser(user_id=user_id, organization_id=org.id)


@pytest.fixture
def tenant_factory(database):
    return new_tenant


@pytest.fixture
def signup_factory(database):
    return signup
