"""
Shared fixtures: an in-memory Motor database swapped into teamup.database,
an HTTP client bound to the FastAPI app, and factories for users and projects.
"""

import os
from datetime import datetime

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

# Set test environment before importing the app
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from teamup import database  # noqa: E402
from teamup.main import app  # noqa: E402
from teamup.models.project import new_slot  # noqa: E402
from teamup.utils.auth import create_access_token  # noqa: E402


@pytest.fixture
def db(monkeypatch):
    mock_db = AsyncMongoMockClient()["teamup_test"]
    monkeypatch.setattr(database, "db", mock_db)
    return mock_db


@pytest_asyncio.fixture
async def client(db):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


def auth_headers(user: dict) -> dict:
    token = create_access_token(str(user["_id"]), user["email"])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db):
    async def _make_user(username: str, role: str = "user", is_active: bool = True) -> dict:
        user = {
            "username": username,
            "email": f"{username}@example.com",
            "password": "not-a-real-hash",
            "role": role,
            "profile": {"name": username.title(), "surname": "Tester", "bio": "", "avatar_url": "", "location": ""},
            "social_links": {"github": "", "linkedin": "", "portfolio": ""},
            "titles": [],
            "skills": [],
            "is_active": is_active,
            "created_at": datetime.utcnow(),
        }
        result = await db.users.insert_one(user)
        user["_id"] = result.inserted_id
        return user

    return _make_user


@pytest.fixture
def make_project(db):
    async def _make_project(owner: dict, slots=None, title: str = "Open Source Game") -> dict:
        now = datetime.utcnow()
        project = {
            "owner_id": str(owner["_id"]),
            "title": title,
            "description": "A collaborative project looking for contributors",
            "category": "game",
            "project_type": "team",
            "status": "active",
            "slots": [
                new_slot(s.get("role_name", "Backend Developer"), s.get("required_skills", ["python"]), s["quota"])
                for s in (slots or [{"quota": 1}])
            ],
            "version": 0,
            "created_at": now,
            "updated_at": now,
        }
        result = await db.projects.insert_one(project)
        project["_id"] = result.inserted_id
        return project

    return _make_project


@pytest_asyncio.fixture
async def owner(make_user):
    return await make_user("owner")


@pytest_asyncio.fixture
async def alice(make_user):
    return await make_user("alice")


@pytest_asyncio.fixture
async def bob(make_user):
    return await make_user("bob")


@pytest_asyncio.fixture
async def admin(make_user):
    return await make_user("admin", role="admin")


@pytest.fixture
def headers():
    return auth_headers
