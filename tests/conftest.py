"""
Shared fixtures: an in-memory Supabase client, seeded groups and an API
client whose current user can be switched per request.

Helpers (plain functions, callable with any arguments):
  - make_user(user_id, ...)       -> user dict as returned by AuthService
  - seed_group(supabase, ...)     -> id of a group row written straight to the table
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from app.core.dependencies import get_current_user_id
from app.main import create_app
from app.modules.auth.service import clear_auth_cache
from tests.fakes import FakeSupabase


def make_user(user_id: str, name: Optional[str] = None, email: Optional[str] = None,
              photo_url: Optional[str] = None) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {}
    if name:
        metadata["full_name"] = name
    if photo_url:
        metadata["avatar_url"] = photo_url
    return {
        "id": user_id,
        "email": email or f"{user_id}@example.com",
        "user_metadata": metadata,
        "app_metadata": {},
    }


def seed_group(supabase: FakeSupabase, name: str, created_by: str, member_ids: List[str],
               is_active: bool = True, bio: str = "We like board games",
               created_at: str = "2026-01-01T00:00:00+00:00") -> str:
    members = [{"user_id": uid, "name": uid.upper()} for uid in member_ids]
    result = supabase.table("groups").insert({
        "name": name,
        "bio": bio,
        "members": members,
        "created_by": created_by,
        "is_active": is_active,
        "created_at": created_at,
        "updated_at": created_at,
    }).execute()
    return result.data[0]["id"]


class ApiSession:
    """TestClient plus the identity the next requests are made as."""

    def __init__(self, client: TestClient):
        self.client = client
        self.user: Optional[Dict[str, Any]] = None

    def as_user(self, user: Dict[str, Any]) -> TestClient:
        self.user = user
        return self.client


@pytest.fixture(autouse=True)
def _fresh_auth_cache():
    clear_auth_cache()
    yield
    clear_auth_cache()


@pytest.fixture
def supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def api(supabase):
    app = create_app(supabase=supabase)
    session = None

    def current_user():
        if session.user is None:
            raise HTTPException(status_code=401, detail="Not authenticated")
        return session.user

    app.dependency_overrides[get_current_user_id] = current_user
    with TestClient(app) as client:
        session = ApiSession(client)
        yield session
    app.dependency_overrides.clear()
