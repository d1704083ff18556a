"""
Pytest fixtures for the Sales Curiosity API and extension client tests.
"""

import os

# IMPORTANT: Set environment variables BEFORE importing sales_curiosity so the
# origin allow-list and mock mode are configured when the app is built.
os.environ["USE_MOCK_AI"] = "1"
os.environ["APP_URL"] = "https://app.salescuriosity.test"
os.environ.pop("NEXT_PUBLIC_MOCK_AI", None)
os.environ.pop("SUPABASE_URL", None)
os.environ.pop("NEXT_PUBLIC_SUPABASE_URL", None)

from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from sales_curiosity.main import app
from sales_curiosity.routers.deps import supabase_dependency
from sales_curiosity.services.db.supabase_client import SupabaseAuthError

EXTENSION_ORIGIN = "chrome-extension://abcdefghijklmnop"
FIXTURES = Path(__file__).parent / "fixtures"


# =============================================================================
# FAKE SUPABASE
# =============================================================================


class FakeQuery:
    """In-memory stand-in for SupabaseTable (same builder methods)."""

    def __init__(self, db: "FakeSupabase", table_name: str):
        self.db = db
        self.table_name = table_name
        self.filters: Dict[str, Any] = {}
        self.operation = "select"
        self.payload: Optional[Dict[str, Any]] = None

    def select(self, columns: str = "*"):
        return self

    def eq(self, column: str, value: Any):
        self.filters[column] = value
        return self

    def order(self, column: str, desc: bool = False):
        return self

    def limit(self, count: int):
        return self

    def insert(self, data: Dict[str, Any]):
        self.operation, self.payload = "insert", data
        return self

    def upsert(self, data: Dict[str, Any], on_conflict: Optional[str] = None):
        self.operation, self.payload = "upsert", data
        return self

    def update(self, data: Dict[str, Any]):
        self.operation, self.payload = "update", data
        return self

    def execute(self):
        rows = self.db.tables.setdefault(self.table_name, [])
        if self.operation in ("insert", "upsert"):
            row = dict(self.payload)
            rows.append(row)
            return SimpleNamespace(data=[row])

        matched = [r for r in rows if all(r.get(k) == v for k, v in self.filters.items())]
        if self.operation == "update":
            for row in matched:
                row.update(self.payload)
        return SimpleNamespace(data=matched)


class FakeAuth:
    def __init__(self):
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.passwords: Dict[str, str] = {}
        self.tokens: Dict[str, Dict[str, Any]] = {}
        self.signed_out: List[str] = []
        self.signups: List[Dict[str, Any]] = []

    def sign_up(self, email, password, metadata=None):
        if email in self.accounts:
            raise SupabaseAuthError("User already registered", 422)
        user = {"id": f"user-{len(self.accounts) + 1}", "email": email, "user_metadata": metadata or {}}
        self.accounts[email] = user
        self.passwords[email] = password
        self.signups.append({"email": email, "metadata": metadata})
        return user

    def sign_in_with_password(self, email, password):
        if self.passwords.get(email) != password:
            raise SupabaseAuthError("Invalid login credentials", 400)
        token = f"token-{email}"
        self.tokens[token] = self.accounts[email]
        return {
            "access_token": token,
            "refresh_token": "refresh",
            "expires_in": 3600,
            "user": self.accounts[email],
        }

    def get_user(self, access_token):
        return self.tokens.get(access_token)

    def sign_out(self, access_token):
        self.signed_out.append(access_token)
        self.tokens.pop(access_token, None)


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.auth = FakeAuth()

    def table(self, table_name: str) -> FakeQuery:
        return FakeQuery(self, table_name)

    def add_user(
        self,
        email: str = "rep@example.com",
        password: str = "secret123",
        role: str = "member",
        organization_id: Optional[str] = None,
        in_users_table: bool = True,
    ) -> Dict[str, Any]:
        """Register an account; returns the auth user with a ready bearer token."""
        user = self.auth.sign_up(email, password)
        token = f"token-{email}"
        self.auth.tokens[token] = user
        if in_users_table:
            self.tables.setdefault("users", []).append({
                "id": user["id"],
                "email": email,
                "role": role,
                "organization_id": organization_id,
                "organizations": {"id": organization_id, "account_type": "organization"} if organization_id else None,
            })
        return {**user, "token": token}


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def client(fake_supabase):
    """FastAPI test client backed by the in-memory database."""
    app.dependency_overrides[supabase_dependency] = lambda: fake_supabase
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def no_db_client():
    """FastAPI test client with Supabase not configured."""
    app.dependency_overrides[supabase_dependency] = lambda: None
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def extension_headers():
    return {"Origin": EXTENSION_ORIGIN}


@pytest.fixture
def profile_payload():
    return {"name": "Jane Doe", "headline": "CMO", "location": "NYC"}


@pytest.fixture
def profile_html():
    return (FIXTURES / "linkedin_profile.html").read_text(encoding="utf-8")
