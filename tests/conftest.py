"""
Shared fixtures: an in-memory stand-in for the Supabase client and a
TestClient wired to it.
"""
import os

# The application module builds an app at import time and refuses to start without these
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import copy
import itertools
import pytest
from types import SimpleNamespace
from fastapi.testclient import TestClient

from portfolio.config.settings import Settings
from portfolio.core.dependencies import limiter
from portfolio.core.notifications import Notifier
from portfolio.database.supabase_client import SupabaseClient
from portfolio.modules.auth.service import clear_auth_cache

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse"


class FakeQuery:
    """Chainable query builder with the subset of the PostgREST API the repositories use."""

    def __init__(self, db, table, access_token=None):
        self.db = db
        self.table = table
        self.access_token = access_token
        self.operation = "select"
        self.payload = None
        self.filters = []
        self.ordering = None
        self.row_limit = None

    def select(self, columns="*"):
        self.operation = "select"
        return self

    def insert(self, row):
        self.operation = "insert"
        self.payload = copy.deepcopy(row)
        return self

    def update(self, patch):
        self.operation = "update"
        self.payload = copy.deepcopy(patch)
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.operation))
        self.db.token_log.append((self.table, self.operation, self.access_token))
        if (self.table, self.operation) in self.db.failures:
            raise Exception(f"connection refused while running {self.operation} on {self.table}")
        rows = self.db.tables.setdefault(self.table, [])

        if self.operation == "insert":
            rows.append(self.payload)
            return SimpleNamespace(data=[copy.deepcopy(self.payload)])

        if self.operation == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(copy.deepcopy(row))
            return SimpleNamespace(data=updated)

        if self.operation == "delete":
            removed = [row for row in rows if self._matches(row)]
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=copy.deepcopy(removed))

        selected = [copy.deepcopy(row) for row in rows if self._matches(row)]
        if self.ordering:
            column, desc = self.ordering
            selected.sort(key=lambda row: str(row.get(column) or ""), reverse=desc)
        if self.row_limit is not None:
            selected = selected[:self.row_limit]
        return SimpleNamespace(data=selected)


class FakeAuth:
    def __init__(self):
        self.users = {ADMIN_EMAIL: (ADMIN_PASSWORD, "user-admin")}
        self.tokens = {}
        self.session = None
        self.sign_out_calls = 0
        self.get_user_calls = 0
        self._counter = itertools.count(1)

    def sign_in_with_password(self, credentials):
        email = credentials["email"]
        password = credentials["password"]
        if email not in self.users or self.users[email][0] != password:
            raise Exception("Invalid login credentials")
        user = SimpleNamespace(id=self.users[email][1], email=email)
        token = f"token-{next(self._counter)}"
        self.tokens[token] = user
        self.session = SimpleNamespace(access_token=token, user=user)
        return SimpleNamespace(user=user, session=self.session)

    def get_user(self, jwt=None):
        self.get_user_calls += 1
        if jwt not in self.tokens:
            raise Exception("invalid JWT: unable to parse or verify signature")
        user = self.tokens[jwt]
        return SimpleNamespace(user=SimpleNamespace(
            id=user.id,
            email=user.email,
            user_metadata={},
            app_metadata={"provider": "email"},
            created_at="2024-01-01T00:00:00+00:00",
            updated_at=None,
        ))

    def get_session(self):
        return self.session

    def sign_out(self):
        self.sign_out_calls += 1
        self.session = None


class FakeSessionClient:
    """Per-token view of a FakeSupabase; table calls are logged with the token they ran under."""

    def __init__(self, db, access_token):
        self.db = db
        self.access_token = access_token

    def table(self, name):
        return FakeQuery(self.db, name, self.access_token)


class FakeSupabase:
    """In-memory Supabase client. Add (table, operation) pairs to `failures` to simulate outages."""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.token_log = []
        self.sessions_opened = []
        self.failures = set()
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)

    def for_session(self, access_token):
        self.sessions_opened.append(access_token)
        return FakeSessionClient(self, access_token)

    def tokens_for(self, table, operation):
        return [token for t, op, token in self.token_log if t == table and op == operation]

    def fail(self, table, operation):
        self.failures.add((table, operation))

    def recover(self):
        self.failures.clear()

    def rows(self, table):
        return self.tables.get(table, [])

    def calls_for(self, table, operation=None):
        return [call for call in self.calls if call[0] == table and (operation is None or call[1] == operation)]


def make_project(**overrides):
    row = {
        "id": "project-1",
        "title": "Network scanner",
        "description": "Scans a subnet and reports open ports",
        "category": "networks",
        "technologies": ["Python", "Scapy"],
        "image_url": None,
        "demo_url": None,
        "github_url": "https://github.com/example/scanner",
        "featured": False,
        "created_at": "2024-01-10T09:00:00+00:00",
        "updated_at": "2024-01-10T09:00:00+00:00",
    }
    row.update(overrides)
    return row


def make_certificate(**overrides):
    row = {
        "id": "certificate-1",
        "title": "Cloud Practitioner",
        "institution": "Example Academy",
        "date": "2023-05-20",
        "image_url": "https://images.example.com/cert.png",
        "description": None,
        "created_at": "2023-06-01T10:00:00+00:00",
        "updated_at": "2023-06-01T10:00:00+00:00",
    }
    row.update(overrides)
    return row


def make_experience(**overrides):
    row = {
        "id": "experience-1",
        "company": "Acme",
        "position": "Backend Developer",
        "description": "APIs and data pipelines",
        "start_date": "2022-01-15",
        "end_date": None,
        "technologies": ["Python", "PostgreSQL"],
        "achievements": ["Cut API latency in half"],
        "created_at": "2022-02-01T10:00:00+00:00",
        "updated_at": "2022-02-01T10:00:00+00:00",
    }
    row.update(overrides)
    return row


def make_profile(**overrides):
    row = {
        "id": "profile-1",
        "name": "Alex Doe",
        "title": "Security Engineer",
        "bio": "Builds and breaks web applications.",
        "email": "alex@example.com",
        "phone": None,
        "location": "Lisbon",
        "linkedin_url": None,
        "github_url": "https://github.com/alexdoe",
        "profile_image_url": None,
        "cv_url": None,
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
    }
    row.update(overrides)
    return row


@pytest.fixture(autouse=True)
def reset_shared_state():
    """Rate limits, the auth cache and the client singleton are process-wide."""
    limiter.reset()
    clear_auth_cache()
    SupabaseClient.reset_client()
    yield
    clear_auth_cache()
    SupabaseClient.reset_client()


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def test_settings():
    return Settings(
        supabase_url="https://test-project.supabase.co",
        supabase_key="test-anon-key",
        _env_file=None,
    )


@pytest.fixture
def client(test_settings, fake_supabase):
    from portfolio.main import create_app

    app = create_app(
        settings=test_settings,
        supabase=fake_supabase,
        session_client_factory=fake_supabase.for_session,
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/v1/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
