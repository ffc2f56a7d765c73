"""
Shared fixtures.

The suite runs against a throwaway SQLite file; DATABASE_URL has to be set
before career_ai is imported because settings and the engine are created at
import time.
"""

import os
import tempfile
import uuid
from datetime import datetime, timezone

_DB_DIR = tempfile.mkdtemp(prefix="career_ai_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["LLM_API_KEY"] = ""
os.environ["REFUND_ON_GATEWAY_FAILURE"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Integer

from career_ai.core.auth import create_access_token
from career_ai.core.config import get_settings
from career_ai.db.postgres import TIMESTAMP, get_db_session, typed_text
from career_ai.db.schema import init_schema, truncate_all
from career_ai.main import app
from career_ai.services.guidance_service import GuidanceService, get_guidance_service

SAMPLE_PAYLOADS = {
    "basic": {
        "careers": [
            {"title": "Data Analyst", "description": "Turns data into decisions.", "fitScore": 88, "resources": []},
        ],
        "extraNotes": "Strong fit for analytical roles.",
    },
    "detailed": {"careers": [{"title": "ML Engineer"}], "industryTrends": "Growing.", "extraNotes": ""},
    "interview": {"questions": [{"question": "Tell me about yourself", "sampleAnswer": "...", "tip": "Be brief"}]},
    "resume": {"improvements": [{"area": "Summary", "suggestion": "Add metrics", "priority": "high"}]},
    "roadmap": {"roadmap": [{"name": "Foundation", "duration": "0-6 months", "skills": [], "milestones": []}]},
    "salary_insights": {
        "entry": {"min": 50000, "max": 65000, "currency": "USD"},
        "mid": {"min": 70000, "max": 95000, "currency": "USD"},
        "senior": {"min": 100000, "max": 140000, "currency": "USD"},
        "tips": [],
        "notes": "",
    },
}


class FakeLLMClient:
    """Stands in for LLMClient; returns canned payloads or raises `error`."""

    model = "test-model"
    provider = "TestProvider"

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = []

    def complete_json(self, system_prompt, user_content, kind):
        self.calls.append({"system": system_prompt, "user": user_content, "kind": kind})
        if self.error is not None:
            raise self.error
        if self.payload is not None:
            return self.payload
        return SAMPLE_PAYLOADS[kind.value]


@pytest.fixture(scope="session", autouse=True)
def database():
    init_schema()
    yield


@pytest.fixture(autouse=True)
def clean_tables():
    truncate_all()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def settings():
    return get_settings()


def create_user(plan="free", queries_today=0, last_query_reset=None, with_profile=True, email=None):
    """Insert a user (and its profile row) directly. Returns the user id."""
    user_id = uuid.uuid4().hex
    now = datetime.now(timezone.utc)
    with get_db_session() as db:
        db.execute(
            typed_text("""
                INSERT INTO users (id, email, password_hash, is_active, created_at)
                VALUES (:id, :email, 'not-a-real-hash', TRUE, :now)
            """, timestamps=["now"]),
            {"id": user_id, "email": email or f"{user_id}@example.com", "now": now}
        )
        if with_profile:
            db.execute(
                typed_text("""
                    INSERT INTO profiles (id, full_name, email, subscription_plan, queries_today,
                                          last_query_reset, created_at, updated_at)
                    VALUES (:id, 'Test User', :email, :plan, :used, :last_reset, :now, :now)
                """, timestamps=["now", "last_reset"]),
                {
                    "id": user_id,
                    "email": email or f"{user_id}@example.com",
                    "plan": plan,
                    "used": queries_today,
                    "last_reset": last_query_reset,
                    "now": now,
                }
            )
    return user_id


def set_quota(user_id, queries_today, last_query_reset):
    with get_db_session() as db:
        db.execute(
            typed_text(
                "UPDATE profiles SET queries_today = :used, last_query_reset = :last_reset WHERE id = :id",
                timestamps=["last_reset"]
            ),
            {"id": user_id, "used": queries_today, "last_reset": last_query_reset}
        )


def get_quota_row(user_id):
    with get_db_session() as db:
        row = db.execute(
            typed_text(
                "SELECT queries_today, last_query_reset FROM profiles WHERE id = :id",
                queries_today=Integer, last_query_reset=TIMESTAMP
            ),
            {"id": user_id}
        ).first()
    return row.queries_today, row.last_query_reset


def auth_headers(user_id):
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def fake_llm():
    return FakeLLMClient()


@pytest.fixture
def use_llm(fake_llm):
    """Route /guidance/query through a GuidanceService backed by a fake LLM client."""

    def install(llm=None, **service_kwargs):
        llm = llm or fake_llm
        app.dependency_overrides[get_guidance_service] = lambda: GuidanceService(llm_client=llm, **service_kwargs)
        return llm

    install()
    return install
