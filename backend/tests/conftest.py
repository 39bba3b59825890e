"""Shared fixtures: response factory, in-memory database, fake text generator, API client."""

import itertools
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bullying_monitor import models  # noqa: F401  registers tables
from bullying_monitor.db import Base, get_db
from bullying_monitor.schemas import SurveyResponse, UserRegistration
from bullying_monitor.settings import settings

ADMIN_PASSWORD = "test-admin-pass"

# 2024-03-01T08:00:00Z
BASE_TS = 1709280000000


class FakeGenerator:
    """Stands in for GeminiClient and records every call."""

    def __init__(self, reply: str = "## Tahlil\n- natija", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def generate(self, prompt, *, system_instruction=None, thinking_budget=None):
        self.calls.append(
            {"prompt": prompt, "system_instruction": system_instruction, "thinking_budget": thinking_budget}
        )
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def make_response():
    counter = itertools.count(1)

    def _make(
        answers: Dict[str, int],
        *,
        school: str = "12",
        class_number: str = "9",
        class_letter: str = "A",
        birth_year: int = 2010,
        timestamp: int = BASE_TS,
        first_name: str = "Ali",
        last_name: str = "Karimov",
    ) -> SurveyResponse:
        return SurveyResponse(
            id=f"r{next(counter)}",
            timestamp=timestamp,
            user=UserRegistration(
                first_name=first_name,
                last_name=last_name,
                birth_year=birth_year,
                school_number=school,
                class_number=class_number,
                class_letter=class_letter,
            ),
            answers=answers,
        )

    return _make


@pytest.fixture
def registration():
    return UserRegistration(
        first_name="Dilnoza",
        last_name="Rahimova",
        birth_year=2011,
        school_number="5",
        class_number="7",
        class_letter="B",
    )


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def client(db_session, fake_generator, monkeypatch):
    from bullying_monitor.main import app
    from bullying_monitor.reports import ReportBuilder
    from bullying_monitor.routers import admin

    monkeypatch.setattr(settings, "admin_password", ADMIN_PASSWORD)
    monkeypatch.setattr(settings, "admin_password_hash", None)

    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[admin.get_report_builder] = lambda: ReportBuilder(fake_generator)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        admin._inflight.clear()


@pytest.fixture
def admin_headers(client):
    r = client.post("/auth/token", json={"password": ADMIN_PASSWORD})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}
