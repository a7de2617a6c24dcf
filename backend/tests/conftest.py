"""Shared pytest fixtures for backend tests."""

import random
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from quizdesk.api.deps import get_clock, get_rng
from quizdesk.core.models import QuestionSpec
from quizdesk.core.security import hash_password
from quizdesk.db.models import Question, Quiz, RoleEnum, User
from quizdesk.db.session import Base, get_db
from quizdesk.main import app
from quizdesk.services.session_store import SessionStore

# Use an in-memory SQLite database for testing with static pool
SQLALCHEMY_TEST_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,  # Use StaticPool to keep connection alive
    echo=False,
)
TestSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)

T0 = datetime(2026, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Controllable clock handed to the API instead of the wall clock."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


def at(seconds: float) -> datetime:
    """Timestamp *seconds* after T0."""
    return T0 + timedelta(seconds=seconds)


def make_specs(count: int, quiz_id: int = 1, points: int = 1) -> list[QuestionSpec]:
    """Engine-level questions whose correct answer is always 'A'."""
    return [
        QuestionSpec(
            id=i + 1,
            quiz_id=quiz_id,
            text=f"Question {i + 1}?",
            options=(f"right {i}", f"wrong {i}b", f"wrong {i}c", f"wrong {i}d"),
            correct_option="A",
            points=points,
        )
        for i in range(count)
    ]


@pytest.fixture(scope="function")
def db():
    """Fresh schema and DB session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestSession()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_quiz(db: Session):
    """Factory: insert a quiz with a pool of questions; returns the ORM quiz."""

    def _make(
        pool: int = 2,
        total: int | None = None,
        time_limit: int = 90,
        points: list[int] | None = None,
        active: bool = True,
        title: str = "Java Basics",
    ) -> Quiz:
        quiz = Quiz(
            title=title,
            total_questions=total if total is not None else pool,
            time_limit_seconds=time_limit,
            active=active,
            questions=[
                Question(
                    text=f"{title} question {i + 1}?",
                    option_a="alpha",
                    option_b="beta",
                    option_c="gamma",
                    option_d="delta",
                    correct_option="ABCD"[i % 4],
                    points=points[i] if points else 1,
                )
                for i in range(pool)
            ],
        )
        db.add(quiz)
        db.commit()
        db.refresh(quiz)
        return quiz

    return _make


@pytest.fixture(scope="function")
def client(db: Session, clock: FakeClock):
    """FastAPI test client with overridden DB, clock and randomness."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_rng] = lambda: random.Random(1234)
    app.state.session_store = SessionStore(retention_seconds=3600)

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ── Auth helpers ──────────────────────────────────────────────────────────────


def register_and_login(client: TestClient) -> dict:
    """Register a fresh examinee account and return bearer auth headers."""
    resp = client.post(
        "/api/users/register",
        json={
            "username": f"student_{uuid.uuid4().hex[:8]}",
            "password": "secret1",
            "full_name": "Test Student",
        },
    )
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def admin_login(client: TestClient, db: Session) -> dict:
    """Insert an admin row directly (registration only creates students) and log in."""
    username = f"admin_{uuid.uuid4().hex[:8]}"
    db.add(User(
        username=username,
        hashed_password=hash_password("secret1"),
        full_name="Test Admin",
        role=RoleEnum.ADMIN,
    ))
    db.commit()
    resp = client.post("/api/users/login", json={"username": username, "password": "secret1"})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def student_headers(client: TestClient) -> dict:
    return register_and_login(client)


@pytest.fixture
def admin_headers(client: TestClient, db: Session) -> dict:
    return admin_login(client, db)
