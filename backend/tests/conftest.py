"""Shared pytest fixtures for backend tests."""

import os
import uuid

# Must be set before webculus.config is imported anywhere
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("STATS_TIMEZONE", "UTC")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from webculus.db.models import Lesson, PracticeProblem
from webculus.db.session import Base, get_db
from webculus.main import app


# Use an in-memory SQLite database for testing with static pool
SQLALCHEMY_TEST_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,  # Use StaticPool to keep connection alive
    echo=False,
)
TestSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(scope="function")
def db():
    """Fresh schema and DB session for each test (routes commit)."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestSession()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db: Session):
    """FastAPI test client with overridden DB dependency."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ── Helpers ────────────────────────────────────────────────────────────────────


def signup(client: TestClient, email: str | None = None, password: str = "secret1", name: str = "Test Learner") -> dict:
    """Create an account and return the auth response body."""
    email = email or f"learner_{uuid.uuid4().hex[:8]}@ex.com"
    resp = client.post(
        "/api/auth/signup",
        json={"email": email, "password": password, "name": name},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_lesson(db: Session, slug: str = "linear-equations", title: str = "Linear Equations", order: int = 1, **kwargs) -> Lesson:
    lesson = Lesson(slug=slug, title=title, order_index=order, **kwargs)
    db.add(lesson)
    db.commit()
    db.refresh(lesson)
    return lesson


def create_problem(db: Session, lesson: Lesson, answer: str = "x = 3", topic: str = "Elimination", order: int = 1) -> PracticeProblem:
    problem = PracticeProblem(
        lesson_id=lesson.id,
        question=f"Question {order}",
        choices=[answer, "x = 0", "x = 1", "x = 2"],
        correct_answer=answer,
        explanation="Because.",
        topic=topic,
        order_index=order,
    )
    db.add(problem)
    db.commit()
    db.refresh(problem)
    return problem
