"""Tests for the lesson catalog and health endpoints."""

from sqlalchemy.exc import OperationalError

from conftest import create_lesson
from webculus.db.session import get_db
from webculus.main import app


def test_list_lessons_in_order(client, db):
    create_lesson(db, "nonlinear-systems", "Non-Linear Systems", order=3)
    create_lesson(db, "linear-equations", "Linear Equations", order=1)
    create_lesson(db, "draft", "Draft", order=2, is_published=False)

    resp = client.get("/api/lessons")

    assert resp.status_code == 200
    assert [lesson["slug"] for lesson in resp.json()] == ["linear-equations", "nonlinear-systems"]


def test_get_lesson_by_slug(client, db):
    create_lesson(db, "linear-inequalities", "Linear Inequalities", order=2)
    resp = client.get("/api/lessons/linear-inequalities")
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Linear Inequalities"
    assert body["difficulty_level"] == "beginner"


def test_get_lesson_not_found(client, db):
    resp = client.get("/api/lessons/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Lesson not found"


def test_get_unpublished_lesson_is_hidden(client, db):
    create_lesson(db, "draft", "Draft", is_published=False)
    assert client.get("/api/lessons/draft").status_code == 404


def test_get_lesson_bad_slug(client):
    assert client.get("/api/lessons/Not_A_Slug").status_code == 422


# ── health ────────────────────────────────────────────────────────────────────


def test_liveness(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_readiness(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["database"] == "connected"


class _DeadSession:
    def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("could not connect"))


def test_readiness_without_database(client):
    app.dependency_overrides[get_db] = lambda: _DeadSession()
    resp = client.get("/api/health")
    assert resp.status_code == 503
    assert resp.json()["database"] == "disconnected"


def test_root_lists_endpoints(client):
    body = client.get("/").json()
    assert body["endpoints"]["dashboard"] == "/api/dashboard/stats"
