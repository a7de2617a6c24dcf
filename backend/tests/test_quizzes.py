"""Integration tests for the quiz catalog endpoints."""

from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from quizdesk.db.models import Question, Quiz


def _quiz_payload(total: int = 2, pool: int = 3) -> dict:
    return {
        "title": "Python Basics",
        "total_questions": total,
        "time_limit_seconds": 120,
        "questions": [
            {
                "text": f"Question {i}?",
                "options": ["one", "two", "three", "four"],
                "correct_option": "C",
                "points": 1,
            }
            for i in range(pool)
        ],
    }


class TestCatalog:
    def test_list_only_active(self, client: TestClient, make_quiz, student_headers):
        make_quiz(pool=7, total=5, title="Java Basics")
        make_quiz(title="Retired", active=False)

        resp = client.get("/api/quizzes/", headers=student_headers)

        assert resp.status_code == 200
        data = resp.json()
        assert [q["title"] for q in data] == ["Java Basics"]
        assert data[0]["question_count"] == 5
        assert data[0]["pool_size"] == 7
        assert data[0]["time_limit_seconds"] == 90

    def test_include_inactive_is_admin_only(
        self, client: TestClient, make_quiz, student_headers, admin_headers
    ):
        make_quiz(title="Live")
        make_quiz(title="Retired", active=False)
        params = {"include_inactive": "true"}

        as_admin = client.get("/api/quizzes/", params=params, headers=admin_headers).json()
        as_student = client.get("/api/quizzes/", params=params, headers=student_headers).json()

        assert [q["title"] for q in as_admin] == ["Live", "Retired"]
        assert [q["title"] for q in as_student] == ["Live"]

    def test_get_quiz(self, client: TestClient, make_quiz, student_headers):
        quiz = make_quiz(pool=3)
        resp = client.get(f"/api/quizzes/{quiz.id}", headers=student_headers)
        assert resp.status_code == 200
        assert resp.json()["id"] == quiz.id

    def test_get_missing_quiz(self, client: TestClient, student_headers):
        resp = client.get("/api/quizzes/999", headers=student_headers)
        assert resp.status_code == 404
        assert resp.json()["error_code"] == "not_found"

    def test_requires_auth(self, client: TestClient):
        assert client.get("/api/quizzes/").status_code == 401


class TestAdmin:
    def test_admin_creates_quiz(self, client: TestClient, db: Session, admin_headers):
        resp = client.post("/api/quizzes/", json=_quiz_payload(), headers=admin_headers)

        assert resp.status_code == 201, resp.text
        data = resp.json()
        assert data["question_count"] == 2
        assert data["pool_size"] == 3
        assert db.scalar(select(func.count()).select_from(Question)) == 3

    def test_student_cannot_create_quiz(self, client: TestClient, student_headers):
        resp = client.post("/api/quizzes/", json=_quiz_payload(), headers=student_headers)
        assert resp.status_code == 403

    def test_question_count_cannot_exceed_pool(self, client: TestClient, admin_headers):
        resp = client.post("/api/quizzes/", json=_quiz_payload(total=5, pool=3), headers=admin_headers)
        assert resp.status_code == 422

    def test_question_needs_four_options(self, client: TestClient, admin_headers):
        payload = _quiz_payload()
        payload["questions"][0]["options"] = ["only", "three", "options"]
        resp = client.post("/api/quizzes/", json=payload, headers=admin_headers)
        assert resp.status_code == 422

    def test_correct_option_must_be_a_label(self, client: TestClient, admin_headers):
        payload = _quiz_payload()
        payload["questions"][0]["correct_option"] = "E"
        resp = client.post("/api/quizzes/", json=payload, headers=admin_headers)
        assert resp.status_code == 422

    def test_delete_quiz_cascades(self, client: TestClient, db: Session, make_quiz, admin_headers):
        quiz = make_quiz(pool=4)

        resp = client.delete(f"/api/quizzes/{quiz.id}", headers=admin_headers)

        assert resp.status_code == 204
        assert db.scalar(select(func.count()).select_from(Quiz)) == 0
        assert db.scalar(select(func.count()).select_from(Question)) == 0

    def test_delete_missing_quiz(self, client: TestClient, admin_headers):
        resp = client.delete("/api/quizzes/4242", headers=admin_headers)
        assert resp.status_code == 404
