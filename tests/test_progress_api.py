import pytest
from fastapi.testclient import TestClient

from progress.app.main import create_app
from progress.app.schemas import SessionType
from progress.app.services.session_cache import SessionProgressCache

from conftest import BrokenStore

API = "/api/v1/progress"


@pytest.fixture
def client(cache):
    return TestClient(create_app(cache=cache))


def test_start_answer_resume_and_clear(client):
    response = client.post(f"{API}/study/sessions", json={"sessionId": "s1", "lessonId": "lessonA"})
    assert response.status_code == 201
    body = response.json()
    assert body["sessionId"] == "s1"
    assert body["currentWordIndex"] == 0
    assert body["wordProgress"] == {}

    response = client.post(
        f"{API}/study/sessions/s1/answers",
        json={"wordId": "w1", "isCorrect": True, "userNotes": "sounds like tree", "currentWordIndex": 1},
    )
    assert response.status_code == 204

    response = client.get(f"{API}/study/lessons/lessonA")
    assert response.status_code == 200
    assert response.json() == {"sessionId": "s1"}

    record = client.get(f"{API}/study/sessions/s1").json()
    assert record["currentWordIndex"] == 1
    assert record["wordProgress"]["w1"]["userNotes"] == "sounds like tree"

    response = client.delete(f"{API}/study/sessions/s1", params={"lesson_id": "lessonA"})
    assert response.status_code == 204
    assert client.get(f"{API}/study/sessions/s1").status_code == 404
    assert client.get(f"{API}/study/lessons/lessonA").status_code == 404


def test_answer_for_unknown_session_is_accepted_and_ignored(client, cache):
    response = client.post(
        f"{API}/test/sessions/nope/answers",
        json={"wordId": "w1", "isCorrect": False, "currentWordIndex": 0},
    )
    assert response.status_code == 204
    assert cache.load(SessionType.TEST, "nope") is None


def test_save_snapshot(client):
    response = client.put(
        f"{API}/test/sessions/s5",
        json={
            "lessonId": "lessonB",
            "currentWordIndex": 3,
            "wordProgress": {"w1": {"isCorrect": False, "userNotes": None, "answeredAt": "2026-10-19T10:00:00Z"}},
        },
    )
    assert response.status_code == 200
    assert response.json()["currentWordIndex"] == 3
    assert client.get(f"{API}/test/lessons/lessonB").json()["sessionId"] == "s5"


def test_rejects_unknown_session_type(client):
    response = client.post(f"{API}/review/sessions", json={"sessionId": "s1", "lessonId": "lessonA"})
    assert response.status_code == 422


def test_rejects_negative_word_index(client):
    client.post(f"{API}/study/sessions", json={"sessionId": "s1", "lessonId": "lessonA"})
    response = client.post(
        f"{API}/study/sessions/s1/answers",
        json={"wordId": "w1", "isCorrect": True, "currentWordIndex": -1},
    )
    assert response.status_code == 422


def test_clear_twice_is_fine(client):
    client.post(f"{API}/test/sessions", json={"sessionId": "s1", "lessonId": "lessonA"})
    for _ in range(2):
        response = client.delete(f"{API}/test/sessions/s1", params={"lesson_id": "lessonA"})
        assert response.status_code == 204


def test_unavailable_storage_reports_503():
    client = TestClient(create_app(cache=SessionProgressCache(BrokenStore())))

    response = client.post(f"{API}/study/sessions", json={"sessionId": "s1", "lessonId": "lessonA"})
    assert response.status_code == 503
