"""
Integration tests for the HTTP API.

The app runs without its startup hook; the store and pipeline
dependencies are swapped for in-memory fixtures.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from debaterag.api.main import GENERIC_ERROR_MESSAGE, create_app
from debaterag.errors import StoreError
from debaterag.nodes.loader import NO_HISTORY_MESSAGE
from debaterag.retrieval.resources import get_debate_store, get_pipeline_dependencies
from debaterag.store import new_debate_id


@pytest.fixture
def app(seeded_store, pipeline_deps):
    app = create_app(with_lifespan=False)
    app.dependency_overrides[get_debate_store] = lambda: seeded_store
    app.dependency_overrides[get_pipeline_dependencies] = lambda: pipeline_deps
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


NEW_DEBATE = {
    "clientId": "u3",
    "debateTopic": "Cities should ban private cars",
    "userRole": "for",
    "chatHistory": [
        {"speaker": "user", "content": "Cars make cities loud and dangerous."},
        {"speaker": "AI Opponent", "content": "Many workers have no alternative."},
    ],
    "adjudicationResult": {"winner": "user"},
}


@pytest.mark.integration
class TestDebateEndpoints:
    def test_list_debates_newest_first(self, client):
        response = client.get("/api/debates")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [d["topic"] for d in body["data"]] == [
            "Homework should be abolished",
            "Social media does more harm than good",
            "Nuclear power should replace fossil fuels",
        ]
        assert {"id", "clientId", "topic", "createdAt"} <= set(body["data"][0])

    def test_create_then_fetch(self, client):
        created = client.post("/api/debates", json=NEW_DEBATE)

        assert created.status_code == 201
        record = created.json()["data"]
        assert record["clientId"] == "u3"
        assert record["topic"] == "Cities should ban private cars"
        assert len(record["id"]) == 24

        fetched = client.get(f"/api/debates/{record['id']}")

        assert fetched.status_code == 200
        data = fetched.json()["data"]
        assert data["chatHistory"][1] == {
            "speaker": "AI Opponent",
            "content": "Many workers have no alternative.",
        }
        assert data["adjudicationResult"] == {"winner": "user"}

    def test_created_debate_is_listed_first(self, client):
        client.post("/api/debates", json=NEW_DEBATE)

        topics = [d["topic"] for d in client.get("/api/debates").json()["data"]]

        assert topics[0] == "Cities should ban private cars"
        assert len(topics) == 4

    def test_mixed_offsets_listed_by_instant(self, client):
        # 10:30+05:00 is 05:30 UTC, earlier than 09:00 UTC
        client.post(
            "/api/debates",
            json={**NEW_DEBATE, "debateTopic": "earlier", "createdAt": "2030-01-01T10:30:00+05:00"},
        )
        client.post(
            "/api/debates",
            json={**NEW_DEBATE, "debateTopic": "later", "createdAt": "2030-01-01T09:00:00+00:00"},
        )

        data = client.get("/api/debates").json()["data"]

        assert [d["topic"] for d in data[:2]] == ["later", "earlier"]
        assert data[1]["createdAt"] in ("2030-01-01T05:30:00Z", "2030-01-01T05:30:00+00:00")

    def test_turn_timestamp_kept_when_present(self, client):
        payload = {
            **NEW_DEBATE,
            "chatHistory": [{"speaker": "user", "content": "Hi", "timestamp": "2030-01-01T09:00:00Z"}],
        }

        record = client.post("/api/debates", json=payload).json()["data"]

        assert record["chatHistory"][0]["timestamp"] in ("2030-01-01T09:00:00Z", "2030-01-01T09:00:00+00:00")

    @pytest.mark.parametrize("missing", ["clientId", "debateTopic", "userRole"])
    def test_create_missing_field(self, client, missing):
        payload = dict(NEW_DEBATE)
        del payload[missing]

        response = client.post("/api/debates", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation Error"
        assert body["error"]

    def test_get_invalid_id(self, client):
        response = client.get("/api/debates/not-an-id")

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid debate ID format."}

    def test_get_unknown_id(self, client):
        response = client.get(f"/api/debates/{new_debate_id()}")

        assert response.status_code == 404
        assert response.json()["message"] == "Debate not found."

    def test_store_failure_is_generic_500(self, app, client):
        broken = MagicMock()
        broken.list_summaries.side_effect = StoreError("database is locked")
        app.dependency_overrides[get_debate_store] = lambda: broken

        response = client.get("/api/debates")

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": GENERIC_ERROR_MESSAGE}


@pytest.mark.integration
class TestChatEndpoint:
    def test_answers_from_client_history(self, client, fake_llm):
        response = client.post(
            "/api/chat/rag",
            json={"question": "What did I say about nuclear carbon?", "clientId": "u1"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "reply": "You argued that nuclear power is clean.",
        }
        assert "Homework" not in fake_llm.calls[0][0]["content"]

    @pytest.mark.parametrize("payload", [{}, {"question": ""}, {"question": "   "}, {"clientId": "u1"}])
    def test_missing_question(self, client, pipeline_deps, payload):
        pipeline_deps.store = MagicMock()

        response = client.post("/api/chat/rag", json=payload)

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Question is required."}
        pipeline_deps.store.find.assert_not_called()

    def test_no_history(self, client, fake_llm):
        response = client.post("/api/chat/rag", json={"question": "Anything?", "clientId": "nobody"})

        assert response.status_code == 200
        assert response.json()["reply"] == NO_HISTORY_MESSAGE
        assert fake_llm.calls == []

    def test_stage_failure_is_generic_500(self, client, pipeline_deps):
        pipeline_deps.llm = MagicMock()
        pipeline_deps.llm.acomplete = AsyncMock(side_effect=ConnectionError("provider unreachable"))

        response = client.post("/api/chat/rag", json={"question": "q", "clientId": "u1"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": GENERIC_ERROR_MESSAGE}
        assert "unreachable" not in response.text


@pytest.mark.integration
def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Server is running"
    assert "timestamp" in body
