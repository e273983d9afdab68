"""Tests for the board HTTP API."""

import pytest
from httpx import AsyncClient

from anonqa.stores.memory import InMemoryStore


async def _ask(client: AsyncClient, title: str = "Why is the sky blue?", **extra) -> dict:
    response = await client.post("/api/questions", json={"title": title, **extra})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_and_fetch_question(client: AsyncClient):
    created = await _ask(client, details="Rayleigh?", category="science")

    assert created["likes"] == 0
    assert created["dislikes"] == 0
    assert created["answers"] == []
    assert created["answerCount"] == 0
    assert created["category"] == "science"
    assert "createdAt" in created

    response = await client.get(f"/api/questions/{created['id']}")
    assert response.status_code == 200
    assert response.json()["title"] == "Why is the sky blue?"


@pytest.mark.asyncio
async def test_validation_errors_use_message_shape(client: AsyncClient):
    response = await client.post("/api/questions", json={"title": "   "})
    assert response.status_code == 400
    assert response.json() == {"message": "Question title is required"}

    response = await client.post("/api/questions", json={"title": "x" * 201})
    assert response.status_code == 400
    assert "200" in response.json()["message"]

    response = await client.post("/api/questions", json={"title": 123})
    assert response.status_code == 400
    assert "message" in response.json()


@pytest.mark.asyncio
async def test_unknown_question_is_404(client: AsyncClient):
    response = await client.get("/api/questions/nope")
    assert response.status_code == 404
    assert response.json() == {"message": "Question not found"}

    response = await client.post("/api/questions/nope/answers", json={"text": "hi"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_answer_returns_updated_question(client: AsyncClient):
    question = await _ask(client)
    response = await client.post(f"/api/questions/{question['id']}/answers", json={"text": "Scattering"})
    assert response.status_code == 201
    body = response.json()
    assert body["answerCount"] == 1
    assert body["answers"][0]["content"] == "Scattering"
    assert body["answers"][0]["questionId"] == question["id"]


@pytest.mark.asyncio
async def test_vote_toggle_over_http(client: AsyncClient):
    question = await _ask(client)
    url = f"/api/questions/{question['id']}"

    assert (await client.post(f"{url}/like")).json() == {"likes": 1, "dislikes": 0}
    assert (await client.post(f"{url}/like")).json() == {"likes": 0, "dislikes": 0}

    await client.post(f"{url}/like")
    assert (await client.post(f"{url}/dislike")).json() == {"likes": 0, "dislikes": 1}


@pytest.mark.asyncio
async def test_vote_is_keyed_by_client_header(client: AsyncClient):
    question = await _ask(client)
    url = f"/api/questions/{question['id']}/like"

    await client.post(url, headers={"X-Client-Id": "alice"})
    response = await client.post(url, headers={"X-Client-Id": "bob"})
    assert response.json() == {"likes": 2, "dislikes": 0}

    vote = await client.get(f"/api/votes/question/{question['id']}", headers={"X-Client-Id": "alice"})
    assert vote.json() == {"vote": "like"}
    vote = await client.get(f"/api/votes/question/{question['id']}", headers={"X-Client-Id": "carol"})
    assert vote.json() == {"vote": None}


@pytest.mark.asyncio
async def test_answer_votes(client: AsyncClient):
    question = await _ask(client)
    body = (await client.post(f"/api/questions/{question['id']}/answers", json={"text": "A"})).json()
    answer_id = body["answers"][0]["id"]

    response = await client.post(f"/api/answers/{answer_id}/dislike")
    assert response.json() == {"likes": 0, "dislikes": 1}

    response = await client.post("/api/answers/missing/like")
    assert response.status_code == 404
    assert response.json() == {"message": "Answer not found"}


@pytest.mark.asyncio
async def test_answer_votes_nested_under_question(client: AsyncClient):
    question = await _ask(client)
    other = await _ask(client, "Another one")
    body = (await client.post(f"/api/questions/{question['id']}/answers", json={"text": "A"})).json()
    answer_id = body["answerId"]
    url = f"/api/questions/{question['id']}/answers/{answer_id}"

    assert (await client.post(f"{url}/like")).json() == {"likes": 1, "dislikes": 0}
    assert (await client.post(f"{url}/dislike")).json() == {"likes": 0, "dislikes": 1}
    assert (await client.get(f"/api/votes/answer/{answer_id}")).json() == {"vote": "dislike"}

    # The answer must belong to the question in the path.
    response = await client.post(f"/api/questions/{other['id']}/answers/{answer_id}/like")
    assert response.status_code == 404
    assert response.json() == {"message": "Answer not found"}
    response = await client.post(f"/api/questions/missing/answers/{answer_id}/like")
    assert response.json() == {"message": "Question not found"}

    fetched = (await client.get(f"/api/questions/{question['id']}")).json()
    assert (fetched["answers"][0]["likes"], fetched["answers"][0]["dislikes"]) == (0, 1)


@pytest.mark.asyncio
async def test_answer_response_identifies_new_answer(client: AsyncClient):
    question = await _ask(client)
    first = (await client.post(f"/api/questions/{question['id']}/answers", json={"text": "first"})).json()
    second = (await client.post(f"/api/questions/{question['id']}/answers", json={"text": "second"})).json()

    assert first["answerId"] == first["answers"][0]["id"]
    assert second["answerId"] == second["answers"][1]["id"]
    assert second["answerId"] != first["answerId"]


@pytest.mark.asyncio
async def test_listing_filters_and_sorts(client: AsyncClient, clock):
    first = await _ask(client, "Q1", category="tech")
    clock.advance(1)
    second = await _ask(client, "Q2", category="life")

    latest = (await client.get("/api/questions", params={"sort": "latest"})).json()
    assert [q["id"] for q in latest] == [second["id"], first["id"]]

    tech = (await client.get("/api/questions", params={"category": "technology"})).json()
    assert [q["id"] for q in tech] == [first["id"]]

    found = (await client.get("/api/questions", params={"q": "q2"})).json()
    assert [q["id"] for q in found] == [second["id"]]

    bad = await client.get("/api/questions", params={"sort": "random"})
    assert bad.status_code == 400


@pytest.mark.asyncio
async def test_report_submission(client: AsyncClient, store: InMemoryStore):
    response = await client.post(
        "/api/report",
        json={"type": "answer", "id": "some-answer", "reason": "spam", "details": "ads"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["itemType"] == "answer"
    assert body["itemId"] == "some-answer"
    assert body["status"] == "pending"
    assert len(await store.list_reports()) == 1

    response = await client.post("/api/report", json={"type": "answer", "id": "x"})
    assert response.status_code == 400
    assert "required" in response.json()["message"]

    response = await client.post("/api/report", json={"type": "answer", "id": "x" * 65, "reason": "spam"})
    assert response.status_code == 400
    assert response.json() == {"message": "Report id must be at most 64 characters"}


@pytest.mark.asyncio
async def test_admin_requires_token(client: AsyncClient):
    question = await _ask(client)

    assert (await client.get("/api/admin/reports")).status_code == 403
    response = await client.delete(f"/api/admin/questions/{question['id']}", headers={"X-Admin-Token": "wrong"})
    assert response.status_code == 403
    assert response.json() == {"message": "Forbidden"}


@pytest.mark.asyncio
async def test_admin_delete_keeps_reports(client: AsyncClient, admin_headers: dict[str, str]):
    question = await _ask(client)
    await client.post("/api/report", json={"type": "question", "id": question["id"], "reason": "off_topic"})

    response = await client.delete(f"/api/admin/questions/{question['id']}", headers=admin_headers)
    assert response.status_code == 204
    assert (await client.get(f"/api/questions/{question['id']}")).status_code == 404

    reports = (await client.get("/api/admin/reports", headers=admin_headers)).json()
    assert [r["itemId"] for r in reports] == [question["id"]]

    stats = (await client.get("/api/admin/stats", headers=admin_headers)).json()
    assert stats["totalQuestions"] == 0
    assert stats["totalReports"] == 1


@pytest.mark.asyncio
async def test_admin_delete_answer(client: AsyncClient, admin_headers: dict[str, str]):
    question = await _ask(client)
    body = (await client.post(f"/api/questions/{question['id']}/answers", json={"text": "A"})).json()
    answer_id = body["answers"][0]["id"]

    assert (await client.delete(f"/api/admin/answers/{answer_id}", headers=admin_headers)).status_code == 204
    assert (await client.delete(f"/api/admin/answers/{answer_id}", headers=admin_headers)).status_code == 404
    assert (await client.get(f"/api/questions/{question['id']}")).json()["answers"] == []
