"""Tests for RemoteStore: end-to-end against the ASGI app, plus error mapping."""

import httpx
import pytest
from httpx import ASGITransport

from anonqa.services.board import Category, ReportReason, VoteCounts, VoteDirection
from anonqa.services.errors import BoardError, NotFoundError, TransientError, ValidationError
from anonqa.stores.remote import RemoteStore


@pytest.fixture
async def remote(app, admin_headers):
    store = RemoteStore(
        base_url="http://test",
        client_id="remote-client",
        admin_token=admin_headers["X-Admin-Token"],
        transport=ASGITransport(app=app),
    )
    yield store
    await store.close()


def _mock_store(handler) -> RemoteStore:
    return RemoteStore(base_url="http://board", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_question_lifecycle_over_http(remote: RemoteStore):
    question = await remote.create_question("Remote?", details="via httpx", category="tech")
    assert question.category is Category.TECHNOLOGY
    assert (question.likes, question.dislikes, question.answers) == (0, 0, [])

    answer = await remote.create_answer(question.id, "Yes")
    assert answer.content == "Yes"
    assert answer.question_id == question.id

    fetched = await remote.get_question(question.id)
    assert [a.id for a in fetched.answers] == [answer.id]

    listed = await remote.list_questions(category="technology", sort="latest")
    assert [q.id for q in listed] == [question.id]


@pytest.mark.asyncio
async def test_vote_toggle_over_http(remote: RemoteStore):
    question = await remote.create_question("Vote remotely")

    assert await remote.vote("question", question.id, "like") == VoteCounts(likes=1, dislikes=0)
    assert await remote.get_vote("question", question.id) is VoteDirection.LIKE
    assert await remote.vote("question", question.id, "like") == VoteCounts(likes=0, dislikes=0)
    assert await remote.get_vote("question", question.id) is None

    # A different client id is a different voter.
    await remote.vote("question", question.id, "dislike", client_id="someone-else")
    counts = await remote.vote("question", question.id, "dislike")
    assert counts == VoteCounts(likes=0, dislikes=2)


@pytest.mark.asyncio
async def test_answer_vote_over_http(remote: RemoteStore):
    question = await remote.create_question("Q")
    answer = await remote.create_answer(question.id, "A")
    assert await remote.vote("answer", answer.id, "like") == VoteCounts(likes=1, dislikes=0)


@pytest.mark.asyncio
async def test_errors_map_back_to_taxonomy(remote: RemoteStore):
    with pytest.raises(ValidationError, match="title is required"):
        await remote.create_question("  ")
    with pytest.raises(NotFoundError, match="Question not found"):
        await remote.create_answer("missing", "text")
    with pytest.raises(NotFoundError):
        await remote.vote("answer", "missing", "like")
    with pytest.raises(ValidationError):
        await remote.vote("question", "anything", "meh")


@pytest.mark.asyncio
async def test_reports_and_moderation_over_http(remote: RemoteStore):
    question = await remote.create_question("Reported")
    report = await remote.create_report("question", question.id, ReportReason.HARASSMENT, details="rude")
    assert report.reason is ReportReason.HARASSMENT

    await remote.delete_question(question.id)
    with pytest.raises(NotFoundError):
        await remote.get_question(question.id)

    reports = await remote.list_reports()
    assert [r.id for r in reports] == [report.id]

    stats = await remote.get_stats()
    assert stats.total_questions == 0
    assert stats.total_reports == 1


@pytest.mark.asyncio
async def test_admin_without_token_is_rejected(app):
    store = RemoteStore(base_url="http://test", transport=ASGITransport(app=app))
    try:
        with pytest.raises(BoardError, match="Forbidden"):
            await store.list_reports()
    finally:
        await store.close()


@pytest.mark.asyncio
async def test_timeout_is_transient():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    store = _mock_store(handler)
    with pytest.raises(TransientError, match="timed out"):
        await store.list_questions()
    await store.close()


@pytest.mark.asyncio
async def test_connection_error_is_transient():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    store = _mock_store(handler)
    with pytest.raises(TransientError):
        await store.get_question("q1")
    await store.close()


@pytest.mark.asyncio
async def test_server_error_is_transient_and_keeps_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"message": "Service temporarily unavailable"})

    store = _mock_store(handler)
    with pytest.raises(TransientError, match="temporarily unavailable"):
        await store.create_report("question", "q1", "spam")
    await store.close()


@pytest.mark.asyncio
async def test_non_json_error_body_gets_generic_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="<html>nope</html>")

    store = _mock_store(handler)
    with pytest.raises(NotFoundError, match="status 404"):
        await store.get_question("q1")
    await store.close()


@pytest.mark.asyncio
async def test_requests_carry_client_id_and_timeout():
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["client"] = request.headers.get("X-Client-Id")
        seen["path"] = request.url.path
        seen["timeout"] = request.extensions.get("timeout")
        return httpx.Response(200, json={"likes": 3, "dislikes": 1})

    store = RemoteStore(
        base_url="http://board",
        client_id="abc",
        timeout=2.5,
        transport=httpx.MockTransport(handler),
    )
    counts = await store.vote("answer", "a1", "like")
    await store.close()

    assert counts == VoteCounts(likes=3, dislikes=1)
    assert seen["client"] == "abc"
    assert seen["path"] == "/api/answers/a1/like"
    assert seen["timeout"]["read"] == 2.5


@pytest.mark.asyncio
async def test_create_answer_picks_answer_by_id():
    # Another client's answer landed after ours but before the server re-read the question.
    body = {
        "id": "q1",
        "title": "Busy question",
        "details": "",
        "category": "general",
        "createdAt": "2026-01-15T10:30:00Z",
        "likes": 0,
        "dislikes": 0,
        "answerCount": 2,
        "trendingScore": 1.0,
        "answerId": "a-mine",
        "answers": [
            {"id": "a-mine", "questionId": "q1", "content": "mine",
             "createdAt": "2026-01-15T10:30:01Z", "likes": 0, "dislikes": 0},
            {"id": "a-theirs", "questionId": "q1", "content": "theirs",
             "createdAt": "2026-01-15T10:30:02Z", "likes": 0, "dislikes": 0},
        ],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, json=body)

    store = _mock_store(handler)
    answer = await store.create_answer("q1", "mine")
    await store.close()

    assert answer.id == "a-mine"
    assert answer.content == "mine"
