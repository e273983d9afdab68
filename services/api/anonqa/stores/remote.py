"""Remote question store: a client-side projection over the board HTTP API.

Each store operation maps 1:1 to a request. Every request has a timeout;
failures are mapped back onto the shared error taxonomy:
- 400/409/422 -> ValidationError (server message kept verbatim)
- 404         -> NotFoundError
- 408/429/5xx, timeouts, connection errors -> TransientError

Nothing is retried automatically: the caller decides whether to prompt the
user, so a retry never duplicates a submission silently.
"""

from datetime import datetime
import logging
from typing import Any
from urllib.parse import quote

import httpx

from anonqa.schemas import AnswerCreatedOut, QuestionOut, ReportOut, StatsOut, VoteCountsOut
from anonqa.services.board import (
    DEFAULT_CLIENT_ID,
    Answer,
    BoardStats,
    Category,
    Question,
    Report,
    ReportReason,
    SortOrder,
    SubjectType,
    VoteCounts,
    VoteDirection,
    parse_enum,
)
from anonqa.services.errors import BoardError, NotFoundError, TransientError, ValidationError
from anonqa.settings import get_settings
from anonqa.stores.base import QuestionStore

logger = logging.getLogger("uvicorn.error")

_VOTE_PATHS = {
    SubjectType.QUESTION: "/api/questions",
    SubjectType.ANSWER: "/api/answers",
}


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def _error_from_response(response: httpx.Response) -> BoardError:
    try:
        body = response.json()
        message = body.get("message") if isinstance(body, dict) else None
    except ValueError:
        message = None
    message = message or f"Request failed with status {response.status_code}"

    code = response.status_code
    if code == 404:
        return NotFoundError(message)
    if code in (400, 409, 422):
        return ValidationError(message)
    if code in (408, 429) or code >= 500:
        return TransientError(message)
    return BoardError(message)


class RemoteStore(QuestionStore):
    """Question store backed by a remote board service."""

    def __init__(
        self,
        base_url: str | None = None,
        client_id: str = DEFAULT_CLIENT_ID,
        timeout: float | None = None,
        admin_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            base_url: Board service URL (default: settings.api_base_url).
            client_id: Anonymous vote key sent as X-Client-Id.
            timeout: Per-request timeout in seconds (default: settings.client_timeout_seconds).
            admin_token: Sent as X-Admin-Token for moderation operations.
            transport: Custom httpx transport (tests use ASGITransport).
        """
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.client_id = client_id
        self.timeout = timeout if timeout is not None else settings.client_timeout_seconds
        self.admin_token = admin_token
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        client_id: str | None = None,
        admin: bool = False,
    ) -> Any:
        headers = {"X-Client-Id": client_id or self.client_id}
        if admin and self.admin_token:
            headers["X-Admin-Token"] = self.admin_token

        client = await self._get_client()
        try:
            response = await client.request(method, path, json=json, params=params, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"Board API timeout: {method} {path}")
            raise TransientError("The request timed out. Please try again.") from e
        except httpx.TransportError as e:
            logger.warning(f"Board API unreachable: {method} {path}: {e}")
            raise TransientError("Service temporarily unavailable. Please try again later.") from e

        if response.status_code >= 400:
            raise _error_from_response(response)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ---------------------------------------------------------------- questions

    async def create_question(
        self,
        title: str,
        details: str | None = None,
        category: str | Category | None = None,
    ) -> Question:
        body = {
            "title": title,
            "details": details or "",
            "category": getattr(category, "value", category),
        }
        data = await self._request("POST", "/api/questions", json=body)
        return QuestionOut.model_validate(data).to_domain()

    async def get_question(self, question_id: str) -> Question:
        data = await self._request("GET", f"/api/questions/{_segment(question_id)}")
        return QuestionOut.model_validate(data).to_domain()

    async def delete_question(self, question_id: str) -> None:
        await self._request("DELETE", f"/api/admin/questions/{_segment(question_id)}", admin=True)

    async def list_questions(
        self,
        category: str | Category | None = None,
        sort: str | SortOrder = SortOrder.TRENDING,
        search: str | None = None,
    ) -> list[Question]:
        order = parse_enum(SortOrder, sort, "sort")
        params: dict[str, Any] = {"sort": order.value}
        if category:
            params["category"] = getattr(category, "value", category)
        if search:
            params["q"] = search
        data = await self._request("GET", "/api/questions", params=params)
        return [QuestionOut.model_validate(item).to_domain() for item in data]

    # ------------------------------------------------------------------ answers

    async def create_answer(self, question_id: str, content: str) -> Answer:
        data = await self._request(
            "POST",
            f"/api/questions/{_segment(question_id)}/answers",
            json={"text": content},
        )
        created = AnswerCreatedOut.model_validate(data)
        for answer in created.answers:
            if answer.id == created.answer_id:
                return answer.to_domain()
        # Deleted again before the server re-read the question.
        raise NotFoundError("Answer not found")

    async def delete_answer(self, answer_id: str) -> None:
        await self._request("DELETE", f"/api/admin/answers/{_segment(answer_id)}", admin=True)

    # ------------------------------------------------------------------- voting

    async def vote(
        self,
        subject_type: str | SubjectType,
        subject_id: str,
        direction: str | VoteDirection,
        *,
        client_id: str | None = None,
    ) -> VoteCounts:
        kind = parse_enum(SubjectType, subject_type, "subject type")
        wanted = parse_enum(VoteDirection, direction, "vote direction")
        data = await self._request(
            "POST",
            f"{_VOTE_PATHS[kind]}/{_segment(subject_id)}/{wanted.value}",
            client_id=client_id,
        )
        counts = VoteCountsOut.model_validate(data)
        return VoteCounts(likes=counts.likes, dislikes=counts.dislikes)

    async def get_vote(
        self,
        subject_type: str | SubjectType,
        subject_id: str,
        *,
        client_id: str | None = None,
    ) -> VoteDirection | None:
        kind = parse_enum(SubjectType, subject_type, "subject type")
        data = await self._request(
            "GET",
            f"/api/votes/{kind.value}/{_segment(subject_id)}",
            client_id=client_id,
        )
        vote = (data or {}).get("vote")
        return VoteDirection(vote) if vote else None

    # ------------------------------------------------------------------ reports

    async def create_report(
        self,
        item_type: str | SubjectType,
        item_id: str,
        reason: str | ReportReason,
        details: str | None = None,
    ) -> Report:
        body = {
            "type": getattr(item_type, "value", item_type),
            "id": item_id,
            "reason": getattr(reason, "value", reason),
            "details": details or "",
        }
        data = await self._request("POST", "/api/report", json=body)
        return ReportOut.model_validate(data).to_domain()

    async def list_reports(self) -> list[Report]:
        data = await self._request("GET", "/api/admin/reports", admin=True)
        return [ReportOut.model_validate(item).to_domain() for item in data]

    async def get_stats(self, now: datetime | None = None) -> BoardStats:
        # The server computes the window against its own clock; `now` is ignored.
        data = await self._request("GET", "/api/admin/stats", admin=True)
        return StatsOut.model_validate(data).to_domain()
