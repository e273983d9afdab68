"""Abstract base class for question/answer stores.

Every backend (in-memory, SQL, remote HTTP) implements the same contract and
raises the same errors (see anonqa.services.errors).
"""

from abc import ABC, abstractmethod
from datetime import datetime

from anonqa.services.board import (
    DEFAULT_CLIENT_ID,
    BoardStats,
    Category,
    Question,
    Report,
    ReportReason,
    SortOrder,
    SubjectType,
    VoteCounts,
    VoteDirection,
    Answer,
)


class QuestionStore(ABC):
    """Owns questions, answers, votes and reports."""

    @abstractmethod
    async def create_question(
        self,
        title: str,
        details: str | None = None,
        category: str | Category | None = None,
    ) -> Question:
        """Create a question with zero votes and no answers."""
        ...

    @abstractmethod
    async def get_question(self, question_id: str) -> Question:
        """Fetch one question with its answers. Raises NotFoundError."""
        ...

    @abstractmethod
    async def create_answer(self, question_id: str, content: str) -> Answer:
        """Append an answer to a question. Raises NotFoundError / ValidationError."""
        ...

    @abstractmethod
    async def vote(
        self,
        subject_type: str | SubjectType,
        subject_id: str,
        direction: str | VoteDirection,
        *,
        client_id: str = DEFAULT_CLIENT_ID,
    ) -> VoteCounts:
        """Toggle the caller's vote on a subject and return updated counters."""
        ...

    @abstractmethod
    async def get_vote(
        self,
        subject_type: str | SubjectType,
        subject_id: str,
        *,
        client_id: str = DEFAULT_CLIENT_ID,
    ) -> VoteDirection | None:
        """The caller's current vote on a subject, if any."""
        ...

    @abstractmethod
    async def delete_question(self, question_id: str) -> None:
        """Delete a question and its answers. Votes/reports are left orphaned."""
        ...

    @abstractmethod
    async def delete_answer(self, answer_id: str) -> None:
        """Delete a single answer."""
        ...

    @abstractmethod
    async def list_questions(
        self,
        category: str | Category | None = None,
        sort: str | SortOrder = SortOrder.TRENDING,
        search: str | None = None,
    ) -> list[Question]:
        """Filtered, sorted snapshot of questions. Never mutates."""
        ...

    @abstractmethod
    async def create_report(
        self,
        item_type: str | SubjectType,
        item_id: str,
        reason: str | ReportReason,
        details: str | None = None,
    ) -> Report:
        """Flag content for moderation. The target need not exist."""
        ...

    @abstractmethod
    async def list_reports(self) -> list[Report]:
        """All reports in submission order."""
        ...

    @abstractmethod
    async def get_stats(self, now: datetime | None = None) -> BoardStats:
        """Aggregate counters for moderation."""
        ...

    async def close(self) -> None:
        """Release backend resources (no-op by default)."""
        return None
