"""Schemas for the board endpoints (/api/questions, /api/answers, /api/report).

Request bodies are loosely typed on purpose: content rules (lengths, enums,
required fields) are enforced by the store so every backend reports the
same ValidationError messages.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from anonqa.services.board import (
    Answer,
    BoardStats,
    Category,
    Question,
    Report,
    ReportReason,
    ReportStatus,
    SubjectType,
    VoteCounts,
    VoteDirection,
)
from anonqa.services.ranking import trending_score


class QuestionCreate(BaseModel):
    """Body for POST /api/questions."""

    title: str | None = None
    details: str | None = None
    category: str | None = None


class AnswerCreate(BaseModel):
    """Body for POST /api/questions/{id}/answers."""

    text: str | None = None


class ReportCreate(BaseModel):
    """Body for POST /api/report."""

    item_type: str | None = Field(alias="type", default=None)
    item_id: str | None = Field(alias="id", default=None)
    reason: str | None = None
    details: str | None = None

    model_config = {"populate_by_name": True}


class AnswerOut(BaseModel):
    """A single answer."""

    id: str
    question_id: str = Field(alias="questionId")
    content: str
    created_at: datetime = Field(alias="createdAt")
    likes: int = Field(ge=0)
    dislikes: int = Field(ge=0)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_domain(cls, answer: Answer) -> "AnswerOut":
        return cls(
            id=answer.id,
            question_id=answer.question_id,
            content=answer.content,
            created_at=answer.created_at,
            likes=answer.likes,
            dislikes=answer.dislikes,
        )

    def to_domain(self) -> Answer:
        return Answer(
            id=self.id,
            question_id=self.question_id,
            content=self.content,
            created_at=self.created_at,
            likes=self.likes,
            dislikes=self.dislikes,
        )


class QuestionOut(BaseModel):
    """A question with nested answers (submission order)."""

    id: str
    title: str
    details: str = ""
    category: Category
    created_at: datetime = Field(alias="createdAt")
    likes: int = Field(ge=0)
    dislikes: int = Field(ge=0)
    answer_count: int = Field(alias="answerCount", ge=0)
    trending_score: float = Field(alias="trendingScore")
    answers: list[AnswerOut] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_domain(cls, question: Question) -> "QuestionOut":
        return cls(
            id=question.id,
            title=question.title,
            details=question.details,
            category=question.category,
            created_at=question.created_at,
            likes=question.likes,
            dislikes=question.dislikes,
            answer_count=question.answer_count,
            trending_score=trending_score(question),
            answers=[AnswerOut.from_domain(a) for a in question.answers],
        )

    def to_domain(self) -> Question:
        return Question(
            id=self.id,
            title=self.title,
            details=self.details,
            category=self.category,
            created_at=self.created_at,
            likes=self.likes,
            dislikes=self.dislikes,
            answers=[a.to_domain() for a in self.answers],
        )


class AnswerCreatedOut(QuestionOut):
    """Response to POST /api/questions/{id}/answers: the question plus the new answer's id.

    Other answers may land between creation and the re-read, so clients pick
    their answer by id rather than by position.
    """

    answer_id: str = Field(alias="answerId")

    @classmethod
    def for_answer(cls, question: Question, answer_id: str) -> "AnswerCreatedOut":
        base = QuestionOut.from_domain(question)
        return cls(**base.model_dump(), answer_id=answer_id)


class VoteCountsOut(BaseModel):
    """Updated counters after a vote."""

    likes: int = Field(ge=0)
    dislikes: int = Field(ge=0)

    @classmethod
    def from_domain(cls, counts: VoteCounts) -> "VoteCountsOut":
        return cls(likes=counts.likes, dislikes=counts.dislikes)


class ReportOut(BaseModel):
    """A stored report."""

    id: str
    item_type: SubjectType = Field(alias="itemType")
    item_id: str = Field(alias="itemId")
    reason: ReportReason
    details: str = ""
    created_at: datetime = Field(alias="createdAt")
    status: ReportStatus

    model_config = {"populate_by_name": True}

    @classmethod
    def from_domain(cls, report: Report) -> "ReportOut":
        return cls(
            id=report.id,
            item_type=report.item_type,
            item_id=report.item_id,
            reason=report.reason,
            details=report.details,
            created_at=report.created_at,
            status=report.status,
        )

    def to_domain(self) -> Report:
        return Report(
            id=self.id,
            item_type=self.item_type,
            item_id=self.item_id,
            reason=self.reason,
            details=self.details,
            created_at=self.created_at,
            status=self.status,
        )


class StatsOut(BaseModel):
    """Moderation dashboard counters."""

    total_questions: int = Field(alias="totalQuestions")
    total_answers: int = Field(alias="totalAnswers")
    total_reports: int = Field(alias="totalReports")
    category_counts: dict[str, int] = Field(alias="categoryCounts")
    questions_this_week: int = Field(alias="questionsThisWeek")
    answers_this_week: int = Field(alias="answersThisWeek")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_domain(cls, stats: BoardStats) -> "StatsOut":
        return cls(
            total_questions=stats.total_questions,
            total_answers=stats.total_answers,
            total_reports=stats.total_reports,
            category_counts=dict(stats.category_counts),
            questions_this_week=stats.questions_this_week,
            answers_this_week=stats.answers_this_week,
        )

    def to_domain(self) -> BoardStats:
        return BoardStats(
            total_questions=self.total_questions,
            total_answers=self.total_answers,
            total_reports=self.total_reports,
            category_counts=dict(self.category_counts),
            questions_this_week=self.questions_this_week,
            answers_this_week=self.answers_this_week,
        )


class VoteRecord(BaseModel):
    """One client's vote, as stored in a backup."""

    client_id: str = Field(alias="clientId")
    subject_type: SubjectType = Field(alias="subjectType")
    subject_id: str = Field(alias="subjectId")
    direction: VoteDirection

    model_config = {"populate_by_name": True}


class BoardSnapshot(BaseModel):
    """Backup of a whole board (InMemoryStore.export_data / import_data).

    Answers travel nested inside their question. A section left out of an
    imported snapshot keeps the store's current contents for that section.
    """

    questions: list[QuestionOut] = Field(default_factory=list)
    votes: list[VoteRecord] = Field(default_factory=list)
    reports: list[ReportOut] = Field(default_factory=list)
    exported_at: datetime | None = Field(alias="exportedAt", default=None)

    model_config = {"populate_by_name": True}
