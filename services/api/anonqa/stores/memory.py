"""In-memory question store.

Process-local collections; one logical writer per instance. Used as the
local store and by tests. Returned objects are copies, so callers cannot
mutate store state behind its back.
"""

from collections.abc import Callable
import copy
from datetime import datetime
import logging
from typing import Any

import pydantic

from anonqa.schemas import BoardSnapshot, QuestionOut, ReportOut, VoteRecord
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
    apply_delta,
    generate_id,
    parse_enum,
    plan_vote,
    utcnow,
    validate_answer,
    validate_question,
    validate_report,
)
from anonqa.services.errors import NotFoundError, ValidationError
from anonqa.services.moderation import AcceptAllPolicy, ContentPolicy
from anonqa.services import ranking
from anonqa.stores.base import QuestionStore

logger = logging.getLogger("uvicorn.error")

VoteKey = tuple[str, SubjectType, str]


class InMemoryStore(QuestionStore):
    """Question store backed by plain Python collections."""

    def __init__(
        self,
        policy: ContentPolicy | None = None,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = generate_id,
    ):
        self.policy = policy or AcceptAllPolicy()
        self._clock = clock
        self._new_id = id_factory
        # Insertion order is preserved; display order always comes from ranking.
        self._questions: dict[str, Question] = {}
        self._answer_index: dict[str, str] = {}  # answer id -> question id
        self._votes: dict[VoteKey, VoteDirection] = {}
        self._reports: list[Report] = []

    # ---------------------------------------------------------------- questions

    async def create_question(
        self,
        title: str,
        details: str | None = None,
        category: str | Category | None = None,
    ) -> Question:
        title, details, resolved = validate_question(title, details, category, self.policy)
        question = Question(
            id=self._unique_id(),
            title=title,
            details=details,
            category=resolved,
            created_at=self._clock(),
        )
        self._questions[question.id] = question
        return copy.deepcopy(question)

    async def get_question(self, question_id: str) -> Question:
        return copy.deepcopy(self._require_question(question_id))

    async def delete_question(self, question_id: str) -> None:
        question = self._require_question(question_id)
        for answer in question.answers:
            self._answer_index.pop(answer.id, None)
        del self._questions[question_id]

    async def list_questions(
        self,
        category: str | Category | None = None,
        sort: str | SortOrder = SortOrder.TRENDING,
        search: str | None = None,
    ) -> list[Question]:
        ordered = ranking.list_questions(self._questions.values(), category=category, sort=sort, search=search)
        return copy.deepcopy(ordered)

    # ------------------------------------------------------------------ answers

    async def create_answer(self, question_id: str, content: str) -> Answer:
        question = self._require_question(question_id)
        content = validate_answer(content, self.policy)
        answer = Answer(
            id=self._unique_id(),
            question_id=question.id,
            content=content,
            created_at=self._clock(),
        )
        question.answers.append(answer)
        self._answer_index[answer.id] = question.id
        return copy.deepcopy(answer)

    async def delete_answer(self, answer_id: str) -> None:
        answer = self._require_answer(answer_id)
        question = self._questions[answer.question_id]
        question.answers = [a for a in question.answers if a.id != answer_id]
        del self._answer_index[answer_id]

    # ------------------------------------------------------------------- voting

    async def vote(
        self,
        subject_type: str | SubjectType,
        subject_id: str,
        direction: str | VoteDirection,
        *,
        client_id: str = DEFAULT_CLIENT_ID,
    ) -> VoteCounts:
        kind = parse_enum(SubjectType, subject_type, "subject type")
        wanted = parse_enum(VoteDirection, direction, "vote direction")
        subject = self._require_subject(kind, subject_id)

        key = (client_id, kind, subject_id)
        transition = plan_vote(self._votes.get(key), wanted)

        # Nothing above this line mutates; everything below cannot fail.
        subject.likes = apply_delta(subject.likes, transition.like_delta)
        subject.dislikes = apply_delta(subject.dislikes, transition.dislike_delta)
        if transition.new_vote is None:
            self._votes.pop(key, None)
        else:
            self._votes[key] = transition.new_vote
        return VoteCounts(likes=subject.likes, dislikes=subject.dislikes)

    async def get_vote(
        self,
        subject_type: str | SubjectType,
        subject_id: str,
        *,
        client_id: str = DEFAULT_CLIENT_ID,
    ) -> VoteDirection | None:
        kind = parse_enum(SubjectType, subject_type, "subject type")
        return self._votes.get((client_id, kind, subject_id))

    # ------------------------------------------------------------------ reports

    async def create_report(
        self,
        item_type: str | SubjectType,
        item_id: str,
        reason: str | ReportReason,
        details: str | None = None,
    ) -> Report:
        kind, item_id, parsed_reason, details = validate_report(item_type, item_id, reason, details)
        report = Report(
            id=self._new_id(),
            item_type=kind,
            item_id=item_id,
            reason=parsed_reason,
            details=details,
            created_at=self._clock(),
        )
        self._reports.append(report)
        logger.info(f"Report submitted: {report.id} {kind.value}={item_id} reason={parsed_reason.value}")
        return copy.deepcopy(report)

    async def list_reports(self) -> list[Report]:
        return copy.deepcopy(self._reports)

    async def get_stats(self, now: datetime | None = None) -> BoardStats:
        questions = list(self._questions.values())
        answers = [a for q in questions for a in q.answers]
        return ranking.compute_stats(questions, answers, len(self._reports), now=now or self._clock())

    # ------------------------------------------------------------------- backup

    def export_data(self) -> dict[str, Any]:
        """JSON-ready snapshot of questions (with answers), votes and reports."""
        snapshot = BoardSnapshot(
            questions=[QuestionOut.from_domain(q) for q in self._questions.values()],
            votes=[
                VoteRecord(client_id=client_id, subject_type=kind, subject_id=subject_id, direction=direction)
                for (client_id, kind, subject_id), direction in self._votes.items()
            ],
            reports=[ReportOut.from_domain(r) for r in self._reports],
            exported_at=self._clock(),
        )
        return snapshot.model_dump(mode="json", by_alias=True)

    def import_data(self, data: dict[str, Any] | str) -> None:
        """Restore a snapshot from export_data().

        Sections present in the snapshot replace the current ones; absent
        sections are left alone. Nothing changes if the snapshot is invalid.
        """
        try:
            if isinstance(data, str):
                snapshot = BoardSnapshot.model_validate_json(data)
            else:
                snapshot = BoardSnapshot.model_validate(data)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid backup: {e.error_count()} invalid field(s)") from e

        present = snapshot.model_fields_set
        questions = self._questions
        answer_index = self._answer_index
        if "questions" in present:
            questions, answer_index = {}, {}
            for item in snapshot.questions:
                question = item.to_domain()
                if question.id in questions:
                    raise ValidationError(f"Invalid backup: duplicate question id '{question.id}'")
                for answer in question.answers:
                    if answer.question_id != question.id or answer.id in answer_index:
                        raise ValidationError(f"Invalid backup: misplaced answer '{answer.id}'")
                    answer_index[answer.id] = question.id
                questions[question.id] = question

        votes = self._votes
        if "votes" in present:
            votes = {(v.client_id, v.subject_type, v.subject_id): v.direction for v in snapshot.votes}

        reports = self._reports
        if "reports" in present:
            reports = [r.to_domain() for r in snapshot.reports]

        self._questions, self._answer_index = questions, answer_index
        self._votes, self._reports = votes, reports
        logger.info(
            f"Board imported: {len(self._questions)} questions, {len(self._votes)} votes, "
            f"{len(self._reports)} reports"
        )

    def clear(self) -> None:
        """Drop every question, answer, vote and report."""
        self._questions = {}
        self._answer_index = {}
        self._votes = {}
        self._reports = []

    # ------------------------------------------------------------------ helpers

    def _unique_id(self) -> str:
        while True:
            candidate = self._new_id()
            if candidate not in self._questions and candidate not in self._answer_index:
                return candidate

    def _require_question(self, question_id: str) -> Question:
        question = self._questions.get(question_id)
        if question is None:
            raise NotFoundError("Question not found")
        return question

    def _require_answer(self, answer_id: str) -> Answer:
        question_id = self._answer_index.get(answer_id)
        if question_id is None:
            raise NotFoundError("Answer not found")
        for answer in self._questions[question_id].answers:
            if answer.id == answer_id:
                return answer
        raise NotFoundError("Answer not found")

    def _require_subject(self, kind: SubjectType, subject_id: str) -> Question | Answer:
        if kind is SubjectType.QUESTION:
            return self._require_question(subject_id)
        return self._require_answer(subject_id)
