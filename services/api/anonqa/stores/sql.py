"""SQL-backed question store (PostgreSQL via async SQLAlchemy).

Every operation runs in a single transaction. Votes lock the subject row
(SELECT ... FOR UPDATE) and change counters with relative UPDATEs, so
concurrent votes from many clients never lose updates.
"""

from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from sqlalchemy import case, delete, func, select, update
from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from anonqa.models import AnswerModel, QuestionModel, ReportModel, VoteModel
from anonqa.services.board import (
    DEFAULT_CLIENT_ID,
    Answer,
    BoardStats,
    Category,
    Question,
    Report,
    ReportReason,
    ReportStatus,
    SortOrder,
    SubjectType,
    VoteCounts,
    VoteDirection,
    normalize_category,
    parse_enum,
    plan_vote,
    utcnow,
    validate_answer,
    validate_question,
    validate_report,
)
from anonqa.services.errors import NotFoundError, TransientError
from anonqa.services.moderation import AcceptAllPolicy, ContentPolicy
from anonqa.services import ranking
from anonqa.stores.base import QuestionStore
from anonqa.stores.postgres import get_session_factory

logger = logging.getLogger("uvicorn.error")

# Connectivity failures worth a user-facing retry prompt.
_TRANSIENT_DB_ERRORS = (sa_exc.OperationalError, sa_exc.InterfaceError, sa_exc.TimeoutError, OSError)


def _shift(column, delta: int):
    """Relative counter update clamped at zero."""
    if delta == 0:
        return column
    if delta > 0:
        return column + delta
    return case((column + delta < 0, 0), else_=column + delta)


def _as_utc(value: datetime) -> datetime:
    """Backends without timezone support (SQLite) hand back naive UTC timestamps."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _to_answer(row: AnswerModel) -> Answer:
    return Answer(
        id=row.id,
        question_id=row.question_id,
        content=row.content,
        created_at=_as_utc(row.created_at),
        likes=row.likes,
        dislikes=row.dislikes,
    )


def _to_question(row: QuestionModel) -> Question:
    return Question(
        id=row.id,
        title=row.title,
        details=row.details or "",
        category=Category(row.category),
        created_at=_as_utc(row.created_at),
        likes=row.likes,
        dislikes=row.dislikes,
        answers=[_to_answer(a) for a in row.answers],
    )


def _to_report(row: ReportModel) -> Report:
    return Report(
        id=row.id,
        item_type=SubjectType(row.item_type),
        item_id=row.item_id,
        reason=ReportReason(row.reason),
        details=row.details or "",
        created_at=_as_utc(row.created_at),
        status=ReportStatus(row.status),
    )


class SqlStore(QuestionStore):
    """Question store persisted in SQL tables (see anonqa.models)."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        policy: ContentPolicy | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._session_factory = session_factory
        self.policy = policy or AcceptAllPolicy()
        self._clock = clock

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        factory = self._session_factory or get_session_factory()
        try:
            async with factory() as session:
                try:
                    yield session
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise
        except _TRANSIENT_DB_ERRORS as e:
            logger.warning(f"Database unavailable: {e}")
            raise TransientError("Service temporarily unavailable. Please try again later.") from e

    # ---------------------------------------------------------------- questions

    async def create_question(
        self,
        title: str,
        details: str | None = None,
        category: str | Category | None = None,
    ) -> Question:
        title, details, resolved = validate_question(title, details, category, self.policy)
        async with self._session() as session:
            row = QuestionModel(
                title=title,
                details=details,
                category=resolved.value,
                likes=0,
                dislikes=0,
                created_at=self._clock(),
            )
            session.add(row)
            await session.flush()
            return Question(
                id=row.id,
                title=row.title,
                details=row.details,
                category=resolved,
                created_at=_as_utc(row.created_at),
            )

    async def get_question(self, question_id: str) -> Question:
        async with self._session() as session:
            result = await session.execute(
                select(QuestionModel)
                .where(QuestionModel.id == question_id)
                .options(selectinload(QuestionModel.answers))
            )
            row = result.scalar_one_or_none()
            if row is None:
                raise NotFoundError("Question not found")
            return _to_question(row)

    async def delete_question(self, question_id: str) -> None:
        async with self._session() as session:
            await session.execute(delete(AnswerModel).where(AnswerModel.question_id == question_id))
            result = await session.execute(delete(QuestionModel).where(QuestionModel.id == question_id))
            if result.rowcount == 0:
                raise NotFoundError("Question not found")

    async def list_questions(
        self,
        category: str | Category | None = None,
        sort: str | SortOrder = SortOrder.TRENDING,
        search: str | None = None,
    ) -> list[Question]:
        order = parse_enum(SortOrder, sort, "sort")
        query = select(QuestionModel).options(selectinload(QuestionModel.answers))
        if category is not None and str(getattr(category, "value", category)).strip():
            query = query.where(QuestionModel.category == normalize_category(category).value)

        async with self._session() as session:
            rows = (await session.execute(query)).scalars().all()
            questions = [_to_question(r) for r in rows]

        # Category already applied in SQL; search and ordering are shared with other stores.
        return ranking.list_questions(questions, sort=order, search=search)

    # ------------------------------------------------------------------ answers

    async def create_answer(self, question_id: str, content: str) -> Answer:
        async with self._session() as session:
            if await session.get(QuestionModel, question_id) is None:
                raise NotFoundError("Question not found")
            content = validate_answer(content, self.policy)
            row = AnswerModel(
                question_id=question_id,
                content=content,
                likes=0,
                dislikes=0,
                created_at=self._clock(),
            )
            session.add(row)
            await session.flush()
            return _to_answer(row)

    async def delete_answer(self, answer_id: str) -> None:
        async with self._session() as session:
            result = await session.execute(delete(AnswerModel).where(AnswerModel.id == answer_id))
            if result.rowcount == 0:
                raise NotFoundError("Answer not found")

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
        model = QuestionModel if kind is SubjectType.QUESTION else AnswerModel

        async with self._session() as session:
            # Lock the subject row: serializes concurrent votes on the same subject.
            locked = await session.execute(
                select(model.id).where(model.id == subject_id).with_for_update()
            )
            if locked.scalar_one_or_none() is None:
                raise NotFoundError(f"{kind.value.capitalize()} not found")

            vote_row = (
                await session.execute(
                    select(VoteModel).where(
                        VoteModel.client_id == client_id,
                        VoteModel.subject_type == kind.value,
                        VoteModel.subject_id == subject_id,
                    )
                )
            ).scalar_one_or_none()
            current = VoteDirection(vote_row.direction) if vote_row is not None else None
            transition = plan_vote(current, wanted)

            counters = await session.execute(
                update(model)
                .where(model.id == subject_id)
                .values(
                    likes=_shift(model.likes, transition.like_delta),
                    dislikes=_shift(model.dislikes, transition.dislike_delta),
                )
                .returning(model.likes, model.dislikes)
            )
            likes, dislikes = counters.one()

            if transition.new_vote is None:
                if vote_row is not None:
                    await session.delete(vote_row)
            elif vote_row is not None:
                vote_row.direction = transition.new_vote.value
            else:
                session.add(
                    VoteModel(
                        client_id=client_id,
                        subject_type=kind.value,
                        subject_id=subject_id,
                        direction=transition.new_vote.value,
                    )
                )
            return VoteCounts(likes=likes, dislikes=dislikes)

    async def get_vote(
        self,
        subject_type: str | SubjectType,
        subject_id: str,
        *,
        client_id: str = DEFAULT_CLIENT_ID,
    ) -> VoteDirection | None:
        kind = parse_enum(SubjectType, subject_type, "subject type")
        async with self._session() as session:
            direction = (
                await session.execute(
                    select(VoteModel.direction).where(
                        VoteModel.client_id == client_id,
                        VoteModel.subject_type == kind.value,
                        VoteModel.subject_id == subject_id,
                    )
                )
            ).scalar_one_or_none()
        return VoteDirection(direction) if direction else None

    # ------------------------------------------------------------------ reports

    async def create_report(
        self,
        item_type: str | SubjectType,
        item_id: str,
        reason: str | ReportReason,
        details: str | None = None,
    ) -> Report:
        kind, item_id, parsed_reason, details = validate_report(item_type, item_id, reason, details)
        async with self._session() as session:
            row = ReportModel(
                item_type=kind.value,
                item_id=item_id,
                reason=parsed_reason.value,
                details=details,
                status=ReportStatus.PENDING.value,
                created_at=self._clock(),
            )
            session.add(row)
            await session.flush()
            report = _to_report(row)
        logger.info(f"Report submitted: {report.id} {kind.value}={item_id} reason={parsed_reason.value}")
        return report

    async def list_reports(self) -> list[Report]:
        async with self._session() as session:
            rows = (await session.execute(select(ReportModel).order_by(ReportModel.seq))).scalars().all()
            return [_to_report(r) for r in rows]

    async def get_stats(self, now: datetime | None = None) -> BoardStats:
        cutoff = (now or self._clock()) - ranking.RECENT_ACTIVITY_WINDOW
        async with self._session() as session:
            total_questions = await session.scalar(select(func.count()).select_from(QuestionModel))
            total_answers = await session.scalar(select(func.count()).select_from(AnswerModel))
            total_reports = await session.scalar(select(func.count()).select_from(ReportModel))
            by_category = (
                await session.execute(
                    select(QuestionModel.category, func.count()).group_by(QuestionModel.category)
                )
            ).all()
            questions_this_week = await session.scalar(
                select(func.count()).select_from(QuestionModel).where(QuestionModel.created_at > cutoff)
            )
            answers_this_week = await session.scalar(
                select(func.count()).select_from(AnswerModel).where(AnswerModel.created_at > cutoff)
            )
        return BoardStats(
            total_questions=total_questions or 0,
            total_answers=total_answers or 0,
            total_reports=total_reports or 0,
            category_counts={category: count for category, count in by_category},
            questions_this_week=questions_this_week or 0,
            answers_this_week=answers_this_week or 0,
        )
