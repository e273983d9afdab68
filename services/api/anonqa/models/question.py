"""Question and answer models.

Answer count is never stored: it is always len(question.answers).
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from anonqa.stores.postgres import Base


def generate_public_id() -> str:
    """Generate unique public ID."""
    return str(uuid4())


class QuestionModel(Base):
    """Anonymous question."""

    __tablename__ = "questions"
    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_questions_likes_nonneg"),
        CheckConstraint("dislikes >= 0", name="ck_questions_dislikes_nonneg"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_public_id)

    title: Mapped[str] = mapped_column(String(200))
    details: Mapped[str] = mapped_column(Text, default="")
    category: Mapped[str] = mapped_column(String(32), index=True, default="general")

    # Counters are only changed through relative UPDATEs (see SqlStore.vote)
    likes: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    dislikes: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )

    answers: Mapped[list["AnswerModel"]] = relationship(
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="AnswerModel.seq",
    )

    def __repr__(self) -> str:
        return f"<Question {self.id} +{self.likes}/-{self.dislikes}>"


class AnswerModel(Base):
    """Answer to a question."""

    __tablename__ = "answers"
    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_answers_likes_nonneg"),
        CheckConstraint("dislikes >= 0", name="ck_answers_dislikes_nonneg"),
    )

    # Surrogate key preserves submission order within a question
    seq: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(64), unique=True, index=True, default=generate_public_id)

    question_id: Mapped[str] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"),
        index=True,
    )
    content: Mapped[str] = mapped_column(Text)

    likes: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    dislikes: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    question: Mapped[QuestionModel] = relationship(back_populates="answers")

    def __repr__(self) -> str:
        return f"<Answer {self.id} q={self.question_id}>"
