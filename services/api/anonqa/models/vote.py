"""Vote model.

One row per (client, subject). No foreign key to the subject: votes on
deleted content stay behind as orphaned references.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from anonqa.stores.postgres import Base


class VoteModel(Base):
    """A client's current vote on a question or answer."""

    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("client_id", "subject_type", "subject_id", name="uq_votes_client_subject"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    client_id: Mapped[str] = mapped_column(String(100))
    subject_type: Mapped[str] = mapped_column(String(16))  # question | answer
    subject_id: Mapped[str] = mapped_column(String(64), index=True)
    direction: Mapped[str] = mapped_column(String(16))  # like | dislike

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Vote {self.client_id} {self.subject_type}:{self.subject_id}={self.direction}>"
