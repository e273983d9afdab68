"""Report model.

Reports reference content by (item_type, item_id) without a foreign key so
they survive deletion of the reported content (audit trail).
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from anonqa.stores.postgres import Base


class ReportModel(Base):
    """Moderation flag on a question or answer."""

    __tablename__ = "reports"

    seq: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(64), unique=True, index=True, default=lambda: str(uuid4()))

    item_type: Mapped[str] = mapped_column(String(16))
    item_id: Mapped[str] = mapped_column(String(64), index=True)
    reason: Mapped[str] = mapped_column(String(32))
    details: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[str] = mapped_column(String(16), default="pending")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Report {self.id} {self.item_type}:{self.item_id} {self.reason}>"
