"""SQLAlchemy ORM models.

Models represent database tables:
- questions: Anonymous questions with vote counters
- answers: Answers attached to a question (deleted with it)
- votes: One vote per (client, subject)
- reports: Moderation flags (kept even if the target is deleted)
"""

from anonqa.models.question import AnswerModel, QuestionModel
from anonqa.models.report import ReportModel
from anonqa.models.vote import VoteModel

__all__ = ["AnswerModel", "QuestionModel", "ReportModel", "VoteModel"]
