"""Pydantic schemas for API request/response validation."""

from anonqa.schemas.common import ErrorResponse
from anonqa.schemas.board import (
    AnswerCreate,
    AnswerCreatedOut,
    AnswerOut,
    BoardSnapshot,
    QuestionCreate,
    QuestionOut,
    ReportCreate,
    ReportOut,
    StatsOut,
    VoteCountsOut,
    VoteRecord,
)

__all__ = [
    "ErrorResponse",
    "AnswerCreate",
    "AnswerCreatedOut",
    "AnswerOut",
    "BoardSnapshot",
    "QuestionCreate",
    "QuestionOut",
    "ReportCreate",
    "ReportOut",
    "StatsOut",
    "VoteCountsOut",
    "VoteRecord",
]
