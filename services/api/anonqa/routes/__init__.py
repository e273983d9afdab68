"""API routes."""

from fastapi import APIRouter

from anonqa.routes import admin, answers, questions, reports, votes

api_router = APIRouter()

# Public board endpoints
api_router.include_router(questions.router, prefix="/api/questions", tags=["questions"])
api_router.include_router(answers.router, prefix="/api/answers", tags=["answers"])
api_router.include_router(votes.router, prefix="/api/votes", tags=["votes"])
api_router.include_router(reports.router, prefix="/api/report", tags=["reports"])

# Moderation endpoints (X-Admin-Token)
api_router.include_router(admin.router, prefix="/api/admin", tags=["admin"])
