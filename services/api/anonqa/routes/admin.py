"""Admin endpoints for moderation.

All routes require the X-Admin-Token header to match settings.admin_token;
with no token configured they are disabled.
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from anonqa.routes.deps import StoreDep, invalidate_listing, require_admin
from anonqa.schemas import ReportOut, StatsOut

router = APIRouter(dependencies=[Depends(require_admin)])
logger = logging.getLogger("uvicorn.error")


@router.delete("/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(question_id: str, store: StoreDep) -> Response:
    """Delete a question and its answers. Votes and reports are kept."""
    await store.delete_question(question_id)
    await invalidate_listing()
    logger.info(f"Question deleted: {question_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/answers/{answer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_answer(answer_id: str, store: StoreDep) -> Response:
    await store.delete_answer(answer_id)
    await invalidate_listing()
    logger.info(f"Answer deleted: {answer_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/reports", response_model=list[ReportOut])
async def list_reports(store: StoreDep) -> list[ReportOut]:
    """All reports in submission order (audit trail)."""
    return [ReportOut.from_domain(r) for r in await store.list_reports()]


@router.get("/stats", response_model=StatsOut)
async def get_stats(store: StoreDep) -> StatsOut:
    return StatsOut.from_domain(await store.get_stats())
