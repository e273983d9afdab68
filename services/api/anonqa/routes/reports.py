"""Report endpoint.

POST /api/report - flag a question or answer for moderation.

Reports are stored for manual review; the reported content is not required
to exist (it may already have been removed).
"""

from fastapi import APIRouter, status

from anonqa.routes.deps import StoreDep
from anonqa.schemas import ReportCreate, ReportOut

router = APIRouter()


@router.post("", response_model=ReportOut, status_code=status.HTTP_201_CREATED)
async def submit_report(body: ReportCreate, store: StoreDep) -> ReportOut:
    report = await store.create_report(
        body.item_type,
        body.item_id,
        body.reason,
        details=body.details,
    )
    return ReportOut.from_domain(report)
