"""Vote lookup endpoint.

GET /api/votes/{subject_type}/{subject_id} - the caller's current vote
(keyed by X-Client-Id), so clients can render the toggle state.
"""

from fastapi import APIRouter

from anonqa.routes.deps import ClientIdDep, StoreDep
from anonqa.services.board import SubjectType

router = APIRouter()


@router.get("/{subject_type}/{subject_id}")
async def get_vote(
    subject_type: SubjectType,
    subject_id: str,
    store: StoreDep,
    client_id: ClientIdDep,
) -> dict[str, str | None]:
    vote = await store.get_vote(subject_type, subject_id, client_id=client_id)
    return {"vote": vote.value if vote else None}
