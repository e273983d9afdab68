"""Answer vote endpoints addressed by answer id alone.

POST /api/answers/{id}/like|dislike - toggle the caller's vote on an answer

The nested form under /api/questions/{qid}/answers/{aid} also checks that
the answer belongs to the question; this one serves clients that only hold
the answer id (RemoteStore).
"""

from fastapi import APIRouter

from anonqa.routes.deps import ClientIdDep, StoreDep, invalidate_listing
from anonqa.schemas import VoteCountsOut
from anonqa.services.board import SubjectType, VoteDirection

router = APIRouter()


@router.post("/{answer_id}/like", response_model=VoteCountsOut)
async def like_answer(answer_id: str, store: StoreDep, client_id: ClientIdDep) -> VoteCountsOut:
    counts = await store.vote(SubjectType.ANSWER, answer_id, VoteDirection.LIKE, client_id=client_id)
    await invalidate_listing()
    return VoteCountsOut.from_domain(counts)


@router.post("/{answer_id}/dislike", response_model=VoteCountsOut)
async def dislike_answer(answer_id: str, store: StoreDep, client_id: ClientIdDep) -> VoteCountsOut:
    counts = await store.vote(SubjectType.ANSWER, answer_id, VoteDirection.DISLIKE, client_id=client_id)
    await invalidate_listing()
    return VoteCountsOut.from_domain(counts)
