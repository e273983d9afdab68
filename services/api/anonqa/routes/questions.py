"""Question endpoints.

GET  /api/questions                                   - filtered, sorted listing
GET  /api/questions/{id}                              - one question with answers
POST /api/questions                                   - ask a question
POST /api/questions/{id}/answers                      - answer a question
POST /api/questions/{id}/like|dislike                 - toggle the caller's vote
POST /api/questions/{id}/answers/{aid}/like|dislike   - toggle a vote on one of its answers

Routers are thin: the store owns validation and business rules.
"""

import logging
from typing import Any

from fastapi import APIRouter, Query, status

from anonqa.routes.deps import ClientIdDep, StoreDep, invalidate_listing
from anonqa.schemas import AnswerCreate, AnswerCreatedOut, QuestionCreate, QuestionOut, VoteCountsOut
from anonqa.services.board import SortOrder, SubjectType, VoteDirection
from anonqa.services.errors import NotFoundError
from anonqa.stores.base import QuestionStore
from anonqa.stores.redis import get_listing_cache, get_listing_generation, set_listing_cache

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


@router.get("", response_model=list[QuestionOut])
async def list_questions(
    store: StoreDep,
    category: str | None = Query(
        default=None,
        description="Exact category filter; empty returns all",
        examples=["technology", "health"],
    ),
    sort: SortOrder = Query(default=SortOrder.TRENDING, description="Listing order"),
    q: str | None = Query(default=None, max_length=200, description="Free-text search terms"),
) -> list[Any]:
    """List questions (pure projection, never mutates)."""
    # One generation for both lookup and fill: a payload built across a write
    # is filed under the superseded generation.
    generation = await _try_get_listing_generation()
    if generation is not None:
        cached = await _try_get_cached_listing(generation, category, sort.value, q)
        if cached is not None:
            return cached

    questions = await store.list_questions(category=category, sort=sort, search=q)
    payload = [QuestionOut.from_domain(question) for question in questions]
    if generation is not None:
        await _try_set_cached_listing(
            generation, category, sort.value, q, [p.model_dump(mode="json", by_alias=True) for p in payload]
        )
    return payload


@router.get("/{question_id}", response_model=QuestionOut)
async def get_question(question_id: str, store: StoreDep) -> QuestionOut:
    return QuestionOut.from_domain(await store.get_question(question_id))


@router.post("", response_model=QuestionOut, status_code=status.HTTP_201_CREATED)
async def create_question(body: QuestionCreate, store: StoreDep) -> QuestionOut:
    question = await store.create_question(body.title, details=body.details, category=body.category)
    await invalidate_listing()
    logger.info(f"Question created: {question.id} category={question.category.value}")
    return QuestionOut.from_domain(question)


@router.post("/{question_id}/answers", response_model=AnswerCreatedOut, status_code=status.HTTP_201_CREATED)
async def create_answer(question_id: str, body: AnswerCreate, store: StoreDep) -> AnswerCreatedOut:
    """Append an answer; returns the updated question plus the new answer's id."""
    answer = await store.create_answer(question_id, body.text)
    question = await store.get_question(question_id)
    await invalidate_listing()
    return AnswerCreatedOut.for_answer(question, answer.id)


@router.post("/{question_id}/like", response_model=VoteCountsOut)
async def like_question(question_id: str, store: StoreDep, client_id: ClientIdDep) -> VoteCountsOut:
    counts = await store.vote(SubjectType.QUESTION, question_id, VoteDirection.LIKE, client_id=client_id)
    await invalidate_listing()
    return VoteCountsOut.from_domain(counts)


@router.post("/{question_id}/dislike", response_model=VoteCountsOut)
async def dislike_question(question_id: str, store: StoreDep, client_id: ClientIdDep) -> VoteCountsOut:
    counts = await store.vote(SubjectType.QUESTION, question_id, VoteDirection.DISLIKE, client_id=client_id)
    await invalidate_listing()
    return VoteCountsOut.from_domain(counts)


@router.post("/{question_id}/answers/{answer_id}/like", response_model=VoteCountsOut)
async def like_answer(question_id: str, answer_id: str, store: StoreDep, client_id: ClientIdDep) -> VoteCountsOut:
    return await _vote_on_answer(store, question_id, answer_id, VoteDirection.LIKE, client_id)


@router.post("/{question_id}/answers/{answer_id}/dislike", response_model=VoteCountsOut)
async def dislike_answer(
    question_id: str, answer_id: str, store: StoreDep, client_id: ClientIdDep
) -> VoteCountsOut:
    return await _vote_on_answer(store, question_id, answer_id, VoteDirection.DISLIKE, client_id)


async def _vote_on_answer(
    store: QuestionStore,
    question_id: str,
    answer_id: str,
    direction: VoteDirection,
    client_id: str,
) -> VoteCountsOut:
    question = await store.get_question(question_id)
    if all(answer.id != answer_id for answer in question.answers):
        raise NotFoundError("Answer not found")
    counts = await store.vote(SubjectType.ANSWER, answer_id, direction, client_id=client_id)
    await invalidate_listing()
    return VoteCountsOut.from_domain(counts)


async def _try_get_listing_generation() -> int | None:
    try:
        return await get_listing_generation()
    except RuntimeError:
        return None
    except Exception as e:
        logger.warning(f"Listing cache generation read failed: {e}")
        return None


async def _try_get_cached_listing(
    generation: int, category: str | None, sort: str, search: str | None
) -> list[Any] | None:
    try:
        cached = await get_listing_cache(generation, category, sort, search)
    except Exception as e:
        logger.warning(f"Listing cache read failed: {e}")
        return None
    if cached is not None:
        logger.info(f"Listing cache HIT for category={category}, sort={sort}")
    return cached


async def _try_set_cached_listing(
    generation: int,
    category: str | None,
    sort: str,
    search: str | None,
    payload: list[dict[str, Any]],
) -> None:
    try:
        await set_listing_cache(generation, category, sort, search, payload)
    except Exception as e:
        logger.warning(f"Listing cache write failed: {e}")
