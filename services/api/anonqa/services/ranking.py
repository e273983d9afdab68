"""Listing service: filter, search and sort questions.

Ranking logic:
1. trending: (likes - dislikes) + 0.5 * answer_count, DESC
2. latest: created_at DESC
3. most_liked: likes DESC
4. most_answered: answer_count DESC

Ties in every order fall back to created_at DESC (newer first), then id ASC,
so listings are deterministic regardless of storage order.

All functions are pure: they never mutate the questions they receive.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

from anonqa.services.board import (
    Answer,
    BoardStats,
    Category,
    Question,
    SortOrder,
    normalize_category,
    parse_enum,
    utcnow,
)

ANSWER_WEIGHT = 0.5
RECENT_ACTIVITY_WINDOW = timedelta(days=7)


def trending_score(question: Question) -> float:
    """Composite ranking value combining net votes and answer count."""
    return (question.likes - question.dislikes) + ANSWER_WEIGHT * question.answer_count


def _primary_key(sort: SortOrder, question: Question) -> float:
    if sort is SortOrder.TRENDING:
        return trending_score(question)
    if sort is SortOrder.LATEST:
        return question.created_at.timestamp()
    if sort is SortOrder.MOST_LIKED:
        return question.likes
    return question.answer_count


def sort_questions(questions: Iterable[Question], sort: SortOrder | str = SortOrder.TRENDING) -> list[Question]:
    """Return a new list of questions in the requested order."""
    order = parse_enum(SortOrder, sort, "sort")
    # Two stable passes: id ASC first, then (primary, created_at) DESC.
    by_id = sorted(questions, key=lambda q: q.id)
    return sorted(
        by_id,
        key=lambda q: (_primary_key(order, q), q.created_at.timestamp()),
        reverse=True,
    )


def matches_search(question: Question, query: str) -> bool:
    """True if any whitespace-separated term occurs in title, details or category."""
    terms = [t for t in query.lower().split() if t]
    if not terms:
        return True
    haystack = f"{question.title} {question.details} {question.category.value}".lower()
    return any(term in haystack for term in terms)


def filter_questions(
    questions: Iterable[Question],
    category: str | Category | None = None,
    search: str | None = None,
) -> list[Question]:
    """Apply category (exact match) and free-text filters; empty filters keep everything."""
    result = list(questions)
    if category is not None and str(getattr(category, "value", category)).strip():
        wanted = normalize_category(category)
        result = [q for q in result if q.category is wanted]
    if search and search.strip():
        result = [q for q in result if matches_search(q, search)]
    return result


def list_questions(
    questions: Iterable[Question],
    category: str | Category | None = None,
    sort: SortOrder | str = SortOrder.TRENDING,
    search: str | None = None,
) -> list[Question]:
    """Filter then sort. Validates `sort` before doing any work."""
    order = parse_enum(SortOrder, sort, "sort")
    return sort_questions(filter_questions(questions, category=category, search=search), order)


def compute_stats(
    questions: list[Question],
    answers: list[Answer],
    total_reports: int,
    now: datetime | None = None,
) -> BoardStats:
    """Aggregate totals, per-category counts and last-7-days activity."""
    cutoff = (now or utcnow()) - RECENT_ACTIVITY_WINDOW
    category_counts: dict[str, int] = {}
    for q in questions:
        category_counts[q.category.value] = category_counts.get(q.category.value, 0) + 1
    return BoardStats(
        total_questions=len(questions),
        total_answers=len(answers),
        total_reports=total_reports,
        category_counts=category_counts,
        questions_this_week=sum(1 for q in questions if q.created_at > cutoff),
        answers_this_week=sum(1 for a in answers if a.created_at > cutoff),
    )
