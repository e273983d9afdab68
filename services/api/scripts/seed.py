#!/usr/bin/env python3
"""Seed the board with demo questions, answers and votes.

Creates:
- A handful of questions across categories
- Answers for some of them
- A few votes from distinct demo clients (so trending order is non-trivial)

Seeding goes through the store API, so the same validation rules apply as
for real traffic. Not idempotent: run it once against an empty database,
or set SEED_RESET=1 to drop and recreate the board tables first.

Usage:
    cd services/api
    python -m scripts.seed

Optional env vars:
    SEED_TARGET=postgres|remote   (default: postgres)
    API_BASE_URL=http://localhost:8080   (when SEED_TARGET=remote)
    SEED_RESET=1                         (postgres only; drops existing rows)
"""

import asyncio
import os
import sys

# Ensure imports work when executed as a script/module
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv  # noqa: E402

from anonqa.services.board import SubjectType, VoteDirection  # noqa: E402
from anonqa.stores.base import QuestionStore  # noqa: E402
from anonqa.stores.postgres import close_db, create_tables, init_db, ping_db  # noqa: E402
from anonqa.stores.remote import RemoteStore  # noqa: E402
from anonqa.stores.sql import SqlStore  # noqa: E402

load_dotenv()

# ============================================================
# Demo content
# ============================================================

SAMPLE_QUESTIONS = [
    {
        "title": "How does machine learning actually work?",
        "details": (
            "I keep hearing about machine learning everywhere, but I don't understand "
            "the basic concepts. Can someone explain it in simple terms?"
        ),
        "category": "technology",
        "answers": [
            "Machine learning is like teaching a computer to recognize patterns by showing "
            "it lots of examples instead of programming specific rules.",
            "Think of it like learning to ride a bike: practice until balance comes naturally. "
            "ML algorithms do something similar with data.",
        ],
        "likes": 12,
        "dislikes": 2,
    },
    {
        "title": "What's the best way to start learning programming?",
        "details": "",
        "category": "education",
        "answers": [
            "Start with Python! It's beginner-friendly and has a huge community.",
        ],
        "likes": 25,
        "dislikes": 3,
    },
    {
        "title": "Why is climate change happening so fast now?",
        "details": "The news keeps talking about accelerating climate change. What's causing this acceleration?",
        "category": "science",
        "answers": [],
        "likes": 7,
        "dislikes": 1,
    },
]


async def seed_board(store: QuestionStore) -> dict[str, int]:
    """Create demo content through `store` and return counters."""
    stats = {"questions": 0, "answers": 0, "votes": 0}

    for item in SAMPLE_QUESTIONS:
        question = await store.create_question(
            item["title"],
            details=item["details"],
            category=item["category"],
        )
        stats["questions"] += 1
        print(f"  ✅ {question.title} ({question.category.value})")

        for text in item["answers"]:
            await store.create_answer(question.id, text)
            stats["answers"] += 1

        # One vote per demo client: the only identity the board knows about.
        for i in range(item["likes"]):
            await store.vote(SubjectType.QUESTION, question.id, VoteDirection.LIKE, client_id=f"seed-like-{i}")
            stats["votes"] += 1
        for i in range(item["dislikes"]):
            await store.vote(
                SubjectType.QUESTION, question.id, VoteDirection.DISLIKE, client_id=f"seed-dislike-{i}"
            )
            stats["votes"] += 1

    return stats


async def main() -> None:
    target = os.getenv("SEED_TARGET", "postgres").lower()
    print("🌱 Seeding board...")

    if target == "remote":
        store: QuestionStore = RemoteStore(base_url=os.getenv("API_BASE_URL"))
        try:
            stats = await seed_board(store)
        finally:
            await store.close()
    else:
        await init_db()
        await ping_db()
        try:
            await create_tables(drop_first=os.getenv("SEED_RESET") == "1")
            stats = await seed_board(SqlStore())
        finally:
            await close_db()

    print({"ok": True, "target": target, **stats})


if __name__ == "__main__":
    asyncio.run(main())
