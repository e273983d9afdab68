"""Tests for board validation rules and the vote state machine."""

import pytest

from anonqa.services.board import (
    ANSWER_MAX_LENGTH,
    DETAILS_MAX_LENGTH,
    ITEM_ID_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Category,
    ReportReason,
    SubjectType,
    VoteDirection,
    apply_delta,
    generate_id,
    normalize_category,
    plan_vote,
    validate_answer,
    validate_question,
    validate_report,
)
from anonqa.services.errors import ValidationError
from anonqa.services.moderation import BannedWordsPolicy, policy_from_words, AcceptAllPolicy


def test_validate_question_trims_and_defaults_category():
    title, details, category = validate_question("  How do tides work?  ", None, None)
    assert title == "How do tides work?"
    assert details == ""
    assert category is Category.GENERAL


@pytest.mark.parametrize("title", ["", "   ", None])
def test_validate_question_rejects_blank_title(title):
    with pytest.raises(ValidationError, match="title is required"):
        validate_question(title, None, None)


def test_validate_question_length_limits():
    validate_question("x" * TITLE_MAX_LENGTH, "d" * DETAILS_MAX_LENGTH, "science")
    with pytest.raises(ValidationError, match="title"):
        validate_question("x" * (TITLE_MAX_LENGTH + 1), None, None)
    with pytest.raises(ValidationError, match="details"):
        validate_question("ok", "d" * (DETAILS_MAX_LENGTH + 1), None)


def test_category_aliases_and_unknown_values():
    assert normalize_category("tech") is Category.TECHNOLOGY
    assert normalize_category("Life") is Category.LIFESTYLE
    assert normalize_category(" Health ") is Category.HEALTH
    assert normalize_category("") is Category.GENERAL
    with pytest.raises(ValidationError, match="Invalid category"):
        normalize_category("cooking")


def test_validate_answer_rules():
    assert validate_answer("  yes  ") == "yes"
    validate_answer("a" * ANSWER_MAX_LENGTH)
    with pytest.raises(ValidationError):
        validate_answer("   ")
    with pytest.raises(ValidationError):
        validate_answer("a" * (ANSWER_MAX_LENGTH + 1))


def test_validate_report_requires_reason_and_known_type():
    kind, item_id, reason, details = validate_report("answer", "abc", "spam", None)
    assert (kind, item_id, reason, details) == (SubjectType.ANSWER, "abc", ReportReason.SPAM, "")

    with pytest.raises(ValidationError, match="required"):
        validate_report("answer", "abc", None, None)
    with pytest.raises(ValidationError, match="Invalid type"):
        validate_report("comment", "abc", "spam", None)
    with pytest.raises(ValidationError, match="Invalid reason"):
        validate_report("question", "abc", "boring", None)


def test_validate_report_limits_item_id_length():
    kind, item_id, _, _ = validate_report("question", "  q-1  ", "spam", None)
    assert item_id == "q-1"
    assert validate_report("question", "x" * ITEM_ID_MAX_LENGTH, "spam", None)[1] == "x" * ITEM_ID_MAX_LENGTH

    with pytest.raises(ValidationError, match="at most 64"):
        validate_report("question", "x" * (ITEM_ID_MAX_LENGTH + 1), "spam", None)
    with pytest.raises(ValidationError, match="required"):
        validate_report("question", "   ", "spam", None)


def test_content_policy_rejects_banned_words():
    policy = BannedWordsPolicy(words=("Spoiler",))
    assert policy.is_acceptable("nothing to see")
    assert not policy.is_acceptable("big SPOILER ahead")

    with pytest.raises(ValidationError, match="inappropriate"):
        validate_question("A spoiler question", None, None, policy)
    with pytest.raises(ValidationError, match="inappropriate"):
        validate_answer("spoiler: he was dead", policy)


def test_policy_from_words():
    assert isinstance(policy_from_words([]), AcceptAllPolicy)
    assert policy_from_words(["x"]) == BannedWordsPolicy(words=("x",))


@pytest.mark.parametrize(
    "current, direction, expected",
    [
        (None, VoteDirection.LIKE, (VoteDirection.LIKE, 1, 0)),
        (None, VoteDirection.DISLIKE, (VoteDirection.DISLIKE, 0, 1)),
        (VoteDirection.LIKE, VoteDirection.LIKE, (None, -1, 0)),
        (VoteDirection.DISLIKE, VoteDirection.DISLIKE, (None, 0, -1)),
        (VoteDirection.LIKE, VoteDirection.DISLIKE, (VoteDirection.DISLIKE, -1, 1)),
        (VoteDirection.DISLIKE, VoteDirection.LIKE, (VoteDirection.LIKE, 1, -1)),
    ],
)
def test_plan_vote_transitions(current, direction, expected):
    transition = plan_vote(current, direction)
    assert (transition.new_vote, transition.like_delta, transition.dislike_delta) == expected


def test_apply_delta_clamps_at_zero():
    assert apply_delta(0, -1) == 0
    assert apply_delta(3, -1) == 2
    assert apply_delta(0, 1) == 1


def test_generate_id_is_unique():
    ids = {generate_id() for _ in range(1000)}
    assert len(ids) == 1000
