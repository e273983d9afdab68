"""Board domain: questions, answers, votes and reports.

Plain data objects plus the validation rules and the vote state machine
shared by every store backend. Stores own persistence; the rules live here.

Vote state machine (per client, per subject):
- NoVote  --like-->    Liked     (likes + 1)
- Liked   --like-->    NoVote    (likes - 1, clamped at 0)
- Liked   --dislike--> Disliked  (likes - 1, dislikes + 1)
- and symmetrically for dislike.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
import itertools
import secrets
import time
from typing import TypeVar

from anonqa.services.errors import ValidationError
from anonqa.services.moderation import AcceptAllPolicy, ContentPolicy

TITLE_MAX_LENGTH = 200
DETAILS_MAX_LENGTH = 1000
ANSWER_MAX_LENGTH = 2000
REPORT_DETAILS_MAX_LENGTH = 1000
# Matches the id column width in every backend.
ITEM_ID_MAX_LENGTH = 64

DEFAULT_CLIENT_ID = "anonymous"


class SubjectType(str, Enum):
    """Kind of votable/reportable content."""

    QUESTION = "question"
    ANSWER = "answer"


class VoteDirection(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"


class Category(str, Enum):
    """Fixed question categories."""

    TECHNOLOGY = "technology"
    SCIENCE = "science"
    EDUCATION = "education"
    HEALTH = "health"
    LIFESTYLE = "lifestyle"
    BUSINESS = "business"
    GENERAL = "general"


DEFAULT_CATEGORY = Category.GENERAL

# Short names accepted on input, stored under the canonical value.
_CATEGORY_ALIASES: dict[str, Category] = {
    "tech": Category.TECHNOLOGY,
    "life": Category.LIFESTYLE,
}


class ReportReason(str, Enum):
    SPAM = "spam"
    INAPPROPRIATE = "inappropriate"
    HARASSMENT = "harassment"
    MISINFORMATION = "misinformation"
    OFF_TOPIC = "off_topic"
    OTHER = "other"


class ReportStatus(str, Enum):
    # Resolution happens outside the board; reports stay pending here.
    PENDING = "pending"


class SortOrder(str, Enum):
    """Listing orders for questions."""

    TRENDING = "trending"
    LATEST = "latest"
    MOST_LIKED = "most_liked"
    MOST_ANSWERED = "most_answered"


@dataclass
class Answer:
    """A free-text answer attached to a question."""

    id: str
    question_id: str
    content: str
    created_at: datetime
    likes: int = 0
    dislikes: int = 0


@dataclass
class Question:
    """A question with its answers in submission order."""

    id: str
    title: str
    details: str
    category: Category
    created_at: datetime
    likes: int = 0
    dislikes: int = 0
    answers: list[Answer] = field(default_factory=list)

    @property
    def answer_count(self) -> int:
        return len(self.answers)


@dataclass(frozen=True)
class VoteCounts:
    likes: int
    dislikes: int


@dataclass
class Report:
    """A moderation flag on a question or answer."""

    id: str
    item_type: SubjectType
    item_id: str
    reason: ReportReason
    details: str
    created_at: datetime
    status: ReportStatus = ReportStatus.PENDING


@dataclass(frozen=True)
class BoardStats:
    """Aggregate counters for the moderation dashboard."""

    total_questions: int
    total_answers: int
    total_reports: int
    category_counts: dict[str, int]
    questions_this_week: int
    answers_this_week: int


@dataclass(frozen=True)
class VoteTransition:
    """Outcome of applying a vote to the caller's current vote."""

    new_vote: VoteDirection | None
    like_delta: int
    dislike_delta: int


# ============================================================
# Ids and clocks
# ============================================================

_id_counter = itertools.count()
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Generate an opaque id: millisecond timestamp + process counter + random suffix."""
    millis = int(time.time() * 1000)
    return f"{_to_base36(millis)}{_to_base36(next(_id_counter))}{secrets.token_hex(4)}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# Input parsing / validation
# ============================================================

E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: type[E], value: object, label: str) -> E:
    """Coerce a raw value into `enum_cls`, raising ValidationError on failure."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {label} '{value}'. Must be one of: {allowed}") from None


def normalize_category(category: str | Category | None) -> Category:
    """Resolve a category; absent or blank means the default category."""
    if category is None:
        return DEFAULT_CATEGORY
    if isinstance(category, Category):
        return category
    raw = str(category).strip().lower()
    if not raw:
        return DEFAULT_CATEGORY
    if raw in _CATEGORY_ALIASES:
        return _CATEGORY_ALIASES[raw]
    return parse_enum(Category, raw, "category")


def validate_question(
    title: str | None,
    details: str | None,
    category: str | Category | None,
    policy: ContentPolicy | None = None,
) -> tuple[str, str, Category]:
    """Validate question input and return (title, details, category) normalized."""
    title = (title or "").strip()
    details = (details or "").strip()
    if not title:
        raise ValidationError("Question title is required")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Question title must be at most {TITLE_MAX_LENGTH} characters")
    if len(details) > DETAILS_MAX_LENGTH:
        raise ValidationError(f"Question details must be at most {DETAILS_MAX_LENGTH} characters")
    resolved = normalize_category(category)
    _check_policy(policy, f"{title} {details}")
    return title, details, resolved


def validate_answer(content: str | None, policy: ContentPolicy | None = None) -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationError("Answer content is required")
    if len(content) > ANSWER_MAX_LENGTH:
        raise ValidationError(f"Answer must be at most {ANSWER_MAX_LENGTH} characters")
    _check_policy(policy, content)
    return content


def validate_report(
    item_type: str | SubjectType | None,
    item_id: str | None,
    reason: str | ReportReason | None,
    details: str | None,
) -> tuple[SubjectType, str, ReportReason, str]:
    """Validate report input. The target is not required to exist."""
    if not item_type or not item_id or not reason:
        raise ValidationError("Missing required fields: type, id, and reason are required")
    subject_type = parse_enum(SubjectType, item_type, "type")
    parsed_reason = parse_enum(ReportReason, reason, "reason")
    details = (details or "").strip()
    if len(details) > REPORT_DETAILS_MAX_LENGTH:
        raise ValidationError(f"Report details must be at most {REPORT_DETAILS_MAX_LENGTH} characters")
    item_id = str(item_id).strip()
    if not item_id:
        raise ValidationError("Missing required fields: type, id, and reason are required")
    if len(item_id) > ITEM_ID_MAX_LENGTH:
        raise ValidationError(f"Report id must be at most {ITEM_ID_MAX_LENGTH} characters")
    return subject_type, item_id, parsed_reason, details


def _check_policy(policy: ContentPolicy | None, text: str) -> None:
    if not (policy or AcceptAllPolicy()).is_acceptable(text):
        raise ValidationError("Content contains inappropriate language")


# ============================================================
# Voting
# ============================================================


def plan_vote(current: VoteDirection | None, direction: VoteDirection) -> VoteTransition:
    """Compute the vote transition for a caller's current vote.

    Deltas are relative so backends can apply them atomically.
    """
    like = 1 if direction is VoteDirection.LIKE else 0
    dislike = 1 - like

    if current is direction:
        # Repeat: retract.
        return VoteTransition(new_vote=None, like_delta=-like, dislike_delta=-dislike)
    if current is None:
        return VoteTransition(new_vote=direction, like_delta=like, dislike_delta=dislike)
    # Switch sides.
    return VoteTransition(new_vote=direction, like_delta=like - dislike, dislike_delta=dislike - like)


def apply_delta(count: int, delta: int) -> int:
    """Apply a counter delta, clamped at zero."""
    return max(0, count + delta)
