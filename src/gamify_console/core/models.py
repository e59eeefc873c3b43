"""Domain models for gamify-console.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and tiny derived views.  They carry zero
I/O and no dependency on external packages.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

MAX_QUESTIONS: int = 6
"""The create endpoint reserves exactly six named question slots."""

STAT_SLOTS: int = 3
"""Statistical answers are always age, sex and experience level."""


# ---------------------------------------------------------------------------
# Session / scope
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Session:
    """Proof of a successful login.

    The credential itself (a cookie) lives in the transport's cookie jar;
    this object only records who logged in and with which role.
    """

    username: str
    role: str
    """Last path segment of the post-login redirect (e.g. ``"admin"``)."""

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class Scope(enum.Enum):
    """Active command vocabulary of the console."""

    TOP = "top"
    ADMIN = "admin"
    EXITED = "exited"


# ---------------------------------------------------------------------------
# Date-time pairs
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DateTimePair:
    """A ``"date,time"`` value as transmitted by the backend."""

    date: str
    time: str

    def __str__(self) -> str:
        return f"{self.date} {self.time}".strip()


# ---------------------------------------------------------------------------
# Campaigns
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Campaign:
    """A questionnaire as listed by the backend."""

    id: int
    """Non-negative questionnaire identifier."""

    name: str

    scheduled: DateTimePair

    image: str
    """Server-side path or URL of the campaign image."""


@dataclass(frozen=True, slots=True)
class NewCampaign:
    """Everything needed to create a questionnaire."""

    name: str
    date: str
    """ISO ``YYYY-MM-DD``."""

    image_path: str
    questions: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ListQuery:
    """Paging window for the campaign listing."""

    start: int = 0
    size: int = 100
    past: bool = False


# ---------------------------------------------------------------------------
# Respondents and answers
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Respondent:
    """A user who completed or canceled a questionnaire."""

    id: int
    username: str
    birth: DateTimePair
    sex: str


@dataclass(frozen=True, slots=True)
class FreeTextAnswer:
    question: str
    answer: str


@dataclass(frozen=True, slots=True)
class AnswerSet:
    """Answers one respondent gave to one questionnaire.

    ``stats`` always has exactly :data:`STAT_SLOTS` entries (age, sex,
    experience); absent answers are ``None``.
    """

    stats: tuple[str | None, str | None, str | None]
    answers: tuple[FreeTextAnswer, ...]

    @property
    def age(self) -> str | None:
        return self.stats[0]

    @property
    def sex(self) -> str | None:
        return self.stats[1]

    @property
    def experience(self) -> str | None:
        return self.stats[2]


# ---------------------------------------------------------------------------
# Transport responses
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RawResponse:
    """Status and body of one HTTP exchange, stripped of transport types."""

    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return self.status_code == 200
