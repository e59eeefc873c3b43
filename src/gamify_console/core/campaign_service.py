"""Core campaign service: one method per administrative operation.

This is the domain client consumed by the console engine.  It depends on
a :class:`~gamify_console.core.protocols.Transport` injected at
construction time, keeping the core free of any HTTP library import.

Guarantees
----------
* Exactly one request per operation; no retry.
* Input is validated before anything is sent.
* Only :class:`~gamify_console.exceptions.GamifyError` subclasses escape.
* Any non-200 status is a failure; any body that does not match the
  expected shape raises :class:`PayloadError` instead of crashing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from gamify_console.core.models import (
    MAX_QUESTIONS,
    STAT_SLOTS,
    AnswerSet,
    Campaign,
    DateTimePair,
    FreeTextAnswer,
    ListQuery,
    NewCampaign,
    RawResponse,
    Respondent,
    Session,
)
from gamify_console.core.protocols import Transport
from gamify_console.exceptions import (
    AuthenticationError,
    GamifyError,
    InvalidInputError,
    PayloadError,
    QuestionLimitError,
    RequestRejectedError,
    TransportError,
)


class Endpoint:
    """Backend paths, relative to the configured base URL."""

    LOGIN = "CheckLogin"
    LIST = "admin/listQuestionnaires"
    CREATE = "admin/create"
    DELETE = "admin/delete"
    COMPLETED_USERS = "admin/listQuestionnaireCompletedUsers"
    CANCELED_USERS = "admin/listQuestionnaireCanceledUsers"
    ANSWERS = "admin/getAnswers"


QUESTION_FIELDS: tuple[str, ...] = tuple(f"Question{i}" for i in range(MAX_QUESTIONS))
"""Multipart field names reserved for questions, in order."""

RESPONDENT_PAGE_START: str = "0"
RESPONDENT_PAGE_SIZE: str = "100"

T = TypeVar("T")


class CampaignService:
    """Stateless wrapper turning each operation into one HTTP exchange.

    Parameters
    ----------
    transport:
        Any object satisfying the :class:`Transport` protocol.  It owns
        the session cookie, so the service itself keeps no state.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport: Transport = transport

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def authenticate(self, username: str, password: str) -> Session:
        """Log in and return the resulting :class:`Session`.

        Raises
        ------
        TransportError
            If the backend cannot be reached.  Callers treat this as fatal.
        AuthenticationError
            If the backend answers with a non-success status.
        """
        response = self._call(
            lambda: self._transport.post_form(
                Endpoint.LOGIN,
                data={"username": username, "pwd": password},
            )
        )
        if not response.ok:
            raise AuthenticationError(
                f"Login refused (HTTP {response.status_code}).",
                hint="Check username and password in your configuration.",
            )
        return Session(username=username, role=self._role_from_redirect(response.text))

    # ------------------------------------------------------------------
    # Campaigns
    # ------------------------------------------------------------------

    def list_campaigns(self, query: ListQuery) -> tuple[Campaign, ...]:
        """Return one page of questionnaires.

        Raises
        ------
        InvalidInputError
            If *start* or *size* is negative.
        RequestRejectedError, PayloadError, TransportError
        """
        if query.start < 0 or query.size < 0:
            raise InvalidInputError("start and size must be non-negative.")
        params = {
            "start": str(query.start),
            "size": str(query.size),
            "past": _bool_param(query.past),
        }
        response = self._expect_ok(
            self._call(lambda: self._transport.get(Endpoint.LIST, params=params)),
            "List questionnaires",
        )
        payloads = _decode(_CAMPAIGN_LIST, response.text, "questionnaire list")
        return tuple(payload.to_domain() for payload in payloads)

    def create_campaign(self, campaign: NewCampaign) -> None:
        """Submit a new questionnaire with its image and questions.

        Raises
        ------
        QuestionLimitError
            If more than :data:`MAX_QUESTIONS` questions are supplied.
            Nothing is sent in that case.
        ImageReadError, RequestRejectedError, TransportError
        """
        if len(campaign.questions) > MAX_QUESTIONS:
            raise QuestionLimitError(
                f"A questionnaire holds at most {MAX_QUESTIONS} questions "
                f"({len(campaign.questions)} given).",
            )
        data = {"name": campaign.name, "date": campaign.date}
        data.update(zip(QUESTION_FIELDS, campaign.questions))
        files = {"image": Path(campaign.image_path)}
        self._expect_ok(
            self._call(
                lambda: self._transport.post_multipart(Endpoint.CREATE, data=data, files=files)
            ),
            "Create questionnaire",
        )

    def delete_campaign(self, campaign_id: int) -> None:
        """Delete a questionnaire.  Deleting a missing id fails every time."""
        _check_id(campaign_id)
        self._expect_ok(
            self._call(
                lambda: self._transport.delete(Endpoint.DELETE, params={"id": str(campaign_id)})
            ),
            "Delete questionnaire",
        )

    # ------------------------------------------------------------------
    # Respondents and answers
    # ------------------------------------------------------------------

    def list_respondents(self, campaign_id: int, *, canceled: bool = False) -> tuple[Respondent, ...]:
        """Return who completed (or canceled) a questionnaire.

        An empty tuple is a valid outcome meaning "nobody yet".
        """
        _check_id(campaign_id)
        endpoint = Endpoint.CANCELED_USERS if canceled else Endpoint.COMPLETED_USERS
        params = {
            "id": str(campaign_id),
            "start": RESPONDENT_PAGE_START,
            "size": RESPONDENT_PAGE_SIZE,
        }
        response = self._expect_ok(
            self._call(lambda: self._transport.get(endpoint, params=params)),
            "List respondents",
        )
        payloads = _decode(_RESPONDENT_LIST, response.text, "respondent list")
        return tuple(payload.to_domain() for payload in payloads)

    def fetch_answers(self, campaign_id: int, respondent_id: int) -> AnswerSet:
        """Return the answers *respondent_id* gave to *campaign_id*."""
        _check_id(campaign_id)
        params = {"questionnaireId": str(campaign_id), "userId": str(respondent_id)}
        response = self._expect_ok(
            self._call(lambda: self._transport.get(Endpoint.ANSWERS, params=params)),
            "Fetch answers",
        )
        return _decode(_ANSWERS, response.text, "answers").to_domain()

    # ------------------------------------------------------------------
    # Transport delegation (safe boundary)
    # ------------------------------------------------------------------

    @staticmethod
    def _call(send: Any) -> RawResponse:
        """Run one transport call and ensure only our exceptions escape."""
        try:
            return send()
        except GamifyError:
            raise
        except Exception as exc:
            raise TransportError(f"Unexpected transport error: {exc}") from exc

    @staticmethod
    def _expect_ok(response: RawResponse, operation: str) -> RawResponse:
        if not response.ok:
            raise RequestRejectedError(
                f"{operation} failed (HTTP {response.status_code}).",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _role_from_redirect(body: str) -> str:
        """``"/GamifyUser/admin"`` → ``"admin"``."""
        return body.strip().rstrip("/").rsplit("/", 1)[-1]


# ---------------------------------------------------------------------------
# Response payloads
# ---------------------------------------------------------------------------

class _Payload(BaseModel):
    """Strict shape of a response body; unknown keys are ignored."""

    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)


class _CampaignPayload(_Payload):
    id: int = Field(alias="questionnaireId", ge=0)
    name: str
    scheduled: str = Field(alias="datetime")
    image: str

    def to_domain(self) -> Campaign:
        return Campaign(
            id=self.id,
            name=self.name,
            scheduled=parse_datetime_pair(self.scheduled),
            image=self.image,
        )


class _RespondentPayload(_Payload):
    id: int = Field(alias="userId")
    username: str
    birth: str
    sex: str

    def to_domain(self) -> Respondent:
        return Respondent(
            id=self.id,
            username=self.username,
            birth=parse_datetime_pair(self.birth),
            sex=self.sex,
        )


class _FreeTextPayload(_Payload):
    question: str
    content: str


class _AnswersPayload(_Payload):
    stats: list[str | None] = Field(max_length=STAT_SLOTS)
    opt: list[_FreeTextPayload]

    def to_domain(self) -> AnswerSet:
        padded = [*self.stats, *([None] * (STAT_SLOTS - len(self.stats)))]
        return AnswerSet(
            stats=(padded[0], padded[1], padded[2]),
            answers=tuple(FreeTextAnswer(question=o.question, answer=o.content) for o in self.opt),
        )


_CAMPAIGN_LIST: TypeAdapter[list[_CampaignPayload]] = TypeAdapter(list[_CampaignPayload])
_RESPONDENT_LIST: TypeAdapter[list[_RespondentPayload]] = TypeAdapter(list[_RespondentPayload])
_ANSWERS: TypeAdapter[_AnswersPayload] = TypeAdapter(_AnswersPayload)


# ---------------------------------------------------------------------------
# Module helpers
# ---------------------------------------------------------------------------

def parse_datetime_pair(value: str) -> DateTimePair:
    """Split a ``"date,time"`` value; anything but two parts is a payload error."""
    parts = value.split(",")
    if len(parts) != 2:
        raise PayloadError(f"Malformed date-time value: {value!r}")
    return DateTimePair(date=parts[0].strip(), time=parts[1].strip())


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


def _check_id(campaign_id: int) -> None:
    if isinstance(campaign_id, bool) or not isinstance(campaign_id, int) or campaign_id < 0:
        raise InvalidInputError(
            f"Invalid questionnaire id: {campaign_id!r}",
            hint="Questionnaire ids are non-negative integers.",
        )


def _decode(adapter: TypeAdapter[T], text: str, what: str) -> T:
    """Validate a JSON body against *adapter*; any mismatch is a payload error."""
    try:
        return adapter.validate_json(text)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in exc.errors()[:3]
        )
        raise PayloadError(f"Malformed {what}: {problems}") from exc
