"""Tests for CampaignService (core/campaign_service.py).

The :class:`Transport` dependency is **mocked** — no network access.
These tests verify:

* One request per operation, with the documented paths and parameters
* Status → success / failure mapping
* Raw JSON → domain-model parsing, and malformed payloads → ``PayloadError``
* Input validated before anything is sent
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from gamify_console.core.campaign_service import (
    QUESTION_FIELDS,
    CampaignService,
    Endpoint,
    parse_datetime_pair,
)
from gamify_console.core.models import (
    DateTimePair,
    ListQuery,
    NewCampaign,
    RawResponse,
)
from gamify_console.exceptions import (
    AuthenticationError,
    InvalidInputError,
    PayloadError,
    QuestionLimitError,
    RequestRejectedError,
    TransportError,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _ok(body: Any = "") -> RawResponse:
    text = body if isinstance(body, str) else json.dumps(body)
    return RawResponse(status_code=200, text=text)


def _status(code: int) -> RawResponse:
    return RawResponse(status_code=code, text="")


def _transport(response: RawResponse | Exception) -> MagicMock:
    """Mock transport answering every call with *response* (or raising it)."""
    transport = MagicMock()
    for method in ("get", "delete", "post_form", "post_multipart"):
        mocked = getattr(transport, method)
        if isinstance(response, Exception):
            mocked.side_effect = response
        else:
            mocked.return_value = response
    return transport


def _raw_campaign(**overrides: Any) -> dict[str, Any]:
    d: dict[str, Any] = {
        "questionnaireId": 4,
        "name": "Spring Survey",
        "datetime": "2024-05-01,10:00",
        "image": "uploads/campaignImages/spring.png",
    }
    d.update(overrides)
    return d


def _raw_user(**overrides: Any) -> dict[str, Any]:
    d: dict[str, Any] = {
        "userId": 12,
        "username": "alice",
        "birth": "1990-01-02,00:00",
        "sex": "F",
    }
    d.update(overrides)
    return d


# ---------------------------------------------------------------------------
# authenticate
# ---------------------------------------------------------------------------

class TestAuthenticate:
    def test_posts_form_credentials(self) -> None:
        transport = _transport(_ok("/GamifyUser/admin"))
        CampaignService(transport).authenticate("ale", "secret")
        transport.post_form.assert_called_once_with(
            Endpoint.LOGIN, data={"username": "ale", "pwd": "secret"},
        )

    def test_role_is_last_path_segment(self) -> None:
        session = CampaignService(_transport(_ok("/GamifyUser/admin\n"))).authenticate("ale", "x")
        assert session.username == "ale"
        assert session.role == "admin"
        assert session.is_admin

    def test_non_admin_role(self) -> None:
        session = CampaignService(_transport(_ok("/GamifyUser/user/"))).authenticate("bob", "x")
        assert session.role == "user"
        assert not session.is_admin

    def test_unauthorized_raises(self) -> None:
        with pytest.raises(AuthenticationError, match="401"):
            CampaignService(_transport(_status(401))).authenticate("ale", "bad")

    def test_transport_error_propagates(self) -> None:
        svc = CampaignService(_transport(TransportError("Server x unreachable.")))
        with pytest.raises(TransportError, match="unreachable"):
            svc.authenticate("ale", "x")

    def test_unexpected_error_wrapped(self) -> None:
        svc = CampaignService(_transport(RuntimeError("boom")))
        with pytest.raises(TransportError, match="Unexpected"):
            svc.authenticate("ale", "x")


# ---------------------------------------------------------------------------
# list_campaigns
# ---------------------------------------------------------------------------

class TestListCampaigns:
    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            (ListQuery(), {"start": "0", "size": "100", "past": "false"}),
            (ListQuery(start=10, size=25, past=True), {"start": "10", "size": "25", "past": "true"}),
        ],
    )
    def test_query_parameters(self, query: ListQuery, expected: dict[str, str]) -> None:
        transport = _transport(_ok([]))
        CampaignService(transport).list_campaigns(query)
        transport.get.assert_called_once_with(Endpoint.LIST, params=expected)

    def test_parses_campaigns_in_order(self) -> None:
        transport = _transport(_ok([_raw_campaign(), _raw_campaign(questionnaireId=5, name="B")]))
        campaigns = CampaignService(transport).list_campaigns(ListQuery())
        assert [c.id for c in campaigns] == [4, 5]
        first = campaigns[0]
        assert first.name == "Spring Survey"
        assert first.scheduled == DateTimePair(date="2024-05-01", time="10:00")
        assert first.image == "uploads/campaignImages/spring.png"

    def test_empty_list(self) -> None:
        assert CampaignService(_transport(_ok([]))).list_campaigns(ListQuery()) == ()

    def test_non_ok_status_raises(self) -> None:
        with pytest.raises(RequestRejectedError) as exc_info:
            CampaignService(_transport(_status(500))).list_campaigns(ListQuery())
        assert exc_info.value.status_code == 500

    def test_negative_start_rejected_before_request(self) -> None:
        transport = _transport(_ok([]))
        with pytest.raises(InvalidInputError):
            CampaignService(transport).list_campaigns(ListQuery(start=-1))
        transport.get.assert_not_called()

    @pytest.mark.parametrize(
        "body",
        [
            "not json",
            json.dumps({"questionnaireId": 1}),
            json.dumps([_raw_campaign(datetime="2024-05-01")]),
            json.dumps([_raw_campaign(datetime="a,b,c")]),
            json.dumps([_raw_campaign(questionnaireId="4")]),
            json.dumps([_raw_campaign(questionnaireId=-3)]),
            json.dumps([{"name": "missing fields"}]),
            json.dumps([42]),
            json.dumps([_raw_campaign(questionnaireId=True)]),
            json.dumps([_raw_campaign(questionnaireId=4.0)]),
            json.dumps([_raw_campaign(name=7)]),
        ],
    )
    def test_malformed_payload_raises_payload_error(self, body: str) -> None:
        with pytest.raises(PayloadError):
            CampaignService(_transport(_ok(body))).list_campaigns(ListQuery())

    def test_payload_error_names_the_field(self) -> None:
        body = json.dumps([_raw_campaign(), _raw_campaign(name=None)])
        with pytest.raises(PayloadError, match=r"questionnaire list: 1\.name"):
            CampaignService(_transport(_ok(body))).list_campaigns(ListQuery())

    def test_unknown_keys_ignored(self) -> None:
        body = [_raw_campaign(owner="admin", archived=False)]
        campaigns = CampaignService(_transport(_ok(body))).list_campaigns(ListQuery())
        assert campaigns[0].id == 4


# ---------------------------------------------------------------------------
# create_campaign
# ---------------------------------------------------------------------------

class TestCreateCampaign:
    def _campaign(self, questions: tuple[str, ...]) -> NewCampaign:
        return NewCampaign(
            name="Spring Survey",
            date="2024-05-01",
            image_path="/tmp/spring.png",
            questions=questions,
        )

    def test_multipart_fields(self) -> None:
        transport = _transport(_ok())
        CampaignService(transport).create_campaign(self._campaign(("Q1", "Q2")))
        transport.post_multipart.assert_called_once_with(
            Endpoint.CREATE,
            data={
                "name": "Spring Survey",
                "date": "2024-05-01",
                "Question0": "Q1",
                "Question1": "Q2",
            },
            files={"image": Path("/tmp/spring.png")},
        )

    def test_six_questions_accepted(self) -> None:
        transport = _transport(_ok())
        questions = tuple(f"Q{i}" for i in range(6))
        CampaignService(transport).create_campaign(self._campaign(questions))
        data = transport.post_multipart.call_args.kwargs["data"]
        assert [data[name] for name in QUESTION_FIELDS] == list(questions)

    def test_seventh_question_rejected_before_request(self) -> None:
        transport = _transport(_ok())
        questions = tuple(f"Q{i}" for i in range(7))
        with pytest.raises(QuestionLimitError, match="at most 6"):
            CampaignService(transport).create_campaign(self._campaign(questions))
        transport.post_multipart.assert_not_called()

    def test_no_questions(self) -> None:
        transport = _transport(_ok())
        CampaignService(transport).create_campaign(self._campaign(()))
        data = transport.post_multipart.call_args.kwargs["data"]
        assert set(data) == {"name", "date"}

    def test_non_ok_status_raises(self) -> None:
        with pytest.raises(RequestRejectedError):
            CampaignService(_transport(_status(400))).create_campaign(self._campaign(("Q",)))


# ---------------------------------------------------------------------------
# delete_campaign
# ---------------------------------------------------------------------------

class TestDeleteCampaign:
    def test_sends_id(self) -> None:
        transport = _transport(_ok())
        CampaignService(transport).delete_campaign(7)
        transport.delete.assert_called_once_with(Endpoint.DELETE, params={"id": "7"})

    def test_missing_id_fails_every_time(self) -> None:
        svc = CampaignService(_transport(_status(404)))
        for _ in range(2):
            with pytest.raises(RequestRejectedError):
                svc.delete_campaign(99)

    @pytest.mark.parametrize("bad_id", [-1, True])
    def test_invalid_id_rejected(self, bad_id: int) -> None:
        transport = _transport(_ok())
        with pytest.raises(InvalidInputError):
            CampaignService(transport).delete_campaign(bad_id)
        transport.delete.assert_not_called()


# ---------------------------------------------------------------------------
# list_respondents
# ---------------------------------------------------------------------------

class TestListRespondents:
    def test_completed_endpoint(self) -> None:
        transport = _transport(_ok([_raw_user()]))
        respondents = CampaignService(transport).list_respondents(4)
        transport.get.assert_called_once_with(
            Endpoint.COMPLETED_USERS, params={"id": "4", "start": "0", "size": "100"},
        )
        assert respondents[0].id == 12
        assert respondents[0].username == "alice"
        assert respondents[0].birth == DateTimePair(date="1990-01-02", time="00:00")
        assert respondents[0].sex == "F"

    def test_canceled_endpoint(self) -> None:
        transport = _transport(_ok([]))
        CampaignService(transport).list_respondents(4, canceled=True)
        assert transport.get.call_args.args[0] == Endpoint.CANCELED_USERS

    def test_empty_is_not_an_error(self) -> None:
        assert CampaignService(_transport(_ok([]))).list_respondents(4) == ()

    def test_not_found_raises(self) -> None:
        with pytest.raises(RequestRejectedError):
            CampaignService(_transport(_status(400))).list_respondents(404)

    def test_malformed_birth_raises(self) -> None:
        with pytest.raises(PayloadError):
            CampaignService(_transport(_ok([_raw_user(birth="1990")]))).list_respondents(4)

    @pytest.mark.parametrize(
        "user",
        [_raw_user(userId="12"), _raw_user(sex=None), {"userId": 12, "username": "bob"}],
    )
    def test_malformed_user_raises(self, user: dict[str, Any]) -> None:
        with pytest.raises(PayloadError, match="respondent list"):
            CampaignService(_transport(_ok([user]))).list_respondents(4)


# ---------------------------------------------------------------------------
# fetch_answers
# ---------------------------------------------------------------------------

class TestFetchAnswers:
    def test_parameters(self) -> None:
        transport = _transport(_ok({"stats": [], "opt": []}))
        CampaignService(transport).fetch_answers(4, 12)
        transport.get.assert_called_once_with(
            Endpoint.ANSWERS, params={"questionnaireId": "4", "userId": "12"},
        )

    def test_full_answer_set(self) -> None:
        body = {
            "stats": ["31", "M", "High"],
            "opt": [
                {"question": "Favourite colour?", "content": "Blue"},
                {"question": "Why?", "content": "Because"},
            ],
        }
        answers = CampaignService(_transport(_ok(body))).fetch_answers(4, 12)
        assert answers.stats == ("31", "M", "High")
        assert [a.question for a in answers.answers] == ["Favourite colour?", "Why?"]
        assert answers.answers[0].answer == "Blue"

    def test_stats_always_three_slots(self) -> None:
        answers = CampaignService(_transport(_ok({"stats": ["20"], "opt": []}))).fetch_answers(4, 1)
        assert answers.stats == ("20", None, None)
        assert answers.sex is None

    def test_absent_stats_are_none(self) -> None:
        body = {"stats": [None, "F", None], "opt": []}
        answers = CampaignService(_transport(_ok(body))).fetch_answers(4, 1)
        assert answers.age is None
        assert answers.sex == "F"
        assert answers.experience is None

    @pytest.mark.parametrize(
        "body",
        [
            [],
            {"opt": []},
            {"stats": ["1", "2", "3", "4"], "opt": []},
            {"stats": [1], "opt": []},
            {"stats": [], "opt": [{"question": "Q"}]},
        ],
    )
    def test_malformed_payload(self, body: Any) -> None:
        with pytest.raises(PayloadError):
            CampaignService(_transport(_ok(body))).fetch_answers(4, 1)


# ---------------------------------------------------------------------------
# parse_datetime_pair
# ---------------------------------------------------------------------------

class TestParseDatetimePair:
    def test_splits_on_comma(self) -> None:
        assert parse_datetime_pair("2024-05-01,10:00") == DateTimePair("2024-05-01", "10:00")

    def test_str_joins_with_space(self) -> None:
        assert str(parse_datetime_pair("2024-05-01,10:00")) == "2024-05-01 10:00"

    @pytest.mark.parametrize("value", ["", "2024-05-01", "a,b,c"])
    def test_rejects_other_shapes(self, value: str) -> None:
        with pytest.raises(PayloadError):
            parse_datetime_pair(value)
