"""Tests for the input resolver (core/resolver.py).

Pure logic; prompting is replaced by a recording ``ask`` callable.
"""

from __future__ import annotations

import pytest

from gamify_console.core.resolver import (
    FLAG_VALUE,
    ArgField,
    is_yes,
    resolve,
    scan,
    schema,
    tokenize,
)

LIST = schema(
    ArgField("start", "Start from", default="0"),
    ArgField("size", "Size", default="100"),
    ArgField("past", "Only past?", default="n", flag=True),
)

INSPECT = schema(
    ArgField("id", "Questionnaire ID", positional=True),
    ArgField("canceled", "Canceled?", default="n", flag=True),
)


class _Recorder:
    """``ask`` callable answering from a dict and logging field names."""

    def __init__(self, answers: dict[str, str] | None = None) -> None:
        self.answers = answers or {}
        self.asked: list[str] = []

    def __call__(self, arg: ArgField) -> str:
        self.asked.append(arg.name)
        return self.answers.get(arg.name, "")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestTokenize:
    def test_splits_on_any_whitespace(self) -> None:
        assert tokenize("  list  start 5\tsize 10 ") == ["list", "start", "5", "size", "10"]

    def test_empty(self) -> None:
        assert tokenize("   ") == []


class TestIsYes:
    @pytest.mark.parametrize("value", ["y", "Y", "yes", "t", "true", "TRUE", "1", " y "])
    def test_truthy(self, value: str) -> None:
        assert is_yes(value)

    @pytest.mark.parametrize("value", ["n", "no", "", "false", "0", "maybe"])
    def test_falsy(self, value: str) -> None:
        assert not is_yes(value)


# ---------------------------------------------------------------------------
# Inline scanning
# ---------------------------------------------------------------------------

class TestScan:
    def test_keywords_consume_next_token(self) -> None:
        pending = scan(LIST, ["start", "5", "size", "25"])
        assert pending.values == {"start": "5", "size": "25"}
        assert [a.name for a in pending.unresolved()] == ["past"]

    def test_flag_by_presence(self) -> None:
        pending = scan(LIST, ["past", "size", "10"])
        assert pending.values == {"past": FLAG_VALUE, "size": "10"}

    def test_shortcut_applies_all_defaults(self) -> None:
        pending = scan(LIST, ["d"])
        assert pending.values == {"start": "0", "size": "100", "past": "n"}

    def test_shortcut_keeps_earlier_inline_values(self) -> None:
        pending = scan(LIST, ["size", "10", "default", "start", "3"])
        assert pending.values == {"start": "0", "size": "10", "past": "n"}

    def test_keyword_without_value_stops(self) -> None:
        pending = scan(LIST, ["size", "10", "start"])
        assert pending.values == {"size": "10"}

    def test_repeated_keyword_stops_without_override(self) -> None:
        pending = scan(LIST, ["size", "10", "size", "50", "start", "2"])
        assert pending.values == {"size": "10"}

    def test_unknown_token_stops(self) -> None:
        pending = scan(LIST, ["bogus", "start", "2"])
        assert pending.values == {}

    def test_keywords_are_case_insensitive(self) -> None:
        assert scan(LIST, ["START", "4"]).values == {"start": "4"}

    def test_positional_field(self) -> None:
        assert scan(INSPECT, ["7", "canceled"]).values == {"id": "7", "canceled": FLAG_VALUE}

    def test_positional_by_keyword(self) -> None:
        assert scan(INSPECT, ["id", "7"]).values == {"id": "7"}

    def test_extra_bare_token_stops(self) -> None:
        assert scan(INSPECT, ["7", "8", "canceled"]).values == {"id": "7"}

    def test_shortcut_leaves_required_fields_unresolved(self) -> None:
        pending = scan(INSPECT, ["default"])
        assert pending.values == {"canceled": "n"}
        assert [a.name for a in pending.unresolved()] == ["id"]

    def test_no_shortcuts_when_schema_declares_none(self) -> None:
        delete = schema(ArgField("id", "ID", positional=True), shortcuts=())
        assert scan(delete, ["d"]).values == {"id": "d"}


# ---------------------------------------------------------------------------
# Full resolution
# ---------------------------------------------------------------------------

class TestResolve:
    def test_shortcut_means_zero_prompts(self) -> None:
        ask = _Recorder()
        values = resolve(LIST, ["default"], ask)
        assert values == {"start": "0", "size": "100", "past": "n"}
        assert ask.asked == []

    def test_only_unresolved_fields_prompted_in_schema_order(self) -> None:
        ask = _Recorder({"start": "3", "past": "y"})
        values = resolve(LIST, ["size", "25"], ask)
        assert ask.asked == ["start", "past"]
        assert values == {"start": "3", "size": "25", "past": "y"}

    def test_empty_answer_takes_default(self) -> None:
        ask = _Recorder()
        values = resolve(LIST, [], ask)
        assert ask.asked == ["start", "size", "past"]
        assert values == {"start": "0", "size": "100", "past": "n"}

    def test_required_field_without_answer_is_empty(self) -> None:
        values = resolve(INSPECT, [], _Recorder())
        assert values == {"id": "", "canceled": "n"}

    def test_inline_wins_over_prompt(self) -> None:
        ask = _Recorder({"id": "99"})
        values = resolve(INSPECT, ["4", "canceled"], ask)
        assert values["id"] == "4"
        assert ask.asked == []
