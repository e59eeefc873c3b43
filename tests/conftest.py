"""Shared pytest fixtures and configuration for the gamify-console test suite.

Guidelines
----------
* No network access in any test — the backend is faked at the
  transport boundary or with ``httpx.MockTransport``.
* No real terminal interaction — prompts are scripted.
* Tests must not depend on a ``config.yaml`` / ``.env`` in the working
  directory or on ``GAMIFY_*`` variables of the developer's shell.
"""

from __future__ import annotations

import io
from collections.abc import Iterable, Sequence
from typing import Any

import pytest
from rich.console import Console


class ScriptedPrompter:
    """:class:`Prompter` that replays canned answers and records every call.

    A ``None`` text answer means "press Enter" and yields the default.
    """

    def __init__(
        self,
        texts: Iterable[str | None] = (),
        confirms: Iterable[bool] = (),
        selections: Iterable[Any] = (),
    ) -> None:
        self._texts = list(texts)
        self._confirms = list(confirms)
        self._selections = list(selections)
        self.text_calls: list[tuple[str, str]] = []
        self.confirm_calls: list[str] = []
        self.select_calls: list[tuple[str, list[tuple[str, Any]]]] = []

    def text(self, message: str, *, default: str = "") -> str:
        self.text_calls.append((message, default))
        if not self._texts:
            raise AssertionError(f"unexpected text prompt: {message!r}")
        answer = self._texts.pop(0)
        return default if answer is None else answer

    def confirm(self, message: str, *, default: bool = True) -> bool:
        self.confirm_calls.append(message)
        if not self._confirms:
            raise AssertionError(f"unexpected confirm prompt: {message!r}")
        return self._confirms.pop(0)

    def select(self, message: str, choices: Sequence[tuple[str, Any]]) -> Any:
        self.select_calls.append((message, list(choices)))
        if not self._selections:
            raise AssertionError(f"unexpected picker: {message!r}")
        return self._selections.pop(0)


@pytest.fixture()
def prompter_cls() -> type[ScriptedPrompter]:
    return ScriptedPrompter


@pytest.fixture()
def out() -> Console:
    """Rich console writing plain text into a buffer."""
    return Console(file=io.StringIO(), width=200, color_system=None, highlight=False)


@pytest.fixture()
def isolated_env(tmp_path: Any, monkeypatch: pytest.MonkeyPatch) -> Any:
    """Run in an empty directory with no ``GAMIFY_*`` variables set."""
    import os

    for key in list(os.environ):
        if key.upper().startswith("GAMIFY_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path
