"""Interactive prompts backed by questionary.

The engine talks to a :class:`Prompter`; :class:`QuestionaryPrompter` is
the terminal implementation.  Ctrl+C inside a prompt raises
``KeyboardInterrupt`` and Ctrl+D raises ``EOFError``; both are left to
the engine, which terminates the console.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, TypeVar

import questionary

from gamify_console.log import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Prompter(Protocol):
    """Contract for interactive operator input."""

    def text(self, message: str, *, default: str = "") -> str:
        """Ask for one line of text, with *default* pre-filled."""
        ...  # pragma: no cover

    def confirm(self, message: str, *, default: bool = True) -> bool:
        """Ask a yes/no question."""
        ...  # pragma: no cover

    def select(self, message: str, choices: Sequence[tuple[str, T]]) -> T:
        """Let the operator pick exactly one of *choices* (``(label, value)``)."""
        ...  # pragma: no cover


class QuestionaryPrompter:
    """Terminal :class:`Prompter` using questionary widgets."""

    def text(self, message: str, *, default: str = "") -> str:
        answer = questionary.text(message, default=default).unsafe_ask()
        return answer or ""

    def confirm(self, message: str, *, default: bool = True) -> bool:
        return bool(questionary.confirm(message, default=default).unsafe_ask())

    def select(self, message: str, choices: Sequence[tuple[str, T]]) -> T:
        """Single-choice picker.

        Presentation failures (e.g. the terminal going away mid-render)
        re-show the picker until a choice is made.  Callers never pass an
        empty *choices*.
        """
        q_choices = [questionary.Choice(title=label, value=value) for label, value in choices]
        while True:
            try:
                selected = questionary.select(
                    message,
                    choices=q_choices,
                    use_arrow_keys=True,
                    use_shortcuts=False,
                ).unsafe_ask()
            except OSError as exc:
                logger.debug("picker failed, showing it again", error=str(exc))
                continue
            if selected is not None:
                return selected
