"""Shared Rich console and terminal geometry."""

from __future__ import annotations

import shutil

from rich.console import Console

FALLBACK_SIZE: tuple[int, int] = (137, 35)
"""Columns and lines assumed when the terminal size cannot be detected."""

console = Console(highlight=False)


def terminal_size() -> tuple[int, int]:
    """Return the live ``(columns, lines)`` of the terminal."""
    size = shutil.get_terminal_size(fallback=FALLBACK_SIZE)
    return size.columns, size.lines


def terminal_width() -> int:
    return terminal_size()[0]
