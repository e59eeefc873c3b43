"""Terminal layout for campaigns, respondents and answers.

Every function takes domain models (and, where centering matters, a
terminal width) and returns something printable: a Rich
:class:`~rich.table.Table` for the campaign listing, plain strings for
the questionary picker, and :class:`Line` values for the answers block.
Nothing here prints, reads the terminal or touches the network; the
engine does the printing.

Cells never wrap.  A value longer than its column is cut to the column
width and ends in ``…``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import NamedTuple

from rich import box
from rich.cells import cell_len, set_cell_size
from rich.console import JustifyMethod
from rich.table import Table

from gamify_console.core.models import AnswerSet, Campaign, Respondent

ELLIPSIS: str = "…"
NOT_AVAILABLE: str = "N/A"


class Line(NamedTuple):
    """One rendered output line and the Rich style to print it with."""

    text: str
    style: str = ""


@dataclass(frozen=True, slots=True)
class Column:
    title: str
    width: int
    align: JustifyMethod = "center"


CAMPAIGN_COLUMNS: tuple[Column, ...] = (
    Column("ID", 5),
    Column("Name", 30),
    Column("Date", 16, "right"),
)

RESPONDENT_COLUMNS: tuple[Column, ...] = (
    Column("ID", 5),
    Column("Name", 30),
    Column("Birth", 16, "right"),
    Column("Sex", 7),
)

BORDER_STYLE = "dim"
ROW_STYLE = "bright_blue"


# ---------------------------------------------------------------------------
# Campaign table
# ---------------------------------------------------------------------------

def campaign_table(campaigns: Iterable[Campaign]) -> Table:
    """Rich table with one row per campaign, in server order."""
    table = Table(
        box=box.SQUARE,
        show_header=True,
        header_style="bold",
        border_style=BORDER_STYLE,
        row_styles=[ROW_STYLE],
    )
    for col in CAMPAIGN_COLUMNS:
        table.add_column(
            col.title,
            justify=col.align,
            width=col.width,
            no_wrap=True,
            overflow="ellipsis",
        )
    for campaign in campaigns:
        table.add_row(str(campaign.id), campaign.name, str(campaign.scheduled))
    return table


# ---------------------------------------------------------------------------
# Respondent picker
# ---------------------------------------------------------------------------
# questionary choices are plain strings, so picker rows are laid out by hand.

def fit(text: str, width: int) -> str:
    """Cut *text* to at most *width* terminal cells, marking the cut."""
    if cell_len(text) <= width:
        return text
    if width <= 1:
        return set_cell_size(text, width)
    return set_cell_size(text, width - 1) + ELLIPSIS


def pad(text: str, width: int, align: JustifyMethod) -> str:
    """Pad *text* (already fitted) to exactly *width* cells."""
    gap = max(width - cell_len(text), 0)
    if align == "left":
        return text + " " * gap
    if align == "right":
        return " " * gap + text
    left = gap // 2
    return " " * left + text + " " * (gap - left)


def row_width(columns: Sequence[Column]) -> int:
    """Cells occupied by one picker row: ``│ a │ b │``."""
    return sum(col.width + 3 for col in columns) + 1


def format_row(columns: Sequence[Column], values: Sequence[str]) -> str:
    cells = (pad(fit(value, col.width), col.width, col.align) for col, value in zip(columns, values))
    return "│ " + " │ ".join(cells) + " │"


def respondent_row(respondent: Respondent) -> str:
    return format_row(
        RESPONDENT_COLUMNS,
        (str(respondent.id), respondent.username, str(respondent.birth), respondent.sex),
    )


def picker_header() -> str:
    """Column titles shown above the single-choice respondent list."""
    return format_row(RESPONDENT_COLUMNS, [col.title for col in RESPONDENT_COLUMNS])


def respondent_choices(respondents: Iterable[Respondent]) -> list[tuple[str, int]]:
    """``(label, respondent id)`` pairs for the picker, in server order."""
    return [(respondent_row(r), r.id) for r in respondents]


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------

def center(text: str, width: int) -> str:
    """Left-pad *text* so it sits in the middle of a *width*-cell line."""
    gap = width - cell_len(text)
    if gap <= 1:
        return text
    return " " * (gap // 2) + text


def stats_line(answers: AnswerSet) -> str:
    def show(value: str | None) -> str:
        return value if value is not None else NOT_AVAILABLE

    return f"Age: {show(answers.age)}, Sex: {show(answers.sex)}, Exp: {show(answers.experience)}"


def _rule(title: str, width: int) -> str:
    gap = max(width - cell_len(title), 0)
    return "~" * (gap // 2) + title + "~" * (gap - gap // 2)


def answers_block(answers: AnswerSet, width: int) -> list[Line]:
    """Statistics block followed by the numbered free-text answers."""
    lines = [
        Line(""),
        Line(_rule(" Statistical answers ", width), "bold"),
        Line(""),
        Line(center(stats_line(answers), width), "bright_magenta"),
        Line(""),
        Line(_rule(" Optional answers ", width), "bold"),
        Line(""),
    ]
    if not answers.answers:
        lines.append(Line(center("No optional answers.", width), "dim"))
    for number, item in enumerate(answers.answers, start=1):
        lines.append(Line(center(f"{number}. {item.question}", width), "bright_yellow"))
        lines.append(Line(center(item.answer, width), "bright_white"))
        lines.append(Line(""))
    lines.append(Line(_rule("", width), "bold"))
    return lines
