"""The console engine: a two-scope read/dispatch loop.

Each line read is split into a command word and argument tokens.  The
word is looked up in the vocabulary of the active scope; anything
unknown maps to that scope's ``HELP`` command.  Arguments are filled by
:mod:`gamify_console.core.resolver` (inline tokens, then prompts), the
campaign service performs the request and :mod:`~gamify_console.cli.render`
lays out the result.

Scopes
------
``TOP``     ``admin`` enters the administrative scope, ``exit`` quits.
``ADMIN``   ``create``, ``list``, ``inspect``, ``delete``;
            ``back``/``b`` returns to ``TOP``, ``exit`` quits.

Ctrl+C and Ctrl+D end the console from anywhere, printing a farewell.
One command finishes before the next line is read.
"""

from __future__ import annotations

import datetime
import enum
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from rich.align import Align
from rich.console import Console
from rich.markup import escape

from gamify_console.cli import exit_codes, render
from gamify_console.cli.console import terminal_width
from gamify_console.cli.prompts import Prompter
from gamify_console.core.campaign_service import CampaignService
from gamify_console.core.models import MAX_QUESTIONS, ListQuery, NewCampaign, Scope, Session
from gamify_console.core.resolver import ArgField, ArgSchema, is_yes, resolve, schema, tokenize
from gamify_console.exceptions import GamifyError, InvalidInputError
from gamify_console.log import get_logger

logger = get_logger(__name__)

FAREWELL: str = " (ᵟຶ︵ ᵟຶ) bye (ᵟຶ︵ ᵟຶ) "
TOP_PROMPT: str = ">> "


# ---------------------------------------------------------------------------
# Command vocabularies
# ---------------------------------------------------------------------------

class TopCommand(enum.Enum):
    ADMIN = "admin"
    EXIT = "exit"
    HELP = "help"


class AdminCommand(enum.Enum):
    CREATE = "create"
    LIST = "list"
    INSPECT = "inspect"
    DELETE = "delete"
    BACK = "back"
    EXIT = "exit"
    HELP = "help"


TOP_WORDS: dict[str, TopCommand] = {
    "admin": TopCommand.ADMIN,
    "exit": TopCommand.EXIT,
    "quit": TopCommand.EXIT,
}

ADMIN_WORDS: dict[str, AdminCommand] = {
    "create": AdminCommand.CREATE,
    "list": AdminCommand.LIST,
    "inspect": AdminCommand.INSPECT,
    "delete": AdminCommand.DELETE,
    "b": AdminCommand.BACK,
    "back": AdminCommand.BACK,
    "exit": AdminCommand.EXIT,
    "quit": AdminCommand.EXIT,
}

TOP_HELP: str = "Available commands: admin, exit."
ADMIN_HELP: str = "Available commands: create, list, delete, inspect, back, exit."


# ---------------------------------------------------------------------------
# Argument schemas
# ---------------------------------------------------------------------------

LIST_ARGS: ArgSchema = schema(
    ArgField("start", "Start from", default="0"),
    ArgField("size", "Size (10,25,50,100)", default="100"),
    ArgField("past", "Only past questionnaires? (y/n)", default="n", flag=True),
)

INSPECT_ARGS: ArgSchema = schema(
    ArgField("id", "Questionnaire ID", positional=True),
    ArgField("canceled", "Canceled users? (y/n)", default="n", flag=True),
)

DELETE_ARGS: ArgSchema = schema(
    ArgField("id", "Questionnaire ID", positional=True),
    shortcuts=(),
)

CREATE_ARGS: ArgSchema = schema(
    ArgField("name", "Questionnaire name"),
    ArgField("date", "Date (YYYY-MM-DD)"),
    ArgField("image", "Image [ex. /home/me/Desktop/img.jpeg]"),
    shortcuts=(),
)


def _digits(value: str) -> str | None:
    """*value* stripped, if it is plain ASCII digits (no sign, no ``_``)."""
    text = value.strip()
    return text if text.isascii() and text.isdigit() else None


def parse_count(value: str, name: str) -> int:
    text = _digits(value)
    if text is None:
        raise InvalidInputError(f"{name} must be a non-negative whole number, got {value!r}.")
    return int(text)


def parse_campaign_id(value: str) -> int:
    text = _digits(value)
    if text is None:
        raise InvalidInputError(
            f"Invalid questionnaire id: {value!r}",
            hint="Use `list` to see the ids of existing questionnaires.",
        )
    return int(text)


def parse_date(value: str) -> str:
    try:
        return datetime.date.fromisoformat(value.strip()).isoformat()
    except ValueError:
        raise InvalidInputError(
            f"Invalid date: {value!r}",
            hint="Use the YYYY-MM-DD format, e.g. 2024-05-01.",
        ) from None


def parse_image(value: str) -> Path:
    path = Path(value.strip()).expanduser()
    if not value.strip() or not path.is_file():
        raise InvalidInputError(f"Image not found: {value!r}")
    return path


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ConsoleState:
    """Everything that survives from one command to the next."""

    scope: Scope
    session: Session


class ConsoleEngine:
    """Read a line, dispatch it in the active scope, repeat.

    Parameters
    ----------
    service:
        Domain client used for every backend operation.
    session:
        Result of the successful login.
    prompter:
        Source of interactive answers (argument fallbacks, questions,
        the respondent picker).
    out:
        Rich console all output is written to.
    read_line:
        Returns the next command line for a given prompt text.  Raises
        ``EOFError`` on end of input and ``KeyboardInterrupt`` on Ctrl+C.
    width:
        Returns the current terminal width; read once per rendered block.
    """

    def __init__(
        self,
        service: CampaignService,
        session: Session,
        *,
        prompter: Prompter,
        out: Console,
        read_line: Callable[[str], str],
        width: Callable[[], int] = terminal_width,
    ) -> None:
        self.state = ConsoleState(scope=Scope.TOP, session=session)
        self._service = service
        self._prompter = prompter
        self._out = out
        self._read_line = read_line
        self._width = width

        self._top_handlers: dict[TopCommand, Callable[[Sequence[str]], None]] = {
            TopCommand.ADMIN: self._enter_admin,
            TopCommand.EXIT: self._exit,
            TopCommand.HELP: self._top_help,
        }
        self._admin_handlers: dict[AdminCommand, Callable[[Sequence[str]], None]] = {
            AdminCommand.CREATE: self._create,
            AdminCommand.LIST: self._list,
            AdminCommand.INSPECT: self._inspect,
            AdminCommand.DELETE: self._delete,
            AdminCommand.BACK: self._back,
            AdminCommand.EXIT: self._exit,
            AdminCommand.HELP: self._admin_help,
        }

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    @property
    def prompt(self) -> str:
        if self.state.scope is Scope.ADMIN:
            return f"{self.state.session.username} >> "
        return TOP_PROMPT

    def run(self) -> int:
        """Loop until ``exit``, Ctrl+C or end of input; return the exit code."""
        while self.state.scope is not Scope.EXITED:
            try:
                line = self._read_line(self.prompt)
                self.handle_line(line)
            except KeyboardInterrupt:
                self._terminate()
                return exit_codes.KEYBOARD_INTERRUPT
            except EOFError:
                self._terminate()
                return exit_codes.SUCCESS
        return exit_codes.SUCCESS

    def handle_line(self, line: str) -> None:
        """Dispatch one command line in the current scope."""
        tokens = tokenize(line)
        word = tokens[0].lower() if tokens else ""
        args = tokens[1:]

        if self.state.scope is Scope.ADMIN:
            handler = self._admin_handlers[ADMIN_WORDS.get(word, AdminCommand.HELP)]
        else:
            handler = self._top_handlers[TOP_WORDS.get(word, TopCommand.HELP)]

        logger.debug("dispatch", scope=self.state.scope.value, command=word or "<empty>")
        try:
            handler(args)
        except InvalidInputError as exc:
            self._report(exc)

    # ------------------------------------------------------------------
    # Scope transitions
    # ------------------------------------------------------------------

    def _enter_admin(self, _args: Sequence[str]) -> None:
        session = self.state.session
        if not session.is_admin:
            self._out.print(
                f"[yellow]Account role {escape(repr(session.role))} "
                "has no administrative commands.[/yellow]"
            )
            return
        self.state.scope = Scope.ADMIN
        self._out.print("[dim]Admin scope. Type `back` to return, `exit` to quit.[/dim]")

    def _back(self, _args: Sequence[str]) -> None:
        self.state.scope = Scope.TOP

    def _exit(self, _args: Sequence[str]) -> None:
        self._terminate()

    def _terminate(self) -> None:
        self.state.scope = Scope.EXITED
        self._out.print(f"\n[bright_blue]{FAREWELL}[/bright_blue]\n")

    def _top_help(self, _args: Sequence[str]) -> None:
        self._out.print(f"[yellow]{TOP_HELP}[/yellow]")

    def _admin_help(self, _args: Sequence[str]) -> None:
        self._out.print(f"[yellow]{ADMIN_HELP}[/yellow]")

    # ------------------------------------------------------------------
    # Admin commands
    # ------------------------------------------------------------------

    def _create(self, args: Sequence[str]) -> None:
        values = resolve(CREATE_ARGS, args, self._ask)
        name = values["name"].strip()
        if not name:
            raise InvalidInputError("Questionnaire name must not be empty.")
        date = parse_date(values["date"])
        image = parse_image(values["image"])
        questions = self._collect_questions()

        campaign = NewCampaign(name=name, date=date, image_path=str(image), questions=tuple(questions))
        try:
            self._service.create_campaign(campaign)
        except GamifyError as exc:
            self._failure("Questionnaire submission failed!", exc)
            return
        self._out.print("[bright_green]Questionnaire submitted successfully![/bright_green]")

    def _collect_questions(self) -> list[str]:
        """Ask for questions one at a time until an empty one, a "no", or the limit."""
        questions: list[str] = []
        while len(questions) < MAX_QUESTIONS:
            question = self._prompter.text(f"Question #{len(questions)}").strip()
            if not question:
                break
            questions.append(question)
            if len(questions) == MAX_QUESTIONS:
                self._out.print(f"[yellow]Maximum of {MAX_QUESTIONS} questions reached.[/yellow]")
                break
            if not self._prompter.confirm("Continue?", default=True):
                break
        return questions

    def _list(self, args: Sequence[str]) -> None:
        values = resolve(LIST_ARGS, args, self._ask)
        query = ListQuery(
            start=parse_count(values["start"], "start"),
            size=parse_count(values["size"], "size"),
            past=is_yes(values["past"]),
        )
        try:
            campaigns = self._service.list_campaigns(query)
        except GamifyError as exc:
            self._failure("Error retrieving list", exc)
            return
        self._out.print(Align.center(render.campaign_table(campaigns)))

    def _inspect(self, args: Sequence[str]) -> None:
        values = resolve(INSPECT_ARGS, args, self._ask)
        campaign_id = parse_campaign_id(values["id"])
        canceled = is_yes(values["canceled"])

        try:
            respondents = self._service.list_respondents(campaign_id, canceled=canceled)
        except GamifyError as exc:
            self._failure(
                "Error in retrieving data. You probably provided a non-existent id. ಠ_ಠ",
                exc,
            )
            return
        if not respondents:
            word = "canceled" if canceled else "answered"
            self._out.print(f"[blue]No one {word} yet![/blue]")
            return

        respondent_id = self._prompter.select(
            render.picker_header(),
            render.respondent_choices(respondents),
        )
        try:
            answers = self._service.fetch_answers(campaign_id, respondent_id)
        except GamifyError as exc:
            self._failure("Error retrieving answers.", exc)
            return
        self._print_lines(render.answers_block(answers, self._width()))

    def _delete(self, args: Sequence[str]) -> None:
        values = resolve(DELETE_ARGS, args, self._ask)
        campaign_id = parse_campaign_id(values["id"])
        try:
            self._service.delete_campaign(campaign_id)
        except GamifyError as exc:
            self._failure("Deletion failed.", exc)
            return
        self._out.print(f"[bright_green]OK! Questionnaire {campaign_id} deleted.[/bright_green]")

    # ------------------------------------------------------------------
    # Output helpers
    # ------------------------------------------------------------------

    def _ask(self, arg: ArgField) -> str:
        return self._prompter.text(arg.prompt, default=arg.default or "")

    def _print_lines(self, lines: Sequence[render.Line]) -> None:
        for line in lines:
            self._out.print(line.text, style=line.style or None, markup=False, highlight=False, soft_wrap=True)

    def _failure(self, message: str, exc: GamifyError) -> None:
        logger.debug("command failed", error=str(exc), kind=type(exc).__name__)
        self._out.print(f"[bright_red]{escape(message)}[/bright_red]")
        self._out.print(f"[dim]{escape(str(exc))}[/dim]")

    def _report(self, exc: InvalidInputError) -> None:
        self._out.print(f"[red]{escape(str(exc))}[/red]")
        if exc.hint:
            self._out.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
