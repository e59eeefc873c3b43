"""CLI application entry point for gamify-console.

This module wires settings, logging, the HTTP transport and the console
engine together, and is the **outer error boundary** for the whole
application.  It catches :class:`~gamify_console.exceptions.GamifyError`,
``KeyboardInterrupt`` and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Startup
-------
1. Load settings (``config.yaml`` / ``--config``, ``GAMIFY_*`` env vars).
2. Log in.  An unreachable server is fatal; refused credentials end the
   program without entering any scope.
3. Run the console engine until the operator leaves.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from pathlib import Path

from gamify_console.cli import exit_codes
from gamify_console.cli.console import console, terminal_size
from gamify_console.cli.engine import FAREWELL, ConsoleEngine
from gamify_console.cli.prompts import Prompter, QuestionaryPrompter
from gamify_console.config import AppSettings, load_settings
from gamify_console.core.campaign_service import CampaignService
from gamify_console.core.models import Session
from gamify_console.exceptions import AuthenticationError, GamifyError
from gamify_console.infra.http_transport import HttpTransport
from gamify_console.log import get_logger, setup_logging
from gamify_console.version import __version__

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gamify-console",
        description="Interactive administrative console for Gamify questionnaires.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="YAML config file (default: ./config.yaml).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show diagnostics and debug logs.",
    )
    return parser


# ---------------------------------------------------------------------------
# Collaborator factories (patched in tests)
# ---------------------------------------------------------------------------

def _build_transport(settings: AppSettings) -> HttpTransport:
    return HttpTransport.from_settings(settings)


def _build_prompter() -> Prompter:
    return QuestionaryPrompter()


def _open_line_reader(settings: AppSettings) -> Callable[[str], str]:
    """Return a prompt_toolkit-backed ``read_line(prompt)`` callable.

    History goes to ``settings.history_file`` when enabled, otherwise it
    only lasts for the session.
    """
    from prompt_toolkit import PromptSession
    from prompt_toolkit.formatted_text import FormattedText
    from prompt_toolkit.history import FileHistory, History, InMemoryHistory

    history: History
    if settings.history:
        history = FileHistory(str(settings.history_file))
    else:
        history = InMemoryHistory()
    session: PromptSession[str] = PromptSession(history=history)

    def read_line(message: str) -> str:
        return session.prompt(FormattedText([("ansiblue", message)]))

    return read_line


# ---------------------------------------------------------------------------
# Startup steps
# ---------------------------------------------------------------------------

def _login(service: CampaignService, settings: AppSettings) -> Session | None:
    """Authenticate; ``None`` when the credentials are refused.

    A :class:`TransportError` is not caught here; an unreachable
    server ends the program through :func:`cli`.
    """
    try:
        session = service.authenticate(
            settings.username,
            settings.password.get_secret_value(),
        )
    except AuthenticationError as exc:
        logger.debug("login refused", error=str(exc))
        console.print("[bold red]Login failed.[/bold red]")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        console.print(f"\n[bright_blue]{FAREWELL}[/bright_blue]\n")
        return None

    if settings.debug:
        console.print("[bold green]Login OK[/bold green]")
    logger.debug("logged in", username=session.username, role=session.role)
    return session


def _greet(session: Session) -> None:
    console.rule(f"[bold bright_blue] Hi {session.username} [/bold bright_blue]", characters="~")
    console.print(
        "[italic]Type a command, or anything else for help. Ctrl+C exits.[/italic]",
        justify="center",
    )


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the console.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.

    Returns
    -------
    int
        OS process exit code.
    """
    args = _build_parser().parse_args(argv)

    overrides = {"debug": True} if args.debug else {}
    settings = load_settings(args.config, **overrides)
    setup_logging(debug=settings.debug)

    if settings.debug:
        console.print(f"Terminal dimensions: {terminal_size()}")

    transport = _build_transport(settings)
    try:
        service = CampaignService(transport)
        session = _login(service, settings)
        if session is None:
            return exit_codes.GENERAL_ERROR

        _greet(session)
        engine = ConsoleEngine(
            service,
            session,
            prompter=_build_prompter(),
            out=console,
            read_line=_open_line_reader(settings),
        )
        return engine.run()
    finally:
        transport.close()


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Wraps :func:`main` and guarantees the process never exits with a raw
    stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except GamifyError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print(f"\n[bright_blue]{FAREWELL}[/bright_blue]\n")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
