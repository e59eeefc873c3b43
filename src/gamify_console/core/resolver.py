"""Partial-input resolution for console commands.

A command declares an :class:`ArgSchema`; the tokens typed after the
command word are scanned left to right to fill fields inline, and every
field still missing afterwards is requested through an injected *ask*
callable, in schema order.

Scanning rules
--------------
* A shortcut token (``d`` / ``default``) resolves every field that has a
  default and stops scanning.
* A field keyword consumes the *next* token as the value.  With no next
  token scanning stops and the field is left for prompting.
* A flag field is resolved to :data:`FLAG_VALUE` by its keyword alone.
* A keyword naming an already-resolved field stops scanning.
* Any other token fills the next unresolved positional field, or stops
  scanning when there is none.

Pure logic. No terminal I/O happens here; prompting is delegated.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

FLAG_VALUE: str = "y"
"""Value stored for a flag field resolved by presence alone."""

DEFAULT_SHORTCUTS: tuple[str, ...] = ("d", "default")

_TRUE_WORDS: frozenset[str] = frozenset({"y", "yes", "t", "true", "1"})


def tokenize(line: str) -> list[str]:
    """Split a command line on whitespace."""
    return line.split()


def is_yes(value: str) -> bool:
    """Interpret a free-text boolean answer."""
    return value.strip().lower() in _TRUE_WORDS


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ArgField:
    """One argument of a command."""

    name: str
    prompt: str
    """Text shown when the field has to be asked for interactively."""

    default: str | None = None
    """Pre-filled answer; ``None`` marks the field as required."""

    positional: bool = False
    """Whether a bare token may fill this field."""

    flag: bool = False
    """Whether the keyword alone sets the field to :data:`FLAG_VALUE`."""


@dataclass(frozen=True, slots=True)
class ArgSchema:
    """Ordered argument declaration for one command."""

    fields: tuple[ArgField, ...]
    shortcuts: tuple[str, ...] = DEFAULT_SHORTCUTS

    def field_for_keyword(self, token: str) -> ArgField | None:
        lowered = token.lower()
        for candidate in self.fields:
            if lowered == candidate.name:
                return candidate
        return None


# ---------------------------------------------------------------------------
# Pending state for one command line
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class PendingArguments:
    """Field values collected so far for a single command invocation."""

    schema: ArgSchema
    values: dict[str, str] = field(default_factory=dict)

    def is_resolved(self, name: str) -> bool:
        return name in self.values

    def resolve(self, name: str, value: str) -> None:
        self.values[name] = value

    def apply_defaults(self) -> None:
        for arg in self.schema.fields:
            if arg.default is not None and not self.is_resolved(arg.name):
                self.values[arg.name] = arg.default

    def unresolved(self) -> list[ArgField]:
        return [arg for arg in self.schema.fields if not self.is_resolved(arg.name)]

    def next_positional(self) -> ArgField | None:
        for arg in self.schema.fields:
            if arg.positional and not self.is_resolved(arg.name):
                return arg
        return None


AskFn = Callable[[ArgField], str]
"""Interactive fallback: return the operator's answer for *field*."""


def scan(schema: ArgSchema, tokens: Sequence[str]) -> PendingArguments:
    """Fill fields from inline *tokens* only (no prompting)."""
    pending = PendingArguments(schema)
    shortcuts = {s.lower() for s in schema.shortcuts}
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token.lower() in shortcuts:
            pending.apply_defaults()
            break

        arg = schema.field_for_keyword(token)
        if arg is not None:
            if pending.is_resolved(arg.name):
                break
            if arg.flag:
                pending.resolve(arg.name, FLAG_VALUE)
                index += 1
                continue
            if index + 1 >= len(tokens):
                break
            pending.resolve(arg.name, tokens[index + 1])
            index += 2
            continue

        positional = pending.next_positional()
        if positional is None:
            break
        pending.resolve(positional.name, token)
        index += 1
    return pending


def resolve(
    schema: ArgSchema,
    tokens: Sequence[str],
    ask: AskFn,
) -> dict[str, str]:
    """Resolve every field of *schema*: inline first, then interactively.

    An empty interactive answer falls back to the field's default when
    it has one.
    """
    pending = scan(schema, tokens)
    for arg in pending.unresolved():
        answer = ask(arg).strip()
        if not answer and arg.default is not None:
            answer = arg.default
        pending.resolve(arg.name, answer)
    return dict(pending.values)


def schema(*fields: ArgField, shortcuts: Iterable[str] = DEFAULT_SHORTCUTS) -> ArgSchema:
    """Convenience constructor: ``schema(ArgField(...), ArgField(...))``."""
    return ArgSchema(fields=tuple(fields), shortcuts=tuple(shortcuts))
