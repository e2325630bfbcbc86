"""Command template loading and positional substitution.

Templates are plain text, one command per line. ``{0}``, ``{1}``, ... are
replaced with the matching entry of an inventory row's parameter tail; any
other text, braces included, passes through untouched. Rendered lines are
joined into one command string with the configured separator.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Sequence

from fleetcmd.config import settings
from fleetcmd.exceptions import TemplateError
from fleetcmd.utils.logging import get_logger

log = get_logger(__name__)

PLACEHOLDER = re.compile(r"\{(\d+)\}")


def read_lines(path: str | Path) -> list[str]:
    """Read a line-oriented command file, dropping blank lines."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise TemplateError(f"Cannot read command file {p}: {exc}") from exc
    return [line.rstrip() for line in text.splitlines() if line.strip()]


def load_template(path: str | Path) -> list[str]:
    lines = read_lines(path)
    if not lines:
        raise TemplateError(f"Command template {path} is empty")
    log.debug("template.loaded", path=str(path), lines=len(lines))
    return lines


def placeholder_indices(lines: Sequence[str]) -> set[int]:
    found: set[int] = set()
    for line in lines:
        found.update(int(m.group(1)) for m in PLACEHOLDER.finditer(line))
    return found


def placeholder_count(lines: Sequence[str]) -> int:
    """Number of parameters a template consumes (highest index + 1)."""
    indices = placeholder_indices(lines)
    return max(indices) + 1 if indices else 0


def check_template(lines: Sequence[str], param_width: int) -> None:
    """Reject a template that cannot be rendered against *param_width* columns.

    A template without placeholders is always valid. Otherwise it must
    consume exactly the parameter columns the inventory provides.
    """
    needed = placeholder_count(lines)
    if needed and needed != param_width:
        raise TemplateError(
            f"Template uses {needed} positional parameter(s) but the "
            f"inventory provides {param_width}",
        )


class JoinedCommand(str):
    """A joined command string that remembers where its statements begin.

    Compares and prints as the plain joined text. Transports that need the
    statements back use :attr:`statements` instead of re-splitting, so a
    separator character inside a statement survives.
    """

    statements: tuple[str, ...]

    def __new__(cls, statements: Sequence[str], separator: str) -> "JoinedCommand":
        obj = super().__new__(cls, separator.join(statements))
        obj.statements = tuple(statements)
        return obj


def join_commands(lines: Sequence[str], separator: str | None = None) -> JoinedCommand:
    sep = settings.command_separator if separator is None else separator
    return JoinedCommand(lines, sep)


def render_command(
    lines: Sequence[str],
    params: Sequence[str],
    separator: str | None = None,
) -> JoinedCommand:
    """Substitute *params* into *lines* and join them into one command."""
    if not params:
        return join_commands(lines, separator)

    def _sub(match: re.Match[str]) -> str:
        index = int(match.group(1))
        if index >= len(params):
            raise TemplateError(
                f"Placeholder {{{index}}} has no value; "
                f"only {len(params)} parameter(s) supplied",
            )
        return params[index]

    return join_commands([PLACEHOLDER.sub(_sub, line) for line in lines], separator)


def split_command(command: str, separator: str | None = None) -> list[str]:
    """Inverse of :func:`join_commands` for transports without a separator.

    A plain string (typed by an operator) is split on every separator.
    """
    if isinstance(command, JoinedCommand):
        return [part.strip() for part in command.statements if part.strip()]
    sep = settings.command_separator if separator is None else separator
    return [part.strip() for part in command.split(sep) if part.strip()]
