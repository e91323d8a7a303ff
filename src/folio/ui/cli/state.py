"""Per-invocation state of the folio CLI.

`CLIState` carries the verbosity flags of the running command, the rich
consoles it prints to, and the pages the current build wrote. The
state is attached to the click context and mirrored in a context variable so
helpers called outside a command body (the diagnostic emitter, `main`) reach
the same instance.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
import logging
import sys
from typing import IO, TYPE_CHECKING

import click
import typer

from folio.core.exceptions import exception_messages


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "configure_logging",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]


@dataclass(slots=True)
class CLIState:
    """Verbosity flags, consoles and rendered pages of one CLI invocation."""

    verbosity: int = 0
    show_tracebacks: bool = False
    pages: list[str] = field(default_factory=list, init=False)
    _consoles: dict[str, Console] = field(default_factory=dict, init=False, repr=False)

    def _console_for(self, name: str, stream: IO[str], **options: object) -> Console:
        from rich.console import Console

        # CliRunner swaps the process streams between invocations
        console = self._consoles.get(name)
        if console is None or console.file is not stream:
            console = Console(file=stream, **options)
            self._consoles[name] = console
        return console

    @property
    def console(self) -> Console:
        return self._console_for("out", sys.stdout)

    @property
    def err_console(self) -> Console:
        return self._console_for("err", sys.stderr, highlight=False)

    def record_page(self, output: str) -> None:
        self.pages.append(output)


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("folio_cli_state", default=None)


def get_cli_state(ctx: click.Context | None = None) -> CLIState:
    """Return the state of the running command, creating it on first use."""
    if ctx is None:
        ctx = click.get_current_context(silent=True)

    if ctx is not None:
        state = ctx.ensure_object(CLIState)
        _STATE_VAR.set(state)
        return state

    state = _STATE_VAR.get()
    if state is None:
        state = CLIState()
        _STATE_VAR.set(state)
    return state


def set_cli_state(
    *,
    ctx: typer.Context | None = None,
    verbosity: int | None = None,
    debug: bool | None = None,
) -> CLIState:
    """Apply the command-line flags to the current state and return it."""
    state = get_cli_state(ctx)
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


def configure_logging(state: CLIState) -> None:
    """Route the ``folio`` loggers through rich; each ``-v`` lowers the threshold."""
    from rich.logging import RichHandler

    if state.show_tracebacks or state.verbosity >= 2:
        level = logging.DEBUG
    elif state.verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    package_logger = logging.getLogger("folio")
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    package_logger.addHandler(
        RichHandler(
            console=state.err_console,
            show_path=state.verbosity >= 3,
            rich_tracebacks=state.show_tracebacks,
        )
    )


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Print ``message``; warnings and errors go to stderr with their causes at ``-v``."""
    state = get_cli_state()

    if level == "info":
        state.console.log(message)
        return

    from rich.text import Text

    style = "red" if level == "error" else "yellow"
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))

    if exception is not None and state.verbosity >= 1:
        causes = [entry for entry in exception_messages(exception) if entry not in message]
        if causes:
            text.append("\n")
            text.append("\n".join(f"  caused by: {entry}" for entry in causes), style=style)

    state.err_console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether full tracebacks were requested."""
    state = _STATE_VAR.get()
    return state is not None and state.show_tracebacks
