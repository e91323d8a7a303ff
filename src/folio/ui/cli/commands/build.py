"""Implementation of the `folio build` command."""

from __future__ import annotations

from pathlib import Path

import typer

from folio.core.book import Book
from folio.core.exceptions import FolioError, exception_hint
from folio.core.renderer import HtmlRenderer

from .._options import (
    BookDirArgument,
    DebugOption,
    DestinationOption,
    LivereloadOption,
    ThemeOption,
    VerboseOption,
)
from ..diagnostics import CliEmitter
from ..state import configure_logging, debug_enabled, emit_error, set_cli_state


def build(
    ctx: typer.Context,
    book_dir: BookDirArgument = Path("."),
    dest: DestinationOption = None,
    theme: ThemeOption = None,
    livereload: LivereloadOption = None,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Render the book found in BOOK_DIR into a static HTML site."""
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)
    configure_logging(state)

    try:
        book = Book.load(book_dir, dest=dest, theme_path=theme, livereload=livereload)
        renderer = HtmlRenderer(CliEmitter(state=state, debug_enabled=debug_enabled()))
        written = renderer.render(book)
    except FolioError as exc:
        if debug_enabled():
            raise
        hint = exception_hint(exc)
        message = str(exc) if hint is None or hint == str(exc) else f"{exc} ({hint})"
        emit_error(message, exception=exc)
        raise typer.Exit(code=1) from exc

    state.console.print(
        f"[green]Rendered[/] {len(state.pages)} pages ({len(written)} files) "
        f"into [bold]{book.destination_dir}[/]"
    )


__all__ = ["build"]
