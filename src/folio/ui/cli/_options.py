"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"

BookDirArgument = Annotated[
    Path,
    typer.Argument(
        metavar="BOOK_DIR",
        help="Root directory of the book, holding book.toml and the source directory.",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

DestinationOption = Annotated[
    Path | None,
    typer.Option(
        "--dest",
        "-d",
        help="Output directory for the rendered site (overrides the configuration).",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

ThemeOption = Annotated[
    Path | None,
    typer.Option(
        "--theme",
        help="Directory with theme overrides (defaults to <BOOK_DIR>/theme).",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

LivereloadOption = Annotated[
    str | None,
    typer.Option(
        "--livereload",
        help="Websocket endpoint injected in every page to trigger reloads.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

ForceOption = Annotated[
    bool,
    typer.Option(
        "--force",
        help="Overwrite existing files.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]
