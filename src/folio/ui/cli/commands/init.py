"""Implementation of the `folio init` command."""

from __future__ import annotations

import json
from pathlib import Path, PurePosixPath
from typing import Annotated

import typer

from folio.core.book import SUMMARY_FILENAME, Chapter, NumberedChapter
from folio.core.config import BookConfig, find_config_file
from folio.core.summary import render_summary

from .._options import BookDirArgument, ForceOption
from ..state import get_cli_state


def _toml_string(value: str) -> str:
    # JSON string escapes are valid TOML basic strings
    return json.dumps(value, ensure_ascii=False)


def render_config(config: BookConfig) -> str:
    """Return the ``book.toml`` payload describing ``config``."""
    lines = [
        f"title = {_toml_string(config.title)}",
        f"description = {_toml_string(config.description)}",
    ]
    if config.author:
        lines.append(f"author = {_toml_string(config.author)}")
    lines.extend(
        [
            f"language = {_toml_string(config.language)}",
            f"src = {_toml_string(config.src.as_posix())}",
            f"dest = {_toml_string(config.dest.as_posix())}",
        ]
    )
    return "\n".join(lines) + "\n"


def init(
    book_dir: BookDirArgument = Path("."),
    title: Annotated[
        str,
        typer.Option("--title", help="Title written to the generated book.toml."),
    ] = "My Book",
    force: ForceOption = False,
) -> None:
    """Create a minimal book skeleton in BOOK_DIR."""
    state = get_cli_state()
    config = BookConfig(title=title)
    created: list[Path] = []

    book_dir.mkdir(parents=True, exist_ok=True)
    config_path = find_config_file(book_dir)
    if config_path is None or force:
        config_path = book_dir / "book.toml"
        config_path.write_text(render_config(config), encoding="utf-8")
        created.append(config_path)

    source_dir = book_dir / config.src
    source_dir.mkdir(parents=True, exist_ok=True)

    first_chapter = Chapter("Chapter 1", PurePosixPath("chapter_1.md"))
    summary_path = source_dir / SUMMARY_FILENAME
    if force or not summary_path.exists():
        summary_path.write_text(
            render_summary([NumberedChapter("1.", first_chapter)]), encoding="utf-8"
        )
        created.append(summary_path)

    chapter_path = source_dir / first_chapter.path
    if force or not chapter_path.exists():
        chapter_path.write_text(f"# {first_chapter.name}\n", encoding="utf-8")
        created.append(chapter_path)

    for path in created:
        state.console.print(f"[green]created[/] {path}")
    if not created:
        state.console.print("Nothing to do, the book already exists.")


__all__ = ["init", "render_config"]
