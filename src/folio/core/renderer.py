"""Render a book into a static HTML site.

Architecture
: `HtmlRenderer.render` builds the book context once, then walks the book in
  order. Every chapter with a path goes through `load_chapter_html` (read,
  playpen substitution, markdown conversion) before being rendered with the
  theme template and written next to its source path.
: The first rendered page is copied to ``index.html`` and all converted
  fragments are concatenated into ``print.html``. Theme assets and every
  non-markdown source file are published last.
: Everything a render needs (Jinja environment, markdown processor, theme,
  contexts) is created inside the call, so consecutive renders share nothing.

Failures are fatal: the first I/O, encoding or template error aborts the
render with a `FolioError` naming the offending path.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from pathlib import Path, PurePath
from typing import Any

from jinja2 import Environment

from folio.adapters.markdown import MarkdownConverter, resolve_markdown_extensions
from folio.adapters.playpen import render_playpen

from .book import Affix, Book, Chapter, NumberedChapter, Spacer
from .context import PRINT_PATH, PageContext, build_book_context, merge_context
from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import DestinationError, SourceReadError
from .paths import copy_files_except_ext, html_path, is_placeholder
from .templates import build_environment, render_page
from .theme import Theme


_log = logging.getLogger(__name__)

INDEX_FILENAME = "index.html"
BASE_HREF_MARKER = "<base href="


def load_chapter_html(book: Book, chapter: Chapter, converter: MarkdownConverter) -> str:
    """Return the converted HTML of ``chapter``."""
    path = book.source_dir / chapter.path

    _log.debug("Opening file: %s", path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(f"Unable to read chapter '{path}'.") from exc

    content = render_playpen(content, path.parent)
    return converter.convert(content)


def derive_index(page: str) -> str:
    """Drop every line declaring a ``<base href=`` from ``page``."""
    return "\n".join(line for line in page.split("\n") if BASE_HREF_MARKER not in line)


class HtmlRenderer:
    """Render books with a theme into HTML pages."""

    def __init__(self, emitter: DiagnosticEmitter | None = None) -> None:
        self.emitter = emitter or NullEmitter()

    def render(self, book: Book, *, theme: Theme | None = None) -> list[Path]:
        """Render ``book`` and return the written paths."""
        _log.debug("Loading theme from %s", book.theme_dir)
        if theme is None:
            theme = Theme.load(book.theme_dir)

        _log.debug("Registering page template and helpers")
        environment = build_environment(theme.template)
        converter = MarkdownConverter(
            resolve_markdown_extensions(book.config.markdown_extensions)
        )
        book_context = build_book_context(book)

        destination = book.destination_dir
        _log.debug("Checking destination directory %s", destination)
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            _log.debug("Creating %s failed: %s", destination, exc)
            raise DestinationError(
                "Unexpected error when constructing destination path"
            ) from None

        written: list[Path] = []
        print_content: list[str] = []
        index_pending = True

        for item in book.iter_items():
            match item:
                case NumberedChapter(chapter=chapter) | Affix(chapter=chapter):
                    if is_placeholder(chapter.path):
                        continue
                case Spacer():
                    continue
                case _:
                    raise TypeError(f"Unsupported book item: {item!r}")

            content = load_chapter_html(book, chapter, converter)
            print_content.append(content)

            page = PageContext.for_chapter(chapter, content)
            filename = html_path(chapter.path)
            written.append(self._render_to(book, environment, book_context, page, filename))
            self.emitter.event("page_rendered", {"output": filename.as_posix()})

            if index_pending:
                written.append(self._write_index(book, filename))
                index_pending = False

        page = PageContext.for_print("".join(print_content))
        written.append(
            self._render_to(book, environment, book_context, page, html_path(PRINT_PATH))
        )
        self.emitter.event("print_rendered", {"pages": len(print_content)})

        written.extend(self.publish_assets(book, theme))

        _log.debug("Copying auxiliary files from %s", book.source_dir)
        copied = copy_files_except_ext(
            book.source_dir,
            destination,
            recursive=True,
            excluded_suffixes=(".md",),
            skip=(book.theme_dir,),
        )
        self.emitter.event("files_copied", {"count": len(copied)})
        written.extend(copied)
        return written

    def publish_assets(self, book: Book, theme: Theme) -> list[Path]:
        """Write every theme asset to its fixed location."""
        written = [book.write_file(name, payload) for name, payload in theme.iter_assets()]
        self.emitter.event("assets_published", {"count": len(written)})
        return written

    def _render_to(
        self,
        book: Book,
        environment: Environment,
        book_context: Mapping[str, Any],
        page: PageContext,
        filename: PurePath,
    ) -> Path:
        _log.debug("Rendering template for %s", page.path)
        rendered = render_page(environment, merge_context(book_context, page))
        return book.write_file(filename, rendered.encode("utf-8"))

    def _write_index(self, book: Book, filename: PurePath) -> Path:
        source = book.destination_dir / filename
        try:
            page = source.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DestinationError(f"Unable to read back '{source}'.") from exc

        target = book.write_file(INDEX_FILENAME, derive_index(page).encode("utf-8"))
        self.emitter.event("index_rendered", {"source": filename.as_posix()})
        return target


def render_book(
    book: Book,
    *,
    theme: Theme | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> list[Path]:
    """Render ``book`` with a fresh renderer."""
    return HtmlRenderer(emitter).render(book, theme=theme)


__all__ = [
    "BASE_HREF_MARKER",
    "INDEX_FILENAME",
    "HtmlRenderer",
    "derive_index",
    "load_chapter_html",
    "render_book",
]
