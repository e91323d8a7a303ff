"""Template contexts shared by every rendered page.

Architecture
: `build_book_context` flattens the book tree once per render into a read-only
  mapping holding the global fields and the ordered chapter summaries.
: `PageContext` is the per-page overlay. `merge_context` combines both into a
  fresh dictionary so nothing written for one page survives into the next.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import PurePath
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .book import Affix, BookItem, Chapter, NumberedChapter, Spacer
from .paths import path_as_text, path_to_root

if TYPE_CHECKING:
    from .book import Book


SPACER_MARKER = "_spacer_"
FAVICON_PATH = "favicon.png"
PRINT_PATH = "print.md"


def chapter_summary(item: BookItem) -> dict[str, str]:
    """Return the template summary of a single book item."""
    match item:
        case NumberedChapter(section=section, chapter=chapter):
            return {
                "section": section,
                "name": chapter.name,
                "path": path_as_text(chapter.path),
            }
        case Affix(chapter=chapter):
            return {"name": chapter.name, "path": path_as_text(chapter.path)}
        case Spacer():
            return {"spacer": SPACER_MARKER}
        case _:
            raise TypeError(f"Unsupported book item: {item!r}")


def build_book_context(book: Book) -> Mapping[str, Any]:
    """Return the global template context of ``book``."""
    data: dict[str, Any] = {
        "language": book.language,
        "title": book.title,
        "description": book.description,
        "favicon": FAVICON_PATH,
    }
    if book.livereload:
        data["livereload"] = book.livereload

    data["chapters"] = tuple(
        MappingProxyType(chapter_summary(item)) for item in book.iter_items()
    )
    return MappingProxyType(data)


@dataclass(frozen=True, slots=True)
class PageContext:
    """Per-page fields laid over the book context before rendering."""

    path: str
    content: str
    path_to_root: str
    chapter_title: str | None = None

    @classmethod
    def for_chapter(cls, chapter: Chapter, content: str) -> PageContext:
        path = path_as_text(chapter.path)
        return cls(
            path=path,
            content=content,
            path_to_root=path_to_root(path),
            chapter_title=chapter.name,
        )

    @classmethod
    def for_print(cls, content: str, path: PurePath | str = PRINT_PATH) -> PageContext:
        text = path_as_text(path)
        return cls(path=text, content=content, path_to_root=path_to_root(text))

    def as_overlay(self) -> dict[str, str]:
        overlay = {
            "path": self.path,
            "content": self.content,
            "path_to_root": self.path_to_root,
        }
        if self.chapter_title is not None:
            overlay["chapter_title"] = self.chapter_title
        return overlay


def merge_context(book_context: Mapping[str, Any], page: PageContext) -> dict[str, Any]:
    """Combine the global context with a page overlay into a new mapping."""
    merged = {
        key: value
        for key, value in book_context.items()
        if key not in {"path", "content", "path_to_root", "chapter_title"}
    }
    merged.update(page.as_overlay())
    return merged


__all__ = [
    "FAVICON_PATH",
    "PRINT_PATH",
    "SPACER_MARKER",
    "PageContext",
    "build_book_context",
    "chapter_summary",
    "merge_context",
]
