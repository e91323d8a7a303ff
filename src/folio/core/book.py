"""Book structure consumed by the HTML renderer.

Architecture
: `BookItem` is a closed union of `NumberedChapter`, `Affix` and `Spacer`.
  Consumers match on it exhaustively; a `Chapter` whose path is empty is a
  structural heading that has no page of its own.
: `Book` bundles the parsed items with the resolved configuration and owns the
  `write_file` sink every output goes through.

Usage Example
:
    >>> from pathlib import PurePosixPath
    >>> intro = Chapter("Intro", PurePosixPath("intro.md"))
    >>> [type(item).__name__ for item in iter_book_items([NumberedChapter("1.", intro), Spacer()])]
    ['NumberedChapter', 'Spacer']
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
import logging
from pathlib import Path, PurePath, PurePosixPath
from typing import Any, TypeAlias

from .config import BookConfig, load_book_config
from .exceptions import DestinationError, SourceReadError


_log = logging.getLogger(__name__)

SUMMARY_FILENAME = "SUMMARY.md"


@dataclass(frozen=True, slots=True)
class Chapter:
    """A content unit backed by a markdown file."""

    name: str
    path: PurePath = PurePosixPath()
    sub_items: tuple[BookItem, ...] = ()


@dataclass(frozen=True, slots=True)
class NumberedChapter:
    """Chapter carrying a section label such as ``1.2.``."""

    section: str
    chapter: Chapter


@dataclass(frozen=True, slots=True)
class Affix:
    """Unnumbered chapter, typically a preface or an appendix."""

    chapter: Chapter


@dataclass(frozen=True, slots=True)
class Spacer:
    """Separator between groups of chapters."""


BookItem: TypeAlias = "NumberedChapter | Affix | Spacer"


def iter_book_items(items: Iterable[BookItem]) -> Iterator[BookItem]:
    """Yield ``items`` depth-first, parents before their sub-items."""
    for item in items:
        yield item
        match item:
            case NumberedChapter(chapter=chapter) | Affix(chapter=chapter):
                yield from iter_book_items(chapter.sub_items)
            case Spacer():
                pass
            case _:
                raise TypeError(f"Unsupported book item: {item!r}")


@dataclass(slots=True)
class Book:
    """Parsed book ready to be rendered."""

    root: Path
    config: BookConfig = field(default_factory=BookConfig)
    items: tuple[BookItem, ...] = ()

    @classmethod
    def load(cls, root: Path | str, **overrides: Any) -> Book:
        """Read the configuration and ``SUMMARY.md`` of the book stored at ``root``."""
        from .summary import parse_summary

        resolved_root = Path(root).resolve()
        config = load_book_config(resolved_root, **overrides)
        book = cls(root=resolved_root, config=config)

        summary_path = book.source_dir / SUMMARY_FILENAME
        try:
            summary_text = summary_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(f"Unable to read '{summary_path}'.") from exc

        book.items = parse_summary(summary_text)
        _log.debug("Loaded %d top-level items from %s", len(book.items), summary_path)
        return book

    @property
    def title(self) -> str:
        return self.config.title

    @property
    def description(self) -> str:
        return self.config.description

    @property
    def language(self) -> str:
        return self.config.language

    @property
    def livereload(self) -> str | None:
        return self.config.livereload

    @property
    def source_dir(self) -> Path:
        return self.root / self.config.src

    @property
    def destination_dir(self) -> Path:
        return self.root / self.config.dest

    @property
    def theme_dir(self) -> Path:
        return self.root / (self.config.theme_path or Path("theme"))

    def iter_items(self) -> Iterator[BookItem]:
        """Iterate over every book item in traversal order."""
        return iter_book_items(self.items)

    def write_file(self, relative_path: PurePath | str, data: bytes) -> Path:
        """Write ``data`` under the destination directory, creating parents as needed."""
        target = self.destination_dir / Path(relative_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise DestinationError(f"Unable to write '{target}'.") from exc
        return target


__all__ = [
    "SUMMARY_FILENAME",
    "Affix",
    "Book",
    "BookItem",
    "Chapter",
    "NumberedChapter",
    "Spacer",
    "iter_book_items",
]
