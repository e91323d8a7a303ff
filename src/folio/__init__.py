"""Primary public API for Folio."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from folio.core import (
    Affix,
    Book,
    BookConfig,
    Chapter,
    FolioError,
    HtmlRenderer,
    NumberedChapter,
    PageContext,
    Spacer,
    Theme,
    build_book_context,
    parse_summary,
    render_book,
)


try:
    __version__ = _pkg_version("folio")
except PackageNotFoundError:
    __version__ = "0.0.0"


__all__ = [
    "Affix",
    "Book",
    "BookConfig",
    "Chapter",
    "FolioError",
    "HtmlRenderer",
    "NumberedChapter",
    "PageContext",
    "Spacer",
    "Theme",
    "__version__",
    "build_book_context",
    "parse_summary",
    "render_book",
]
