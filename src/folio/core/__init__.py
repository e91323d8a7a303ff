"""Core rendering pipeline: book model, contexts, templates and the HTML renderer."""

from __future__ import annotations

from .book import Affix, Book, BookItem, Chapter, NumberedChapter, Spacer, iter_book_items
from .config import BookConfig, load_book_config
from .context import PageContext, build_book_context, chapter_summary, merge_context
from .diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from .exceptions import (
    ConfigError,
    DestinationError,
    FolioError,
    RenderError,
    SourceReadError,
    SummaryError,
    ThemeError,
)
from .renderer import HtmlRenderer, render_book
from .summary import parse_summary, render_summary
from .theme import Theme


__all__ = [
    "Affix",
    "Book",
    "BookConfig",
    "BookItem",
    "Chapter",
    "ConfigError",
    "DestinationError",
    "DiagnosticEmitter",
    "FolioError",
    "HtmlRenderer",
    "LoggingEmitter",
    "NullEmitter",
    "NumberedChapter",
    "PageContext",
    "RenderError",
    "SourceReadError",
    "Spacer",
    "SummaryError",
    "Theme",
    "ThemeError",
    "build_book_context",
    "chapter_summary",
    "iter_book_items",
    "load_book_config",
    "merge_context",
    "parse_summary",
    "render_book",
    "render_summary",
]
