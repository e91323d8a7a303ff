"""Markdown conversion utilities for Folio."""

from __future__ import annotations

from collections.abc import Iterable
import re
from typing import Any

from slugify import slugify

from folio.core.exceptions import RenderError


__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "MarkdownConversionError",
    "MarkdownConverter",
    "deduplicate_markdown_extensions",
    "normalize_markdown_extensions",
    "render_markdown",
    "resolve_markdown_extensions",
]


DEFAULT_MARKDOWN_EXTENSIONS = [
    "abbr",
    "admonition",
    "attr_list",
    "def_list",
    "footnotes",
    "md_in_html",
    "tables",
    "toc",
    "pymdownx.highlight",
    "pymdownx.superfences",
    "pymdownx.tasklist",
    "pymdownx.tilde",
]


def _slugify_heading(value: str, separator: str) -> str:
    return slugify(value, separator=separator)


DEFAULT_EXTENSION_CONFIGS: dict[str, dict[str, object]] = {
    "toc": {
        "slugify": _slugify_heading,
    },
    # highlight.js colours code blocks in the browser
    "pymdownx.highlight": {
        "use_pygments": False,
        "pygments_lang_class": True,
    },
}


class MarkdownConversionError(RenderError):
    """Raised when Markdown cannot be converted into HTML."""


def normalize_markdown_extensions(
    values: Iterable[str] | str | None,
) -> list[str]:
    """Normalise extension names from CLI-friendly strings into a flat list."""
    if values is None:
        return []

    if isinstance(values, str):
        candidates: Iterable[str] = [values]
    else:
        candidates = values

    normalized: list[str] = []
    for value in candidates:
        if not isinstance(value, str):
            continue
        chunks = re.split(r"[,\s\x00]+", value)
        normalized.extend(chunk for chunk in chunks if chunk)
    return normalized


def deduplicate_markdown_extensions(values: Iterable[str]) -> list[str]:
    """Remove duplicate extensions while preserving order and case."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result


def resolve_markdown_extensions(requested: Iterable[str] | str | None) -> list[str]:
    """Return the default extensions followed by the requested extras."""
    enabled = normalize_markdown_extensions(requested)
    return deduplicate_markdown_extensions(list(DEFAULT_MARKDOWN_EXTENSIONS) + enabled)


class MarkdownConverter:
    """Markdown processor owned by a single render invocation.

    The underlying processor is reset before each document so footnotes,
    abbreviations and heading ids never bleed from one chapter into another.
    """

    def __init__(self, extensions: Iterable[str] | None = None) -> None:
        try:
            import markdown
        except ModuleNotFoundError as exc:  # pragma: no cover - environment dependent
            raise MarkdownConversionError(
                "Python Markdown is required to process Markdown inputs; "
                "install the 'markdown' package."
            ) from exc

        self.extensions = (
            list(DEFAULT_MARKDOWN_EXTENSIONS) if extensions is None else list(extensions)
        )
        extension_configs = {
            name: dict(DEFAULT_EXTENSION_CONFIGS[name])
            for name in self.extensions
            if name in DEFAULT_EXTENSION_CONFIGS
        }
        try:
            self._processor: Any = markdown.Markdown(
                extensions=self.extensions,
                extension_configs=extension_configs,
                output_format="html",
            )
        except Exception as exc:  # pragma: no cover - library-controlled
            raise MarkdownConversionError(
                f"Failed to initialize Markdown processor: {exc}"
            ) from exc

    def convert(self, source: str) -> str:
        """Convert Markdown ``source`` into an HTML fragment."""
        try:
            self._processor.reset()
            return self._processor.convert(source)
        except Exception as exc:  # pragma: no cover - library-controlled
            raise MarkdownConversionError(f"Failed to convert Markdown source: {exc}") from exc


def render_markdown(source: str, extensions: Iterable[str] | None = None) -> str:
    """Convert Markdown into HTML with a throwaway converter."""
    return MarkdownConverter(extensions).convert(source)
