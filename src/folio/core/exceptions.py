"""Custom exception hierarchy for the HTML rendering pipeline."""

from __future__ import annotations


class FolioError(RuntimeError):
    """Base exception for book rendering failures."""


class SourceReadError(FolioError):
    """Raised when a chapter source cannot be read or its path cannot be represented."""


class DestinationError(FolioError):
    """Raised when the output tree cannot be created or written."""


class RenderError(FolioError):
    """Raised when the page template cannot be registered or rendered."""


class ThemeError(FolioError):
    """Raised when a theme asset cannot be located or fetched."""


class SummaryError(FolioError):
    """Raised when SUMMARY.md does not describe a valid book structure."""


class ConfigError(FolioError):
    """Raised when the book configuration file is malformed."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigError",
    "DestinationError",
    "FolioError",
    "RenderError",
    "SourceReadError",
    "SummaryError",
    "ThemeError",
    "exception_hint",
    "exception_messages",
]
