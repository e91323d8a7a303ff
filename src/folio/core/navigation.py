"""Table of contents and previous/next helpers exposed to page templates.

Every helper is a pure function of the ordered chapter summaries and the path
of the page being rendered; `folio.core.templates` binds them to the Jinja
context of each render call.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import html
from typing import Any

from .paths import html_path


ChapterSummaries = Sequence[Mapping[str, Any]]


def _level(summary: Mapping[str, Any]) -> int:
    section = summary.get("section")
    if not section:
        return 1
    return max(str(section).count("."), 1)


def _has_page(summary: Mapping[str, Any]) -> bool:
    return "spacer" not in summary and bool(summary.get("path"))


def render_toc(
    chapters: ChapterSummaries,
    current_path: str | None,
    path_to_root: str = "",
) -> str:
    """Render the sidebar table of contents as nested HTML lists."""
    parts = ['<ul class="chapter">']
    current_level = 1

    for summary in chapters:
        if "spacer" in summary:
            parts.append('<li class="spacer"></li>')
            continue

        level = _level(summary)
        while current_level < level:
            parts.append('<li><ul class="section">')
            current_level += 1
        while current_level > level:
            parts.append("</ul></li>")
            current_level -= 1

        css = "" if summary.get("section") else ' class="affix"'
        parts.append(f"<li{css}>")

        label = html.escape(str(summary.get("name", "")))
        section = summary.get("section")
        if section:
            label = f"<strong>{html.escape(str(section))}</strong> {label}"

        if _has_page(summary):
            href = f"{path_to_root}{html_path(str(summary['path'])).as_posix()}"
            active = ' class="active"' if summary.get("path") == current_path else ""
            parts.append(f'<a href="{html.escape(href)}"{active}>{label}</a>')
        else:
            parts.append(f"<span>{label}</span>")
        parts.append("</li>")

    while current_level > 1:
        parts.append("</ul></li>")
        current_level -= 1
    parts.append("</ul>")
    return "".join(parts)


def _neighbour(
    chapters: ChapterSummaries,
    current_path: str | None,
    step: int,
) -> dict[str, str] | None:
    if not current_path:
        return None

    pages = [summary for summary in chapters if _has_page(summary)]
    for index, summary in enumerate(pages):
        if summary.get("path") != current_path:
            continue
        target = index + step
        if 0 <= target < len(pages):
            found = pages[target]
            return {
                "name": str(found.get("name", "")),
                "link": html_path(str(found["path"])).as_posix(),
            }
        return None
    return None


def previous_chapter(chapters: ChapterSummaries, current_path: str | None) -> dict[str, str] | None:
    """Return the page preceding ``current_path``, skipping spacers and placeholders."""
    return _neighbour(chapters, current_path, -1)


def next_chapter(chapters: ChapterSummaries, current_path: str | None) -> dict[str, str] | None:
    """Return the page following ``current_path``, skipping spacers and placeholders."""
    return _neighbour(chapters, current_path, 1)


__all__ = ["next_chapter", "previous_chapter", "render_toc"]
