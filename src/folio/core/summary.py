"""Parser for the ``SUMMARY.md`` file describing the book layout.

Recognised lines:

- ``[Name](path.md)`` outside a list becomes an `Affix`;
- ``- [Name](path.md)`` (``*`` and ``+`` work too) becomes a `NumberedChapter`,
  nested by indentation;
- ``[Name]()`` produces a placeholder without a page;
- ``---`` outside a list becomes a `Spacer`;
- headings, blank lines and free text are ignored.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import PurePosixPath
import re

from .book import Affix, BookItem, Chapter, NumberedChapter, Spacer
from .exceptions import SummaryError


_LINK_RE = re.compile(r"^\[(?P<name>[^\]]*)\]\((?P<path>[^)]*)\)\s*$")
_LIST_ITEM_RE = re.compile(r"^(?P<indent>[ \t]*)[-*+]\s+(?P<body>.*?)\s*$")
_SPACER_RE = re.compile(r"^-{3,}\s*$")


@dataclass(slots=True)
class _Node:
    name: str
    path: str
    section: str | None
    children: list[_Node] = field(default_factory=list)

    def freeze(self) -> BookItem:
        chapter = Chapter(
            name=self.name,
            path=PurePosixPath(self.path) if self.path else PurePosixPath(),
            sub_items=tuple(child.freeze() for child in self.children),
        )
        if self.section is None:
            return Affix(chapter)
        return NumberedChapter(self.section, chapter)


@dataclass(slots=True)
class _Level:
    indent: int
    section: str
    nodes: list[_Node]
    counter: int = 0


def _indent_width(text: str) -> int:
    return len(text.expandtabs(4))


def _parse_link(text: str, lineno: int) -> tuple[str, str]:
    match = _LINK_RE.match(text.strip())
    if match is None:
        raise SummaryError(f"SUMMARY.md line {lineno}: expected a link like '[Name](path.md)'.")
    name = match.group("name").strip()
    if not name:
        raise SummaryError(f"SUMMARY.md line {lineno}: chapter name cannot be empty.")
    return name, match.group("path").strip()


def parse_summary(text: str) -> tuple[BookItem, ...]:
    """Parse ``SUMMARY.md`` content into book items."""
    roots: list[_Node | Spacer] = []
    top_counter = 0
    stack: list[_Level] = []

    for lineno, raw_line in enumerate(text.lstrip("\ufeff").splitlines(), start=1):
        line = raw_line.rstrip()
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        item_match = _LIST_ITEM_RE.match(line)
        if item_match is not None and not _SPACER_RE.match(stripped):
            indent = _indent_width(item_match.group("indent"))
            name, path = _parse_link(item_match.group("body"), lineno)

            if not stack:
                if indent:
                    raise SummaryError(
                        f"SUMMARY.md line {lineno}: the first list item cannot be indented."
                    )
                stack.append(_Level(indent=0, section="", nodes=[], counter=top_counter))
            elif indent > stack[-1].indent:
                parent_level = stack[-1]
                if not parent_level.nodes:
                    raise SummaryError(f"SUMMARY.md line {lineno}: nested item has no parent.")
                parent = parent_level.nodes[-1]
                stack.append(
                    _Level(indent=indent, section=parent.section or "", nodes=parent.children)
                )
            else:
                while stack and indent < stack[-1].indent:
                    stack.pop()
                if not stack or indent != stack[-1].indent:
                    raise SummaryError(f"SUMMARY.md line {lineno}: inconsistent indentation.")

            level = stack[-1]
            level.counter += 1
            node = _Node(name=name, path=path, section=f"{level.section}{level.counter}.")
            level.nodes.append(node)
            if len(stack) == 1:
                top_counter = level.counter
                roots.append(node)
            continue

        if line[:1].isspace():
            continue

        # anything at column zero closes the numbered list
        stack.clear()
        if _SPACER_RE.match(stripped):
            roots.append(Spacer())
            continue
        if _LINK_RE.match(stripped):
            name, path = _parse_link(stripped, lineno)
            roots.append(_Node(name=name, path=path, section=None))

    return tuple(entry if isinstance(entry, Spacer) else entry.freeze() for entry in roots)


def render_summary(items: Iterable[BookItem], *, title: str = "Summary") -> str:
    """Serialise book items back into ``SUMMARY.md`` syntax."""
    lines = [f"# {title}", ""]

    def _emit(entries: Iterable[BookItem], depth: int) -> None:
        for entry in entries:
            match entry:
                case NumberedChapter(chapter=chapter):
                    path = chapter.path.as_posix() if chapter.path.parts else ""
                    lines.append(f"{'    ' * depth}- [{chapter.name}]({path})")
                    _emit(chapter.sub_items, depth + 1)
                case Affix(chapter=chapter):
                    path = chapter.path.as_posix() if chapter.path.parts else ""
                    lines.append(f"[{chapter.name}]({path})")
                case Spacer():
                    lines.append("---")
                case _:
                    raise TypeError(f"Unsupported book item: {entry!r}")

    _emit(items, 0)
    lines.append("")
    return "\n".join(lines)


__all__ = ["parse_summary", "render_summary"]
