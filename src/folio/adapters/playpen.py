"""Substitution of ``{{#playpen file}}`` markers by runnable code blocks.

A marker references a source file relative to the chapter directory and is
replaced by a ``<pre class="playpen">`` block holding the escaped file
content. Themes hook their "run" buttons on that class. Prefixing the marker
with a backslash keeps it literal.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import html
import logging
from pathlib import Path
import re


_log = logging.getLogger(__name__)

_PLAYPEN_RE = re.compile(r"(?P<escape>\\)?\{\{#playpen\s+(?P<args>[^}]*?)\s*\}\}")

_LANGUAGES: dict[str, str] = {
    ".c": "c",
    ".cpp": "cpp",
    ".go": "go",
    ".js": "javascript",
    ".py": "python",
    ".rs": "rust",
    ".sh": "bash",
    ".toml": "toml",
}


@dataclass(frozen=True, slots=True)
class Playpen:
    """A marker found in chapter text."""

    start: int
    end: int
    file: Path
    editable: bool
    escaped: bool

    @property
    def language(self) -> str:
        return _LANGUAGES.get(self.file.suffix.lower(), "rust")


def find_playpens(text: str) -> Iterator[Playpen]:
    """Yield the playpen markers of ``text`` in order of appearance."""
    for match in _PLAYPEN_RE.finditer(text):
        tokens = match.group("args").split()
        if not tokens:
            continue
        yield Playpen(
            start=match.start(),
            end=match.end(),
            file=Path(tokens[0]),
            editable="editable" in tokens[1:],
            escaped=match.group("escape") is not None,
        )


def _render_block(playpen: Playpen, source: str) -> str:
    classes = f"language-{playpen.language}"
    if playpen.editable:
        classes += " editable"
    return f'<pre class="playpen"><code class="{classes}">{html.escape(source)}</code></pre>'


def render_playpen(text: str, base_dir: Path) -> str:
    """Return ``text`` with every playpen marker expanded from files under ``base_dir``."""
    pieces: list[str] = []
    cursor = 0
    for playpen in find_playpens(text):
        pieces.append(text[cursor : playpen.start])
        cursor = playpen.end
        marker = text[playpen.start : playpen.end]

        if playpen.escaped:
            pieces.append(marker[1:])
            continue

        target = base_dir / playpen.file
        try:
            source = target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _log.warning("Unable to include playpen file '%s': %s", target, exc)
            pieces.append(marker)
            continue
        pieces.append(_render_block(playpen, source.rstrip("\n")))

    pieces.append(text[cursor:])
    return "".join(pieces)


__all__ = ["Playpen", "find_playpens", "render_playpen"]
