"""Path helpers shared by the renderer and the template helpers."""

from __future__ import annotations

from collections.abc import Collection, Iterable
from pathlib import Path, PurePath, PurePosixPath
import shutil

from .exceptions import DestinationError, SourceReadError


HTML_SUFFIX = ".html"


def path_as_text(path: PurePath | str) -> str:
    """Return ``path`` as a forward-slash string usable in templates."""
    text = path if isinstance(path, str) else PurePosixPath(*PurePath(path).parts).as_posix()
    if text == ".":
        return ""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise SourceReadError(f"Could not convert path to str: {text!r}") from exc
    return text


def path_to_root(path: PurePath | str) -> str:
    """Return the relative prefix leading from ``path``'s directory to the output root.

    Only the number of directory components matters; nothing is read from disk.

    >>> path_to_root("intro.md")
    ''
    >>> path_to_root("a/b/page.md")
    '../../'
    """
    parts = PurePosixPath(path_as_text(path)).parts
    depth = max(len(parts) - 1, 0)
    return "../" * depth


def html_path(path: PurePath | str) -> PurePosixPath:
    """Return the output path of a chapter source, swapping its suffix for ``.html``."""
    return PurePosixPath(path_as_text(path)).with_suffix(HTML_SUFFIX)


def is_placeholder(path: PurePath | str) -> bool:
    """Return whether ``path`` designates a structural node without a page."""
    return path_as_text(path) == ""


def _is_within(candidate: Path, parent: Path) -> bool:
    try:
        candidate.relative_to(parent)
    except ValueError:
        return False
    return True


def copy_files_except_ext(
    source: Path,
    destination: Path,
    *,
    recursive: bool = True,
    excluded_suffixes: Collection[str] = (".md",),
    skip: Iterable[Path] = (),
) -> list[Path]:
    """Copy every file from ``source`` into ``destination`` except the excluded suffixes.

    The relative layout is preserved and existing files are overwritten.
    Directories listed in ``skip`` (typically the destination itself when it
    lives under the source tree) are not traversed.
    """
    source = source.resolve()
    destination = destination.resolve()
    skipped = [Path(entry).resolve() for entry in skip]
    if _is_within(destination, source):
        skipped.append(destination)
    suffixes = {suffix.lower() for suffix in excluded_suffixes}

    copied: list[Path] = []
    for entry in sorted(source.iterdir()):
        if any(entry.resolve() == item or _is_within(entry.resolve(), item) for item in skipped):
            continue
        target = destination / entry.name
        if entry.is_dir():
            if not recursive:
                continue
            copied.extend(
                copy_files_except_ext(
                    entry,
                    target,
                    recursive=recursive,
                    excluded_suffixes=suffixes,
                    skip=skipped,
                )
            )
            continue
        if entry.suffix.lower() in suffixes:
            continue
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(entry, target)
        except OSError as exc:
            raise DestinationError(f"Unable to copy '{entry}' to '{target}'.") from exc
        copied.append(target)
    return copied


__all__ = [
    "HTML_SUFFIX",
    "copy_files_except_ext",
    "html_path",
    "is_placeholder",
    "path_as_text",
    "path_to_root",
]
