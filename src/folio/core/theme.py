"""Theme loading.

A theme is one page template plus a fixed set of static assets. Each file is
looked up in the book's theme directory first, then in the packaged default
theme, and finally, for third-party libraries, in the vendor cache.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, fields
import logging
from pathlib import Path

from .exceptions import ThemeError
from .vendor import VENDOR_ASSETS, VendorAssetFetcher


_log = logging.getLogger(__name__)

DEFAULT_THEME_DIR = Path(__file__).resolve().parent.parent / "themes" / "default"

# theme attribute -> file name inside a theme directory
THEME_FILES: dict[str, str] = {
    "index": "index.html",
    "css": "book.css",
    "js": "book.js",
    "favicon": "favicon.png",
    "jquery": "jquery.js",
    "highlight_css": "highlight.css",
    "tomorrow_night_css": "tomorrow-night.css",
    "highlight_js": "highlight.js",
    "font_awesome_css": "_FontAwesome/css/font-awesome.css",
    "font_awesome_eot": "_FontAwesome/fonts/fontawesome-webfont.eot",
    "font_awesome_svg": "_FontAwesome/fonts/fontawesome-webfont.svg",
    "font_awesome_ttf": "_FontAwesome/fonts/fontawesome-webfont.ttf",
    "font_awesome_woff": "_FontAwesome/fonts/fontawesome-webfont.woff",
    "font_awesome_woff2": "_FontAwesome/fonts/fontawesome-webfont.woff2",
}


@dataclass(frozen=True, slots=True)
class Theme:
    """Template and static assets used for one render."""

    index: bytes
    css: bytes
    js: bytes
    favicon: bytes
    jquery: bytes
    highlight_css: bytes
    tomorrow_night_css: bytes
    highlight_js: bytes
    font_awesome_css: bytes
    font_awesome_eot: bytes
    font_awesome_svg: bytes
    font_awesome_ttf: bytes
    font_awesome_woff: bytes
    font_awesome_woff2: bytes

    @classmethod
    def load(
        cls,
        theme_dir: Path | None = None,
        *,
        fetcher: VendorAssetFetcher | None = None,
    ) -> Theme:
        """Read every theme file, falling back to the default theme and the vendor cache."""
        if theme_dir is not None and not theme_dir.is_dir():
            _log.debug("Theme directory %s does not exist, using the default theme", theme_dir)
            theme_dir = None

        vendor = fetcher or VendorAssetFetcher()
        payload: dict[str, bytes] = {}
        for attribute, filename in THEME_FILES.items():
            payload[attribute] = _read_theme_file(filename, theme_dir, vendor)
        return cls(**payload)

    @property
    def template(self) -> str:
        """Return the page template source."""
        try:
            return self.index.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ThemeError("Theme template 'index.html' is not valid UTF-8.") from exc

    def iter_assets(self) -> Iterator[tuple[str, bytes]]:
        """Yield ``(destination, payload)`` for every published asset."""
        for item in fields(self):
            if item.name == "index":
                continue
            yield THEME_FILES[item.name], getattr(self, item.name)
        yield "_FontAwesome/fonts/FontAwesome.ttf", self.font_awesome_ttf


def _read_theme_file(
    filename: str,
    theme_dir: Path | None,
    vendor: VendorAssetFetcher,
) -> bytes:
    for root in (theme_dir, DEFAULT_THEME_DIR):
        if root is None:
            continue
        candidate = root / filename
        if not candidate.is_file():
            continue
        try:
            return candidate.read_bytes()
        except OSError as exc:
            raise ThemeError(f"Unable to read theme file '{candidate}'.") from exc

    if filename in VENDOR_ASSETS:
        return vendor.fetch(filename)
    raise ThemeError(f"Theme file '{filename}' is missing.")


__all__ = ["DEFAULT_THEME_DIR", "THEME_FILES", "Theme"]
