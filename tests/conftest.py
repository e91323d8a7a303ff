from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

import pytest

from folio.core.book import Book, BookItem
from folio.core.config import BookConfig
from folio.core.theme import THEME_FILES, Theme
from folio.core.vendor import VENDOR_ASSETS


PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="{{ language }}">
<head>
<base href="{{ path_to_root }}">
<title>{% if chapter_title is defined %}{{ chapter_title }} - {% endif %}{{ title }}</title>
</head>
<body>
<nav>{{ toc() }}</nav>
<main>{{ content }}</main>
</body>
</html>
"""


def make_theme(template: str = PAGE_TEMPLATE) -> Theme:
    payload = {attribute: f"/* {name} */".encode() for attribute, name in THEME_FILES.items()}
    payload["index"] = template.encode("utf-8")
    return Theme(**payload)


@pytest.fixture
def theme() -> Theme:
    return make_theme()


@pytest.fixture
def theme_factory() -> Callable[[str], Theme]:
    return make_theme


@pytest.fixture
def vendor_cache(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Pre-populate the vendor cache so theme loading never touches the network."""
    cache_root = tmp_path / "cache"
    for path in VENDOR_ASSETS:
        target = cache_root / "vendor" / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(f"vendor:{path}".encode())
    monkeypatch.setenv("FOLIO_CACHE_DIR", str(cache_root))
    return cache_root / "vendor"


BookFactory = Callable[..., Book]


@pytest.fixture
def make_book(tmp_path: Path) -> BookFactory:
    def _factory(
        items: Iterable[BookItem],
        files: Mapping[str, str | bytes] | None = None,
        **config: object,
    ) -> Book:
        root = tmp_path / "book"
        source = root / "src"
        source.mkdir(parents=True, exist_ok=True)
        for name, payload in (files or {}).items():
            target = source / name
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(payload, bytes):
                target.write_bytes(payload)
            else:
                target.write_text(payload, encoding="utf-8")
        settings = {"title": "Test Book", "description": "A book for tests"}
        settings.update(config)
        return Book(root=root, config=BookConfig(**settings), items=tuple(items))

    return _factory
