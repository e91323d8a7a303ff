"""Configuration model describing a book project.

BookConfig

`title` (`str`)
: Book title injected in every page and in the `<title>` element.

`description` (`str`)
: Short description exposed to themes as the page meta description.

`author` (`str | None`)
: Optional author string, available to themes.

`language` (`str`)
: BCP 47 language code used for the `lang` attribute of generated pages.

`src` (`Path`)
: Directory holding `SUMMARY.md` and the chapter sources, relative to the book root.

`dest` (`Path`)
: Output directory for the rendered site, relative to the book root.

`theme_path` (`Path | None`)
: Directory with theme overrides. Defaults to `<root>/theme`; files that are
  absent there fall back to the packaged default theme.

`livereload` (`str | None`)
: Websocket endpoint injected in every page so a development server can
  trigger reloads.

`markdown_extensions` (`list[str]`)
: Additional Python-Markdown extensions enabled on top of the defaults.

The configuration is read from the first of `book.toml`, `book.json`,
`book.yaml` or `book.yml` found at the book root.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

try:  # Python >=3.11
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # Python 3.10
    import tomli as tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import ConfigError


CONFIG_FILENAMES = ("book.toml", "book.json", "book.yaml", "book.yml")


class BookConfig(BaseModel):
    """Settings controlling how a book is located and rendered."""

    model_config = ConfigDict(extra="forbid")

    title: str = ""
    description: str = ""
    author: str | None = None
    language: str = "en"
    src: Path = Field(default=Path("src"), description="Chapter source directory")
    dest: Path = Field(default=Path("book"), description="Rendered site directory")
    theme_path: Path | None = None
    livereload: str | None = None
    markdown_extensions: list[str] = Field(default_factory=list)

    @field_validator("language")
    @classmethod
    def _normalise_language(cls, value: str) -> str:
        candidate = value.strip()
        if not candidate:
            raise ValueError("language cannot be empty")
        return candidate

    @field_validator("livereload")
    @classmethod
    def _blank_livereload(cls, value: str | None) -> str | None:
        if value is None:
            return None
        candidate = value.strip()
        return candidate or None


def _read_payload(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".toml":
        return tomllib.loads(text)
    if suffix == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def find_config_file(root: Path) -> Path | None:
    """Return the configuration file present under ``root``, if any."""
    for name in CONFIG_FILENAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_book_config(root: Path, **overrides: Any) -> BookConfig:
    """Load the configuration stored at ``root`` and apply keyword overrides."""
    config_path = find_config_file(root)
    payload: Any = {}
    if config_path is not None:
        try:
            payload = _read_payload(config_path)
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Unable to read book configuration '{config_path}'.") from exc
        except (tomllib.TOMLDecodeError, json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ConfigError(f"Invalid book configuration '{config_path}': {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigError(
            f"Book configuration '{config_path}' must be a mapping, "
            f"got {type(payload).__name__}."
        )

    # book.toml may nest everything under a [book] table
    section = payload.get("book")
    data = dict(section) if isinstance(section, dict) else dict(payload)
    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return BookConfig.model_validate(data)
    except ValidationError as exc:
        source = config_path or root
        raise ConfigError(f"Invalid book configuration '{source}': {exc}") from exc


__all__ = ["CONFIG_FILENAMES", "BookConfig", "find_config_file", "load_book_config"]
