"""Jinja environment used to expand the theme page template."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from jinja2 import (
    DictLoader,
    Environment,
    StrictUndefined,
    TemplateError as JinjaTemplateError,
    pass_context,
)
from jinja2.runtime import Context

from .exceptions import RenderError
from .navigation import next_chapter, previous_chapter, render_toc


PAGE_TEMPLATE = "index"


@pass_context
def _toc_helper(context: Context, relative: bool = False) -> str:
    # links are root-relative unless the theme has no <base href>
    prefix = context.get("path_to_root", "") if relative else ""
    return render_toc(context.get("chapters", ()), context.get("path"), prefix)


@pass_context
def _previous_helper(context: Context) -> dict[str, str] | None:
    return previous_chapter(context.get("chapters", ()), context.get("path"))


@pass_context
def _next_helper(context: Context) -> dict[str, str] | None:
    return next_chapter(context.get("chapters", ()), context.get("path"))


def build_environment(template_source: str, *, name: str = PAGE_TEMPLATE) -> Environment:
    """Return a fresh environment holding the page template and the navigation helpers.

    Undefined variables raise, so a theme referring to a missing field fails
    the render instead of silently producing an empty string.
    """
    environment = Environment(
        loader=DictLoader({name: template_source}),
        autoescape=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    environment.globals["toc"] = _toc_helper
    environment.globals["previous"] = _previous_helper
    environment.globals["next"] = _next_helper

    try:
        environment.get_template(name)
    except JinjaTemplateError as exc:
        raise RenderError(f"Unable to register theme template '{name}': {exc}") from exc
    return environment


def render_page(
    environment: Environment,
    context: Mapping[str, Any],
    *,
    name: str = PAGE_TEMPLATE,
) -> str:
    """Render the registered page template with ``context``."""
    try:
        template = environment.get_template(name)
        return template.render(dict(context))
    except JinjaTemplateError as exc:
        page = context.get("path") or "<unknown>"
        raise RenderError(f"Failed to render template '{name}' for '{page}': {exc}") from exc


__all__ = ["PAGE_TEMPLATE", "build_environment", "render_page"]
