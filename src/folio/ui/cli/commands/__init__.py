"""CLI command implementations exposed via `folio.ui.cli`."""

from __future__ import annotations

from .build import build
from .init import init


__all__ = ["build", "init"]
