"""Public CLI exports for Folio."""

from __future__ import annotations

from .app import app, main
from .commands import build, init
from .state import debug_enabled, emit_error, emit_warning, get_cli_state


__all__ = [
    "app",
    "build",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "init",
    "main",
]
