"""Progress reporting for ``folio build``."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from folio.core.diagnostics import DiagnosticEmitter, format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


class CliEmitter(DiagnosticEmitter):
    """Print render events on the CLI console.

    Every written page is recorded on the state. The per-page "Creating" lines
    only show with ``-v``; the index, print page and asset summaries always do.
    """

    def __init__(self, state: CLIState | None = None, *, debug_enabled: bool | None = None) -> None:
        self._state = state or get_cli_state()
        self.debug_enabled = (
            self._state.show_tracebacks if debug_enabled is None else bool(debug_enabled)
        )

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        if name == "page_rendered":
            self._state.record_page(str(payload.get("output", "")))
            if self._state.verbosity < 1:
                return
        message = format_event_message(name, payload)
        if message:
            render_message("info", message)


__all__ = ["CliEmitter"]
