"""Session bootstrap: wires state, terminal, dispatcher and renderer."""

from __future__ import annotations

import sys

from ..input import KeyActions, KeyDispatcher
from ..render import build_frame, render_frame
from ..state import SessionState
from ..ui_theme import DEFAULT_THEME, UITheme
from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from .pager import open_full_diff
from .terminal import TerminalController


def run_session(
    state: SessionState,
    *,
    theme: UITheme = DEFAULT_THEME,
    diff_style: str | None = None,
    pager: str | None = None,
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
    timing: RuntimeLoopTiming | None = None,
) -> None:
    """Run the interactive review loop for an already refreshed ``state``."""
    if stdin_fd is None:
        stdin_fd = sys.stdin.fileno()
    if stdout_fd is None:
        stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)

    def open_selection_in_pager() -> None:
        error = open_full_diff(state, terminal, pager)
        if error is not None:
            state.status = error

    def draw(columns: int, rows: int) -> None:
        render_frame(build_frame(state, columns, rows, theme, diff_style=diff_style), stdout_fd)

    dispatcher = KeyDispatcher(state, KeyActions(open_full_diff=open_selection_in_pager))
    run_main_loop(
        state,
        terminal,
        stdin_fd,
        timing or RuntimeLoopTiming(),
        RuntimeLoopCallbacks(handle_key=dispatcher.handle, draw=draw),
    )


__all__ = ["run_session"]
