"""Main interactive event loop for the terminal UI.

Each tick fills caches for the current selection, redraws when something
changed, then waits up to ``poll_ms`` for one key. Fetches and child
processes block the loop while they run; there is no background work.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..input import read_key
from ..state import SessionState
from .terminal import TerminalController

logger = logging.getLogger(__name__)

DEFAULT_POLL_MS = 120


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    poll_ms: int = DEFAULT_POLL_MS


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``.

    ``handle_key`` returns ``True`` to end the session; ``draw`` receives the
    terminal size in columns and rows.
    """

    handle_key: Callable[[str], bool]
    draw: Callable[[int, int], None]
    read_key: Callable[..., str] = read_key


def run_main_loop(
    state: SessionState,
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run the interactive loop until a quit key arrives.

    Raw mode is entered once and released on every exit path, including
    exceptions raised from rendering or dispatch.
    """
    last_size: tuple[int, int] | None = None
    with terminal.raw_mode():
        while True:
            state.load_selection()
            term = terminal.size()
            size = (term.columns, term.lines)
            if size != last_size:
                last_size = size
                state.dirty = True
            if state.dirty:
                callbacks.draw(term.columns, term.lines)
                state.dirty = False

            try:
                key = callbacks.read_key(stdin_fd, timeout_ms=timing.poll_ms)
            except KeyboardInterrupt:
                break
            if key == "":
                continue
            if callbacks.handle_key(key):
                logger.debug("quit on %s", key)
                break


__all__ = ["DEFAULT_POLL_MS", "RuntimeLoopCallbacks", "RuntimeLoopTiming", "run_main_loop"]
