"""Full-diff pager launch.

Runs ``<diff command> | <pager>`` while temporarily leaving raw/alternate
screen mode. Returns an error message string instead of raising for
UI-friendly handling.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable

from ..state import SessionState
from .config import load_pager
from .terminal import TerminalController

logger = logging.getLogger(__name__)

DEFAULT_PAGER = "less -R"
PAGER_FAILED_MESSAGE = "Failed to open pager."


def resolve_pager(load_configured: Callable[[], str | None] = load_pager) -> str:
    """Return ``$PAGER``, then the configured pager, then ``less -R``."""
    env_pager = os.environ.get("PAGER", "").strip()
    if env_pager:
        return env_pager
    return load_configured() or DEFAULT_PAGER


def build_pager_pipeline(state: SessionState, pager: str) -> str | None:
    """Shell pipeline for the current selection, or ``None`` without a commit."""
    commit = state.selected_commit()
    if commit is None:
        return None
    file = state.selected_file()
    diff_command = state.source.full_diff_command(commit.id, file.path if file is not None else None)
    return f"{diff_command} | {pager}"


def open_full_diff(
    state: SessionState,
    terminal: TerminalController,
    pager: str | None = None,
) -> str | None:
    pipeline = build_pager_pipeline(state, pager or resolve_pager())
    if pipeline is None:
        return None

    logger.info("pager pipeline: %s", pipeline)
    error: str | None = None
    with terminal.suspended():
        try:
            proc = subprocess.run(["sh", "-c", pipeline], cwd=state.repo, check=False)
        except OSError as exc:
            logger.warning("pager launch failed: %s", exc)
            error = PAGER_FAILED_MESSAGE
        else:
            if proc.returncode != 0:
                logger.info("pager pipeline exited with %s", proc.returncode)
                error = PAGER_FAILED_MESSAGE
    state.dirty = True
    return error


__all__ = ["DEFAULT_PAGER", "PAGER_FAILED_MESSAGE", "build_pager_pipeline", "open_full_diff", "resolve_pager"]
