"""Commit, file, and diff providers for the two review modes."""

from __future__ import annotations

from pathlib import Path

from ..models import ViewMode
from .base import CommitSource, SourceError, parse_name_status, split_diff_lines
from .process import CommandResult, run_shell, run_tool
from .queue import QueueSource
from .stack import StackSource, resolve_default_base


def build_source(mode: ViewMode, repo: Path, base_revset: str = "") -> CommitSource:
    """Select the adapter that answers every fetch for ``mode``."""
    if mode is ViewMode.QUEUE:
        return QueueSource(repo)
    return StackSource(repo, base_revset)


__all__ = [
    "CommandResult",
    "CommitSource",
    "QueueSource",
    "SourceError",
    "StackSource",
    "build_source",
    "parse_name_status",
    "resolve_default_base",
    "run_shell",
    "run_tool",
    "split_diff_lines",
]
