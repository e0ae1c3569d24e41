"""Displayed item shapes for the review session.

Commits and changed files are immutable snapshots produced by a source
adapter. ``ViewMode`` picks which adapter answers every fetch.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

SHORT_ID_LENGTH = 8


class ViewMode(Enum):
    STACK = "stack"
    QUEUE = "queue"


@dataclass(frozen=True)
class CommitItem:
    """One reviewable commit: an opaque history id plus a one-line summary."""

    id: str
    summary: str

    @property
    def short_id(self) -> str:
        return self.id[:SHORT_ID_LENGTH]


@dataclass(frozen=True)
class FileItem:
    """One changed-file record from a name-status report.

    ``status`` is kept exactly as the source tool printed it (``M``, ``A``,
    ``R100`` ...). ``original_path`` is only set for renames.
    """

    status: str
    path: str
    original_path: str | None = None

    @property
    def is_rename(self) -> bool:
        return self.status.startswith("R")

    @property
    def display_path(self) -> str:
        if self.is_rename and self.original_path is not None:
            return f"{self.original_path} -> {self.path}"
        return self.path


__all__ = ["CommitItem", "FileItem", "ViewMode", "SHORT_ID_LENGTH"]
