"""Source adapter contract and shared report parsers.

Both review modes answer the same three questions (which commits, which
files, which diff lines) so the session engine never branches on mode when
fetching. Adapters raise ``SourceError`` for any command or parse failure.
"""

from __future__ import annotations

from typing import Protocol

from ..models import CommitItem, FileItem


class SourceError(RuntimeError):
    """Raised when an external source command fails or cannot be parsed."""


class CommitSource(Protocol):
    """Capability interface implemented by the stack and queue adapters."""

    def list_commits(self, limit: int) -> list[CommitItem]:
        ...

    def list_files(self, commit_id: str) -> list[FileItem]:
        ...

    def list_diff_lines(self, commit_id: str, file_path: str | None = None) -> list[str]:
        ...

    def full_diff_command(self, commit_id: str, file_path: str | None = None) -> str:
        """Shell command printing a colored diff, used for the pager pipeline."""
        ...

    def approve_command(self, commit_id: str) -> str | None:
        """Shell command approving ``commit_id``, or ``None`` when unsupported."""
        ...

    def status_label(self) -> str:
        ...


def parse_name_status(output: str) -> list[FileItem]:
    """Parse a ``status<TAB>path`` report into file items.

    Rename records carry ``status<TAB>original<TAB>new``. Lines that do not
    yield at least a status and a path are dropped.
    """
    items: list[FileItem] = []
    for line in output.splitlines():
        parts = line.split("\t")
        status = parts[0].strip()
        if status.startswith("R") and len(parts) >= 3:
            items.append(FileItem(status=status, path=parts[2], original_path=parts[1]))
        elif len(parts) >= 2:
            items.append(FileItem(status=status, path=parts[1]))
    return items


def split_diff_lines(output: str) -> list[str]:
    """Split tool output into lines without a trailing empty artifact."""
    return output.splitlines()


__all__ = ["CommitSource", "SourceError", "parse_name_status", "split_diff_lines"]
