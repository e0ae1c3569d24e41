"""Queue-mode adapter: pending commits recorded as JSON files on disk.

Each ``*.json`` file under ``.ai/internal/commit-queue`` describes one queued
commit. Entries are shown oldest first and diffed with plain ``git`` against
their first parent (or the empty tree for root commits).
"""

from __future__ import annotations

import json
import logging
import shlex
from dataclasses import dataclass
from pathlib import Path

from ..models import CommitItem, FileItem
from .base import SourceError, parse_name_status, split_diff_lines
from .process import run_tool

logger = logging.getLogger(__name__)

GIT = "git"
EMPTY_TREE_HASH = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
QUEUE_DIR_PARTS: tuple[str, ...] = (".ai", "internal", "commit-queue")
NO_MESSAGE_SUMMARY = "(no message)"
QUEUE_STATUS_LABEL = "queue: flow commit-queue"


@dataclass(frozen=True)
class QueueEntry:
    created_at: str
    commit_sha: str
    message: str
    review_bookmark: str | None = None

    @classmethod
    def from_json(cls, data: object) -> QueueEntry | None:
        """Build an entry from decoded JSON, or ``None`` when fields are missing."""
        if not isinstance(data, dict):
            return None
        created_at = data.get("created_at")
        commit_sha = data.get("commit_sha")
        message = data.get("message")
        if not isinstance(created_at, str) or not isinstance(commit_sha, str) or not isinstance(message, str):
            return None
        bookmark = data.get("review_bookmark")
        return cls(
            created_at=created_at,
            commit_sha=commit_sha,
            message=message,
            review_bookmark=bookmark if isinstance(bookmark, str) else None,
        )

    @property
    def summary(self) -> str:
        lines = self.message.splitlines()
        summary = lines[0] if lines and lines[0] else NO_MESSAGE_SUMMARY
        if self.review_bookmark is not None:
            summary = f"{summary}  [{self.review_bookmark}]"
        return summary

    def to_commit(self) -> CommitItem:
        return CommitItem(id=self.commit_sha, summary=self.summary)


def queue_dir(repo: Path) -> Path:
    return repo.joinpath(*QUEUE_DIR_PARTS)


def load_queue_entries(directory: Path) -> list[QueueEntry]:
    """Read every parseable queue record in ``directory``, oldest first."""
    if not directory.is_dir():
        return []
    try:
        candidates = sorted(directory.glob("*.json"))
    except OSError as exc:
        raise SourceError(f"read queue dir: {exc}") from exc

    entries: list[QueueEntry] = []
    for path in candidates:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("skipping queue record %s: %s", path, exc)
            continue
        entry = QueueEntry.from_json(data)
        if entry is None:
            logger.warning("skipping queue record %s: missing fields", path)
            continue
        entries.append(entry)
    entries.sort(key=lambda entry: entry.created_at)
    return entries


class QueueSource:
    def __init__(self, repo: Path) -> None:
        self.repo = repo

    def list_commits(self, limit: int) -> list[CommitItem]:
        entries = load_queue_entries(queue_dir(self.repo))
        return [entry.to_commit() for entry in entries[:limit]]

    def list_files(self, commit_id: str) -> list[FileItem]:
        output = run_tool(
            self.repo,
            GIT,
            ["diff-tree", "--root", "--no-commit-id", "--name-status", "-r", "-M", commit_id],
        )
        return parse_name_status(output)

    def parent_of(self, commit_id: str) -> str:
        """Return the first parent of ``commit_id``, or the empty tree for a root commit.

        Resolved on every call; callers cache the resulting diff, not the parent.
        """
        try:
            parent = run_tool(self.repo, GIT, ["rev-parse", f"{commit_id}^"]).strip()
        except SourceError as exc:
            logger.debug("no parent for %s, diffing against empty tree: %s", commit_id, exc)
            parent = ""
        return parent or EMPTY_TREE_HASH

    def list_diff_lines(self, commit_id: str, file_path: str | None = None) -> list[str]:
        args = ["diff", self.parent_of(commit_id), commit_id, "--color", "never"]
        if file_path is not None:
            args.extend(["--", file_path])
        return split_diff_lines(run_tool(self.repo, GIT, args))

    def full_diff_command(self, commit_id: str, file_path: str | None = None) -> str:
        parent = self.parent_of(commit_id)
        command = f"git diff --color=always {shlex.quote(parent)} {shlex.quote(commit_id)}"
        if file_path is not None:
            command += f" -- {shlex.quote(file_path)}"
        return command

    def approve_command(self, commit_id: str) -> str | None:
        return f"f commit-queue approve {shlex.quote(commit_id)}"

    def status_label(self) -> str:
        return QUEUE_STATUS_LABEL


__all__ = [
    "EMPTY_TREE_HASH",
    "NO_MESSAGE_SUMMARY",
    "QueueEntry",
    "QueueSource",
    "load_queue_entries",
    "queue_dir",
]
