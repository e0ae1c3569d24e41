"""Session state and the navigation/cache engine.

``SessionState`` is the single source of truth for one review session. All
cache writes go through its methods; the renderer only reads it. Cursor
moves clamp instead of wrapping, and dependent cursors are reset only when
an index actually changes so holding a boundary key is a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .models import CommitItem, FileItem, ViewMode
from .sources import CommandResult, CommitSource, SourceError, run_shell

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
DEFAULT_PAGE_SIZE = 10

DiffKey = tuple[str, str | None]


def _clamp(value: int, length: int) -> int:
    return max(0, min(value, length - 1))


@dataclass
class SessionState:
    repo: Path
    mode: ViewMode
    source: CommitSource
    base_revset: str = ""
    limit: int = DEFAULT_LIMIT
    page_size: int = DEFAULT_PAGE_SIZE
    command_runner: Callable[[Path, str], CommandResult] = run_shell
    commits: list[CommitItem] = field(default_factory=list)
    commit_index: int = 0
    file_index: int = 0
    diff_scroll: int = 0
    files_cache: dict[str, list[FileItem]] = field(default_factory=dict)
    diff_cache: dict[DiffKey, list[str]] = field(default_factory=dict)
    failed_files: set[str] = field(default_factory=set)
    failed_diffs: set[DiffKey] = field(default_factory=set)
    status: str = ""
    input_mode: bool = False
    input_buffer: str = ""
    dirty: bool = True

    # Selection accessors

    def selected_commit(self) -> CommitItem | None:
        if 0 <= self.commit_index < len(self.commits):
            return self.commits[self.commit_index]
        return None

    def files_for_selected_commit(self) -> list[FileItem] | None:
        commit = self.selected_commit()
        if commit is None:
            return None
        return self.files_cache.get(commit.id)

    def selected_file(self) -> FileItem | None:
        files = self.files_for_selected_commit()
        if files and 0 <= self.file_index < len(files):
            return files[self.file_index]
        return None

    def selection_diff_key(self) -> DiffKey | None:
        """Cache key for the diff shown next to the current selection.

        A commit without a loaded or non-empty file list shows its whole diff.
        """
        commit = self.selected_commit()
        if commit is None:
            return None
        file = self.selected_file()
        return (commit.id, file.path if file is not None else None)

    def selected_diff_lines(self) -> list[str]:
        key = self.selection_diff_key()
        if key is None:
            return []
        return self.diff_cache.get(key, [])

    # Refresh and cache fill

    def refresh(self, limit: int | None = None) -> None:
        """Reload the commit list and drop every cache and cursor.

        Raises ``SourceError`` without touching state when the fetch fails.
        """
        if limit is None:
            limit = self.limit
        commits = self.source.list_commits(limit)
        self.commits = list(commits)
        self.commit_index = 0
        self.file_index = 0
        self.diff_scroll = 0
        self.files_cache.clear()
        self.diff_cache.clear()
        self.failed_files.clear()
        self.failed_diffs.clear()
        self.status = self.source.status_label()
        self.dirty = True
        logger.info("refreshed %d commits (%s)", len(self.commits), self.mode.value)

    def refresh_or_report(self, limit: int | None = None) -> bool:
        """Refresh, turning a fetch failure into a status message."""
        try:
            self.refresh(limit)
        except SourceError as exc:
            logger.warning("refresh failed: %s", exc)
            self.status = f"refresh failed: {exc}"
            self.dirty = True
            return False
        return True

    def ensure_files_loaded(self) -> None:
        commit = self.selected_commit()
        if commit is None or commit.id in self.files_cache:
            return
        files = self.source.list_files(commit.id)
        self.files_cache[commit.id] = list(files)
        self.file_index = 0
        self.dirty = True

    def ensure_diff_loaded(self, commit_id: str, file_path: str | None = None) -> list[str]:
        key = (commit_id, file_path)
        cached = self.diff_cache.get(key)
        if cached is None:
            cached = list(self.source.list_diff_lines(commit_id, file_path))
            self.diff_cache[key] = cached
            self.dirty = True
        return cached

    def load_selection(self) -> None:
        """Populate caches for the current selection, reporting failures softly.

        A key that failed once is not retried until the next refresh, so a
        broken source does not spawn a subprocess on every loop tick.
        """
        commit = self.selected_commit()
        if commit is None:
            return
        if commit.id not in self.failed_files:
            try:
                self.ensure_files_loaded()
            except SourceError as exc:
                logger.warning("loading files for %s failed: %s", commit.id, exc)
                self.failed_files.add(commit.id)
                self.status = f"load files failed: {exc}"
                self.dirty = True

        key = self.selection_diff_key()
        if key is None or key in self.diff_cache or key in self.failed_diffs:
            return
        try:
            self.ensure_diff_loaded(*key)
        except SourceError as exc:
            logger.warning("loading diff for %s failed: %s", key, exc)
            self.failed_diffs.add(key)
            self.status = f"load diff failed: {exc}"
            self.dirty = True

    # Navigation

    def _select_file(self, index: int) -> bool:
        files = self.files_for_selected_commit()
        if not files:
            return False
        target = _clamp(index, len(files))
        if target == self.file_index:
            return False
        self.file_index = target
        self.diff_scroll = 0
        self.dirty = True
        return True

    def move_file_selection(self, delta: int) -> bool:
        return self._select_file(self.file_index + delta)

    def jump_file_top(self) -> bool:
        return self._select_file(0)

    def jump_file_bottom(self) -> bool:
        files = self.files_for_selected_commit()
        if not files:
            return False
        return self._select_file(len(files) - 1)

    def move_commit(self, delta: int) -> bool:
        if not self.commits:
            return False
        target = _clamp(self.commit_index + delta, len(self.commits))
        if target == self.commit_index:
            return False
        self.commit_index = target
        self.file_index = 0
        self.diff_scroll = 0
        self.dirty = True
        return True

    def scroll_diff(self, delta: int) -> bool:
        """Scroll the diff pane, never above the top or past the last cached line."""
        target = max(0, self.diff_scroll + delta)
        key = self.selection_diff_key()
        if key is not None and key in self.diff_cache:
            target = min(target, max(0, len(self.diff_cache[key]) - 1))
        if target == self.diff_scroll:
            return False
        self.diff_scroll = target
        self.dirty = True
        return True

    # External commands

    def run_command(self, command: str) -> None:
        if not command.strip():
            return
        result = self.command_runner(self.repo, command)
        if result.ok:
            self.status = f"> {result.first_line or 'ok'}"
        else:
            self.status = f"command failed: {result.stderr}"
        self.dirty = True

    def approve_selected(self) -> None:
        if self.mode is not ViewMode.QUEUE:
            self.status = "approve only works in queue mode"
            self.dirty = True
            return
        commit = self.selected_commit()
        if commit is None:
            return
        command = self.source.approve_command(commit.id)
        if command is None:
            self.status = "approve is not supported by this source"
            self.dirty = True
            return
        self.run_command(command)

    # Command-line entry

    def enter_input_mode(self) -> None:
        self.input_mode = True
        self.input_buffer = ""
        self.dirty = True

    def cancel_input(self) -> None:
        self.input_mode = False
        self.input_buffer = ""
        self.dirty = True

    def submit_input(self) -> str:
        """Leave entry mode, then run the typed command."""
        command = self.input_buffer
        self.input_mode = False
        self.input_buffer = ""
        self.dirty = True
        self.run_command(command)
        return command

    def append_input(self, text: str) -> None:
        self.input_buffer += text
        self.dirty = True

    def erase_input(self) -> None:
        if self.input_buffer:
            self.input_buffer = self.input_buffer[:-1]
            self.dirty = True


__all__ = ["DEFAULT_LIMIT", "DEFAULT_PAGE_SIZE", "DiffKey", "SessionState"]
