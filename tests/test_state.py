"""Session engine tests: refresh, cache fill, navigation and commands.

Uses an in-memory source that counts every fetch so cache idempotence and
failure suppression can be asserted directly.
"""

from __future__ import annotations

import unittest
from pathlib import Path
from unittest import mock

from jjinspect.models import CommitItem, FileItem, ViewMode
from jjinspect.sources import CommandResult, SourceError
from jjinspect.state import SessionState


class FakeSource:
    def __init__(
        self,
        commits: list[CommitItem] | None = None,
        files: dict[str, list[FileItem]] | None = None,
        diffs: dict[tuple[str, str | None], list[str]] | None = None,
        approve: str | None = None,
    ) -> None:
        self.commits = commits or []
        self.files = files or {}
        self.diffs = diffs or {}
        self.approve = approve
        self.fail_commits = False
        self.fail_files = False
        self.fail_diffs = False
        self.commit_calls = 0
        self.file_calls: list[str] = []
        self.diff_calls: list[tuple[str, str | None]] = []

    def list_commits(self, limit: int) -> list[CommitItem]:
        self.commit_calls += 1
        if self.fail_commits:
            raise SourceError("jj failed: no repo")
        return self.commits[:limit]

    def list_files(self, commit_id: str) -> list[FileItem]:
        self.file_calls.append(commit_id)
        if self.fail_files:
            raise SourceError("git failed: bad object")
        return self.files.get(commit_id, [])

    def list_diff_lines(self, commit_id: str, file_path: str | None = None) -> list[str]:
        self.diff_calls.append((commit_id, file_path))
        if self.fail_diffs:
            raise SourceError("git failed: bad object")
        return self.diffs.get((commit_id, file_path), [])

    def full_diff_command(self, commit_id: str, file_path: str | None = None) -> str:
        return f"show {commit_id} {file_path}"

    def approve_command(self, commit_id: str) -> str | None:
        if self.approve is None:
            return None
        return f"{self.approve} {commit_id}"

    def status_label(self) -> str:
        return "fake status"


TWO_COMMITS = [
    CommitItem(id="abc123def456", summary="fix bug"),
    CommitItem(id="def456abc123", summary="add test"),
]
THREE_FILES = [
    FileItem(status="M", path="a.txt"),
    FileItem(status="A", path="b.txt"),
    FileItem(status="D", path="c.txt"),
]


def _make_state(source: FakeSource, mode: ViewMode = ViewMode.STACK, **kwargs) -> SessionState:
    return SessionState(repo=Path("/repo"), mode=mode, source=source, **kwargs)


def _loaded_state(**kwargs) -> tuple[SessionState, FakeSource]:
    source = FakeSource(
        commits=list(TWO_COMMITS),
        files={"abc123def456": list(THREE_FILES), "def456abc123": [FileItem(status="M", path="z.txt")]},
        diffs={("abc123def456", "a.txt"): [f"line {i}" for i in range(30)]},
    )
    state = _make_state(source, **kwargs)
    state.refresh()
    state.load_selection()
    return state, source


class RefreshTests(unittest.TestCase):
    def test_refresh_resets_cursors_and_caches(self) -> None:
        state, source = _loaded_state()
        state.move_commit(1)
        state.diff_scroll = 3

        state.refresh()

        self.assertEqual(state.commits, TWO_COMMITS)
        self.assertEqual((state.commit_index, state.file_index, state.diff_scroll), (0, 0, 0))
        self.assertEqual(state.files_cache, {})
        self.assertEqual(state.diff_cache, {})
        self.assertEqual(state.status, "fake status")
        self.assertEqual(source.commit_calls, 2)

    def test_refresh_with_no_commits_leaves_everything_empty(self) -> None:
        state = _make_state(FakeSource())
        state.refresh()
        state.load_selection()

        self.assertIsNone(state.selected_commit())
        self.assertIsNone(state.selected_file())
        self.assertEqual(state.selected_diff_lines(), [])
        self.assertFalse(state.move_commit(1))
        self.assertFalse(state.move_file_selection(1))

    def test_refresh_passes_limit(self) -> None:
        source = FakeSource(commits=list(TWO_COMMITS))
        state = _make_state(source, limit=1)
        state.refresh()
        self.assertEqual(len(state.commits), 1)

    def test_failed_refresh_keeps_previous_state(self) -> None:
        state, source = _loaded_state()
        state.move_file_selection(1)
        source.fail_commits = True

        with self.assertRaises(SourceError):
            state.refresh()
        self.assertEqual(state.file_index, 1)
        self.assertEqual(state.commits, TWO_COMMITS)

        self.assertFalse(state.refresh_or_report())
        self.assertEqual(state.status, "refresh failed: jj failed: no repo")
        self.assertEqual(state.file_index, 1)


class CacheTests(unittest.TestCase):
    def test_selection_loads_files_and_file_diff(self) -> None:
        state, source = _loaded_state()

        self.assertEqual(state.selected_file(), THREE_FILES[0])
        self.assertEqual(state.selection_diff_key(), ("abc123def456", "a.txt"))
        self.assertEqual(state.selected_diff_lines()[0], "line 0")
        self.assertEqual(source.file_calls, ["abc123def456"])
        self.assertEqual(source.diff_calls, [("abc123def456", "a.txt")])

    def test_loading_twice_does_not_refetch(self) -> None:
        state, source = _loaded_state()
        state.load_selection()
        state.ensure_files_loaded()
        state.ensure_diff_loaded("abc123def456", "a.txt")

        self.assertEqual(len(source.file_calls), 1)
        self.assertEqual(len(source.diff_calls), 1)

    def test_commit_without_files_shows_whole_commit_diff(self) -> None:
        source = FakeSource(commits=[TWO_COMMITS[0]], diffs={("abc123def456", None): ["+whole"]})
        state = _make_state(source)
        state.refresh()
        state.load_selection()

        self.assertEqual(state.files_for_selected_commit(), [])
        self.assertEqual(state.selection_diff_key(), ("abc123def456", None))
        self.assertEqual(state.selected_diff_lines(), ["+whole"])

    def test_file_failure_is_reported_and_not_retried(self) -> None:
        source = FakeSource(commits=list(TWO_COMMITS))
        source.fail_files = True
        state = _make_state(source)
        state.refresh()

        state.load_selection()
        state.load_selection()

        self.assertEqual(state.status, "load files failed: git failed: bad object")
        self.assertEqual(source.file_calls, ["abc123def456"])
        # The whole-commit diff is still attempted.
        self.assertIn(("abc123def456", None), source.diff_calls)

    def test_diff_failure_is_reported_and_not_retried(self) -> None:
        state, source = _loaded_state()
        source.fail_diffs = True
        state.move_file_selection(1)

        state.load_selection()
        state.load_selection()

        self.assertEqual(state.status, "load diff failed: git failed: bad object")
        self.assertEqual(source.diff_calls.count(("abc123def456", "b.txt")), 1)
        self.assertEqual(state.selected_diff_lines(), [])

    def test_refresh_clears_failure_memory(self) -> None:
        source = FakeSource(commits=list(TWO_COMMITS))
        source.fail_files = True
        state = _make_state(source)
        state.refresh()
        state.load_selection()
        self.assertEqual(state.failed_files, {"abc123def456"})

        source.fail_files = False
        state.refresh()
        self.assertEqual(state.failed_files, set())
        self.assertEqual(state.failed_diffs, set())
        state.load_selection()

        self.assertEqual(source.file_calls, ["abc123def456", "abc123def456"])
        self.assertEqual(state.status, "fake status")


class NavigationTests(unittest.TestCase):
    def test_file_moves_clamp_at_boundaries(self) -> None:
        state, _source = _loaded_state()

        self.assertFalse(state.move_file_selection(-1))
        self.assertTrue(state.move_file_selection(5))
        self.assertEqual(state.file_index, 2)
        self.assertFalse(state.move_file_selection(1))

    def test_boundary_move_keeps_diff_scroll(self) -> None:
        state, _source = _loaded_state()
        state.scroll_diff(4)

        self.assertFalse(state.move_file_selection(-1))
        self.assertFalse(state.jump_file_top())
        self.assertEqual(state.diff_scroll, 4)

    def test_file_change_resets_diff_scroll(self) -> None:
        state, _source = _loaded_state()
        state.scroll_diff(4)

        self.assertTrue(state.jump_file_bottom())
        self.assertEqual((state.file_index, state.diff_scroll), (2, 0))
        self.assertTrue(state.jump_file_top())
        self.assertEqual(state.file_index, 0)

    def test_commit_change_resets_file_and_scroll(self) -> None:
        state, _source = _loaded_state()
        state.move_file_selection(2)
        state.scroll_diff(3)

        self.assertTrue(state.move_commit(1))
        self.assertEqual((state.commit_index, state.file_index, state.diff_scroll), (1, 0, 0))
        self.assertFalse(state.move_commit(1))
        self.assertTrue(state.move_commit(-10))
        self.assertEqual(state.commit_index, 0)

    def test_scroll_is_bounded_by_top_and_cached_length(self) -> None:
        state, _source = _loaded_state()

        self.assertFalse(state.scroll_diff(-10))
        self.assertTrue(state.scroll_diff(10))
        self.assertEqual(state.diff_scroll, 10)
        state.scroll_diff(100)
        self.assertEqual(state.diff_scroll, 29)
        state.scroll_diff(-100)
        self.assertEqual(state.diff_scroll, 0)

    def test_indices_stay_in_range_after_mixed_moves(self) -> None:
        state, _source = _loaded_state()
        for delta in (3, -7, 1, 1, 1, -1, 9):
            state.move_commit(delta)
            state.load_selection()
            state.move_file_selection(delta)
            files = state.files_for_selected_commit() or []
            self.assertTrue(0 <= state.commit_index < len(state.commits))
            self.assertTrue(state.file_index == 0 or state.file_index < len(files))


class CommandTests(unittest.TestCase):
    def test_successful_command_shows_first_line(self) -> None:
        runner = mock.Mock(return_value=CommandResult(ok=True, stdout="done\nmore\n", stderr=""))
        state, _source = _loaded_state(command_runner=runner)

        state.run_command("echo done")

        runner.assert_called_once_with(Path("/repo"), "echo done")
        self.assertEqual(state.status, "> done")

    def test_silent_success_shows_ok(self) -> None:
        runner = mock.Mock(return_value=CommandResult(ok=True, stdout="", stderr=""))
        state, _source = _loaded_state(command_runner=runner)
        state.run_command("true")
        self.assertEqual(state.status, "> ok")

    def test_failed_command_shows_stderr(self) -> None:
        runner = mock.Mock(return_value=CommandResult(ok=False, stdout="", stderr="nope"))
        state, _source = _loaded_state(command_runner=runner)
        state.run_command("false")
        self.assertEqual(state.status, "command failed: nope")

    def test_blank_command_is_ignored(self) -> None:
        runner = mock.Mock()
        state, _source = _loaded_state(command_runner=runner)
        state.run_command("   ")
        runner.assert_not_called()

    def test_approve_outside_queue_mode_runs_nothing(self) -> None:
        runner = mock.Mock()
        state, _source = _loaded_state(command_runner=runner)

        state.approve_selected()

        runner.assert_not_called()
        self.assertEqual(state.status, "approve only works in queue mode")

    def test_approve_in_queue_mode_runs_source_command(self) -> None:
        runner = mock.Mock(return_value=CommandResult(ok=True, stdout="approved\n", stderr=""))
        source = FakeSource(commits=[CommitItem(id="123", summary="queued")], approve="f commit-queue approve")
        state = _make_state(source, mode=ViewMode.QUEUE, command_runner=runner)
        state.refresh()

        state.approve_selected()

        runner.assert_called_once_with(Path("/repo"), "f commit-queue approve 123")
        self.assertEqual(state.status, "> approved")

    def test_approve_unsupported_by_source(self) -> None:
        runner = mock.Mock()
        source = FakeSource(commits=[CommitItem(id="123", summary="queued")])
        state = _make_state(source, mode=ViewMode.QUEUE, command_runner=runner)
        state.refresh()

        state.approve_selected()

        runner.assert_not_called()
        self.assertEqual(state.status, "approve is not supported by this source")

    def test_input_editing(self) -> None:
        runner = mock.Mock(return_value=CommandResult(ok=True, stdout="", stderr=""))
        state, _source = _loaded_state(command_runner=runner)

        state.enter_input_mode()
        for ch in "lsx":
            state.append_input(ch)
        state.erase_input()
        self.assertEqual(state.input_buffer, "ls")

        self.assertEqual(state.submit_input(), "ls")
        self.assertFalse(state.input_mode)
        self.assertEqual(state.input_buffer, "")
        runner.assert_called_once_with(Path("/repo"), "ls")

    def test_cancel_input_discards_buffer(self) -> None:
        runner = mock.Mock()
        state, _source = _loaded_state(command_runner=runner)
        state.enter_input_mode()
        state.append_input("x")

        state.cancel_input()

        self.assertFalse(state.input_mode)
        self.assertEqual(state.input_buffer, "")
        runner.assert_not_called()


if __name__ == "__main__":
    unittest.main()
