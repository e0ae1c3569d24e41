"""Stack-mode adapter backed by the ``jj`` CLI.

Lists every change between the working copy and a base revset, and answers
file/diff queries with ``jj diff``.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from ..models import CommitItem, FileItem
from .base import parse_name_status, split_diff_lines
from .process import run_tool, tool_succeeds

logger = logging.getLogger(__name__)

JJ = "jj"
ROOT_REVSET = "root()"
DEFAULT_BASE_CANDIDATES: tuple[str, ...] = (
    "trunk()",
    "main@origin",
    "master@origin",
    "main",
    "master",
)
COMMIT_TEMPLATE = 'commit_id ++ "\\t" ++ description.first_line()'


def revset_exists(repo: Path, revset: str) -> bool:
    return tool_succeeds(repo, JJ, ["log", "-r", revset, "--no-graph", "-T", "commit_id"])


def resolve_default_base(repo: Path) -> str:
    """Return the first conventional trunk name that resolves, else ``root()``."""
    for candidate in DEFAULT_BASE_CANDIDATES:
        if revset_exists(repo, candidate):
            logger.debug("resolved default base %s", candidate)
            return candidate
    return ROOT_REVSET


def parse_commit_log(output: str, limit: int) -> list[CommitItem]:
    commits: list[CommitItem] = []
    for line in output.splitlines():
        if len(commits) >= limit:
            break
        commit_id, _, summary = line.partition("\t")
        commit_id = commit_id.strip()
        if not commit_id:
            continue
        commits.append(CommitItem(id=commit_id, summary=summary.strip()))
    return commits


class StackSource:
    def __init__(self, repo: Path, base_revset: str) -> None:
        self.repo = repo
        self.base_revset = base_revset

    def list_commits(self, limit: int) -> list[CommitItem]:
        revset = f"ancestors(@) & ~ancestors({self.base_revset})"
        output = run_tool(self.repo, JJ, ["log", "-r", revset, "--no-graph", "-T", COMMIT_TEMPLATE])
        return parse_commit_log(output, limit)

    def list_files(self, commit_id: str) -> list[FileItem]:
        output = run_tool(self.repo, JJ, ["diff", "-r", commit_id, "--name-status", "--color", "never"])
        return parse_name_status(output)

    def list_diff_lines(self, commit_id: str, file_path: str | None = None) -> list[str]:
        args = ["diff", "-r", commit_id, "--color", "never"]
        if file_path is not None:
            args.extend(["--", file_path])
        return split_diff_lines(run_tool(self.repo, JJ, args))

    def full_diff_command(self, commit_id: str, file_path: str | None = None) -> str:
        command = f"jj diff -r {shlex.quote(commit_id)} --color always"
        if file_path is not None:
            command += f" -- {shlex.quote(file_path)}"
        return command

    def approve_command(self, commit_id: str) -> str | None:
        return None

    def status_label(self) -> str:
        return f"stack base: {self.base_revset}"


__all__ = [
    "DEFAULT_BASE_CANDIDATES",
    "ROOT_REVSET",
    "StackSource",
    "parse_commit_log",
    "resolve_default_base",
    "revset_exists",
]
