"""Subprocess helpers for version-control tools and operator shell commands.

Tool calls raise ``SourceError`` so fetch paths can abort cleanly.
Shell commands return a ``CommandResult`` instead of raising, since their
outcome is only ever shown in the status line.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .base import SourceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    ok: bool
    stdout: str
    stderr: str

    @property
    def first_line(self) -> str:
        lines = self.stdout.strip().splitlines()
        return lines[0] if lines else ""


def run_tool(repo: Path, tool: str, args: list[str]) -> str:
    """Run ``tool`` with ``args`` in ``repo`` and return its standard output."""
    logger.debug("run %s %s (cwd=%s)", tool, args, repo)
    try:
        proc = subprocess.run(
            [tool, *args],
            cwd=repo,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except FileNotFoundError as exc:
        raise SourceError(f"{tool} not found") from exc
    except OSError as exc:
        raise SourceError(f"failed to run {tool}: {exc}") from exc
    if proc.returncode != 0:
        logger.warning("%s exited with %s: %s", tool, proc.returncode, proc.stderr.strip())
        raise SourceError(f"{tool} failed: {proc.stderr.strip()}")
    return proc.stdout


def tool_succeeds(repo: Path, tool: str, args: list[str]) -> bool:
    """Return whether ``tool`` exits cleanly and prints something."""
    try:
        return bool(run_tool(repo, tool, args))
    except SourceError:
        return False


def run_shell(repo: Path, command: str) -> CommandResult:
    """Run an operator-typed command through ``sh -c`` in ``repo``."""
    logger.info("shell command: %s", command)
    try:
        proc = subprocess.run(
            ["sh", "-c", command],
            cwd=repo,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        return CommandResult(ok=False, stdout="", stderr=str(exc))
    if proc.returncode != 0:
        logger.info("shell command exited with %s", proc.returncode)
    return CommandResult(ok=proc.returncode == 0, stdout=proc.stdout, stderr=proc.stderr.strip())


__all__ = ["CommandResult", "run_shell", "run_tool", "tool_succeeds"]
