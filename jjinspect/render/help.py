"""Key hint and help text shared by the renderer and the CLI."""

from __future__ import annotations

COMMAND_PROMPT = ":"

HINT_LINE = "[j/k] files  [/] commits  [A] approve  [:] command  [Enter] diff"

KEY_HELP: tuple[tuple[str, str], ...] = (
    ("j/k, Down/Up", "Move file"),
    ("[ / ]", "Prev/Next commit"),
    ("PgDn/PgUp", "Scroll diff"),
    ("g/G", "Top/Bottom file"),
    ("r", "Refresh"),
    ("Enter", "Open full diff"),
    (":", "Command mode"),
    ("A", "Approve commit (queue mode)"),
    ("q, Ctrl-C", "Quit"),
)


def help_epilog() -> str:
    """Return the keys/modes section appended to ``--help`` output."""
    key_width = max(len(keys) for keys, _ in KEY_HELP)
    lines = ["Keys:"]
    for keys, description in KEY_HELP:
        lines.append(f"  {keys.ljust(key_width)}  {description}")
    lines.append("")
    lines.append("Modes:")
    lines.append("  --queue  Show Flow commit-queue entries (from .ai/internal/commit-queue)")
    return "\n".join(lines)


__all__ = ["COMMAND_PROMPT", "HINT_LINE", "KEY_HELP", "help_epilog"]
