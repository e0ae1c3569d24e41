"""Rendering engine for the split file-list/diff terminal view.

``build_frame`` is a pure function of session state and terminal size that
returns one fully composed ANSI frame; ``render_frame`` writes it. Layout:
a header row, body rows pairing one file entry with one diff line, then a
status row and a hint (or command prompt) row.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from ..ansi import clip_ansi_line, expand_diff_tabs, pad_to_width, truncate_to_width
from ..highlight import colorize_diff_line, sanitize_terminal_text
from ..models import FileItem
from ..state import SessionState
from ..ui_theme import DEFAULT_THEME, UITheme
from .help import COMMAND_PROMPT, HINT_LINE, KEY_HELP, help_epilog

LEFT_PANE_RATIO = 0.38
LEFT_PANE_MIN_WIDTH = 28
HEADER_ROWS = 1
FOOTER_ROWS = 2
SELECTED_MARKER = "▸ "
UNSELECTED_MARKER = "  "
DIVIDER = "│"
DIFF_LABEL = "Diff"
NO_COMMIT_LABEL = "(no commit)"


@dataclass(frozen=True)
class PaneLayout:
    columns: int
    rows: int
    left_width: int
    diff_x: int
    diff_width: int
    body_rows: int


def compute_layout(columns: int, rows: int) -> PaneLayout:
    """Split the screen into file and diff panes with a one-column gap."""
    columns = max(0, columns)
    rows = max(0, rows)
    left_width = max(int(columns * LEFT_PANE_RATIO), LEFT_PANE_MIN_WIDTH)
    diff_width = max(0, columns - left_width - 1)
    return PaneLayout(
        columns=columns,
        rows=rows,
        left_width=left_width,
        diff_x=left_width + 1,
        diff_width=diff_width,
        body_rows=max(0, rows - HEADER_ROWS - FOOTER_ROWS),
    )


def format_file_row(file: FileItem, selected: bool) -> str:
    marker = SELECTED_MARKER if selected else UNSELECTED_MARKER
    return f"{marker}{file.status} {file.display_path}"


def file_list_start(file_index: int, file_count: int, body_rows: int) -> int:
    """First file shown so the selected file stays inside the body rows."""
    if body_rows <= 0 or file_count <= body_rows:
        return 0
    return max(0, min(file_index - body_rows + 1, file_count - body_rows))


def build_status_text(state: SessionState) -> str:
    files = state.files_for_selected_commit() or []
    position = state.commit_index + 1 if state.commits else 0
    return f"{state.status}  |  {len(files)} files  |  commit {position}/{len(state.commits)}"


def build_bottom_text(state: SessionState) -> str:
    if state.input_mode:
        return f"{COMMAND_PROMPT}{state.input_buffer}"
    return HINT_LINE


def _styled(text: str, style: str, reset: str) -> str:
    if not style or not text:
        return text
    return f"{style}{text}{reset}"


def _header_line(state: SessionState, layout: PaneLayout, theme: UITheme) -> str:
    commit = state.selected_commit()
    if commit is None:
        title = NO_COMMIT_LABEL
    else:
        title = f"{commit.short_id} {commit.summary}"
    left_cols = min(layout.left_width, layout.columns)
    left = pad_to_width(truncate_to_width(title, left_cols), left_cols)
    if layout.diff_width <= 0:
        return _styled(left, theme.header, theme.reset)
    right = truncate_to_width(DIFF_LABEL, layout.diff_width)
    return (
        _styled(left, theme.header, theme.reset)
        + " "
        + _styled(right, theme.header_label, theme.reset)
    )


def _diff_cell(line: str, width: int, diff_style: str | None) -> str:
    text = truncate_to_width(sanitize_terminal_text(expand_diff_tabs(line)), width)
    if diff_style is None or not text:
        return text
    colored = clip_ansi_line(colorize_diff_line(text, diff_style), width)
    if "\033" in colored:
        colored += "\033[0m"
    return colored


def build_body_lines(
    state: SessionState,
    layout: PaneLayout,
    theme: UITheme,
    diff_style: str | None,
) -> list[str]:
    files = state.files_for_selected_commit() or []
    diff_lines = state.selected_diff_lines()
    start = file_list_start(state.file_index, len(files), layout.body_rows)
    left_cols = min(layout.left_width, layout.columns)
    divider = _styled(DIVIDER, theme.divider, theme.reset)

    lines: list[str] = []
    for row in range(layout.body_rows):
        file_idx = start + row
        left = ""
        selected = False
        if file_idx < len(files):
            selected = file_idx == state.file_index
            left = format_file_row(files[file_idx], selected)
        left = pad_to_width(truncate_to_width(left, left_cols), left_cols)
        if selected:
            left = _styled(left, theme.selected, theme.reset)
        if layout.diff_width <= 0:
            lines.append(left)
            continue

        diff_idx = state.diff_scroll + row
        right = ""
        if diff_idx < len(diff_lines):
            right = _diff_cell(diff_lines[diff_idx], layout.diff_width, diff_style)
        lines.append(f"{left}{divider}{right}")
    return lines


def build_frame(
    state: SessionState,
    columns: int,
    rows: int,
    theme: UITheme = DEFAULT_THEME,
    *,
    diff_style: str | None = None,
) -> str:
    """Compose one full-screen frame for ``state``.

    ``diff_style`` names a Pygments style for diff colouring; ``None`` leaves
    diff text uncoloured. The frame never mutates ``state``.
    """
    layout = compute_layout(columns, rows)
    if layout.rows <= 0 or layout.columns <= 0:
        return ""

    status = pad_to_width(truncate_to_width(build_status_text(state), layout.columns), layout.columns)
    bottom = truncate_to_width(build_bottom_text(state), layout.columns)
    bottom_style = theme.prompt if state.input_mode else theme.hint

    lines = [_header_line(state, layout, theme)]
    lines.extend(build_body_lines(state, layout, theme, diff_style))
    lines.append(_styled(status, theme.status, theme.reset))
    lines.append(_styled(bottom, bottom_style, theme.reset))
    # Footer rows win when the terminal is too short for the header.
    lines = lines[-layout.rows:]
    return "\033[H\033[J" + "\r\n".join(lines)


def render_frame(frame: str, fd: int | None = None) -> None:
    if fd is None:
        fd = sys.stdout.fileno()
    os.write(fd, frame.encode("utf-8", errors="replace"))


__all__ = [
    "KEY_HELP",
    "HINT_LINE",
    "PaneLayout",
    "build_body_lines",
    "build_bottom_text",
    "build_frame",
    "build_status_text",
    "compute_layout",
    "file_list_start",
    "format_file_row",
    "help_epilog",
    "render_frame",
]
