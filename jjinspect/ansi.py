"""Display-width text measurement and clipping.

Terminal cells, not characters or bytes, decide where text is cut: combining
marks take no column and East Asian wide/fullwidth characters take two.
Clipping helpers preserve ANSI escape sequences without counting them.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
ELLIPSIS = "…"
DIFF_TAB = "    "


def char_display_width(ch: str) -> int:
    """Return the terminal column width of one character."""
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return the column width of ``text``, ignoring ANSI escape sequences."""
    plain = ANSI_ESCAPE_RE.sub("", text)
    return sum(char_display_width(ch) for ch in plain)


def truncate_to_width(text: str, width: int) -> str:
    """Cut ``text`` so it fits in ``width`` columns.

    An ellipsis is appended only when characters were dropped, ``width`` is
    larger than one, and a free column is left after the kept prefix.
    """
    if width <= 0:
        return ""
    out: list[str] = []
    col = 0
    truncated = False
    for ch in text:
        w = char_display_width(ch)
        if col + w > width:
            truncated = True
            break
        out.append(ch)
        col += w
    if truncated and width > 1 and col + 1 <= width:
        out.append(ELLIPSIS)
    return "".join(out)


def pad_to_width(text: str, width: int) -> str:
    """Right-pad ``text`` with spaces up to ``width`` display columns."""
    missing = width - display_width(text)
    if missing <= 0:
        return text
    return text + " " * missing


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
        i += 1

    return "".join(out)


def expand_diff_tabs(line: str) -> str:
    return line.replace("\t", DIFF_TAB)


__all__ = [
    "ANSI_ESCAPE_RE",
    "ELLIPSIS",
    "char_display_width",
    "clip_ansi_line",
    "display_width",
    "expand_diff_tabs",
    "pad_to_width",
    "truncate_to_width",
]
