"""Diff-line sanitization and syntax colouring.

Colouring uses Pygments' diff lexer on one already-truncated line at a time,
so escape sequences never affect width decisions. Control bytes coming from
the diff tool are neutralized before anything reaches the terminal.
"""

from __future__ import annotations

import re
from functools import lru_cache

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import DiffLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0a-\x1f\x7f-\x9f]")
# Diff rules only match newline-terminated lines; ensurenl supplies it.
_DIFF_LEXER = DiffLexer(stripnl=False, ensurenl=True)


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch == "\t":
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def normalize_style(style: str) -> str:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    return style


@lru_cache(maxsize=8)
def _formatter_for_style(style: str) -> Terminal256Formatter:
    return Terminal256Formatter(style=normalize_style(style))


def colorize_diff_line(line: str, style: str = DEFAULT_STYLE) -> str:
    """Return ``line`` with ANSI colours for diff markers, hunks and headers."""
    if not line:
        return line
    rendered = pygments_highlight(line, _DIFF_LEXER, _formatter_for_style(style))
    return rendered.rstrip("\n")


__all__ = ["DEFAULT_STYLE", "colorize_diff_line", "normalize_style", "sanitize_terminal_text"]
