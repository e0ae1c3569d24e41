"""Terminal control helpers for the review session.

Owns the raw-mode lifecycle and alternate-screen switching. Both are scoped
resources: ``raw_mode`` brackets the whole event loop and ``suspended``
hands the terminal back to a child process, restoring TUI mode afterwards
on every exit path.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import termios
import tty

DEFAULT_TERMINAL_SIZE = (80, 24)


class TerminalController:
    """Manage terminal mode transitions for one stdin/stdout pair."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._tui_active = False

    @property
    def tui_active(self) -> bool:
        return self._tui_active

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")
        self._tui_active = True

    def disable_tui_mode(self) -> None:
        """Show the cursor, leave the alternate screen, restore saved tty state."""
        os.write(self.stdout_fd, b"\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        self._tui_active = False

    def size(self) -> os.terminal_size:
        return shutil.get_terminal_size(DEFAULT_TERMINAL_SIZE)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()

    @contextlib.contextmanager
    def suspended(self):
        """Temporarily return the terminal to cooked mode for a child process."""
        self.disable_tui_mode()
        try:
            yield
        finally:
            self.enable_tui_mode()
