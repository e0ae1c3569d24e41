"""Modal keyboard dispatch for the review session.

Two modes exist: normal navigation and command-line entry. ``CTRL_C`` quits
from either. In entry mode only text editing keys act; navigation is inert.
Dispatch never performs I/O itself beyond calling into ``SessionState`` and
the injected external actions.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..state import SessionState
from .key_registry import KeyBinding, KeyRegistry

INTERRUPT_KEY = "CTRL_C"
ENTER_COMMAND_KEY = ":"


@dataclass(frozen=True)
class KeyActions:
    """External actions the dispatcher may trigger."""

    open_full_diff: Callable[[], None]


def build_normal_keymap(state: SessionState, actions: KeyActions) -> KeyRegistry:
    """Return the fixed normal-mode keymap bound to ``state``."""
    page = state.page_size
    return KeyRegistry().register(
        KeyBinding(("q",), lambda: None, quits=True),
        KeyBinding(("j", "DOWN"), lambda: state.move_file_selection(1)),
        KeyBinding(("k", "UP"), lambda: state.move_file_selection(-1)),
        KeyBinding(("[",), lambda: state.move_commit(-1)),
        KeyBinding(("]",), lambda: state.move_commit(1)),
        KeyBinding(("PAGE_DOWN",), lambda: state.scroll_diff(page)),
        KeyBinding(("PAGE_UP",), lambda: state.scroll_diff(-page)),
        KeyBinding(("g",), state.jump_file_top),
        KeyBinding(("G",), state.jump_file_bottom),
        KeyBinding(("r",), state.refresh_or_report),
        KeyBinding((ENTER_COMMAND_KEY,), state.enter_input_mode),
        KeyBinding(("A",), state.approve_selected),
        KeyBinding(("ENTER",), actions.open_full_diff),
    )


def _is_text_key(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


def handle_input_key(key: str, state: SessionState) -> None:
    """Apply one key while the command line is being edited."""
    if key == "ESC":
        state.cancel_input()
    elif key == "ENTER":
        state.submit_input()
    elif key == "BACKSPACE":
        state.erase_input()
    elif _is_text_key(key):
        state.append_input(key)


class KeyDispatcher:
    """Normal/entry-mode dispatcher bound to one session."""

    def __init__(self, state: SessionState, actions: KeyActions) -> None:
        self.state = state
        self.actions = actions
        self.normal_keys = build_normal_keymap(state, actions)

    def handle(self, key: str) -> bool:
        """Handle one key token and return ``True`` when the session should end."""
        if key == INTERRUPT_KEY:
            return True
        if self.state.input_mode:
            handle_input_key(key, self.state)
            return False
        _handled, should_quit = self.normal_keys.dispatch(key)
        return should_quit


def handle_key(key: str, state: SessionState, actions: KeyActions) -> bool:
    """Handle one key token for ``state``; ``True`` means quit."""
    return KeyDispatcher(state, actions).handle(key)


__all__ = [
    "ENTER_COMMAND_KEY",
    "INTERRUPT_KEY",
    "KeyActions",
    "KeyDispatcher",
    "build_normal_keymap",
    "handle_input_key",
    "handle_key",
]
