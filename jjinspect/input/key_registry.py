"""Key-token to action table used by the normal-mode keymap."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyBinding:
    """One or more key tokens bound to a single action.

    Action return values are ignored; ``quits`` marks bindings that end the
    session after running.
    """

    keys: tuple[str, ...]
    action: Callable[[], object]
    quits: bool = False


class KeyRegistry:
    def __init__(self) -> None:
        self._by_key: dict[str, KeyBinding] = {}

    def register(self, *bindings: KeyBinding) -> KeyRegistry:
        """Register bindings, later ones overriding earlier keys; returns ``self``."""
        for binding in bindings:
            for key in binding.keys:
                self._by_key[key] = binding
        return self

    def dispatch(self, key: str) -> tuple[bool, bool]:
        """Run the action bound to ``key``.

        Returns ``(handled, should_quit)``.
        """
        binding = self._by_key.get(key)
        if binding is None:
            return False, False
        binding.action()
        return True, binding.quits


__all__ = ["KeyBinding", "KeyRegistry"]
