"""Input-layer public API for key decoding and modal dispatch.

``read_key`` turns raw terminal bytes into tokens; ``KeyDispatcher`` maps
tokens onto session operations.
"""

from .key_registry import KeyBinding, KeyRegistry
from .keys import KeyActions, KeyDispatcher, build_normal_keymap, handle_input_key, handle_key
from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key

__all__ = [
    "read_key",
    "_PENDING_BYTES",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyActions",
    "KeyBinding",
    "KeyDispatcher",
    "KeyRegistry",
    "build_normal_keymap",
    "handle_input_key",
    "handle_key",
]
