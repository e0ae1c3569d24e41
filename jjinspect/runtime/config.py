"""Persistent JSON config helpers.

Stores startup defaults (result limit, pager, theme, diff style, page size).
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "jj-inspect"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so a read-only config
    directory never breaks a review session.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def _load_positive_int(key: str) -> int | None:
    """Read a positive integer value; booleans and other types are rejected."""
    value = load_config().get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def _load_string(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_default_limit() -> int | None:
    """Load the default commit-count limit used when ``--limit`` is absent."""
    return _load_positive_int("limit")


def load_page_size() -> int | None:
    """Load the diff scroll step for PgUp/PgDn."""
    return _load_positive_int("page_size")


def load_pager() -> str | None:
    """Load the pager command used when ``$PAGER`` is unset."""
    return _load_string("pager")


def load_style_name() -> str | None:
    """Load the Pygments style used for diff colouring."""
    return _load_string("style")


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    return _load_string("theme")


def save_theme_name(theme_name: str) -> None:
    """Persist selected UI theme name."""
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)
