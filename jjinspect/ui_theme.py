"""UI theme definitions and selection helpers.

Themes only colour the chrome (header, selection, status and prompt rows).
Diff colouring is a separate Pygments style setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the renderer."""

    name: str
    header: str
    header_label: str
    selected: str
    divider: str
    status: str
    hint: str
    prompt: str
    reset: str


DEFAULT_THEME = UITheme(
    name="default",
    header="\033[1m",
    header_label="\033[1m",
    selected="\033[33m",
    divider="\033[2m",
    status="\033[7m",
    hint="\033[2;38;5;250m",
    prompt="\033[1;38;5;81m",
    reset="\033[0m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    header="\033[1;38;5;45m",
    header_label="\033[1;38;5;117m",
    selected="\033[38;5;81m",
    divider="\033[2;38;5;31m",
    status="\033[7;38;5;39m",
    hint="\033[2;38;5;110m",
    prompt="\033[1;38;5;45m",
    reset="\033[0m",
)

PLAIN_THEME = UITheme(
    name="plain",
    header="",
    header_label="",
    selected="",
    divider="",
    status="",
    hint="",
    prompt="",
    reset="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
