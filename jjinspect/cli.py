"""Command-line front door for jj-inspect.

Parses CLI options, resolves the repository and base revset, performs the
initial refresh, then dispatches into the interactive session runtime.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .highlight import DEFAULT_STYLE, normalize_style
from .models import ViewMode
from .render.help import help_epilog
from .runtime import run_session
from .runtime.config import (
    load_default_limit,
    load_page_size,
    load_style_name,
    load_theme_name,
    save_theme_name,
)
from .sources import SourceError, build_source, resolve_default_base
from .state import DEFAULT_LIMIT, DEFAULT_PAGE_SIZE, SessionState
from .ui_theme import available_theme_names, normalize_theme_name, resolve_theme

LOG_ENV_VAR = "JJ_INSPECT_LOG"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jj-inspect",
        description="jj-inspect - stack/queue review TUI",
        epilog=help_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--repo", type=Path, default=None, help="Repository path (default: current directory).")
    parser.add_argument("--base", default="", help="Base revset for stack mode (default: auto-detected trunk).")
    parser.add_argument(
        "--limit",
        type=_positive_int,
        default=None,
        help=f"Maximum number of commits to load (default: {DEFAULT_LIMIT}).",
    )
    parser.add_argument("--queue", action="store_true", help="Review commit-queue entries instead of the stack.")
    parser.add_argument("--no-color", action="store_true", help="Disable diff and UI colors.")
    parser.add_argument("--style", default=None, help=f"Pygments style for diff colors (default: {DEFAULT_STYLE}).")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--log-file", default=None, help=f"Write debug logs to this file (or set ${LOG_ENV_VAR}).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(log_file: str | None) -> None:
    """Send debug logs to a file; without one the TUI stays silent."""
    target = log_file or os.environ.get(LOG_ENV_VAR, "").strip()
    if not target:
        return
    logging.basicConfig(filename=target, level=logging.DEBUG, format=LOG_FORMAT)


def resolve_repo(repo: Path | None) -> Path:
    if repo is None:
        try:
            return Path.cwd()
        except OSError as exc:
            raise SystemExit(f"jj-inspect: resolve cwd: {exc}") from exc
    if not repo.is_dir():
        raise SystemExit(f"jj-inspect: repository path not found: {repo}")
    return repo.resolve()


def stdio_is_interactive() -> bool:
    return os.isatty(sys.stdin.fileno()) and os.isatty(sys.stdout.fileno())


def build_state(args: argparse.Namespace) -> SessionState:
    """Create session state for parsed arguments, resolving the base revset."""
    repo = resolve_repo(args.repo)
    mode = ViewMode.QUEUE if args.queue else ViewMode.STACK
    base_revset = args.base.strip()
    if mode is ViewMode.STACK and not base_revset:
        base_revset = resolve_default_base(repo)
    limit = args.limit if args.limit is not None else (load_default_limit() or DEFAULT_LIMIT)
    return SessionState(
        repo=repo,
        mode=mode,
        source=build_source(mode, repo, base_revset),
        base_revset=base_revset,
        limit=limit,
        page_size=load_page_size() or DEFAULT_PAGE_SIZE,
    )


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the review session.

    Startup failures (bad repository, failed initial fetch, no terminal)
    exit non-zero before the terminal is touched.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file)

    state = build_state(args)
    try:
        state.refresh()
    except SourceError as exc:
        logger.error("initial refresh failed: %s", exc)
        raise SystemExit(f"jj-inspect: {exc}") from exc

    if not state.commits:
        print("No commits found.")
        return

    if not stdio_is_interactive():
        raise SystemExit("jj-inspect requires an interactive terminal.")

    if args.theme is not None and args.theme.strip().lower() in available_theme_names():
        save_theme_name(normalize_theme_name(args.theme))
    theme = resolve_theme(args.theme or load_theme_name(), no_color=args.no_color)
    diff_style = None if args.no_color else normalize_style(args.style or load_style_name() or DEFAULT_STYLE)
    run_session(state, theme=theme, diff_style=diff_style)


if __name__ == "__main__":
    main()
