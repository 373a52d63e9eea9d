"""CLI entry point for epictrack."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from . import __version__
from .config import LOG_LEVELS, find_state_dir, load_config, resolve_db_path
from .logs import LOG_FILE_NAME, configure_logging
from .navigator import NavigationFailure, Navigator
from .pages import RenderFailure
from .prompts import interactive_prompts
from .stores.backend import DatabaseError, JSONFileDatabase
from .stores.tracker import TrackerStore
from .ui import add_output_mode_argument, make_console, resolve_output_mode

logger = logging.getLogger(__name__)

ReadLine = Callable[[], str]


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="epictrack",
        description="Terminal tracker for epics and their stories.",
    )
    p.add_argument("command", nargs="?", choices=["init"], help="init: create an empty database")
    p.add_argument("--db", default=None, help="Path to the JSON database file")
    p.add_argument("--log-level", default=None, type=str.upper, choices=LOG_LEVELS)
    p.add_argument("--log-file", default=None, help=f"Log file (default: <state dir>/{LOG_FILE_NAME})")
    p.add_argument("--version", action="store_true", help="Show version")
    add_output_mode_argument(p)
    return p


def _show_error(console: Console, exc: Exception) -> None:
    console.print(Text(str(exc), style="bold red"), soft_wrap=True)
    console.print(Text("Press enter to continue...", style="dim"))


def _pause(read_line: ReadLine) -> bool:
    """Wait for one line. Returns False when input is exhausted."""
    try:
        read_line()
    except EOFError:
        return False
    return True


def run_loop(
    navigator: Navigator,
    console: Console,
    read_line: ReadLine,
    *,
    clear: bool = True,
) -> None:
    """Draw the current page, read one line, dispatch, repeat until the stack is empty."""
    while True:
        if clear:
            console.clear()
        page = navigator.current_page()
        if page is None:
            break

        try:
            console.out(page.render(), end="", highlight=False)
        except RenderFailure as exc:
            _show_error(console, exc)
            if not _pause(read_line):
                break
            continue

        try:
            raw = read_line()
        except EOFError:
            break

        try:
            action = page.interpret(raw)
        except RenderFailure as exc:
            _show_error(console, exc)
            if not _pause(read_line):
                break
            continue
        if action is None:
            continue

        try:
            navigator.handle_action(action)
        except NavigationFailure as exc:
            _show_error(console, exc)
            if not _pause(read_line):
                break
        except EOFError:
            break


def cmd_init(db_path: Path, console: Console) -> int:
    database = JSONFileDatabase(db_path)
    try:
        created = database.initialize()
    except DatabaseError as exc:
        console.print(Text(str(exc), style="red"))
        return 1
    if created:
        console.print(Panel(f"Initialized [bold]{db_path}[/bold]", style="green", expand=False))
    else:
        console.print(Panel(f"Database already exists: {db_path}", style="dim", expand=False))
    return 0


def cmd_run(db_path: Path, console: Console, read_line: ReadLine) -> int:
    database = JSONFileDatabase(db_path)
    try:
        if database.initialize():
            logger.info("created empty database at %s", db_path)
    except DatabaseError as exc:
        console.print(Text(str(exc), style="red"))
        return 1

    store = TrackerStore(database)
    navigator = Navigator(store, interactive_prompts(console, read_line))
    logger.info("session started with %s", db_path)
    run_loop(navigator, console, read_line)
    logger.info("session ended")
    return 0


def main(argv: list[str] | None = None, *, read_line: ReadLine = input) -> None:
    args = _parser().parse_args(argv if argv is not None else sys.argv[1:])

    if args.version:
        Console().print(Text(f"epictrack {__version__}", style="bold"))
        sys.exit(0)

    try:
        state_dir = find_state_dir()
        config = load_config(state_dir)
        console = make_console(resolve_output_mode(args.output, configured=config.output))
    except ValueError as exc:
        make_console("plain", stderr=True).print(Text(str(exc), style="red"), soft_wrap=True)
        sys.exit(1)

    log_file = Path(args.log_file).expanduser() if args.log_file else state_dir / LOG_FILE_NAME
    configure_logging(args.log_level or config.log_level or "INFO", log_file=log_file)
    db_path = resolve_db_path(args.db, config)

    if args.command == "init":
        sys.exit(cmd_init(db_path, console))
    sys.exit(cmd_run(db_path, console, read_line))


if __name__ == "__main__":
    main()
