from __future__ import annotations

import argparse
import io
import os
import sys
from collections.abc import Mapping, Sequence
from typing import Literal

from rich.console import Console, RenderableType
from rich.table import Table
from rich.text import Text

OUTPUT_CHOICES = ("auto", "plain", "rich")
OUTPUT_ENV_VAR = "EPICTRACK_OUTPUT"
OutputMode = Literal["plain", "rich"]

PAGE_WIDTH = 100


def add_output_mode_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        choices=OUTPUT_CHOICES,
        help=(
            f"plain or rich page output; overrides {OUTPUT_ENV_VAR} and the "
            "config file's output key (default: auto, rich on a terminal)"
        ),
    )


def _output_choice(raw: str | None, *, source: str) -> str | None:
    value = (raw or "").strip().lower()
    if value and value not in OUTPUT_CHOICES:
        raise ValueError(f"{source}: unknown output mode {raw!r} (use {', '.join(OUTPUT_CHOICES)})")
    return value or None


def resolve_output_mode(
    requested: str | None = None,
    *,
    configured: str | None = None,
    env: Mapping[str, str] | None = None,
    is_tty: bool | None = None,
) -> OutputMode:
    """Pick plain or rich output: --output, then EPICTRACK_OUTPUT, then config, then auto."""
    source_env = os.environ if env is None else env
    sources = (
        ("--output", requested),
        (OUTPUT_ENV_VAR, source_env.get(OUTPUT_ENV_VAR)),
        ("config output", configured),
    )
    selected = "auto"
    for source, raw in sources:
        choice = _output_choice(raw, source=source)
        if choice is not None:
            selected = choice
            break

    if selected != "auto":
        return "rich" if selected == "rich" else "plain"
    if is_tty is None:
        isatty = getattr(sys.stdout, "isatty", None)
        is_tty = bool(isatty()) if callable(isatty) else False
    return "rich" if is_tty else "plain"


def make_console(mode: OutputMode, *, stderr: bool = False) -> Console:
    """Console for page output; plain mode never emits escape codes."""
    rich_mode = mode == "rich"
    return Console(
        file=sys.stderr if stderr else sys.stdout,
        force_terminal=rich_mode,
        no_color=not rich_mode,
        highlight=False,
    )


def column_text(text: str, width: int) -> str:
    """Fit text into a fixed-width column, padding or truncating with dots."""
    if width <= 0:
        return ""
    if len(text) <= width:
        return text.ljust(width)
    if width <= 3:
        return "." * width
    return text[: width - 3] + "..."


def build_table(
    *,
    title: str,
    columns: Sequence[tuple[str, int]],
    rows: Sequence[Sequence[object]],
) -> Table:
    table = Table(title=title, expand=False, show_edge=False, pad_edge=False)
    for header, width in columns:
        table.add_column(header, no_wrap=True, min_width=width, max_width=width)
    for row in rows:
        table.add_row(
            *(
                Text(column_text(str(value), width))
                for value, (_, width) in zip(row, columns)
            )
        )
    return table


def render_text(*renderables: RenderableType, width: int = PAGE_WIDTH) -> str:
    """Render to plain text so pages stay independent of the terminal."""
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=width,
        force_terminal=False,
        no_color=True,
        highlight=False,
    )
    for renderable in renderables:
        console.print(renderable)
    return buffer.getvalue()
