from __future__ import annotations

from collections.abc import Callable

from rich.console import Console
from rich.rule import Rule
from rich.text import Text

from .models import Epic, Status, Story
from .navigator import Prompts

ReadLine = Callable[[], str]

_YES = {"y", "Y"}


def _ask(console: Console, read_line: ReadLine, question: str) -> str:
    console.print(Text(question))
    return read_line().strip()


def _confirm(console: Console, read_line: ReadLine, question: str) -> bool:
    console.print(Rule(style="dim"))
    answer = _ask(console, read_line, f"{question} [Y/n]:")
    return not answer or answer in _YES


def interactive_prompts(console: Console, read_line: ReadLine) -> Prompts:
    """Build line-based prompts that print to console and read with read_line."""

    def gather_new_epic() -> Epic:
        console.print(Rule(style="dim"))
        name = _ask(console, read_line, "Epic Name:")
        description = _ask(console, read_line, "Epic Description:")
        return Epic(name, description)

    def gather_new_story() -> Story:
        console.print(Rule(style="dim"))
        name = _ask(console, read_line, "Story Name:")
        description = _ask(console, read_line, "Story Description:")
        return Story(name, description)

    def confirm_epic_deletion() -> bool:
        return _confirm(
            console,
            read_line,
            "Are you sure you want to delete this epic? "
            "All stories in this epic will also be deleted",
        )

    def confirm_story_deletion() -> bool:
        return _confirm(console, read_line, "Are you sure you want to delete this story?")

    def gather_new_status() -> Status | None:
        console.print(Rule(style="dim"))
        answer = _ask(
            console,
            read_line,
            "New Status (1 - OPEN, 2 - IN-PROGRESS, 3 - RESOLVED, 4 - CLOSED):",
        )
        return Status.from_choice(answer)

    return Prompts(
        gather_new_epic=gather_new_epic,
        gather_new_story=gather_new_story,
        confirm_epic_deletion=confirm_epic_deletion,
        confirm_story_deletion=confirm_story_deletion,
        gather_new_status=gather_new_status,
    )
