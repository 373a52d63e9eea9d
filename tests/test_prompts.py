from __future__ import annotations

import io

import pytest
from rich.console import Console

from epictrack.models import Epic, Status, Story
from epictrack.prompts import interactive_prompts


def test_gather_new_epic_reads_trimmed_name_and_description(
    console: Console, stdout: io.StringIO, scripted
) -> None:
    prompts = interactive_prompts(console, scripted(["  Checkout \n", " Payments "]))

    assert prompts.gather_new_epic() == Epic("Checkout", "Payments")
    out = stdout.getvalue()
    assert "Epic Name:" in out
    assert "Epic Description:" in out


def test_gather_new_story(console: Console, scripted) -> None:
    prompts = interactive_prompts(console, scripted(["Card form", ""]))

    assert prompts.gather_new_story() == Story("Card form", "")


@pytest.mark.parametrize(
    ("answer", "expected"),
    [("", True), ("y", True), ("Y", True), ("n", False), ("N", False), ("maybe", False)],
)
def test_deletion_confirmations(console: Console, scripted, answer: str, expected: bool) -> None:
    prompts = interactive_prompts(console, scripted([answer, answer]))

    assert prompts.confirm_epic_deletion() is expected
    assert prompts.confirm_story_deletion() is expected


def test_epic_deletion_warns_about_stories(
    console: Console, stdout: io.StringIO, scripted
) -> None:
    interactive_prompts(console, scripted(["n"])).confirm_epic_deletion()

    assert "All stories in this epic will also be deleted [Y/n]:" in stdout.getvalue()


@pytest.mark.parametrize(
    ("answer", "expected"),
    [("1", Status.OPEN), ("2", Status.IN_PROGRESS), ("3", Status.RESOLVED), ("4", Status.CLOSED), ("9", None), ("x", None)],
)
def test_gather_new_status(console: Console, scripted, answer: str, expected: Status | None) -> None:
    prompts = interactive_prompts(console, scripted([answer]))

    assert prompts.gather_new_status() is expected


def test_prompt_propagates_end_of_input(console: Console, scripted) -> None:
    prompts = interactive_prompts(console, scripted([]))

    with pytest.raises(EOFError):
        prompts.gather_new_epic()
