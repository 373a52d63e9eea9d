from __future__ import annotations

import io
from collections.abc import Callable, Iterable

import pytest
from rich.console import Console

from epictrack.stores.tracker import TrackerStore


@pytest.fixture
def stdout() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(stdout: io.StringIO) -> Console:
    return Console(file=stdout, width=100, force_terminal=False, no_color=True)


@pytest.fixture
def store() -> TrackerStore:
    return TrackerStore.in_memory()


def _scripted(lines: Iterable[str]) -> Callable[[], str]:
    remaining = iter(lines)

    def read_line() -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError from None

    return read_line


@pytest.fixture
def scripted() -> Callable[[Iterable[str]], Callable[[], str]]:
    """Factory for read_line stand-ins that raise EOFError once lines run out."""
    return _scripted
