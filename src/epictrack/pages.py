"""Navigator pages: each renders from the store and maps raw input to an Action."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from rich.text import Text

from .models import (
    Action,
    CreateEpic,
    CreateStory,
    DBState,
    DeleteEpic,
    DeleteStory,
    Exit,
    NavigateToEpicDetail,
    NavigateToPreviousPage,
    NavigateToStoryDetail,
    UpdateEpicStatus,
    UpdateStoryStatus,
)
from .stores.tracker import TrackerError, TrackerStore
from .ui import build_table, render_text

_LIST_COLUMNS = (("id", 10), ("name", 32), ("status", 16))
_DETAIL_COLUMNS = (("id", 6), ("name", 16), ("description", 32), ("status", 14))


class RenderFailure(RuntimeError):
    pass


def _read(store: TrackerStore) -> DBState:
    try:
        return store.read_db()
    except TrackerError as exc:
        raise RenderFailure(f"Failed to load page: {exc}") from exc


def _parse_id(raw: str) -> int | None:
    if raw.isascii() and raw.isdigit():
        return int(raw)
    return None


@dataclass
class HomePage:
    store: TrackerStore

    def render(self) -> str:
        db_state = _read(self.store)
        rows = [
            (item_id, db_state.epics[item_id].name, db_state.epics[item_id].status)
            for item_id in sorted(db_state.epics)
        ]
        return render_text(
            build_table(title="EPICS", columns=_LIST_COLUMNS, rows=rows),
            Text(""),
            Text("[q] quit | [c] create epic | [:id:] navigate to epic"),
        )

    def interpret(self, raw: str) -> Action | None:
        value = raw.strip()
        if not value:
            return None
        item_id = _parse_id(value)
        if item_id is not None:
            if item_id in _read(self.store).epics:
                return NavigateToEpicDetail(epic_id=item_id)
            return None
        if value == "q":
            return Exit()
        if value == "c":
            return CreateEpic()
        return None


@dataclass
class EpicDetail:
    store: TrackerStore
    epic_id: int

    def render(self) -> str:
        db_state = _read(self.store)
        epic = db_state.epics.get(self.epic_id)
        if epic is None:
            raise RenderFailure(f"Epic {self.epic_id} no longer exists.")

        # Deliberately lists only this epic's stories rather than every story
        # in the store; interpret() accepts the same ids.
        story_rows = [
            (story_id, db_state.stories[story_id].name, db_state.stories[story_id].status)
            for story_id in sorted(epic.stories)
            if story_id in db_state.stories
        ]
        return render_text(
            build_table(
                title="EPIC",
                columns=_DETAIL_COLUMNS,
                rows=[(self.epic_id, epic.name, epic.description, epic.status)],
            ),
            Text(""),
            build_table(title="STORIES", columns=_LIST_COLUMNS, rows=story_rows),
            Text(""),
            Text(
                "[p] previous | [u] update epic | [d] delete epic | "
                "[c] create story | [:id:] navigate to story"
            ),
        )

    def interpret(self, raw: str) -> Action | None:
        value = raw.strip()
        if not value:
            return None
        item_id = _parse_id(value)
        if item_id is not None:
            db_state = _read(self.store)
            epic = db_state.epics.get(self.epic_id)
            if epic is not None and item_id in epic.stories and item_id in db_state.stories:
                return NavigateToStoryDetail(epic_id=self.epic_id, story_id=item_id)
            return None
        if value == "p":
            return NavigateToPreviousPage()
        if value == "u":
            return UpdateEpicStatus(epic_id=self.epic_id)
        if value == "d":
            return DeleteEpic(epic_id=self.epic_id)
        if value == "c":
            return CreateStory(epic_id=self.epic_id)
        return None


@dataclass
class StoryDetail:
    store: TrackerStore
    epic_id: int
    story_id: int

    def render(self) -> str:
        db_state = _read(self.store)
        story = db_state.stories.get(self.story_id)
        if story is None:
            raise RenderFailure(f"Story {self.story_id} no longer exists.")

        return render_text(
            build_table(
                title="STORY",
                columns=_DETAIL_COLUMNS,
                rows=[(self.story_id, story.name, story.description, story.status)],
            ),
            Text(""),
            Text("[p] previous | [q] quit | [u] update story | [d] delete story"),
        )

    def interpret(self, raw: str) -> Action | None:
        value = raw.strip()
        if not value or _parse_id(value) is not None:
            return None
        if value == "p":
            return NavigateToPreviousPage()
        if value == "q":
            return Exit()
        if value == "u":
            return UpdateStoryStatus(story_id=self.story_id)
        if value == "d":
            return DeleteStory(epic_id=self.epic_id, story_id=self.story_id)
        return None


Page = Union[HomePage, EpicDetail, StoryDetail]
