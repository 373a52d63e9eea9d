from __future__ import annotations

import logging
from pathlib import Path

from ..models import DBState, Epic, Status, Story
from .backend import Database, DatabaseError, JSONFileDatabase, MemoryDatabase

logger = logging.getLogger(__name__)


class TrackerError(RuntimeError):
    pass


class ReadFailure(TrackerError):
    def __init__(self, detail: str = "") -> None:
        message = "Failed to read tracker database."
        super().__init__(f"{message} {detail}".strip())


class WriteFailure(TrackerError):
    def __init__(self, detail: str = "") -> None:
        message = "Failed to write tracker database."
        super().__init__(f"{message} {detail}".strip())


class NoEpicWithID(TrackerError):
    def __init__(self, epic_id: int) -> None:
        super().__init__(f"No epic with id {epic_id}.")
        self.epic_id = epic_id


class NoStoryWithID(TrackerError):
    def __init__(self, story_id: int, *, epic_id: int | None = None) -> None:
        if epic_id is None:
            message = f"No story with id {story_id}."
        else:
            message = f"No story with id {story_id} in epic {epic_id}."
        super().__init__(message)
        self.story_id = story_id
        self.epic_id = epic_id


class TrackerStore:
    """Epic/story store with whole-state read-modify-write persistence.

    Every mutation reads the full state, validates the ids it touches, applies
    one change to that copy and writes the whole copy back. Validation errors
    are raised before anything is written.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    @classmethod
    def from_path(cls, path: Path) -> TrackerStore:
        return cls(JSONFileDatabase(path))

    @classmethod
    def in_memory(cls, state: DBState | None = None) -> TrackerStore:
        return cls(MemoryDatabase(state))

    def read_db(self) -> DBState:
        try:
            return self.database.read_db()
        except DatabaseError as exc:
            raise ReadFailure(exc.detail) from exc

    def _save(self, db_state: DBState) -> None:
        try:
            self.database.write_db(db_state)
        except DatabaseError as exc:
            logger.warning("write failed: %s", exc)
            raise WriteFailure(exc.detail) from exc

    def _epic(self, db_state: DBState, epic_id: int) -> Epic:
        epic = db_state.epics.get(epic_id)
        if epic is None:
            logger.warning("no epic with id %s", epic_id)
            raise NoEpicWithID(epic_id)
        return epic

    def create_epic(self, epic: Epic) -> int:
        db_state = self.read_db()

        item_id = db_state.last_item_id + 1
        db_state.epics[item_id] = epic
        db_state.last_item_id = item_id

        self._save(db_state)
        logger.info("created epic %s (%r)", item_id, epic.name)
        return item_id

    def create_story(self, story: Story, epic_id: int) -> int:
        db_state = self.read_db()
        epic = self._epic(db_state, epic_id)

        item_id = db_state.last_item_id + 1
        db_state.stories[item_id] = story
        epic.stories.append(item_id)
        db_state.last_item_id = item_id

        self._save(db_state)
        logger.info("created story %s in epic %s (%r)", item_id, epic_id, story.name)
        return item_id

    def delete_epic(self, epic_id: int) -> None:
        db_state = self.read_db()
        epic = self._epic(db_state, epic_id)

        for story_id in epic.stories:
            db_state.stories.pop(story_id, None)
        del db_state.epics[epic_id]

        self._save(db_state)
        logger.info("deleted epic %s with %d stories", epic_id, len(epic.stories))

    def delete_story(self, epic_id: int, story_id: int) -> None:
        db_state = self.read_db()
        epic = self._epic(db_state, epic_id)

        # Membership is checked against this epic only; the same id under
        # another epic does not count.
        if story_id not in epic.stories or story_id not in db_state.stories:
            logger.warning("no story with id %s in epic %s", story_id, epic_id)
            raise NoStoryWithID(story_id, epic_id=epic_id)

        del db_state.stories[story_id]
        epic.stories.remove(story_id)

        self._save(db_state)
        logger.info("deleted story %s from epic %s", story_id, epic_id)

    def update_epic_status(self, epic_id: int, status: Status) -> None:
        db_state = self.read_db()
        epic = self._epic(db_state, epic_id)

        epic.status = status

        self._save(db_state)
        logger.info("epic %s status -> %s", epic_id, status.label)

    def update_story_status(self, story_id: int, status: Status) -> None:
        db_state = self.read_db()
        story = db_state.stories.get(story_id)
        if story is None:
            logger.warning("no story with id %s", story_id)
            raise NoStoryWithID(story_id)

        story.status = status

        self._save(db_state)
        logger.info("story %s status -> %s", story_id, status.label)
