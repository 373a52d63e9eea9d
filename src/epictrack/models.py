from __future__ import annotations

import copy
import enum
from dataclasses import dataclass, field
from collections.abc import Callable
from typing import Any, TypeVar, Union

T = TypeVar("T")


class Status(enum.Enum):
    OPEN = "Open"
    IN_PROGRESS = "InProgress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    def __str__(self) -> str:
        return self.label

    @classmethod
    def from_choice(cls, raw: str) -> Status | None:
        """Map a menu token ("1".."4") to a status; anything else cancels."""
        return _STATUS_CHOICES.get(raw.strip())


_STATUS_LABELS = {
    Status.OPEN: "OPEN",
    Status.IN_PROGRESS: "IN PROGRESS",
    Status.RESOLVED: "RESOLVED",
    Status.CLOSED: "CLOSED",
}
_STATUS_CHOICES = {
    "1": Status.OPEN,
    "2": Status.IN_PROGRESS,
    "3": Status.RESOLVED,
    "4": Status.CLOSED,
}


@dataclass
class Epic:
    name: str
    description: str
    status: Status = Status.OPEN
    stories: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "stories": list(self.stories),
        }

    @classmethod
    def from_dict(cls, raw: object) -> Epic:
        row = _as_record(raw, kind="epic")
        stories = row.get("stories")
        if not isinstance(stories, list):
            raise ValueError("epic stories must be a list of ids")
        return cls(
            name=_as_text(row.get("name"), field="epic name"),
            description=_as_text(row.get("description"), field="epic description"),
            status=_as_status(row.get("status")),
            stories=[_as_id(item) for item in stories],
        )


@dataclass
class Story:
    name: str
    description: str
    status: Status = Status.OPEN

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, raw: object) -> Story:
        row = _as_record(raw, kind="story")
        return cls(
            name=_as_text(row.get("name"), field="story name"),
            description=_as_text(row.get("description"), field="story description"),
            status=_as_status(row.get("status")),
        )


@dataclass
class DBState:
    last_item_id: int = 0
    epics: dict[int, Epic] = field(default_factory=dict)
    stories: dict[int, Story] = field(default_factory=dict)

    def copy(self) -> DBState:
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "last_item_id": self.last_item_id,
            "epics": {str(key): epic.to_dict() for key, epic in self.epics.items()},
            "stories": {str(key): story.to_dict() for key, story in self.stories.items()},
        }

    @classmethod
    def from_dict(cls, raw: object) -> DBState:
        if not isinstance(raw, dict):
            raise ValueError("database state must be a JSON object")
        for key in ("last_item_id", "epics", "stories"):
            if key not in raw:
                raise ValueError(f"database state is missing {key!r}")
        epics = raw["epics"]
        stories = raw["stories"]
        if not isinstance(epics, dict) or not isinstance(stories, dict):
            raise ValueError("epics and stories must be JSON objects")
        db_state = cls(
            last_item_id=_as_id(raw["last_item_id"]),
            epics=_keyed(epics, Epic.from_dict, kind="epic"),
            stories=_keyed(stories, Story.from_dict, kind="story"),
        )
        db_state.check_consistency()
        return db_state

    def check_consistency(self) -> None:
        """Raise ValueError unless ids are unique, allocated and every story reference resolves."""
        shared = self.epics.keys() & self.stories.keys()
        if shared:
            raise ValueError(f"ids used by both an epic and a story: {sorted(shared)}")
        highest = max((*self.epics, *self.stories), default=0)
        if highest > self.last_item_id:
            raise ValueError(
                f"last_item_id {self.last_item_id} is below existing id {highest}"
            )
        for epic_id, epic in self.epics.items():
            dangling = [story_id for story_id in epic.stories if story_id not in self.stories]
            if dangling:
                raise ValueError(f"epic {epic_id} lists missing stories: {dangling}")


def _keyed(rows: dict[str, Any], parse: Callable[[object], T], *, kind: str) -> dict[int, T]:
    parsed: dict[int, T] = {}
    for key, value in rows.items():
        item_id = _as_id(key)
        if item_id in parsed:
            raise ValueError(f"duplicate {kind} id {item_id} (key {key!r})")
        parsed[item_id] = parse(value)
    return parsed


def _as_record(raw: object, *, kind: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise ValueError(f"{kind} record must be a JSON object")
    return raw


def _as_text(value: object, *, field: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string")
    return value


def _as_status(value: object) -> Status:
    try:
        return Status(value)
    except ValueError:
        raise ValueError(f"invalid status: {value!r}") from None


def _as_id(value: object) -> int:
    # JSON object keys arrive as strings; list entries and counters as ints.
    if isinstance(value, bool):
        raise ValueError(f"invalid item id: {value!r}")
    if isinstance(value, str):
        if not value.isdigit():
            raise ValueError(f"invalid item id: {value!r}")
        return int(value)
    if isinstance(value, int) and value >= 0:
        return value
    raise ValueError(f"invalid item id: {value!r}")


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CreateEpic:
    pass


@dataclass(frozen=True)
class NavigateToEpicDetail:
    epic_id: int


@dataclass(frozen=True)
class UpdateEpicStatus:
    epic_id: int


@dataclass(frozen=True)
class DeleteEpic:
    epic_id: int


@dataclass(frozen=True)
class CreateStory:
    epic_id: int


@dataclass(frozen=True)
class NavigateToStoryDetail:
    epic_id: int
    story_id: int


@dataclass(frozen=True)
class UpdateStoryStatus:
    story_id: int


@dataclass(frozen=True)
class DeleteStory:
    epic_id: int
    story_id: int


@dataclass(frozen=True)
class NavigateToPreviousPage:
    pass


@dataclass(frozen=True)
class Exit:
    pass


Action = Union[
    CreateEpic,
    NavigateToEpicDetail,
    UpdateEpicStatus,
    DeleteEpic,
    CreateStory,
    NavigateToStoryDetail,
    UpdateStoryStatus,
    DeleteStory,
    NavigateToPreviousPage,
    Exit,
]
