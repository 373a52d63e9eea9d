from __future__ import annotations

import pytest

from epictrack.models import DBState, Epic, Status, Story
from epictrack.stores.backend import DatabaseError, MemoryDatabase
from epictrack.stores.tracker import (
    NoEpicWithID,
    NoStoryWithID,
    ReadFailure,
    TrackerStore,
    WriteFailure,
)


class _BrokenDatabase(MemoryDatabase):
    def __init__(self, *, fail_read: bool = False, fail_write: bool = False) -> None:
        super().__init__()
        self.fail_read = fail_read
        self.fail_write = fail_write

    def read_db(self) -> DBState:
        if self.fail_read:
            raise DatabaseError("read", None, "unreadable")
        return super().read_db()

    def write_db(self, db_state: DBState) -> None:
        if self.fail_write:
            raise DatabaseError("write", None, "disk full")
        super().write_db(db_state)


def test_create_epic_allocates_sequential_ids(store: TrackerStore) -> None:
    ids = [store.create_epic(Epic(f"epic {n}", "")) for n in range(4)]

    assert ids == [1, 2, 3, 4]
    db_state = store.read_db()
    assert db_state.last_item_id == 4
    assert db_state.epics[1] == Epic("epic 0", "")


def test_create_story_attaches_to_epic(store: TrackerStore) -> None:
    epic_id = store.create_epic(Epic("", ""))
    story = Story("", "")

    story_id = store.create_story(story, epic_id)

    db_state = store.read_db()
    assert story_id == 2
    assert db_state.last_item_id == 2
    assert db_state.epics[epic_id].stories == [2]
    assert db_state.stories[story_id] == story


def test_epic_and_story_ids_share_one_counter(store: TrackerStore) -> None:
    first = store.create_epic(Epic("a", ""))
    story_id = store.create_story(Story("s", ""), first)
    second = store.create_epic(Epic("b", ""))

    assert (first, story_id, second) == (1, 2, 3)
    db_state = store.read_db()
    assert set(db_state.epics).isdisjoint(db_state.stories)


def test_create_story_with_unknown_epic_leaves_state_untouched() -> None:
    database = MemoryDatabase()
    store = TrackerStore(database)
    store.create_epic(Epic("keep", ""))
    before = store.read_db().to_dict()
    writes = database.writes

    with pytest.raises(NoEpicWithID) as raised:
        store.create_story(Story("", ""), 999)

    assert raised.value.epic_id == 999
    assert store.read_db().to_dict() == before
    assert database.writes == writes


def test_delete_epic_cascades_to_its_stories_only(store: TrackerStore) -> None:
    doomed = store.create_epic(Epic("doomed", ""))
    doomed_a = store.create_story(Story("a", ""), doomed)
    doomed_b = store.create_story(Story("b", ""), doomed)
    kept = store.create_epic(Epic("kept", ""))
    kept_story = store.create_story(Story("c", ""), kept)

    store.delete_epic(doomed)

    db_state = store.read_db()
    assert doomed not in db_state.epics
    assert doomed_a not in db_state.stories
    assert doomed_b not in db_state.stories
    assert db_state.epics[kept].stories == [kept_story]
    assert kept_story in db_state.stories
    assert db_state.last_item_id == 5


def test_delete_epic_unknown_id(store: TrackerStore) -> None:
    with pytest.raises(NoEpicWithID):
        store.delete_epic(999)


def test_delete_story_scenario(store: TrackerStore) -> None:
    epic_id = store.create_epic(Epic("", ""))
    story_id = store.create_story(Story("", ""), epic_id)
    assert (epic_id, story_id) == (1, 2)
    assert store.read_db().epics[1].stories == [2]

    store.delete_story(1, 2)

    db_state = store.read_db()
    assert 2 not in db_state.stories
    assert db_state.epics[1].stories == []
    assert db_state.last_item_id == 2


def test_delete_story_keeps_order_of_remaining_stories(store: TrackerStore) -> None:
    epic_id = store.create_epic(Epic("", ""))
    ids = [store.create_story(Story(str(n), ""), epic_id) for n in range(3)]

    store.delete_story(epic_id, ids[1])

    assert store.read_db().epics[epic_id].stories == [ids[0], ids[2]]


def test_delete_story_unknown_epic(store: TrackerStore) -> None:
    epic_id = store.create_epic(Epic("", ""))
    story_id = store.create_story(Story("", ""), epic_id)

    with pytest.raises(NoEpicWithID):
        store.delete_story(999, story_id)
    assert story_id in store.read_db().stories


def test_delete_story_not_in_epic(store: TrackerStore) -> None:
    epic_id = store.create_epic(Epic("", ""))
    store.create_story(Story("", ""), epic_id)

    with pytest.raises(NoStoryWithID):
        store.delete_story(epic_id, 999)


def test_delete_story_listed_under_other_epic_is_rejected(store: TrackerStore) -> None:
    first = store.create_epic(Epic("first", ""))
    second = store.create_epic(Epic("second", ""))
    story_id = store.create_story(Story("", ""), second)
    before = store.read_db().to_dict()

    with pytest.raises(NoStoryWithID) as raised:
        store.delete_story(first, story_id)

    assert raised.value.epic_id == first
    assert store.read_db().to_dict() == before


def test_update_epic_status_only_touches_status(store: TrackerStore) -> None:
    epic_id = store.create_epic(Epic("name", "description"))
    story_id = store.create_story(Story("s", ""), epic_id)

    store.update_epic_status(epic_id, Status.CLOSED)

    epic = store.read_db().epics[epic_id]
    assert epic == Epic("name", "description", Status.CLOSED, [story_id])


def test_update_epic_status_unknown_id(store: TrackerStore) -> None:
    with pytest.raises(NoEpicWithID):
        store.update_epic_status(999, Status.CLOSED)


def test_update_story_status_only_touches_status(store: TrackerStore) -> None:
    epic_id = store.create_epic(Epic("", ""))
    story_id = store.create_story(Story("name", "description"), epic_id)

    store.update_story_status(story_id, Status.IN_PROGRESS)

    db_state = store.read_db()
    assert db_state.stories[story_id] == Story("name", "description", Status.IN_PROGRESS)
    assert db_state.epics[epic_id] == Epic("", "", Status.OPEN, [story_id])


def test_update_story_status_unknown_id_reports_missing_story(store: TrackerStore) -> None:
    with pytest.raises(NoStoryWithID) as raised:
        store.update_story_status(999, Status.CLOSED)
    assert raised.value.story_id == 999


def test_read_failure_is_wrapped() -> None:
    store = TrackerStore(_BrokenDatabase(fail_read=True))

    with pytest.raises(ReadFailure, match="unreadable"):
        store.read_db()
    with pytest.raises(ReadFailure):
        store.create_epic(Epic("", ""))


def test_write_failure_is_wrapped_and_nothing_is_committed() -> None:
    database = _BrokenDatabase(fail_write=True)
    store = TrackerStore(database)

    with pytest.raises(WriteFailure, match="disk full") as raised:
        store.create_epic(Epic("", ""))

    assert isinstance(raised.value.__cause__, DatabaseError)
    assert store.read_db() == DBState()


def test_reads_do_not_alias_stored_state(store: TrackerStore) -> None:
    epic_id = store.create_epic(Epic("", ""))

    snapshot = store.read_db()
    snapshot.epics[epic_id].status = Status.CLOSED

    assert store.read_db().epics[epic_id].status is Status.OPEN
