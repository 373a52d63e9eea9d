from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .models import (
    Action,
    CreateEpic,
    CreateStory,
    DeleteEpic,
    DeleteStory,
    Epic,
    Exit,
    NavigateToEpicDetail,
    NavigateToPreviousPage,
    NavigateToStoryDetail,
    Status,
    Story,
    UpdateEpicStatus,
    UpdateStoryStatus,
)
from .pages import EpicDetail, HomePage, Page, StoryDetail
from .stores.tracker import TrackerError, TrackerStore

logger = logging.getLogger(__name__)


class NavigationFailure(RuntimeError):
    def __init__(self, message: str, *, cause: TrackerError | None = None) -> None:
        super().__init__(message)
        self.cause = cause


@dataclass
class Prompts:
    """Blocking user prompts the navigator calls while handling an action."""

    gather_new_epic: Callable[[], Epic]
    gather_new_story: Callable[[], Story]
    confirm_epic_deletion: Callable[[], bool]
    confirm_story_deletion: Callable[[], bool]
    gather_new_status: Callable[[], Status | None]


class Navigator:
    def __init__(self, store: TrackerStore, prompts: Prompts) -> None:
        self.store = store
        self.prompts = prompts
        self.pages: list[Page] = [HomePage(store)]

    def current_page(self) -> Page | None:
        return self.pages[-1] if self.pages else None

    def page_count(self) -> int:
        return len(self.pages)

    def handle_action(self, action: Action) -> None:
        try:
            self._apply(action)
        except TrackerError as exc:
            logger.warning("%s failed: %s", type(action).__name__, exc)
            raise NavigationFailure(str(exc), cause=exc) from exc

    def _pop(self) -> None:
        # Home is never popped by navigation; only Exit empties the stack.
        if len(self.pages) > 1:
            self.pages.pop()

    def _apply(self, action: Action) -> None:
        if isinstance(action, NavigateToEpicDetail):
            self.pages.append(EpicDetail(self.store, action.epic_id))
        elif isinstance(action, NavigateToStoryDetail):
            self.pages.append(StoryDetail(self.store, action.epic_id, action.story_id))
        elif isinstance(action, NavigateToPreviousPage):
            self._pop()
        elif isinstance(action, Exit):
            self.pages.clear()
        elif isinstance(action, CreateEpic):
            self.store.create_epic(self.prompts.gather_new_epic())
        elif isinstance(action, CreateStory):
            self.store.create_story(self.prompts.gather_new_story(), action.epic_id)
        elif isinstance(action, DeleteEpic):
            if self.prompts.confirm_epic_deletion():
                self.store.delete_epic(action.epic_id)
                self._pop()
        elif isinstance(action, DeleteStory):
            if self.prompts.confirm_story_deletion():
                self.store.delete_story(action.epic_id, action.story_id)
                self._pop()
        elif isinstance(action, UpdateEpicStatus):
            status = self.prompts.gather_new_status()
            if status is not None:
                self.store.update_epic_status(action.epic_id, status)
        elif isinstance(action, UpdateStoryStatus):
            status = self.prompts.gather_new_status()
            if status is not None:
                self.store.update_story_status(action.story_id, status)
        else:
            raise NavigationFailure(f"unknown action: {action!r}")
        logger.debug("%s -> %d page(s)", type(action).__name__, len(self.pages))
