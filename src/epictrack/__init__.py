from __future__ import annotations

from typing import TYPE_CHECKING

__all__ = [
    "__version__",
    "Navigator",
    "Prompts",
    "TrackerStore",
]

__version__ = "0.1.0"

if TYPE_CHECKING:
    from .navigator import Navigator, Prompts
    from .stores.tracker import TrackerStore


def __getattr__(name: str):
    if name in {"Navigator", "Prompts"}:
        from .navigator import Navigator, Prompts

        return {"Navigator": Navigator, "Prompts": Prompts}[name]
    if name == "TrackerStore":
        from .stores.tracker import TrackerStore

        return TrackerStore
    raise AttributeError(f"module 'epictrack' has no attribute {name!r}")
