from __future__ import annotations

from .backend import Database, DatabaseError, JSONFileDatabase, MemoryDatabase
from .tracker import (
    NoEpicWithID,
    NoStoryWithID,
    ReadFailure,
    TrackerError,
    TrackerStore,
    WriteFailure,
)

__all__ = [
    "Database",
    "DatabaseError",
    "JSONFileDatabase",
    "MemoryDatabase",
    "NoEpicWithID",
    "NoStoryWithID",
    "ReadFailure",
    "TrackerError",
    "TrackerStore",
    "WriteFailure",
]
