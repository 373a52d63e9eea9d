"""Whole-state persistence backends for the tracker store."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Literal, Protocol

from ..models import DBState

DatabaseErrorKind = Literal["read", "write"]


class DatabaseError(RuntimeError):
    def __init__(self, kind: DatabaseErrorKind, path: Path | None, detail: str) -> None:
        target = str(path) if path is not None else "database"
        super().__init__(f"failed to {kind} {target}: {detail}")
        self.kind = kind
        self.path = path
        self.detail = detail


class Database(Protocol):
    def read_db(self) -> DBState: ...

    def write_db(self, db_state: DBState) -> None: ...


class JSONFileDatabase:
    """Stores the full tracker state as one JSON document."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def initialize(self) -> bool:
        """Write an empty state if the file does not exist. Returns True if created."""
        if self.path.exists():
            return False
        self.write_db(DBState())
        return True

    def read_db(self) -> DBState:
        try:
            raw_content = self.path.read_bytes()
        except OSError as exc:
            raise DatabaseError("read", self.path, str(exc)) from exc
        try:
            payload = json.loads(raw_content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DatabaseError("read", self.path, f"invalid JSON: {exc}") from exc
        try:
            return DBState.from_dict(payload)
        except ValueError as exc:
            raise DatabaseError("read", self.path, str(exc)) from exc

    def write_db(self, db_state: DBState) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(db_state.to_dict(), f, ensure_ascii=False, indent=2)
                f.write("\n")
            os.replace(tmp, self.path)
        except OSError as exc:
            tmp.unlink(missing_ok=True)
            raise DatabaseError("write", self.path, str(exc)) from exc


class MemoryDatabase:
    """Keeps the last written state in memory; used by tests."""

    def __init__(self, state: DBState | None = None) -> None:
        self._state = state.copy() if state is not None else DBState()
        self.writes = 0

    def read_db(self) -> DBState:
        return self._state.copy()

    def write_db(self, db_state: DBState) -> None:
        self._state = db_state.copy()
        self.writes += 1
