from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomllib

from .ui import OUTPUT_CHOICES

CONFIG_FILE_NAME = "epictrack.toml"
DB_FILE_NAME = "db.json"
DB_ENV_VAR = "EPICTRACK_DB"
STATE_DIR_ENV_VAR = "EPICTRACK_STATE_DIR"
STATE_DIR_NAME = ".epictrack"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigValidationError(ValueError):
    pass


@dataclass(frozen=True)
class EpictrackFileConfig:
    state_dir: Path
    path: Path
    db_path: Path | None = None
    output: str | None = None
    log_level: str | None = None


def _as_str(value: object, *, field: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigValidationError(f"{field} must be a string")
    stripped = value.strip()
    if not stripped:
        return None
    return stripped


def find_state_dir(cwd: Path | None = None, *, env: Mapping[str, str] | None = None) -> Path:
    """Locate the directory holding epictrack.toml, the default db.json and the log.

    EPICTRACK_STATE_DIR wins. Otherwise a tracker started anywhere below a
    project reuses that project's nearest .epictrack directory, and a fresh
    tree falls back to cwd/.epictrack. Nothing is created here; the database
    and log writers create their parent directories on first write.
    """
    source_env = os.environ if env is None else env
    raw = source_env.get(STATE_DIR_ENV_VAR, "").strip()
    if raw:
        return Path(raw).expanduser().resolve()
    start = (cwd or Path.cwd()).resolve()
    found = next(
        (base / STATE_DIR_NAME for base in (start, *start.parents) if (base / STATE_DIR_NAME).is_dir()),
        None,
    )
    return found or start / STATE_DIR_NAME


def _parse(raw: dict[str, Any], *, state_dir: Path, path: Path) -> EpictrackFileConfig:
    db_raw = _as_str(raw.get("db_path"), field="db_path")
    db_path: Path | None = None
    if db_raw is not None:
        db_path = Path(db_raw).expanduser()
        if not db_path.is_absolute():
            db_path = state_dir.parent / db_path

    output = _as_str(raw.get("output"), field="output")
    if output is not None:
        output = output.lower()
        if output not in OUTPUT_CHOICES:
            raise ConfigValidationError(
                f"output must be one of: {', '.join(OUTPUT_CHOICES)}"
            )

    log_level = _as_str(raw.get("log_level"), field="log_level")
    if log_level is not None:
        log_level = log_level.upper()
        if log_level not in LOG_LEVELS:
            raise ConfigValidationError(
                f"log_level must be one of: {', '.join(LOG_LEVELS)}"
            )

    return EpictrackFileConfig(
        state_dir=state_dir,
        path=path,
        db_path=db_path,
        output=output,
        log_level=log_level,
    )


def load_config(state_dir: Path) -> EpictrackFileConfig:
    """Read <state_dir>/epictrack.toml; a missing file yields defaults."""
    path = state_dir / CONFIG_FILE_NAME
    if not path.is_file():
        return EpictrackFileConfig(state_dir=state_dir, path=path)
    try:
        raw = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigValidationError(f"invalid TOML in {path}: {exc}") from exc
    try:
        return _parse(raw, state_dir=state_dir, path=path)
    except ConfigValidationError as exc:
        raise ConfigValidationError(f"{path}: {exc}") from exc


def resolve_db_path(
    requested: str | None,
    config: EpictrackFileConfig,
    *,
    env: Mapping[str, str] | None = None,
) -> Path:
    """Pick the database file: --db flag, then EPICTRACK_DB, then config, then default."""
    if requested:
        return Path(requested).expanduser()
    source_env = os.environ if env is None else env
    raw = source_env.get(DB_ENV_VAR, "").strip()
    if raw:
        return Path(raw).expanduser()
    if config.db_path is not None:
        return config.db_path
    return config.state_dir / DB_FILE_NAME
