from __future__ import annotations

import os
from pathlib import Path

CACHE_FOLDERS = {"__pycache__", ".pytest_cache", ".cache", ".ruff_cache"}
EXCLUDED_FOLDERS = {"node_modules", ".tox", ".git"} | CACHE_FOLDERS
EXCLUDED_FILE_NAMES = {".DS_Store"}

STATE_DB_ENV_VAR = "FILELIBRARIAN_STATE_DB"
DEFAULT_STATE_DB = Path("~/.filelibrarian/library.sqlite3")


def default_state_db_path() -> Path:
    override = os.environ.get(STATE_DB_ENV_VAR, "").strip()
    path = Path(override) if override else DEFAULT_STATE_DB
    return path.expanduser().resolve()
