from __future__ import annotations

import json
import logging
import sqlite3
import tomllib
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path

from .models import SavedFileRecord
from .text_utils import normalize_text

logger = logging.getLogger(__name__)

PYPROJECT_PATH = Path(__file__).resolve().parents[2] / "pyproject.toml"
_DROP_ORDER = ("view", "trigger", "index", "table")


@lru_cache(maxsize=1)
def _project_version() -> str:
    project = tomllib.loads(PYPROJECT_PATH.read_text(encoding="utf-8"))["project"]
    version = str(project.get("version", "")).strip()
    if not version:
        raise RuntimeError(f"project.version missing from {PYPROJECT_PATH}")
    return version


@contextmanager
def _open_db(db_path: Path) -> Iterator[sqlite3.Connection]:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        _init_schema(conn)
        yield conn
    finally:
        conn.close()


def _drop_all_user_objects(conn: sqlite3.Connection) -> None:
    objects = conn.execute(
        "SELECT type, name FROM sqlite_master WHERE name NOT LIKE 'sqlite_%'"
    ).fetchall()
    for obj_type in _DROP_ORDER:
        for row in objects:
            if row["type"] == obj_type:
                conn.execute(f'DROP {obj_type.upper()} IF EXISTS "{row["name"]}"')


def _ensure_versioned_db(conn: sqlite3.Connection) -> None:
    expected_version = _project_version()
    try:
        row = conn.execute(
            """
            SELECT value
            FROM filelibrarian
            WHERE key = 'version'
            """
        ).fetchone()
    except sqlite3.Error:
        row = None
    if row is None or str(row["value"]) != expected_version:
        logger.info("Resetting state DB schema to version %s", expected_version)
        _drop_all_user_objects(conn)
        conn.execute(
            """
            CREATE TABLE filelibrarian (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """
        )
        conn.execute(
            "INSERT INTO filelibrarian(key, value) VALUES ('version', ?)",
            (expected_version,),
        )


def _init_schema(conn: sqlite3.Connection) -> None:
    _ensure_versioned_db(conn)
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS tracked_files (
            path TEXT PRIMARY KEY,
            tags_json TEXT NOT NULL DEFAULT '[]',
            content_json TEXT,
            sort_position INTEGER NOT NULL DEFAULT 0,
            updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
        """
    )
    conn.commit()


def _row_values(record: SavedFileRecord) -> tuple[str, str, str | None, int]:
    content_json = (
        json.dumps(record.content, ensure_ascii=True)
        if record.content is not None
        else None
    )
    return (
        normalize_text(record.path),
        json.dumps(list(record.tags), ensure_ascii=True),
        content_json,
        record.sort_position,
    )


def save_library(db_path: Path, records: list[SavedFileRecord]) -> None:
    with _open_db(db_path) as conn, conn:
        conn.execute("DELETE FROM tracked_files")
        conn.executemany(
            """
            INSERT INTO tracked_files (path, tags_json, content_json, sort_position)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(path) DO UPDATE SET
                tags_json = excluded.tags_json,
                content_json = excluded.content_json,
                sort_position = excluded.sort_position,
                updated_at = CURRENT_TIMESTAMP
            """,
            [_row_values(record) for record in records],
        )
    logger.info("Saved %d tracked files to %s", len(records), db_path)


def load_library(db_path: Path) -> list[SavedFileRecord]:
    with _open_db(db_path) as conn:
        rows = conn.execute(
            """
            SELECT path, tags_json, content_json, sort_position
            FROM tracked_files
            ORDER BY sort_position, path
            """
        ).fetchall()
    return [
        SavedFileRecord(
            path=str(row["path"]),
            tags=json.loads(row["tags_json"] or "[]"),
            content=json.loads(row["content_json"])
            if row["content_json"] is not None
            else None,
            sort_position=int(row["sort_position"]),
        )
        for row in rows
    ]
