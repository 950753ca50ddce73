from __future__ import annotations

import sqlite3

import pytest

from filelibrarian.models import SavedFileRecord
from filelibrarian.state_db import (
    _open_db,
    _project_version,
    load_library,
    save_library,
)


def _records() -> list[SavedFileRecord]:
    return [
        SavedFileRecord(path="/data/b.txt", tags=["x"], content=None, sort_position=0),
        SavedFileRecord(
            path="/data/a.txt",
            tags=["y", "z"],
            content=["café", "", "end"],
            sort_position=1,
        ),
    ]


def test_save_and_load_round_trip(tmp_path) -> None:
    db_path = tmp_path / "nested" / "state.sqlite3"
    save_library(db_path, _records())

    assert load_library(db_path) == _records()


def test_save_replaces_previous_set(tmp_path) -> None:
    db_path = tmp_path / "state.sqlite3"
    save_library(db_path, _records())
    save_library(db_path, _records()[:1])

    loaded = load_library(db_path)
    assert [record.path for record in loaded] == ["/data/b.txt"]


def test_load_from_new_db_is_empty(tmp_path) -> None:
    assert load_library(tmp_path / "state.sqlite3") == []


def test_save_bootstraps_versioned_db(tmp_path) -> None:
    db_path = tmp_path / "state.sqlite3"
    save_library(db_path, _records())

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        version = conn.execute(
            "SELECT value FROM filelibrarian WHERE key = 'version'"
        ).fetchone()
        assert version is not None
        assert str(version["value"]) == _project_version()
    finally:
        conn.close()


def test_load_reinitializes_on_version_mismatch(tmp_path) -> None:
    db_path = tmp_path / "state.sqlite3"
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(
            "CREATE TABLE filelibrarian (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
        )
        conn.execute(
            "INSERT INTO filelibrarian(key, value) VALUES ('version', '0.0.0-test')"
        )
        conn.execute("CREATE TABLE tracked_files (path TEXT PRIMARY KEY)")
        conn.execute("INSERT INTO tracked_files(path) VALUES ('/old')")
        conn.commit()
    finally:
        conn.close()

    assert load_library(db_path) == []

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        cols = {
            str(row["name"])
            for row in conn.execute("PRAGMA table_info(tracked_files)").fetchall()
        }
        assert {"tags_json", "content_json", "sort_position"} <= cols
    finally:
        conn.close()


def test_open_db_closes_connection(tmp_path) -> None:
    with _open_db(tmp_path / "state.sqlite3") as conn:
        assert conn.execute("SELECT COUNT(*) FROM tracked_files").fetchone()[0] == 0

    with pytest.raises(sqlite3.ProgrammingError):
        conn.execute("SELECT 1")
