from __future__ import annotations

from pathlib import Path

from filelibrarian.file_record import FileRecord


def write_lines(path: Path, lines: list[str], *, trailing_newline: bool = True) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    text = "\n".join(lines)
    if lines and trailing_newline:
        text += "\n"
    path.write_text(text, encoding="utf-8")
    return path


def mk_record(
    tmp_path: Path,
    name: str,
    lines: list[str],
    *,
    tags: tuple[str, ...] = (),
) -> FileRecord:
    record = FileRecord(write_lines(tmp_path / name, lines))
    for tag in tags:
        record.add_tag(tag)
    return record
