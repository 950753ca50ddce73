from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from .file_record import FileRecord, absolute_path
from .models import SavedFileRecord
from .scanner_local import LocalScanner


@dataclass(frozen=True)
class LibraryStatus:
    files: int
    directories: int


def _key(path: str | Path) -> str:
    return str(absolute_path(path))


class Library:
    """The working set of tracked files, keyed by absolute path."""

    def __init__(self, records: Iterable[FileRecord] = ()) -> None:
        self._records: dict[str, FileRecord] = {}
        for record in records:
            self._records[record.key] = record

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self._records.values())

    def __contains__(self, path: object) -> bool:
        if isinstance(path, FileRecord):
            return path.key in self._records
        if isinstance(path, (str, Path)):
            return _key(path) in self._records
        return False

    def get(self, path: str | Path) -> FileRecord | None:
        return self._records.get(_key(path))

    def add(self, path: str | Path) -> FileRecord:
        key = _key(path)
        record = self._records.get(key)
        if record is None:
            record = FileRecord(key)
            record.last_sort_position = self._next_position()
            self._records[key] = record
        return record

    def _next_position(self) -> int:
        return max((record.last_sort_position for record in self), default=-1) + 1

    def add_tree(self, root: Path) -> list[FileRecord]:
        return [self.add(path) for path in LocalScanner(root).scan()]

    def drop(self, path: str | Path) -> bool:
        return self._records.pop(_key(path), None) is not None

    def with_tag(self, tag: str) -> list[FileRecord]:
        return [record for record in self.sorted_by_position() if record.has_tag(tag)]

    def matching_filename(
        self, substring: str, ignore_case: bool = False
    ) -> list[FileRecord]:
        return [
            record
            for record in self.sorted_by_position()
            if record.matches_filename(substring, ignore_case=ignore_case)
        ]

    def containing(self, substring: str, ignore_case: bool = False) -> list[FileRecord]:
        return [
            record
            for record in self.sorted_by_position()
            if record.content_contains(substring, ignore_case=ignore_case)
        ]

    def sorted_by_position(self) -> list[FileRecord]:
        return sorted(self, key=lambda record: (record.last_sort_position, record.key))

    def status(self) -> LibraryStatus:
        directories = {record.directory for record in self}
        return LibraryStatus(files=len(self._records), directories=len(directories))

    def status_line(self) -> str:
        status = self.status()
        return (
            f"Current list contains '{status.files}' files "
            f"in '{status.directories}' directories."
        )

    def to_saved(self) -> list[SavedFileRecord]:
        return [record.to_saved() for record in self.sorted_by_position()]

    @classmethod
    def from_saved(cls, saved: Iterable[SavedFileRecord]) -> Library:
        return cls(FileRecord.from_saved(item) for item in saved)
