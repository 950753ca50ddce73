from __future__ import annotations

import logging
import os
from pathlib import Path

from .compare import compare_lines
from .models import CompareResult, LoadState, SavedFileRecord, SizeUnit

logger = logging.getLogger(__name__)


def absolute_path(path: str | Path) -> Path:
    """Make `path` absolute without following symlinks."""
    return Path(os.path.abspath(Path(path).expanduser()))


class FileRecord:
    """A tracked file with lazily cached size and content, tags and compare history."""

    def __init__(self, path: str | Path) -> None:
        self.path = absolute_path(path)
        self.last_sort_position = 0
        self.compare_results: dict[str, CompareResult] = {}
        self._tags: list[str] = []
        self._size: int | None = None
        self._content: list[str] | None = None
        self._load_state = LoadState.NOT_LOADED

    def __repr__(self) -> str:
        return f"FileRecord({str(self.path)!r})"

    @property
    def key(self) -> str:
        return str(self.path)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def directory(self) -> Path:
        return self.path.parent

    # Size

    @property
    def size_bytes(self) -> int:
        if self._size is None:
            try:
                self._size = self.path.stat().st_size
            except FileNotFoundError:
                raise FileNotFoundError(f"Could not stat file '{self.path}'")
            logger.debug("Read size of %s: %d bytes", self.path, self._size)
        return self._size

    def size_in(self, unit: SizeUnit | str = SizeUnit.BYTES) -> float:
        resolved = SizeUnit.parse(unit)
        return self.size_bytes / (1024**resolved.step)

    # Tagging

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(self._tags)

    def has_tag(self, tag: str) -> bool:
        return tag in self._tags

    def add_tag(self, tag: str) -> None:
        if not self.has_tag(tag):
            self._tags.append(tag)

    def remove_tag(self, tag: str) -> bool:
        if not self.has_tag(tag):
            return False
        self._tags.remove(tag)
        return True

    # Content

    @property
    def load_state(self) -> LoadState:
        return self._load_state

    @property
    def content(self) -> tuple[str, ...]:
        return tuple(self._ensure_content())

    def _ensure_content(self) -> list[str]:
        if self._load_state == LoadState.LOADED and self._content is not None:
            return self._content
        if self._load_state == LoadState.FAILED:
            raise FileNotFoundError(f"Could not open file '{self.path}'")

        if not self.path.is_file():
            self._load_state = LoadState.FAILED
            raise FileNotFoundError(f"Could not open file '{self.path}'")
        text = self.path.read_text(encoding="utf-8", errors="replace")
        # Newlines are already universal here; other separators stay in the line.
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        self._content = lines
        self._load_state = LoadState.LOADED
        logger.debug("Loaded %d lines from %s", len(self._content), self.path)
        return self._content

    def compare_with(self, other: FileRecord, ignore_empty_lines: bool = True) -> str:
        this_content = self._ensure_content()
        other_content = other._ensure_content()

        start, end = compare_lines(
            this_content, other_content, ignore_empty_lines=ignore_empty_lines
        )
        result = CompareResult(
            size_diff=self.size_bytes - other.size_bytes,
            line_count_diff=len(this_content) - len(other_content),
            different_line_start=start,
            different_line_end=end,
        )
        self.compare_results[other.key] = result
        logger.debug("Compared %s with %s: %s", self.path, other.path, result)
        return result.summary()

    def last_compare_result(self, other: FileRecord) -> CompareResult | None:
        return self.compare_results.get(other.key)

    # Filtering

    def matches_filename(self, substring: str, ignore_case: bool = False) -> bool:
        if ignore_case:
            return substring.casefold() in self.name.casefold()
        return substring in self.name

    def content_contains(self, substring: str, ignore_case: bool = False) -> bool:
        lines = self._ensure_content()
        if ignore_case:
            needle = substring.casefold()
            return any(needle in line.casefold() for line in lines)
        return any(substring in line for line in lines)

    # Persistence

    def to_saved(self) -> SavedFileRecord:
        return SavedFileRecord(
            path=self.key,
            tags=list(self._tags),
            content=list(self._content) if self._content is not None else None,
            sort_position=self.last_sort_position,
        )

    @classmethod
    def from_saved(cls, saved: SavedFileRecord) -> FileRecord:
        if not saved.path:
            raise ValueError("Saved file record is missing its path")
        record = cls(saved.path)
        for tag in saved.tags:
            record.add_tag(tag)
        if saved.content is not None:
            record._content = list(saved.content)
            record._load_state = LoadState.LOADED
        record.last_sort_position = saved.sort_position
        return record
