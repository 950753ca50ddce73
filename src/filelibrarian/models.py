from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class SizeUnit(str, Enum):
    BYTES = "bytes"
    KB = "kb"
    MB = "mb"
    GB = "gb"

    @property
    def step(self) -> int:
        return _UNIT_STEPS[self]

    @classmethod
    def parse(cls, value: SizeUnit | str) -> SizeUnit:
        if isinstance(value, SizeUnit):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(unit.value for unit in cls)
            raise ValueError(f"Unknown size unit {value!r} (expected one of: {choices})")


_UNIT_STEPS = {
    SizeUnit.BYTES: 0,
    SizeUnit.KB: 1,
    SizeUnit.MB: 2,
    SizeUnit.GB: 3,
}


class LoadState(str, Enum):
    NOT_LOADED = "not_loaded"
    LOADED = "loaded"
    FAILED = "failed"


class CompareState(str, Enum):
    IDENTICAL = "identical"
    CONTENT_MATCH = "content_match"
    DIFFERENT = "different"


@dataclass(frozen=True)
class CompareResult:
    size_diff: int
    line_count_diff: int
    different_line_start: int | None = None
    different_line_end: int | None = None

    def __post_init__(self) -> None:
        if self.different_line_start is None and self.different_line_end is not None:
            raise ValueError("different_line_end requires different_line_start")

    @property
    def state(self) -> CompareState:
        lines_match = (
            self.different_line_start is None and self.different_line_end is None
        )
        if lines_match and self.size_diff == 0:
            return CompareState.IDENTICAL
        if lines_match:
            return CompareState.CONTENT_MATCH
        return CompareState.DIFFERENT

    def summary(self) -> str:
        state = self.state
        if state == CompareState.IDENTICAL:
            return "MATCH - Files identical."
        if state == CompareState.CONTENT_MATCH:
            return (
                "CONTENT MATCH - file sizes differ. "
                f"Size diff = {self.size_diff}, Line diff = {self.line_count_diff}"
            )
        return (
            "DIFFERENT - First different line from start = "
            f"{_line_number(self.different_line_start)}, "
            f"Last different line from end = {_line_number(self.different_line_end)}"
        )


def _line_number(index: int | None) -> str:
    return "n/a" if index is None else str(index + 1)


@dataclass
class SavedFileRecord:
    """Plain shape of a tracked file as handed to persistence."""

    path: str
    tags: list[str] = field(default_factory=list)
    content: list[str] | None = None
    sort_position: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "tags": list(self.tags),
            "content": list(self.content) if self.content is not None else None,
            "sort_position": self.sort_position,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> SavedFileRecord:
        path = data.get("path")
        if not isinstance(path, str) or not path:
            raise ValueError("Saved file record is missing its path")
        tags = data.get("tags") or []
        content = data.get("content")
        return cls(
            path=path,
            tags=[str(tag) for tag in tags],
            content=[str(line) for line in content] if content is not None else None,
            sort_position=int(data.get("sort_position") or 0),
        )
