from __future__ import annotations

import pytest

from filelibrarian.models import CompareResult, CompareState, SavedFileRecord, SizeUnit


def test_summary_identical() -> None:
    result = CompareResult(size_diff=0, line_count_diff=0)
    assert result.state == CompareState.IDENTICAL
    assert result.summary() == "MATCH - Files identical."


def test_summary_content_match_when_only_line_count_differs() -> None:
    result = CompareResult(size_diff=0, line_count_diff=2)
    # Size decides the first outcome; line counts alone do not.
    assert result.state == CompareState.IDENTICAL

    result = CompareResult(size_diff=-3, line_count_diff=-1)
    assert result.state == CompareState.CONTENT_MATCH
    assert result.summary() == (
        "CONTENT MATCH - file sizes differ. Size diff = -3, Line diff = -1"
    )


def test_summary_different_uses_one_based_lines() -> None:
    result = CompareResult(
        size_diff=0, line_count_diff=0, different_line_start=0, different_line_end=4
    )
    assert result.state == CompareState.DIFFERENT
    assert result.summary() == (
        "DIFFERENT - First different line from start = 1, "
        "Last different line from end = 5"
    )


def test_summary_different_without_end() -> None:
    result = CompareResult(size_diff=2, line_count_diff=-1, different_line_start=0)
    assert result.summary().endswith("Last different line from end = n/a")


def test_end_without_start_is_rejected() -> None:
    with pytest.raises(ValueError):
        CompareResult(size_diff=0, line_count_diff=0, different_line_end=3)


def test_size_unit_parse() -> None:
    assert SizeUnit.parse("KB") == SizeUnit.KB
    assert SizeUnit.parse(" gb ") == SizeUnit.GB
    assert SizeUnit.parse(SizeUnit.MB) == SizeUnit.MB
    assert [unit.step for unit in SizeUnit] == [0, 1, 2, 3]
    with pytest.raises(ValueError, match="Unknown size unit"):
        SizeUnit.parse("tb")


def test_saved_record_dict_round_trip() -> None:
    saved = SavedFileRecord(
        path="/data/a.txt", tags=["x", "y"], content=["1", ""], sort_position=3
    )
    assert SavedFileRecord.from_dict(saved.to_dict()) == saved


def test_saved_record_defaults() -> None:
    saved = SavedFileRecord.from_dict({"path": "/data/a.txt"})
    assert saved.tags == []
    assert saved.content is None
    assert saved.sort_position == 0


@pytest.mark.parametrize("payload", [{}, {"path": ""}, {"path": None, "tags": ["x"]}])
def test_saved_record_requires_path(payload) -> None:
    with pytest.raises(ValueError, match="missing its path"):
        SavedFileRecord.from_dict(payload)
