from __future__ import annotations

from collections.abc import Sequence


def _is_empty(line: str) -> bool:
    return not line


def find_divergence(
    this_lines: Sequence[str],
    other_lines: Sequence[str],
    *,
    from_start: bool,
    ignore_empty_lines: bool = True,
) -> int | None:
    """Return the index in `this_lines` where the two sequences stop matching.

    Scans forward from the first line when `from_start` is set, otherwise
    backward from the last line. Empty lines are stepped over independently on
    each side when `ignore_empty_lines` is set. Returns None when either side
    runs out of lines before a mismatch is seen.
    """
    if from_start:
        step = 1
        this_idx, other_idx = 0, 0
        this_end, other_end = len(this_lines), len(other_lines)
    else:
        step = -1
        this_idx, other_idx = len(this_lines) - 1, len(other_lines) - 1
        this_end, other_end = -1, -1

    while this_idx != this_end and other_idx != other_end:
        if ignore_empty_lines:
            while this_idx != this_end and _is_empty(this_lines[this_idx]):
                this_idx += step
            while other_idx != other_end and _is_empty(other_lines[other_idx]):
                other_idx += step

        if (
            this_idx != this_end
            and other_idx != other_end
            and this_lines[this_idx] != other_lines[other_idx]
        ):
            return this_idx

        if this_idx != this_end:
            this_idx += step
        if other_idx != other_end:
            other_idx += step

    return None


def compare_lines(
    this_lines: Sequence[str],
    other_lines: Sequence[str],
    ignore_empty_lines: bool = True,
) -> tuple[int | None, int | None]:
    start = find_divergence(
        this_lines,
        other_lines,
        from_start=True,
        ignore_empty_lines=ignore_empty_lines,
    )
    # A clean forward pass is taken as a full match; the tail is not rechecked.
    if start is None:
        return (None, None)
    end = find_divergence(
        this_lines,
        other_lines,
        from_start=False,
        ignore_empty_lines=ignore_empty_lines,
    )
    return (start, end)
