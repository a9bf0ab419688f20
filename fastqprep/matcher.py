"""Approximate string matching that tolerates a single inserted base."""

from __future__ import annotations

# Returned by diff_with_one_insertion when no insertion position exists.
_NO_POSITION = 100_000_000


def _char_at(data: str, index: int) -> str:
    """Return the character at ``index``, or NUL beyond the end of ``data``."""
    return data[index] if index < len(data) else "\0"


def _mismatch_tables(
    ins_data: str, normal_data: str, cmplen: int, diff_limit: int
) -> tuple[list[int], list[int]]:
    """Build accumulated mismatch counts from the left and from the right.

    ``left[i]`` counts mismatches of ``ins_data[:i+1]`` against
    ``normal_data[:i+1]``; ``right[i]`` counts mismatches of
    ``ins_data[i+1:cmplen+1]`` against ``normal_data[i:cmplen]``.
    Both scans stop early once the limit can no longer be met.
    """
    if cmplen < 1:
        raise ValueError(f"comparison length must be positive, got {cmplen}")

    left = [0] * cmplen
    right = [0] * cmplen
    last = cmplen - 1

    left[0] = 0 if _char_at(ins_data, 0) == normal_data[0] else 1
    right[last] = 0 if _char_at(ins_data, cmplen) == normal_data[last] else 1

    for i in range(1, cmplen):
        mismatch = _char_at(ins_data, i) != normal_data[i]
        left[i] = left[i - 1] + (1 if mismatch else 0)
        if left[i] + right[last] > diff_limit:
            break

    for i in range(cmplen - 2, -1, -1):
        mismatch = _char_at(ins_data, i + 1) != normal_data[i]
        right[i] = right[i + 1] + (1 if mismatch else 0)
        if right[i] + left[0] > diff_limit:
            for p in range(i):
                right[p] = diff_limit + 1
            break

    return left, right


def match_with_one_insertion(
    ins_data: str, normal_data: str, cmplen: int, diff_limit: int
) -> bool:
    """Tell whether ``ins_data`` matches ``normal_data`` with one extra base.

    ``ins_data`` holds ``cmplen + 1`` bases, one of which (at positions
    1 to ``cmplen - 1``) is taken as an insertion; the rest is compared
    with the first ``cmplen`` bases of ``normal_data``. The match succeeds
    when no more than ``diff_limit`` mismatches remain.
    """
    left, right = _mismatch_tables(ins_data, normal_data, cmplen, diff_limit)
    tail = right[cmplen - 1]
    for i in range(1, cmplen):
        if left[i - 1] + tail > diff_limit:
            return False
        if left[i - 1] + right[i] <= diff_limit:
            return True
    return False


def diff_with_one_insertion(
    ins_data: str, normal_data: str, cmplen: int, diff_limit: int
) -> int | None:
    """Return the fewest mismatches over all single-insertion positions.

    Returns ``None`` as soon as the scan finds that the mismatches on the
    left side alone exceed ``diff_limit``.
    """
    left, right = _mismatch_tables(ins_data, normal_data, cmplen, diff_limit)
    tail = right[cmplen - 1]
    min_diff = _NO_POSITION
    for i in range(1, cmplen):
        if left[i - 1] + tail > diff_limit:
            return None
        min_diff = min(min_diff, left[i - 1] + right[i])
    return min_diff