"""Adapter trimming by paired-end overlap or by known adapter sequences."""

from __future__ import annotations

from dataclasses import dataclass

from fastqprep.fastq import Read
from fastqprep.filterresult import FilterResult
from fastqprep.matcher import match_with_one_insertion

# One mismatch is tolerated for every this many compared bases.
_ALLOW_ONE_MISMATCH_FOR_EACH = 8


@dataclass(frozen=True)
class OverlapResult:
    """How read 1 and the reverse complement of read 2 overlap.

    ``offset`` is the start of the overlap on read 1; a negative offset
    means read 2 reaches past the start of read 1, so both reads run
    into adapter sequence.
    """

    overlapped: bool
    offset: int
    overlap_len: int
    diff: int


def trim_by_overlap(
    r1: Read,
    r2: Read,
    fr: FilterResult | None,
    ov: OverlapResult,
    front_trimmed1: int = 0,
    front_trimmed2: int = 0,
) -> bool:
    """Cut the adapter tails of a pair whose reads run past each other.

    Returns True when the pair was trimmed.
    """
    if not (ov.overlapped and ov.offset < 0):
        return False
    len1 = min(r1.length(), ov.overlap_len + front_trimmed2)
    len2 = min(r2.length(), ov.overlap_len + front_trimmed1)
    adapter1 = r1.seq[len1:]
    adapter2 = r2.seq[len2:]
    r1.resize(len1)
    r2.resize(len2)
    if fr is not None:
        fr.add_paired_adapter_trimmed(adapter1, adapter2)
    return True


def _hamming_match(read_seq: str, adapter: str, pos: int) -> bool:
    """Compare ``adapter`` with ``read_seq`` placed at ``pos`` (may be negative)."""
    cmplen = min(len(read_seq) - pos, len(adapter))
    allowed = cmplen // _ALLOW_ONE_MISMATCH_FOR_EACH
    mismatch = 0
    for i in range(max(0, -pos), cmplen):
        if adapter[i] != read_seq[i + pos]:
            mismatch += 1
            if mismatch > allowed:
                return False
    return True


def _find_adapter(read_seq: str, adapter: str, match_req: int) -> int | None:
    """Return where the adapter starts in the read, or None."""
    rlen = len(read_seq)
    alen = len(adapter)

    # Start left of the read: adapter dimers often miss the A-tailing base.
    if alen >= 16:
        start = -4
    elif alen >= 12:
        start = -3
    elif alen >= 8:
        start = -2
    else:
        start = 0

    for pos in range(start, rlen - match_req):
        if _hamming_match(read_seq, adapter, pos):
            return pos

    # One base inserted in the read.
    for pos in range(0, rlen - match_req - 1):
        cmplen = min(rlen - pos - 1, alen)
        if cmplen < 1:
            continue
        allowed = cmplen // _ALLOW_ONE_MISMATCH_FOR_EACH - 1
        if match_with_one_insertion(read_seq, adapter, cmplen, allowed):
            return pos

    # One base deleted from the read.
    for pos in range(0, rlen - match_req):
        cmplen = min(rlen - pos, alen - 1)
        if cmplen < 1:
            continue
        allowed = cmplen // _ALLOW_ONE_MISMATCH_FOR_EACH - 1
        if match_with_one_insertion(adapter, read_seq, cmplen, allowed):
            return pos

    return None


def trim_by_sequence(
    read: Read,
    fr: FilterResult | None,
    adapter: str,
    is_r2: bool = False,
    match_req: int = 4,
) -> bool:
    """Cut ``adapter`` and everything after it from ``read``.

    Returns True when the adapter was found and the read trimmed.
    """
    if len(adapter) < match_req:
        return False
    pos = _find_adapter(read.seq, adapter, match_req)
    if pos is None:
        return False
    if pos < 0:
        trimmed = adapter[: len(adapter) + pos]
        read.resize(0)
    else:
        trimmed = read.seq[pos:]
        read.resize(pos)
    if fr is not None:
        fr.add_adapter_trimmed(trimmed, is_r2)
    return True


def trim_by_multi_sequences(
    read: Read,
    fr: FilterResult | None,
    adapters: list[str],
    is_r2: bool = False,
    inc_trimmed_counter: bool = True,
) -> bool:
    """Trim every adapter of ``adapters`` from ``read`` in turn.

    The whole removed tail is recorded once in ``fr``.
    """
    match_req = 4
    if len(adapters) > 16:
        match_req = 5
    if len(adapters) > 256:
        match_req = 6

    original = read.seq
    trimmed = False
    for adapter in adapters:
        trimmed |= trim_by_sequence(read, None, adapter, is_r2, match_req)

    if trimmed and fr is not None:
        fr.add_adapter_trimmed(original[read.length():], is_r2, inc_trimmed_counter)
    return trimmed