"""Base correction in the overlapping region of paired-end reads."""

from __future__ import annotations

import warnings

from fastqprep.adaptertrimmer import OverlapResult
from fastqprep.fastq import Read, complement
from fastqprep.filterresult import FilterResult

_GOOD_QUAL = chr(30 + 33)
_BAD_QUAL = chr(14 + 33)


def correct_by_overlap(
    r1: Read, r2: Read, fr: FilterResult | None, ov: OverlapResult
) -> int:
    """Fix mismatches in the overlap where one read is confident and the other not.

    A base with quality of at least Q30 replaces its counterpart of Q14 or
    lower. Returns the number of corrected bases.
    """
    if ov.diff == 0 or not ov.overlapped:
        return 0

    start1 = max(0, ov.offset)
    start2 = r2.length() - max(0, -ov.offset) - 1

    seq1, qual1 = list(r1.seq), list(r1.quality)
    seq2, qual2 = list(r2.seq), list(r2.quality)

    corrected = 0
    uncorrected = 0
    r1_corrected = False
    r2_corrected = False
    for i in range(ov.overlap_len):
        p1 = start1 + i
        p2 = start2 - i
        if seq1[p1] == complement(seq2[p2]):
            continue
        if qual1[p1] >= _GOOD_QUAL and qual2[p2] <= _BAD_QUAL:
            fixed = complement(seq1[p1])
            if fr is not None:
                fr.add_correction(seq2[p2], fixed)
            seq2[p2] = fixed
            qual2[p2] = qual1[p1]
            corrected += 1
            r2_corrected = True
        elif qual2[p2] >= _GOOD_QUAL and qual1[p1] <= _BAD_QUAL:
            fixed = complement(seq2[p2])
            if fr is not None:
                fr.add_correction(seq1[p1], fixed)
            seq1[p1] = fixed
            qual1[p1] = qual2[p2]
            corrected += 1
            r1_corrected = True
        else:
            uncorrected += 1

    r1.seq, r1.quality = "".join(seq1), "".join(qual1)
    r2.seq, r2.quality = "".join(seq2), "".join(qual2)

    if corrected + uncorrected != ov.diff:
        warnings.warn(
            "corrected and uncorrected bases do not add up to the overlap difference",
            RuntimeWarning,
            stacklevel=2,
        )

    if corrected > 0 and fr is not None:
        fr.inc_corrected_reads(2 if r1_corrected and r2_corrected else 1)
    return corrected