"""Per-read quality, length, complexity and index filters, and quality cutting."""

from __future__ import annotations

from dataclasses import dataclass, field

from fastqprep.fastq import Read
from fastqprep.filterresult import FilterOutcome

_PHRED_OFFSET = 33


@dataclass
class FilterOptions:
    """Settings for filtering reads and cutting them by quality."""

    quality_filter: bool = True
    qualified_quality_phred: int = 15
    unqualified_percent_limit: int = 40
    n_base_limit: int = 5
    average_qual: int = 0

    length_filter: bool = True
    length_required: int = 15
    length_limit: int = 0

    complexity_filter: bool = False
    complexity_threshold: float = 0.3

    cut_front: bool = False
    cut_tail: bool = False
    cut_right: bool = False
    cut_front_window_size: int = 4
    cut_front_mean_quality: int = 20
    cut_tail_window_size: int = 4
    cut_tail_mean_quality: int = 20
    cut_right_window_size: int = 4
    cut_right_mean_quality: int = 20

    index_filter: bool = False
    index_blacklist1: list[str] = field(default_factory=list)
    index_blacklist2: list[str] = field(default_factory=list)
    index_threshold: int = 0


def _matches_any(barcodes: list[str], target: str, threshold: int) -> bool:
    for barcode in barcodes:
        diff = 0
        for a, b in zip(barcode, target):
            if a != b:
                diff += 1
                if diff > threshold:
                    break
        if diff <= threshold:
            return True
    return False


class ReadFilter:
    """Apply the filters and cuts configured in a :class:`FilterOptions`."""

    def __init__(self, options: FilterOptions):
        self.options = options

    def pass_filter(self, read: Read | None) -> FilterOutcome:
        """Decide whether ``read`` passes, or which filter it fails."""
        if read is None or read.length() == 0:
            return FilterOutcome.FAIL_LENGTH
        opts = self.options
        rlen = read.length()

        low_qual = 0
        n_bases = 0
        total_qual = 0
        if opts.quality_filter or opts.length_filter:
            qualified = _PHRED_OFFSET + opts.qualified_quality_phred
            for base, qual in zip(read.seq, read.quality):
                code = ord(qual)
                total_qual += code - _PHRED_OFFSET
                if code < qualified:
                    low_qual += 1
                if base == "N":
                    n_bases += 1

        if opts.quality_filter:
            if low_qual > opts.unqualified_percent_limit * rlen / 100.0:
                return FilterOutcome.FAIL_QUALITY
            if opts.average_qual > 0 and int(total_qual / rlen) < opts.average_qual:
                return FilterOutcome.FAIL_QUALITY
            if n_bases > opts.n_base_limit:
                return FilterOutcome.FAIL_N_BASE

        if opts.length_filter:
            if rlen < opts.length_required:
                return FilterOutcome.FAIL_LENGTH
            if opts.length_limit > 0 and rlen > opts.length_limit:
                return FilterOutcome.FAIL_TOO_LONG

        if opts.complexity_filter and not self.pass_low_complexity_filter(read):
            return FilterOutcome.FAIL_COMPLEXITY

        return FilterOutcome.PASS_FILTER

    def pass_low_complexity_filter(self, read: Read) -> bool:
        """Tell whether enough neighbouring bases differ from each other."""
        length = read.length()
        if length <= 1:
            return False
        seq = read.seq
        diff = sum(1 for a, b in zip(seq, seq[1:]) if a != b)
        return diff / (length - 1) >= self.options.complexity_threshold

    def trim_and_cut(self, read: Read, front: int, tail: int) -> tuple[Read | None, int]:
        """Trim fixed bases from both ends, then cut low-quality ends.

        Returns the read (changed in place) and the number of bases removed
        from its front, or ``(None, 0)`` when nothing usable is left.
        """
        opts = self.options
        cutting = opts.cut_front or opts.cut_tail or opts.cut_right
        if front == 0 and tail == 0 and not cutting:
            return read, 0

        rlen = read.length() - front - tail
        if rlen < 0:
            return None, 0

        if not cutting:
            read.seq = read.seq[front:front + rlen]
            read.quality = read.quality[front:front + rlen]
            return read, front

        length = read.length()
        qual = [ord(q) for q in read.quality]
        seq = read.seq

        if opts.cut_front:
            w = opts.cut_front_window_size
            if length - front - tail - w <= 0:
                return None, 0
            s = front
            total = sum(qual[s + i] for i in range(w - 1))
            while s + w < length - tail:
                total += qual[s + w - 1]
                if s > front:
                    total -= qual[s - 1]
                if total / w >= _PHRED_OFFSET + opts.cut_front_mean_quality:
                    break
                s += 1
            if s > 0:
                s = s + w - 1
            while s < length and seq[s] == "N":
                s += 1
            front = s
            rlen = length - front - tail

        if opts.cut_right:
            w = opts.cut_right_window_size
            if length - front - tail - w <= 0:
                return None, 0
            s = front
            total = sum(qual[s + i] for i in range(w - 1))
            threshold = _PHRED_OFFSET + opts.cut_right_mean_quality
            found_low = False
            while s + w < length - tail:
                total += qual[s + w - 1]
                if s > front:
                    total -= qual[s - 1]
                if total / w < threshold:
                    found_low = True
                    break
                s += 1
            if found_low:
                while s < length - 1 and qual[s] >= threshold:
                    s += 1
                rlen = s - front

        if not opts.cut_right and opts.cut_tail:
            w = opts.cut_tail_window_size
            if length - front - tail - w <= 0:
                return None, 0
            t = length - tail - 1
            total = sum(qual[t - i] for i in range(w - 1))
            while t - w >= front:
                total += qual[t - w + 1]
                if t < length - tail - 1:
                    total -= qual[t + 1]
                if total / w >= _PHRED_OFFSET + opts.cut_tail_mean_quality:
                    break
                t -= 1
            if t < length - 1:
                t = t - w + 1
            while t >= 0 and seq[t] == "N":
                t -= 1
            rlen = t - front + 1

        if rlen <= 0 or front >= length - 1:
            return None, 0

        read.seq = read.seq[front:front + rlen]
        read.quality = read.quality[front:front + rlen]
        return read, front

    def filter_by_index(self, index1: str, index2: str | None = None) -> bool:
        """Tell whether the index barcodes are on a blacklist and must be dropped."""
        opts = self.options
        if not opts.index_filter:
            return False
        if _matches_any(opts.index_blacklist1, index1, opts.index_threshold):
            return True
        if index2 is not None and _matches_any(
            opts.index_blacklist2, index2, opts.index_threshold
        ):
            return True
        return False