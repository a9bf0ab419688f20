"""Counters for filtering, adapter trimming, polyX trimming and base correction."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

# Beyond this many distinct adapter sequences, no new ones are recorded.
MAX_ADAPTER_REC = 20000
# Beyond this many, low-complexity adapter sequences are no longer recorded.
LOW_COMPLEXITY_SKIP = 5000
# Adapters below this fraction of all adapter hits are lumped together.
REPORT_THRESHOLD = 0.01

ATCG_BASES = ("A", "T", "C", "G")


class FilterOutcome(IntEnum):
    """Why a read passed or failed filtering."""

    PASS_FILTER = 0
    FAIL_QUALITY = 1
    FAIL_N_BASE = 2
    FAIL_LENGTH = 3
    FAIL_TOO_LONG = 4
    FAIL_COMPLEXITY = 5


@dataclass
class ResultOptions:
    """The settings that decide which parts of the result are reported."""

    paired: bool = False
    length_filter: bool = True
    max_length: int = 0
    complexity_filter: bool = False
    adapter_trimming: bool = True
    poly_x_trimming: bool = False
    correction: bool = False
    adapter1: str = ""
    adapter2: str = ""


def output_row(key: str, value: object) -> str:
    """Return one two-column HTML table row."""
    return f"<tr><td class='col1'>{key}</td><td class='col2'>{value}</td></tr>\n"


def format_number(number: int) -> str:
    """Format a count with a K/M/G/T/P suffix once it exceeds 1000."""
    units = ("", "K", "M", "G", "T", "P")
    num = float(number)
    order = 0
    while num > 1000.0 and order < len(units) - 1:
        order += 1
        num /= 1000.0
    if order == 0:
        return str(number)
    return f"{num:.6f} {units[order]}"


def _percent(numerator: float, denominator: float) -> str:
    if denominator == 0:
        return "nan" if numerator == 0 else "inf"
    return f"{numerator * 100.0 / denominator:.6f}"


def _adapter_order(counts: dict[str, int]) -> list[tuple[str, int]]:
    """Adapters sorted from short to long, then alphabetically."""
    return sorted(counts.items(), key=lambda item: (len(item[0]), item[0]))


def _base_counts_json(pad: str, key: str, total: int, counts: list[int]) -> str:
    inner = ", ".join(f'"{base}": {count}' for base, count in zip(ATCG_BASES, counts))
    return f'{pad}\t"total_{key}": {total},\n{pad}\t"{key}":{{{inner}}}'


class FilterResult:
    """Accumulated outcome of filtering and trimming a set of reads."""

    def __init__(self, options: ResultOptions, paired: bool = False):
        self.options = options
        self.paired = paired
        self.read_stats: dict[FilterOutcome, int] = {outcome: 0 for outcome in FilterOutcome}
        self.trimmed_adapter_reads = 0
        self.trimmed_adapter_bases = 0
        self.merged_pairs = 0
        self.corrected_reads = 0
        self.trimmed_poly_x_reads = [0, 0, 0, 0]
        self.trimmed_poly_x_bases = [0, 0, 0, 0]
        self.adapter1: dict[str, int] = {}
        self.adapter2: dict[str, int] = {}
        self.correction_matrix = [0] * 64

    def add_filter_result(self, result: int, read_num: int = 1) -> None:
        """Count ``read_num`` reads under ``result``; unknown results are ignored."""
        try:
            outcome = FilterOutcome(result)
        except ValueError:
            return
        self.read_stats[outcome] += read_num

    def add_merged_pairs(self, pairs: int) -> None:
        """Count merged read pairs."""
        self.merged_pairs += pairs

    @classmethod
    def merge(cls, results: list[FilterResult]) -> FilterResult | None:
        """Sum several results into a new one; ``None`` for an empty list."""
        if not results:
            return None
        merged = cls(results[0].options, results[0].paired)
        for item in results:
            for outcome, count in item.read_stats.items():
                merged.read_stats[outcome] += count
            merged.trimmed_adapter_reads += item.trimmed_adapter_reads
            merged.trimmed_adapter_bases += item.trimmed_adapter_bases
            merged.merged_pairs += item.merged_pairs
            for b in range(4):
                merged.trimmed_poly_x_reads[b] += item.trimmed_poly_x_reads[b]
                merged.trimmed_poly_x_bases[b] += item.trimmed_poly_x_bases[b]
            for adapter, count in item.adapter1.items():
                merged.adapter1[adapter] = merged.adapter1.get(adapter, 0) + count
            for adapter, count in item.adapter2.items():
                merged.adapter2[adapter] = merged.adapter2.get(adapter, 0) + count
            merged.correction_matrix = [
                a + b for a, b in zip(merged.correction_matrix, item.correction_matrix)
            ]
            merged.corrected_reads += item.corrected_reads
        return merged

    @staticmethod
    def is_low_complexity(adapter: str) -> bool:
        """Tell whether fewer than half the neighbouring bases differ."""
        diff = sum(1 for a, b in zip(adapter, adapter[1:]) if a != b)
        return diff < len(adapter) // 2

    def _record(self, counts: dict[str, int], adapter: str) -> bool:
        """Count one adapter hit; return False when a new one was not recorded."""
        if adapter in counts:
            counts[adapter] += 1
            return True
        if len(counts) > MAX_ADAPTER_REC or (
            len(counts) > LOW_COMPLEXITY_SKIP and self.is_low_complexity(adapter)
        ):
            return False
        counts[adapter] = 1
        return True

    def add_adapter_trimmed(
        self, adapter: str, is_r2: bool = False, inc_trimmed_counter: bool = True
    ) -> None:
        """Record an adapter trimmed from a single read."""
        if not adapter:
            return
        if inc_trimmed_counter:
            self.trimmed_adapter_reads += 1
        self.trimmed_adapter_bases += len(adapter)
        self._record(self.adapter2 if is_r2 else self.adapter1, adapter)

    def add_paired_adapter_trimmed(self, adapter1: str, adapter2: str) -> None:
        """Record adapters trimmed from both reads of a pair."""
        self.trimmed_adapter_reads += 2
        self.trimmed_adapter_bases += len(adapter1) + len(adapter2)
        if adapter1 and not self._record(self.adapter1, adapter1):
            return
        if adapter2:
            self._record(self.adapter2, adapter2)

    def add_poly_x_trimmed(self, base: int, length: int) -> None:
        """Record a polyX tail of ``length`` bases; ``base`` indexes A, T, C, G."""
        self.trimmed_poly_x_reads[base] += 1
        self.trimmed_poly_x_bases[base] += length

    def total_poly_x_trimmed_reads(self) -> int:
        """Reads with a polyX tail trimmed."""
        return sum(self.trimmed_poly_x_reads)

    def total_poly_x_trimmed_bases(self) -> int:
        """Bases trimmed in polyX tails."""
        return sum(self.trimmed_poly_x_bases)

    def total_corrected_bases(self) -> int:
        """Bases changed by overlap correction."""
        return sum(self.correction_matrix)

    @staticmethod
    def _matrix_index(from_base: str, to_base: str) -> int:
        return (ord(from_base) & 0x07) * 8 + (ord(to_base) & 0x07)

    def add_correction(self, from_base: str, to_base: str) -> None:
        """Count one base corrected from ``from_base`` to ``to_base``."""
        self.correction_matrix[self._matrix_index(from_base, to_base)] += 1

    def correction_count(self, from_base: str, to_base: str) -> int:
        """How often ``from_base`` was corrected to ``to_base``."""
        return self.correction_matrix[self._matrix_index(from_base, to_base)]

    def inc_corrected_reads(self, count: int) -> None:
        """Count reads changed by overlap correction."""
        self.corrected_reads += count

    def summary_lines(self) -> list[str]:
        """Plain-text summary lines for the console."""
        stats = self.read_stats
        opts = self.options
        lines = [
            f"reads passed filter: {stats[FilterOutcome.PASS_FILTER]}",
            f"reads failed due to low quality: {stats[FilterOutcome.FAIL_QUALITY]}",
            f"reads failed due to too many N: {stats[FilterOutcome.FAIL_N_BASE]}",
        ]
        if opts.length_filter:
            lines.append(f"reads failed due to too short: {stats[FilterOutcome.FAIL_LENGTH]}")
            if opts.max_length > 0:
                lines.append(
                    f"reads failed due to too long: {stats[FilterOutcome.FAIL_TOO_LONG]}"
                )
        if opts.complexity_filter:
            lines.append(
                f"reads failed due to low complexity: {stats[FilterOutcome.FAIL_COMPLEXITY]}"
            )
        if opts.adapter_trimming:
            lines.append(f"reads with adapter trimmed: {self.trimmed_adapter_reads}")
            lines.append(f"bases trimmed due to adapters: {self.trimmed_adapter_bases}")
        if opts.poly_x_trimming:
            lines.append(f"reads with polyX in 3' end: {self.total_poly_x_trimmed_reads()}")
            lines.append(f"bases trimmed in polyX tail: {self.total_poly_x_trimmed_bases()}")
        if opts.correction:
            lines.append(f"reads corrected by overlap analysis: {self.corrected_reads}")
            lines.append(f"bases corrected by overlap analysis: {self.total_corrected_bases()}")
        return lines

    def report_json(self, padding: str) -> str:
        """The filtering-result object of the JSON report."""
        stats = self.read_stats
        entries = [("passed_filter_reads", stats[FilterOutcome.PASS_FILTER])]
        if self.options.correction:
            entries.append(("corrected_reads", self.corrected_reads))
            entries.append(("corrected_bases", self.total_corrected_bases()))
        entries.append(("low_quality_reads", stats[FilterOutcome.FAIL_QUALITY]))
        entries.append(("too_many_N_reads", stats[FilterOutcome.FAIL_N_BASE]))
        if self.options.complexity_filter:
            entries.append(("low_complexity_reads", stats[FilterOutcome.FAIL_COMPLEXITY]))
        entries.append(("too_short_reads", stats[FilterOutcome.FAIL_LENGTH]))
        entries.append(("too_long_reads", stats[FilterOutcome.FAIL_TOO_LONG]))
        body = ",\n".join(f'{padding}\t"{key}": {value}' for key, value in entries)
        return "{\n" + body + "\n" + padding + "},\n"

    def adapters_json(self, counts: dict[str, int]) -> str:
        """Adapter counts as JSON members; rare ones are summed as ``others``."""
        total = sum(counts.values())
        if total == 0:
            return ""
        members = []
        reported = 0
        for adapter, count in _adapter_order(counts):
            if count / total < REPORT_THRESHOLD:
                continue
            members.append(f'"{adapter}":{count}')
            reported += count
        unreported = total - reported
        if unreported > 0:
            members.append(f'"others":{unreported}')
        return ", ".join(members)

    def report_adapter_json(self, padding: str) -> str:
        """The adapter-cutting object of the JSON report."""
        paired = self.options.paired
        out = ["{\n"]
        out.append(f'{padding}\t"adapter_trimmed_reads": {self.trimmed_adapter_reads},\n')
        out.append(f'{padding}\t"adapter_trimmed_bases": {self.trimmed_adapter_bases},\n')
        out.append(f'{padding}\t"read1_adapter_sequence": "{self.options.adapter1}",\n')
        if paired:
            out.append(f'{padding}\t"read2_adapter_sequence": "{self.options.adapter2}",\n')
        out.append(f'{padding}\t"read1_adapter_counts": {{{self.adapters_json(self.adapter1)}}}')
        if paired:
            out.append(",")
        out.append("\n")
        if paired:
            out.append(
                f'{padding}\t"read2_adapter_counts": {{{self.adapters_json(self.adapter2)}}}\n'
            )
        out.append(f"{padding}}},\n")
        return "".join(out)

    def report_poly_x_json(self, padding: str) -> str:
        """The polyX-trimming object of the JSON report."""
        reads = _base_counts_json(
            padding, "polyx_trimmed_reads",
            self.total_poly_x_trimmed_reads(), self.trimmed_poly_x_reads,
        )
        bases = _base_counts_json(
            padding, "polyx_trimmed_bases",
            self.total_poly_x_trimmed_bases(), self.trimmed_poly_x_bases,
        )
        return f"{padding}{{\n{reads},\n{bases}\n{padding}}},\n"

    def report_html(self, total_reads: int, total_bases: int) -> str:
        """The filtering-result table of the HTML report."""
        stats = self.read_stats
        opts = self.options

        def reads_row(label: str, count: int) -> str:
            return output_row(label, f"{format_number(count)} ({_percent(count, total_reads)}%)")

        out = ["<table class='summary_table'>\n"]
        out.append(reads_row("reads passed filters:", stats[FilterOutcome.PASS_FILTER]))
        if opts.correction:
            out.append(reads_row("reads corrected:", self.corrected_reads))
            corrected = self.total_corrected_bases()
            out.append(output_row(
                "bases corrected:",
                f"{format_number(corrected)} ({_percent(corrected, total_bases)}%)",
            ))
        out.append(reads_row("reads with low quality:", stats[FilterOutcome.FAIL_QUALITY]))
        out.append(reads_row("reads with too many N:", stats[FilterOutcome.FAIL_N_BASE]))
        if opts.length_filter:
            out.append(reads_row("reads too short:", stats[FilterOutcome.FAIL_LENGTH]))
            if opts.max_length > 0:
                out.append(reads_row("reads too long:", stats[FilterOutcome.FAIL_TOO_LONG]))
        if opts.complexity_filter:
            out.append(
                reads_row("reads with low complexity:", stats[FilterOutcome.FAIL_COMPLEXITY])
            )
        out.append("</table>\n")
        return "".join(out)

    def adapter_report_count(self, counts: dict[str, int]) -> int:
        """How many adapters reach the reporting threshold."""
        total = sum(counts.values())
        if total == 0:
            return 0
        return sum(1 for count in counts.values() if count / total >= REPORT_THRESHOLD)

    def adapters_html(
        self, counts: dict[str, int], total_bases: int, limit_count: int = 0
    ) -> str:
        """An HTML table of adapter sequences and how often each was trimmed."""
        total = sum(counts.values())
        adapter_bases = sum(len(adapter) * count for adapter, count in counts.items())
        out = []
        if total_bases:
            frac = adapter_bases / total_bases
            if self.options.paired:
                frac *= 2.0
            if frac < 0.01:
                out.append(
                    "<div class='sub_section_tips'>The input has little adapter percentage "
                    f"(~{frac * 100.0:.6f}%), probably it's trimmed before.</div>\n"
                )
        if total == 0:
            return "".join(out)

        out.append("<table class='summary_table'>\n")
        out.append(
            "<tr><td class='adapter_col' style='font-size:14px;color:#ffffff;"
            "background:#556699'>Sequence</td><td class='col2' style='font-size:14px;"
            "color:#ffffff;background:#556699'>Occurrences</td></tr>\n"
        )
        reported = 0
        shown = 0
        for adapter, count in _adapter_order(counts):
            if count / total < REPORT_THRESHOLD:
                continue
            out.append(
                f"<tr><td class='adapter_col'>{adapter}</td>"
                f"<td class='col2'>{count}</td></tr>\n"
            )
            reported += count
            shown += 1
            if limit_count > 0 and shown >= limit_count:
                break
        unreported = total - reported
        if unreported > 0:
            tag = "all adapter sequences" if reported == 0 else "other adapter sequences"
            out.append(
                f"<tr><td class='adapter_col'>{tag}</td>"
                f"<td class='col2'>{unreported}</td></tr>\n"
            )
        out.append("</table>\n")
        return "".join(out)

    def report_adapter_html(self, total_bases: int) -> str:
        """The adapter section of the HTML report."""
        if not self.options.paired:
            return (
                "<div class='subsection_title' onclick=showOrHide('read_adapters')>"
                "Adapter or bad ligation</div>\n"
                "<div id='read_adapters'>\n"
                + self.adapters_html(self.adapter1, total_bases)
                + "</div>\n"
            )
        limit = min(
            self.adapter_report_count(self.adapter1),
            self.adapter_report_count(self.adapter2),
        )
        return (
            "<table> <tr> <td>\n"
            "<div class='subsection_title' onclick=showOrHide('read1_adapters')>"
            "Adapter or bad ligation of read1</div>\n"
            "<div id='read1_adapters'>\n"
            + self.adapters_html(self.adapter1, total_bases, limit)
            + "</div>\n</td><td>\n"
            "<div class='subsection_title' onclick=showOrHide('read2_adapters')>"
            "Adapter or bad ligation of read2</div>\n"
            "<div id='read2_adapters'>\n"
            + self.adapters_html(self.adapter2, total_bases, limit)
            + "</div>\n</td></tr></table>\n"
        )