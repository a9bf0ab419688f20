"""FASTQ records and streaming readers for plain and gzip-compressed files."""

from __future__ import annotations

import gzip
import io
import os
import sys
import zlib
from dataclasses import dataclass
from typing import BinaryIO, Iterator

_COMPLEMENT = {
    "A": "T",
    "T": "A",
    "C": "G",
    "G": "C",
    "a": "t",
    "t": "a",
    "c": "g",
    "g": "c",
}

# phred64 qualities are shifted down to phred33, never below '!'.
_PHRED64_TO_33 = {code: max(33, code - 31) for code in range(256)}

_GZIP_MAGIC = b"\x1f\x8b"


class FastqFormatError(ValueError):
    """Raised when the input is not valid FASTQ."""


def complement(base: str) -> str:
    """Return the complementary base; anything unknown becomes ``N``."""
    return _COMPLEMENT.get(base, "N")


def is_zip_fastq(filename: str) -> bool:
    """Tell whether the file name looks like a gzip-compressed FASTQ/FASTA."""
    return str(filename).endswith((".fastq.gz", ".fq.gz", ".fasta.gz", ".fa.gz"))


def is_fastq(filename: str) -> bool:
    """Tell whether the file name looks like a plain FASTQ/FASTA."""
    return str(filename).endswith((".fastq", ".fq", ".fasta", ".fa"))


@dataclass
class Read:
    """One FASTQ record."""

    name: str
    seq: str
    strand: str = "+"
    quality: str = ""

    def length(self) -> int:
        """Number of bases in the read."""
        return len(self.seq)

    def resize(self, length: int) -> None:
        """Truncate sequence and quality to ``length``."""
        if length < 0:
            raise ValueError(f"length must not be negative, got {length}")
        self.seq = self.seq[:length]
        self.quality = self.quality[:length]

    def reverse_complement(self) -> Read:
        """Return a new read holding the reverse complement of this one."""
        seq = "".join(complement(base) for base in reversed(self.seq))
        return Read(self.name, seq, self.strand, self.quality[::-1])


@dataclass
class ReadPair:
    """Read 1 and read 2 of a paired-end fragment."""

    left: Read
    right: Read


class FastqReader:
    """Read FASTQ records one at a time from a file, ``.gz`` file or stdin.

    Lines may end in ``\\n``, ``\\r`` or ``\\r\\n``; blank lines and lines
    before a record header are skipped. Concatenated gzip members are read
    as one stream.
    """

    def __init__(self, filename: str, has_quality: bool = True, phred64: bool = False):
        self.filename = str(filename)
        self.has_quality = has_quality
        self.phred64 = phred64
        self._zipped = self.filename.endswith(".gz")
        self._no_line_break_at_end = False
        self._exhausted = False

        self._owns_raw = not (self.filename == "/dev/stdin" and not self._zipped)
        raw: BinaryIO = open(self.filename, "rb") if self._owns_raw else sys.stdin.buffer
        self._raw = raw

        stream: BinaryIO = raw
        if self._zipped:
            if raw.read(2) != _GZIP_MAGIC:
                raw.close()
                raise FastqFormatError(f"invalid gzip header found: {self.filename}")
            raw.seek(0)
            stream = gzip.GzipFile(fileobj=raw, mode="rb")
        self._stream = stream
        self._text: io.TextIOWrapper | None = io.TextIOWrapper(
            stream, encoding="latin-1", newline=None
        )

    def _next_line(self) -> str:
        if self._exhausted or self._text is None:
            return ""
        try:
            line = self._text.readline()
        except (OSError, EOFError, zlib.error) as exc:
            raise FastqFormatError(
                f"failed to decompress file: {self.filename}"
            ) from exc
        if not line:
            self._exhausted = True
            return ""
        if line.endswith("\n"):
            return line[:-1]
        self._no_line_break_at_end = True
        return line

    def read(self) -> Read | None:
        """Return the next record, or ``None`` at the end of the input."""
        name = self._next_line()
        while (not name and not self._exhausted) or (name and not name.startswith("@")):
            name = self._next_line()
        if not name:
            return None

        seq = self._next_line()
        strand = self._next_line()
        quality = self._next_line()

        if not strand.startswith("+"):
            raise FastqFormatError(
                f"{name}: expected '+', got {strand!r}; "
                "the FASTQ may be invalid, please check its tail"
            )
        if len(quality) != len(seq):
            raise FastqFormatError(
                f"{name}: sequence and quality have different length "
                f"({len(seq)} vs {len(quality)})"
            )
        if self.phred64:
            quality = quality.translate(_PHRED64_TO_33)
        return Read(name, seq, strand, quality)

    def __iter__(self) -> Iterator[Read]:
        while (read := self.read()) is not None:
            yield read

    def bytes_progress(self) -> tuple[int, int]:
        """Return (bytes consumed from the file so far, total file size)."""
        try:
            consumed = self._raw.tell()
        except (OSError, ValueError):
            consumed = 0
        try:
            total = os.path.getsize(self.filename)
        except OSError:
            total = 0
        return consumed, total

    def is_zipped(self) -> bool:
        """Tell whether the input is gzip-compressed."""
        return self._zipped

    def has_no_line_break_at_end(self) -> bool:
        """Tell whether the last line read had no trailing line break."""
        return self._no_line_break_at_end

    def close(self) -> None:
        """Release the underlying file; stdin is left open."""
        if self._text is None:
            return
        if self._owns_raw:
            self._text.close()
            self._raw.close()
        else:
            self._text.detach()
        self._text = None

    def __enter__(self) -> FastqReader:
        return self

    def __exit__(self, *args) -> None:
        self.close()


class FastqReaderPair:
    """Read pairs from two files, or from one interleaved file."""

    def __init__(
        self,
        left_name: str,
        right_name: str | None = None,
        has_quality: bool = True,
        phred64: bool = False,
        interleaved: bool = False,
    ):
        self.interleaved = interleaved
        self.left = FastqReader(left_name, has_quality, phred64)
        self.right: FastqReader | None = None
        if not interleaved:
            if right_name is None:
                self.left.close()
                raise ValueError("a read2 file is required unless input is interleaved")
            self.right = FastqReader(right_name, has_quality, phred64)

    def read(self) -> ReadPair | None:
        """Return the next pair, or ``None`` when either side runs out."""
        left = self.left.read()
        source = self.left if self.interleaved else self.right
        right = source.read() if source is not None else None
        if left is None or right is None:
            return None
        return ReadPair(left, right)

    def __iter__(self) -> Iterator[ReadPair]:
        while (pair := self.read()) is not None:
            yield pair

    def close(self) -> None:
        """Close both readers."""
        self.left.close()
        if self.right is not None:
            self.right.close()

    def __enter__(self) -> FastqReaderPair:
        return self

    def __exit__(self, *args) -> None:
        self.close()