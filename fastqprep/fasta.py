"""Reading contigs from FASTA files."""

from __future__ import annotations

import os


def _clean_sequence_line(line: str, force_upper_case: bool) -> str:
    """Keep the letters, ``-`` and ``*`` of a sequence line, optionally upper-cased."""
    kept = []
    for c in line:
        if force_upper_case and "a" <= c <= "z":
            c = c.upper()
        if (c.isascii() and c.isalpha()) or c in "-*":
            kept.append(c)
    return "".join(kept)


class FastaReader:
    """Read the contigs of a FASTA file one after another."""

    def __init__(self, path: str, force_upper_case: bool = True):
        self.path = str(path)
        self.force_upper_case = force_upper_case
        self.current_id = ""
        self.current_description = ""
        self.current_sequence = ""
        self.contigs: dict[str, str] = {}

        if os.path.isdir(self.path):
            raise ValueError(
                f"There is a problem with the provided fasta file: "
                f"'{self.path}' is a directory NOT a file"
            )
        try:
            self._file = open(self.path, encoding="latin-1", newline=None)
        except OSError as exc:
            raise ValueError(
                f"There is a problem with the provided fasta file: could NOT read {self.path}"
            ) from exc
        self._pending_header = self._seek_first_header()

    def _seek_first_header(self) -> str | None:
        while line := self._file.readline():
            index = line.find(">")
            if index >= 0:
                return line[index + 1:].rstrip("\r\n")
        return None

    def has_next(self) -> bool:
        """Tell whether another contig is left to read."""
        return self._pending_header is not None

    def read_next(self) -> tuple[str, str] | None:
        """Read the next contig and return its (id, sequence), or None at the end."""
        self.current_id = ""
        self.current_description = ""
        self.current_sequence = ""
        if self._pending_header is None:
            return None

        header = self._pending_header
        self._pending_header = None
        parts = []
        while line := self._file.readline():
            if line.startswith(">"):
                self._pending_header = line[1:].rstrip("\r\n")
                break
            parts.append(_clean_sequence_line(line, self.force_upper_case))

        self.current_id = header
        self.current_sequence = "".join(parts)
        return self.current_id, self.current_sequence

    def read_all(self) -> dict[str, str]:
        """Read every remaining contig into ``contigs`` and return it."""
        while self.has_next():
            record = self.read_next()
            if record is None:
                break
            contig_id, sequence = record
            self.contigs[contig_id] = sequence
        return self.contigs

    def close(self) -> None:
        """Close the underlying file."""
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> FastaReader:
        return self

    def __exit__(self, *args) -> None:
        self.close()