"""Sampling-based evaluation of FASTQ input: read length, overrepresented
sequences, sequencer chemistry and the total number of reads."""

from __future__ import annotations

from fastqprep.fastq import FastqReader

_BASES = ("A", "T", "C", "G")
_BASE_VALUES = {"A": 0, "T": 1, "C": 2, "G": 3}

# Read-name prefixes of NextSeq 500, NextSeq 550/550DX and NovaSeq.
_TWO_COLOR_PREFIXES = ("@NS", "@NB", "@NDX", "@A0")

SEQ_LEN_SAMPLE_READS = 1000
OVER_REP_BASE_LIMIT = 151 * 10000
READ_NUM_READ_LIMIT = 512 * 1024
READ_NUM_BASE_LIMIT = 151 * 512 * 1024

# (minimum sequence length, minimum count) from long to short; the first
# tier is keyed on the read length and is checked separately.
_OVER_REP_TIERS = ((100, 5), (40, 20), (20, 100), (10, 500))


def int2seq(val: int, seqlen: int) -> str:
    """Decode a 2-bit-per-base key into a sequence of ``seqlen`` bases."""
    chars = []
    for _ in range(seqlen):
        chars.append(_BASES[val & 0x03])
        val >>= 2
    return "".join(reversed(chars))


def seq2int(seq: str, pos: int, keylen: int, last_val: int = -1) -> int:
    """Encode ``seq[pos:pos+keylen]`` as a 2-bit-per-base key.

    With a non-negative ``last_val`` (the key at ``pos - 1``) only the new
    last base is shifted in. Returns -1 when the window holds a base other
    than A, T, C or G.
    """
    if last_val >= 0:
        mask = (1 << (keylen * 2)) - 1
        value = _BASE_VALUES.get(seq[pos + keylen - 1])
        if value is None:
            return -1
        return ((last_val << 2) & mask) + value
    key = 0
    for base in seq[pos:pos + keylen]:
        value = _BASE_VALUES.get(base)
        if value is None:
            return -1
        key = (key << 2) + value
    return key


def is_two_color_system(path: str) -> bool:
    """Tell whether the first read's name marks a two-colour sequencer."""
    with FastqReader(path) as reader:
        read = reader.read()
    if read is None:
        return False
    return read.name.startswith(_TWO_COLOR_PREFIXES)


def compute_seq_len(path: str) -> int:
    """Return the longest read length among the first 1000 reads."""
    seqlen = 0
    with FastqReader(path) as reader:
        for count, read in enumerate(reader):
            seqlen = max(seqlen, read.length())
            if count + 1 >= SEQ_LEN_SAMPLE_READS:
                break
    return seqlen


def _is_hot(length: int, count: int, seqlen: int) -> bool:
    if length >= seqlen - 1:
        return count >= 3
    for min_len, min_count in _OVER_REP_TIERS:
        if length >= min_len:
            return count >= min_count
    return False


def compute_over_rep_seq(path: str, seqlen: int) -> dict[str, int]:
    """Find overrepresented subsequences in a sample of the file.

    Subsequences of 10, 20, 40, 100 and ``min(150, seqlen - 2)`` bases are
    counted over the first 1.51M bases; those frequent enough for their
    length are kept, except ones contained in a kept longer sequence that
    is not at least ten times rarer.
    """
    counts: dict[str, int] = {}
    steps = (10, 20, 40, 100, min(150, seqlen - 2))
    bases = 0
    with FastqReader(path) as reader:
        while bases < OVER_REP_BASE_LIMIT:
            read = reader.read()
            if read is None:
                break
            seq = read.seq
            rlen = len(seq)
            bases += rlen
            for step in steps:
                if step <= 0:
                    continue
                for i in range(rlen - step):
                    sub = seq[i:i + step]
                    counts[sub] = counts.get(sub, 0) + 1

    hot = {
        seq: count
        for seq, count in sorted(counts.items())
        if _is_hot(len(seq), count, seqlen)
    }

    for seq in sorted(hot):
        count = hot[seq]
        contained = any(
            other != seq and seq in other and count // other_count < 10
            for other, other_count in hot.items()
        )
        if contained:
            del hot[seq]
    return hot


def estimate_read_num(path: str) -> int:
    """Count the reads of a file, extrapolating from a sample when it is large.

    Up to 512K reads or 151 * 512K bases are read; if the file ends first
    the exact count is returned, otherwise the count is estimated from the
    bytes per read so far and raised by 1%.
    """
    records = 0
    bases = 0
    first_read_pos = 0
    reached_eof = False
    with FastqReader(path) as reader:
        while records < READ_NUM_READ_LIMIT and bases < READ_NUM_BASE_LIMIT:
            read = reader.read()
            if read is None:
                reached_eof = True
                break
            if records == 0:
                first_read_pos, _ = reader.bytes_progress()
            records += 1
            bases += read.length()
        if reached_eof:
            return records
        if records == 0:
            return 0
        bytes_read, bytes_total = reader.bytes_progress()
    bytes_per_read = (bytes_read - first_read_pos) / records
    if bytes_per_read <= 0:
        return records
    return int(bytes_total * 1.01 / bytes_per_read)