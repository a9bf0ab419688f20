"""Bloom-filter estimation of duplicated reads and read pairs."""

from __future__ import annotations

import math
import threading
from functools import lru_cache

from fastqprep.fastq import Read

PRIME_ARRAY_LEN = 1 << 9
DEFAULT_BUF_LEN_BYTES = 1 << 29

_UINT64_MASK = (1 << 64) - 1
_BASE_CODES = {"A": 7, "T": 222, "C": 74, "G": 31}
_OTHER_BASE_CODE = 13

# accuracy level -> (buffer length multiplier, buffer count multiplier)
_LEVELS = {
    1: (1, 1),
    2: (2, 1),
    3: (2, 2),
    4: (4, 2),
    5: (8, 2),
    6: (8, 3),
}


def _is_prime(number: int) -> bool:
    return all(number % i for i in range(2, math.isqrt(number) + 1))


@lru_cache(maxsize=None)
def _prime_array(count: int) -> tuple[int, ...]:
    """Primes above 10000, each at least 10000 past the previous one."""
    primes = []
    number = 10000
    while len(primes) < count:
        number += 1
        if _is_prime(number):
            primes.append(number)
            number += 10000
    return tuple(primes)


class Duplicate:
    """Estimate duplication by hashing sequences into a set of bit buffers.

    Higher accuracy levels (1 to 6) use longer and more buffers; with the
    default buffer length they take 1G, 2G, 4G, 8G, 16G and 24G of memory.
    Unknown levels behave like level 1.
    """

    def __init__(self, accuracy_level: int = 1, buf_len_bytes: int = DEFAULT_BUF_LEN_BYTES):
        if buf_len_bytes <= 0:
            raise ValueError(f"buffer length must be positive, got {buf_len_bytes}")
        len_factor, num_factor = _LEVELS.get(accuracy_level, (1, 1))
        self.buf_len_bytes = buf_len_bytes * len_factor
        self.buf_num = 2 * num_factor
        self.buf_len_bits = self.buf_len_bytes << 3
        self._offset_mask = PRIME_ARRAY_LEN * self.buf_num - 1
        self._primes = _prime_array(PRIME_ARRAY_LEN * self.buf_num)
        self._buffer = bytearray(self.buf_len_bytes * self.buf_num)
        self._lock = threading.Lock()
        self.total_reads = 0
        self.dup_reads = 0

    def seq_to_int_vector(
        self, seq: str, pos_offset: int = 0, output: list[int] | None = None
    ) -> list[int]:
        """Add the hashes of ``seq`` to ``output`` (zeros if None) and return them.

        ``pos_offset`` is the position of ``seq`` within a longer sequence.
        """
        values = list(output) if output is not None else [0] * self.buf_num
        if len(values) != self.buf_num:
            raise ValueError(f"expected {self.buf_num} hash values, got {len(values)}")
        for p, c in enumerate(seq):
            position = p + pos_offset
            weight = _BASE_CODES.get(c, _OTHER_BASE_CODE) + position
            for i in range(self.buf_num):
                offset = (position * self.buf_num + i) & self._offset_mask
                values[i] = (values[i] + self._primes[offset] * weight) & _UINT64_MASK
        return values

    def _apply_bloom_filter(self, positions: list[int]) -> bool:
        is_dup = True
        for i, value in enumerate(positions):
            pos = value % self.buf_len_bits
            index = i * self.buf_len_bytes + (pos >> 3)
            bit = 1 << (pos & 0x07)
            previous = self._buffer[index]
            self._buffer[index] = previous | bit
            is_dup = (previous & bit) != 0
        return is_dup

    def _record(self, positions: list[int]) -> bool:
        with self._lock:
            is_dup = self._apply_bloom_filter(positions)
            self.total_reads += 1
            if is_dup:
                self.dup_reads += 1
        return is_dup

    def check_read(self, read: Read) -> bool:
        """Record a single read and tell whether it was seen before."""
        return self._record(self.seq_to_int_vector(read.seq))

    def check_pair(self, r1: Read, r2: Read) -> bool:
        """Record a read pair and tell whether it was seen before."""
        positions = self.seq_to_int_vector(r1.seq)
        positions = self.seq_to_int_vector(r2.seq, r1.length(), positions)
        return self._record(positions)

    def dup_rate(self) -> float:
        """Fraction of recorded reads or pairs that were duplicates."""
        if self.total_reads == 0:
            return 0.0
        return self.dup_reads / self.total_reads