import pytest

from fastqprep.evaluator import (
    compute_over_rep_seq,
    compute_seq_len,
    estimate_read_num,
    int2seq,
    is_two_color_system,
    seq2int,
)


def _write_fastq(path, records):
    lines = []
    for name, seq in records:
        lines.extend([name, seq, "+", "E" * len(seq)])
    path.write_text("\n".join(lines) + "\n")
    return str(path)


def test_round_trip_from_source():
    s = "ATCGATCGAT"
    assert int2seq(seq2int(s, 0, 10, -1), 10) == s


@pytest.mark.parametrize("seq", ["AAAAAAAAAA", "GGGGGGGGGG", "TTCAGGACTA", "CGTA"])
def test_round_trip_various(seq):
    assert int2seq(seq2int(seq, 0, len(seq)), len(seq)) == seq


def test_zero_key_is_all_a():
    assert int2seq(0, 4) == "AAAA"
    assert seq2int("AAAA", 0, 4) == 0


def test_non_acgt_gives_minus_one():
    assert seq2int("ATCNG", 0, 5) == -1
    assert seq2int("ATCGN", 1, 4, seq2int("ATCGN", 0, 4)) == -1


def test_rolling_key_equals_full_key():
    seq = "GATTACAGGCTTAACGTAGC"
    keylen = 8
    key = -1
    for pos in range(len(seq) - keylen + 1):
        key = seq2int(seq, pos, keylen, key)
        assert key == seq2int(seq, pos, keylen)


def test_two_color_detection(tmp_path):
    nova = _write_fastq(tmp_path / "a.fq", [("@A00123:1:1", "ACGT")])
    nextseq = _write_fastq(tmp_path / "b.fq", [("@NB501:2:3", "ACGT")])
    miseq = _write_fastq(tmp_path / "c.fq", [("@M01234:1:1", "ACGT")])
    empty = tmp_path / "d.fq"
    empty.write_text("")
    assert is_two_color_system(nova) is True
    assert is_two_color_system(nextseq) is True
    assert is_two_color_system(miseq) is False
    assert is_two_color_system(str(empty)) is False


def test_seq_len_is_maximum(tmp_path):
    path = _write_fastq(
        tmp_path / "r.fq",
        [("@r1", "ACGT"), ("@r2", "ACGTACGTAC"), ("@r3", "ACG")],
    )
    assert compute_seq_len(path) == 10


def test_seq_len_only_samples_first_thousand(tmp_path):
    records = [(f"@r{i}", "ACGTA") for i in range(1000)]
    records.append(("@long", "ACGTACGTACGTACGT"))
    path = _write_fastq(tmp_path / "r.fq", records)
    assert compute_seq_len(path) == 5


def test_over_rep_keeps_longest_and_drops_substrings(tmp_path):
    seq = "ACGTTGCAAGCTTACGGATCCATGCAGTCA"
    path = _write_fastq(tmp_path / "r.fq", [(f"@r{i}", seq) for i in range(200)])
    hot = compute_over_rep_seq(path, len(seq))
    assert hot == {seq[0:28]: 200, seq[1:29]: 200}


def test_over_rep_nothing_for_diverse_reads(tmp_path):
    path = _write_fastq(
        tmp_path / "r.fq",
        [("@r1", "ACGTTGCAAGCTTACGGATCCATGCAGTCA")],
    )
    assert compute_over_rep_seq(path, 30) == {}


def test_estimate_read_num_exact_for_small_file(tmp_path):
    path = _write_fastq(tmp_path / "r.fq", [(f"@r{i}", "ACGTACGT") for i in range(37)])
    assert estimate_read_num(path) == 37


def test_estimate_read_num_empty_file(tmp_path):
    empty = tmp_path / "e.fq"
    empty.write_text("")
    assert estimate_read_num(str(empty)) == 0
    assert compute_seq_len(str(empty)) == 0


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        compute_seq_len(str(tmp_path / "missing.fq"))