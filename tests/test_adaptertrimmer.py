import pytest

from fastqprep.adaptertrimmer import (
    OverlapResult,
    trim_by_multi_sequences,
    trim_by_overlap,
    trim_by_sequence,
)
from fastqprep.fastq import Read
from fastqprep.filterresult import FilterResult, ResultOptions


def make_read(seq, qual=None):
    return Read("@name", seq, "+", qual if qual is not None else "E" * len(seq))


def test_trim_by_sequence_source_case():
    read = Read(
        "@name",
        "TTTTAACCCCCCCCCCCCCCCCCCCCCCCCCCCCAATTTTAAAATTTTCCCCGGGG",
        "+",
        "///EEEEEEEEEEEEEEEEEEEEEEEEEE////EEEEEEEEEEEEE////E////E",
    )
    assert trim_by_sequence(read, None, "TTTTCCACGGGGATACTACTG") is True
    assert read.seq == "TTTTAACCCCCCCCCCCCCCCCCCCCCCCCCCCCAATTTTAAAA"
    assert len(read.quality) == len(read.seq)


def test_trim_by_multi_sequences_source_case():
    read = Read(
        "@name",
        "TTTTAACCCCCCCCCCCCCCCCCCCCCCCCCCCCAATTTTAAAATTTTCCCCGGGGAAATTTCCCGGGAAATTTCCCGGGATCGATCGATCGATCGAATTCC",
        "+",
        "///EEEEEEEEEEEEEEEEEEEEEEEEEE////EEEEEEEEEEEEE////E////EEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEE",
    )
    adapters = [
        "GCTAGCTAGCTAGCTA",
        "AAATTTCCCGGGAAATTTCCCGGG",
        "ATCGATCGATCGATCG",
        "AATTCCGGAATTCCGG",
    ]
    assert trim_by_multi_sequences(read, None, adapters) is True
    assert read.seq == "TTTTAACCCCCCCCCCCCCCCCCCCCCCCCCCCCAATTTTAAAATTTTCCCCGGGG"


def test_trim_by_multi_sequences_records_whole_tail():
    original = (
        "TTTTAACCCCCCCCCCCCCCCCCCCCCCCCCCCCAATTTTAAAATTTTCCCCGGGG"
        "AAATTTCCCGGGAAATTTCCCGGGATCGATCGATCGATCGAATTCC"
    )
    read = make_read(original)
    fr = FilterResult(ResultOptions())
    adapters = ["AAATTTCCCGGGAAATTTCCCGGG", "ATCGATCGATCGATCG"]
    assert trim_by_multi_sequences(read, fr, adapters, False, True)
    assert fr.adapter1 == {original[read.length():]: 1}
    assert fr.trimmed_adapter_reads == 1
    assert fr.trimmed_adapter_bases == len(original) - read.length()


def test_trim_by_multi_sequences_without_counter_increment():
    original = "TTTTAACCCCCCCCCCCCCCCCCCCCCCCCCCCCAATTTTAAAATTTTCCCCGGGGAAATTTCCCGGGAAATTTCCCGGG"
    read = make_read(original)
    fr = FilterResult(ResultOptions())
    assert trim_by_multi_sequences(read, fr, ["AAATTTCCCGGGAAATTTCCCGGG"], True, False)
    assert fr.trimmed_adapter_reads == 0
    assert fr.adapter2 == {original[read.length():]: 1}


def test_adapter_shorter_than_match_requirement_is_ignored():
    read = make_read("ACGTACGTACGTACGTACGT")
    assert trim_by_sequence(read, None, "ACG") is False
    assert read.seq == "ACGTACGTACGTACGTACGT"


def test_adapter_missing_first_base_empties_read():
    adapter = "AGATCGGAAGAGCACA"
    read = make_read(adapter[1:] + "T" * 20)
    fr = FilterResult(ResultOptions())
    assert trim_by_sequence(read, fr, adapter) is True
    assert read.seq == ""
    assert read.quality == ""
    assert fr.adapter1 == {adapter[:-1]: 1}


def test_adapter_in_read_middle_is_cut_and_recorded_as_r2():
    insert = "CCCCCCCCCCGGGGGGGGGGCCCCCCCCCC"
    adapter = "AGATCGGAAGAGCACA"
    read = make_read(insert + adapter + "TTTT")
    fr = FilterResult(ResultOptions())
    assert trim_by_sequence(read, fr, adapter, True) is True
    assert read.seq == insert
    assert fr.adapter2 == {adapter + "TTTT": 1}
    assert fr.adapter1 == {}


def test_trim_by_overlap_negative_offset():
    r1 = make_read("ACGTACGTACGTACGTAGATCGGA")
    r2 = make_read("TGCATGCATGCATGCATCTAGCAA")
    fr = FilterResult(ResultOptions(paired=True))
    ov = OverlapResult(overlapped=True, offset=-4, overlap_len=20, diff=0)
    seq1, seq2 = r1.seq, r2.seq
    assert trim_by_overlap(r1, r2, fr, ov) is True
    assert r1.seq == seq1[:20]
    assert r2.seq == seq2[:20]
    assert fr.adapter1 == {seq1[20:]: 1}
    assert fr.adapter2 == {seq2[20:]: 1}
    assert fr.trimmed_adapter_reads == 2


def test_trim_by_overlap_respects_front_trimming():
    r1 = make_read("A" * 30)
    r2 = make_read("C" * 30)
    ov = OverlapResult(overlapped=True, offset=-2, overlap_len=20, diff=0)
    assert trim_by_overlap(r1, r2, None, ov, 3, 5) is True
    assert r1.length() == 20 + 5
    assert r2.length() == 20 + 3


@pytest.mark.parametrize(
    "ov",
    [
        OverlapResult(overlapped=True, offset=3, overlap_len=20, diff=0),
        OverlapResult(overlapped=False, offset=-3, overlap_len=20, diff=0),
    ],
)
def test_trim_by_overlap_leaves_other_pairs(ov):
    r1 = make_read("ACGT" * 8)
    r2 = make_read("TGCA" * 8)
    assert trim_by_overlap(r1, r2, None, ov) is False
    assert r1.seq == "ACGT" * 8
    assert r2.seq == "TGCA" * 8