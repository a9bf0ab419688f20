import pytest

from fastqprep.fasta import FastaReader

CONTIG1 = "GATCACAGGTCTATCACCCTATTAATTGGTATTTTCGTCTGGGGGGTGTGGAGCCGGAGCACCCTATGTCGCAGT"
CONTIG2 = "GTCTGCACAGCCGCTTTCCACACAGAACCCCCCCCTCCCCCCGCTTCTGGCAAACCCCAAAAACAAAGAACCCTA"


def _write(tmp_path, text, name="ref.fa"):
    path = tmp_path / name
    path.write_text(text)
    return path


def _tiny_ref(tmp_path):
    text = (
        ">contig1\n"
        + CONTIG1[:40] + "\n"
        + CONTIG1[40:] + "\n"
        + ">contig2\n"
        + CONTIG2[:30].lower() + "\n"
        + CONTIG2[30:] + "\n"
    )
    return _write(tmp_path, text)


def test_read_all_contigs(tmp_path):
    with FastaReader(_tiny_ref(tmp_path)) as reader:
        contigs = reader.read_all()
    assert contigs == {"contig1": CONTIG1, "contig2": CONTIG2}


def test_read_next_sequentially(tmp_path):
    with FastaReader(_tiny_ref(tmp_path)) as reader:
        assert reader.has_next()
        assert reader.read_next() == ("contig1", CONTIG1)
        assert reader.current_id == "contig1"
        assert reader.read_next() == ("contig2", CONTIG2)
        assert not reader.has_next()
        assert reader.read_next() is None


def test_lower_case_kept_without_forcing(tmp_path):
    with FastaReader(_tiny_ref(tmp_path), force_upper_case=False) as reader:
        contigs = reader.read_all()
    assert contigs["contig2"] == CONTIG2[:30].lower() + CONTIG2[30:]
    assert contigs["contig1"] == CONTIG1


def test_invalid_characters_removed(tmp_path):
    path = _write(tmp_path, ">seq\nAC GT12\r\nNN-*\n")
    with FastaReader(path) as reader:
        assert reader.read_all() == {"seq": "ACGTNN-*"}


def test_text_before_first_header_skipped(tmp_path):
    path = _write(tmp_path, "junk line\nmore junk\n>first\nACGT\n")
    with FastaReader(path) as reader:
        assert reader.read_all() == {"first": "ACGT"}


def test_file_without_header_has_no_contigs(tmp_path):
    path = _write(tmp_path, "ACGT\n")
    with FastaReader(path) as reader:
        assert not reader.has_next()
        assert reader.read_all() == {}


def test_directory_rejected(tmp_path):
    with pytest.raises(ValueError, match="directory"):
        FastaReader(tmp_path)


def test_missing_file_rejected(tmp_path):
    with pytest.raises(ValueError, match="could NOT read"):
        FastaReader(tmp_path / "missing.fa")