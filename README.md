# fastqprep

Building blocks for preprocessing FASTQ sequencing data in pure Python,
with no dependencies outside the standard library.

## Modules

- `fastqprep.fastq` — `FastqReader` reads plain or gzip-compressed FASTQ
  (or `/dev/stdin`) one `Read` at a time; `FastqReaderPair` reads two files,
  or one interleaved file, as `ReadPair` objects. Both are iterators and
  context managers. Malformed records raise `FastqFormatError`. Also
  `complement`, `is_fastq` and `is_zip_fastq`. With `phred64=True`
  qualities are converted to phred33.
- `fastqprep.fasta` — `FastaReader` reads contigs with `read_next` or
  `read_all` (which fills and returns the `contigs` dict).
- `fastqprep.matcher` — `match_with_one_insertion` and
  `diff_with_one_insertion` compare two sequences allowing one inserted base.
- `fastqprep.adaptertrimmer` — `trim_by_overlap` cuts the adapter tails of a
  pair described by an `OverlapResult`; `trim_by_sequence` and
  `trim_by_multi_sequences` cut known adapter sequences, tolerating a few
  mismatches and one inserted or deleted base.
- `fastqprep.basecorrector` — `correct_by_overlap` fixes mismatched bases in
  the overlap of a pair where one base is Q30 or better and the other Q14 or
  worse.
- `fastqprep.filter` — `ReadFilter`, configured by `FilterOptions`, applies
  quality, N-base, length and low-complexity filters (`pass_filter` returns a
  `FilterOutcome`), sliding-window quality cutting at the front, tail or
  right (`trim_and_cut`) and index barcode blacklists (`filter_by_index`).
- `fastqprep.filterresult` — `FilterResult` counts filter outcomes, trimmed
  adapters, polyX trims and corrections; `merge` sums several results, and
  `summary_lines`, `report_json`, `report_adapter_json`,
  `report_poly_x_json`, `report_html` and `report_adapter_html` render text,
  JSON and HTML fragments as strings. `ResultOptions` chooses which parts
  appear.
- `fastqprep.duplicate` — `Duplicate` estimates the duplication rate of reads
  or pairs with a Bloom filter (`check_read`, `check_pair`, `dup_rate`);
  `accuracy_level` 1 to 6 trades memory for accuracy, and `buf_len_bytes`
  sets the buffer size.
- `fastqprep.evaluator` — sampling helpers: `compute_seq_len`,
  `compute_over_rep_seq`, `estimate_read_num`, `is_two_color_system`, and the
  k-mer codecs `seq2int` / `int2seq`.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from fastqprep.fastq import FastqReader
from fastqprep.filter import FilterOptions, ReadFilter
from fastqprep.filterresult import FilterResult, ResultOptions
from fastqprep.adaptertrimmer import trim_by_sequence

read_filter = ReadFilter(FilterOptions())
result = FilterResult(ResultOptions(), False)

with FastqReader("sample.fq.gz", True, False) as reader:
    for read in reader:
        trim_by_sequence(read, result, "AGATCGGAAGAGC", False, 4)
        outcome = read_filter.pass_filter(read)
        result.add_filter_result(outcome, 1)

print("\n".join(result.summary_lines()))
```

## What it does not do

- There is no command-line program; the package is a library.
- It does not write FASTQ output, split output files or write complete
  JSON/HTML report files; the report methods return fragments as strings.
- It does not compute the overlap of a read pair: `trim_by_overlap` and
  `correct_by_overlap` take an `OverlapResult` that the caller supplies.
- It does not trim polyG/polyX tails, process UMIs, merge pairs or detect
  adapter sequences automatically; `FilterResult` only counts polyX trims
  reported to it.
- It does not run work across threads.