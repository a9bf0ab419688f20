"""FASTQ/FASTA reading, adapter trimming, quality cutting, filtering, base
correction, duplication estimation and result statistics."""

__version__ = "0.1.0"