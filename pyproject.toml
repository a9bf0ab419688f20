[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fastqprep"
version = "0.1.0"
description = "FASTQ preprocessing building blocks: reading, adapter trimming, quality cutting, filtering, base correction and duplication estimation"
requires-python = ">=3.10"
dependencies = []
keywords = ["fastq", "fasta", "sequencing", "adapter trimming", "quality control", "bioinformatics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fastqprep"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
