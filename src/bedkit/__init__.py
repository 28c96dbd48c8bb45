"""
Top-level module: sequential reading of BED annotation tracks.

Examples:
    >>> from bedkit import open_bed
    >>> with open_bed("peaks.bed.gz") as reader:
    ...     records = list(reader)
"""
from bedkit.core.strand import Strand
from bedkit.containers.record import BedHeader, BedRecord
from bedkit.containers.batch import BedBatch
from bedkit.io import (
    BedError, BedFormatError, BedIOError, BedStateError, BedWarning, TruncatedFileError, ReaderConfiguration,
    BedReader, BedIterator, IteratorState, open_bed
)

__version__ = '0.1.0'
