"""
Module for reading BED annotation tracks, plain or compressed.
"""
from typing import Optional


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class BedError(Exception):
    """Base class for BED reader errors."""


class BedFormatError(BedError, ValueError):
    """
    Raised when the content of a BED file cannot be decoded.

    Attributes:
        expected: Expected number of fields, for field-count mismatches.
        actual: Number of fields found, for field-count mismatches.
        field: Name of the column that failed to decode.
        line_number: 1-based line number of the offending line, if known.
    """
    def __init__(self, message: str, *, expected: Optional[int] = None, actual: Optional[int] = None,
                 field: Optional[str] = None, line_number: Optional[int] = None):
        if line_number is not None: message = f"Line {line_number}: {message}"
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.field = field
        self.line_number = line_number


class BedIOError(BedError, IOError):
    """Base class for BED I/O errors not already raised by the operating system."""


class TruncatedFileError(BedIOError):
    """Raised when a compressed file ends before its end-of-stream marker."""


class BedStateError(BedError, RuntimeError):
    """Raised when a reader or iterator is used in a state that does not allow the operation."""


class BedWarning(Warning):
    """Non-fatal notices about BED input."""


# Import submodules to expose the public API
from bedkit.io.options import ReaderConfiguration
from bedkit.io.open import Xopen, PeekableHandle
from bedkit.io.tabular import tokenize, parse_row, validate
from bedkit.io.bed import BedReader, BedIterator, IteratorState, open_bed
