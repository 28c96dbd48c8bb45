"""
Sequential BED reader.

A BedReader owns a layered stream (file, optional decompressor, buffer), resolves the number of fields per record
once, and hands out a single forward-only iterator that decodes and validates one line at a time.
"""
from enum import Enum, auto
from pathlib import Path
from typing import Union, BinaryIO, Optional, Generator
from warnings import warn

from bedkit.containers.batch import BedBatch
from bedkit.containers.record import BedHeader, BedRecord, MIN_FIELDS, MAX_FIELDS
from bedkit.io import BedFormatError, BedStateError, BedWarning, TruncatedFileError
from bedkit.io.open import Xopen
from bedkit.io.options import ReaderConfiguration
from bedkit.io.tabular import tokenize, parse_row, validate, is_header_line


# Classes --------------------------------------------------------------------------------------------------------------
class IteratorState(Enum):
    """Lifecycle of a BedIterator."""
    READY = auto()
    ACTIVE = auto()
    EXHAUSTED = auto()
    CLOSED = auto()


class BedIterator:
    """
    Forward-only, single-pass iterator over the records of a BedReader.

    A ``BedFormatError`` raised by ``__next__`` leaves the iterator active and positioned after the offending line,
    so calling ``next`` again continues with the following record.

    Examples:
        >>> it = reader.iterate()
        >>> first = next(it)
    """
    __slots__ = ('_reader', '_state')

    def __init__(self, reader: 'BedReader'):
        self._reader = reader
        self._state = IteratorState.READY

    @property
    def state(self) -> IteratorState: return self._state
    @property
    def line_number(self) -> int:
        """Number of lines consumed from the stream so far."""
        return self._reader._line_number

    def __iter__(self): return self

    def __next__(self) -> BedRecord:
        if self._state is IteratorState.CLOSED:
            raise BedStateError("Cannot read from a closed BedReader")
        if self._state is IteratorState.EXHAUSTED: raise StopIteration
        self._state = IteratorState.ACTIVE
        if (record := self._reader._next_record()) is None:
            self._state = IteratorState.EXHAUSTED
            raise StopIteration
        return record

    def _close(self): self._state = IteratorState.CLOSED
    def __repr__(self): return f"<BedIterator: {self._state.name} at line {self.line_number}>"


class BedReader:
    """
    Reader for BED format files, plain or compressed (gzip/BGZF, bzip2, xz, zstd).

    The number of fields per record is taken from ``config.num_fields`` or, if unset, from the first data line.
    Every record is validated against it. The reader is single-pass: it hands out one iterator, and reading the
    file again requires a new reader.

    Examples:
        >>> with BedReader("peaks.bed.gz") as reader:
        ...     print(reader.header.num_fields)
        ...     for record in reader:
        ...         print(record.reference_name, record.start, record.end)
    """
    __slots__ = ('_config', '_opener', '_handle', '_header', '_pending', '_line_number', '_iterator', '_closed')

    def __init__(self, file: Union[str, Path, BinaryIO], config: Optional[ReaderConfiguration] = None, **options):
        """
        Opens the file and resolves the header.

        Args:
            file: Path to the BED file, ``'-'`` for stdin, or a binary file object (left open on close).
            config: Reader options. Mutually exclusive with ``options``.
            **options: Keyword arguments for a new ReaderConfiguration.

        Raises:
            OSError: If the file cannot be opened or read.
            BedFormatError: If the number of fields cannot be determined.
            TypeError: If both ``config`` and keyword options are given.
        """
        if config is None: config = ReaderConfiguration(**options)
        elif options: raise TypeError("Pass either a ReaderConfiguration or keyword options, not both")
        self._config = config
        self._opener = Xopen(file, buffer_size=config.buffer_size)
        self._handle = None
        self._pending: Optional[tuple[int, str]] = None
        self._line_number = 0
        self._iterator: Optional[BedIterator] = None
        self._closed = False
        try:
            self._handle = self._opener.open()
            self._header = self._resolve_header()
        except BaseException:
            self._closed = True
            self._opener.close()
            raise

    @classmethod
    def open(cls, file: Union[str, Path, BinaryIO], config: Optional[ReaderConfiguration] = None,
             **options) -> 'BedReader':
        return cls(file, config, **options)

    @property
    def header(self) -> BedHeader: return self._header
    @property
    def config(self) -> ReaderConfiguration: return self._config
    @property
    def closed(self) -> bool: return self._closed
    @property
    def compression(self) -> Optional[str]:
        """Compression detected from the magic bytes, or None for plain text."""
        return self._opener.compression
    @property
    def name(self) -> str: return self._opener.name

    def __repr__(self):
        return f"<BedReader: {self.name!r}, num_fields={self._header.num_fields}, closed={self._closed}>"

    def __enter__(self): return self
    def __exit__(self, exc_type, exc_val, exc_tb): self.close()
    def __iter__(self) -> BedIterator: return self.iterate()

    def _read_line(self) -> Optional[tuple[int, str]]:
        """Returns the next data line and its 1-based line number, or None at the end of the stream."""
        encoding = self._config.encoding
        skip_header_lines = self._config.skip_header_lines
        while True:
            try: raw = self._handle.readline()
            except EOFError as e:
                raise TruncatedFileError(f"{self.name} ended unexpectedly after line {self._line_number}") from e
            if not raw: return None
            self._line_number += 1
            try: line = raw.decode(encoding)
            except UnicodeDecodeError as e:
                raise BedFormatError(f"Not valid {encoding} text ({e.reason})",
                                     line_number=self._line_number) from None
            if not line.strip(): continue
            if skip_header_lines and is_header_line(line): continue
            return self._line_number, line

    def _resolve_header(self) -> BedHeader:
        if not self._config.infer_num_fields:
            num_fields = self._config.num_fields
        else:
            # The peeked line is replayed as the first record
            if (entry := self._read_line()) is None: return BedHeader(0)
            self._pending = entry
            line_number, line = entry
            if is_header_line(line):
                warn(f"{self.name}: line {line_number} looks like a comment, track or browser line but is read as "
                     f"data; pass skip_header_lines=True to ignore such lines", BedWarning)
            num_fields = len(tokenize(line))
        if not MIN_FIELDS <= num_fields <= MAX_FIELDS:
            raise BedFormatError(
                f"Cannot determine BED field count: {num_fields} is outside {MIN_FIELDS}-{MAX_FIELDS}",
                actual=num_fields, line_number=self._pending[0] if self._pending else None
            )
        return BedHeader(num_fields)

    def _next_record(self) -> Optional[BedRecord]:
        if self._pending is not None: entry, self._pending = self._pending, None
        else: entry = self._read_line()
        if entry is None: return None
        line_number, line = entry
        tokens = tokenize(line)
        validate(len(tokens), self._header, line_number)
        return parse_row(tokens, line_number)

    def validate(self, token_count: int):
        """
        Checks a token count against the header.

        Args:
            token_count: Number of tab-separated tokens.

        Raises:
            BedFormatError: If ``token_count != header.num_fields``; ``expected`` and ``actual`` are set.
        """
        validate(token_count, self._header)

    def iterate(self) -> BedIterator:
        """
        Returns the iterator over this reader's records.

        Raises:
            BedStateError: If the reader is closed or an iterator was already handed out.
        """
        if self._closed: raise BedStateError(f"Cannot iterate over a closed BedReader ({self.name})")
        if self._iterator is not None:
            if self._iterator.state is IteratorState.EXHAUSTED:
                raise BedStateError("BedReader is single-pass and its records have been consumed; open a new reader")
            raise BedStateError("BedReader already has an active iterator; only one may consume the stream")
        self._iterator = BedIterator(self)
        return self._iterator

    def batches(self, size: int = 1024) -> Generator[BedBatch, None, None]:
        """
        Yields records in columnar batches.

        Args:
            size: Number of records per batch.

        Yields:
            BedBatch objects.
        """
        if size < 1: raise ValueError(f"Batch size must be positive, got {size}")
        batch_records = []
        for record in self.iterate():
            batch_records.append(record)
            if len(batch_records) >= size:
                yield BedBatch.build(batch_records)
                batch_records = []
        if batch_records: yield BedBatch.build(batch_records)

    def close(self):
        """
        Closes the stream chain. Calling it again is a no-op.

        Raises:
            OSError: If a layer of the stream fails to close.
        """
        if self._closed: return
        self._closed = True
        self._pending = None
        if self._iterator is not None: self._iterator._close()
        self._handle = None
        self._opener.close()


# Functions ------------------------------------------------------------------------------------------------------------
def open_bed(file: Union[str, Path, BinaryIO], config: Optional[ReaderConfiguration] = None,
             **options) -> BedReader:
    """
    Opens a BED file for sequential reading.

    Args:
        file: Path to the file, ``'-'`` for stdin, or a binary file object.
        config: Reader options.
        **options: Keyword arguments for a ReaderConfiguration, if ``config`` is not given.

    Returns:
        A ready-to-iterate BedReader.

    Examples:
        >>> reader = open_bed("exons.bed", num_fields=12)
    """
    return BedReader.open(file, config, **options)
