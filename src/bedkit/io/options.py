import codecs
from dataclasses import dataclass
from typing import Optional

from bedkit.containers.record import MAX_FIELDS


# Constants ------------------------------------------------------------------------------------------------------------
_ASCII_SAMPLE = 'chr1\t0\t10\n'


# Classes --------------------------------------------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ReaderConfiguration:
    """
    Options controlling how a BedReader parses its input.
    Frozen = Immutable and Hashable.

    Attributes:
        num_fields: Expected number of fields per record. ``None`` or ``0`` infers it from the first data line.
        skip_header_lines: If True, ``#`` comment, ``track`` and ``browser`` lines are skipped. Otherwise every
            non-empty line is treated as data.
        buffer_size: Size in bytes of the buffering layer on top of the (decompressed) stream.
        encoding: Text encoding of each line. Lines are split on the byte ``\\n`` before decoding, so only
            ASCII-compatible encodings (utf-8, latin-1, ...) are accepted.
    """
    num_fields: Optional[int] = None
    skip_header_lines: bool = False
    buffer_size: int = 65536
    encoding: str = 'utf-8'

    def __post_init__(self):
        if self.num_fields is not None:
            if isinstance(self.num_fields, bool) or not isinstance(self.num_fields, int):
                raise TypeError(f"num_fields must be an int, got {type(self.num_fields).__name__}")
            if not 0 <= self.num_fields <= MAX_FIELDS:
                raise ValueError(f"num_fields must be between 0 and {MAX_FIELDS}, got {self.num_fields}")
        if self.buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {self.buffer_size}")
        try: encoded = _ASCII_SAMPLE.encode(codecs.lookup(self.encoding).name)
        except LookupError: raise ValueError(f"Unknown text encoding {self.encoding!r}") from None
        if encoded != _ASCII_SAMPLE.encode('ascii'):
            raise ValueError(f"encoding must be ASCII-compatible, got {self.encoding!r}")

    @property
    def infer_num_fields(self) -> bool:
        """True if the field count has to be read from the data."""
        return not self.num_fields
