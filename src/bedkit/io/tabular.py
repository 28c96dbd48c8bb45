"""
Tokenizing and decoding of tab-delimited BED rows.

Only the tab character separates fields, so names containing spaces survive. Each column is decoded strictly:
numeric columns must be integers, coordinates must satisfy ``0 <= start <= end``, and any failure raises
``BedFormatError`` naming the column and line.
"""
from typing import Callable, Optional

from bedkit.containers.record import BedHeader, BedRecord, MAX_FIELDS, MIN_FIELDS
from bedkit.core.strand import Strand
from bedkit.io import BedFormatError


# Constants ------------------------------------------------------------------------------------------------------------
_DELIM = '\t'
_HEADER_PREFIXES = ('#', 'track', 'browser')
MAX_SCORE = 1000


# Functions ------------------------------------------------------------------------------------------------------------
def tokenize(line: str) -> list[str]:
    """
    Splits one line into tab-separated tokens.

    Args:
        line: A line of text, with or without its line terminator.

    Returns:
        The tokens in column order.

    Examples:
        >>> tokenize('chr1\\t0\\t10\\tmy feature\\n')
        ['chr1', '0', '10', 'my feature']
    """
    return line.rstrip('\r\n').split(_DELIM)


def is_header_line(line: str) -> bool:
    """True for comment, ``track`` and ``browser`` lines."""
    return line.startswith(_HEADER_PREFIXES)


def validate(token_count: int, header: BedHeader, line_number: Optional[int] = None):
    """
    Checks a token count against the file-wide field count.

    Args:
        token_count: Number of tokens found.
        header: The resolved header.
        line_number: Line the tokens came from, for the error message.

    Raises:
        BedFormatError: If ``token_count`` differs from ``header.num_fields``.
    """
    if token_count != header.num_fields:
        raise BedFormatError(
            f"Expected {header.num_fields} fields per record but found {token_count}",
            expected=header.num_fields, actual=token_count, line_number=line_number
        )


def _parse_int(token: str, field: str, line_number: Optional[int], minimum: int = 0,
               maximum: Optional[int] = None) -> int:
    # int() accepts surrounding whitespace, underscores and signs; BED does not
    if not token.isascii() or not token.isdigit():
        raise BedFormatError(f"Invalid {field} value {token!r}: expected a non-negative integer",
                             field=field, line_number=line_number)
    value = int(token)
    if value < minimum or (maximum is not None and value > maximum):
        bound = f"between {minimum} and {maximum}" if maximum is not None else f">= {minimum}"
        raise BedFormatError(f"{field} value {value} out of range: expected {bound}",
                             field=field, line_number=line_number)
    return value


def _parse_score(token: str, field: str, line_number: Optional[int]) -> int:
    if token == '.': return 0
    return _parse_int(token, field, line_number, maximum=MAX_SCORE)


def _parse_strand(token: str, field: str, line_number: Optional[int]) -> Strand:
    try: return Strand.from_token(token)
    except ValueError as e: raise BedFormatError(str(e), field=field, line_number=line_number) from None


def _parse_text(token: str, field: str, line_number: Optional[int]) -> str:
    if not token: raise BedFormatError(f"Empty {field} value", field=field, line_number=line_number)
    return token


def _parse_int_list(token: str, field: str, line_number: Optional[int]) -> tuple[int, ...]:
    # UCSC writes a trailing comma after the last block
    items = token[:-1] if token.endswith(',') else token
    if not items: return ()
    return tuple(_parse_int(i, field, line_number) for i in items.split(','))


# Column decoders in file order: (record attribute, column name, decoder)
_COLUMNS: tuple[tuple[str, str, Callable], ...] = (
    ('reference_name', 'chrom', _parse_text),
    ('start', 'chromStart', _parse_int),
    ('end', 'chromEnd', _parse_int),
    ('name', 'name', lambda t, f, n: t),
    ('score', 'score', _parse_score),
    ('strand', 'strand', _parse_strand),
    ('thick_start', 'thickStart', _parse_int),
    ('thick_end', 'thickEnd', _parse_int),
    ('item_rgb', 'itemRgb', lambda t, f, n: t),
    ('block_count', 'blockCount', _parse_int),
    ('block_sizes', 'blockSizes', _parse_int_list),
    ('block_starts', 'blockStarts', _parse_int_list),
)


def parse_row(tokens: list[str], line_number: Optional[int] = None) -> BedRecord:
    """
    Decodes the tokens of one BED line into a record.

    The token count must already have been validated against the header; this function only checks that it is a
    legal BED width.

    Args:
        tokens: Tokens from ``tokenize``.
        line_number: Line the tokens came from, for error messages.

    Returns:
        A BedRecord with ``len(tokens)`` columns populated.

    Raises:
        BedFormatError: If a column fails to decode or ``start > end``.

    Examples:
        >>> parse_row(['chr1', '5', '5'])
        BedRecord(chr1:5-5, num_fields=3)
    """
    n = len(tokens)
    if not MIN_FIELDS <= n <= MAX_FIELDS:
        raise BedFormatError(f"BED records need {MIN_FIELDS} to {MAX_FIELDS} fields, found {n}",
                             actual=n, line_number=line_number)
    values = {attr: decode(token, column, line_number) for (attr, column, decode), token in zip(_COLUMNS, tokens)}
    if values['start'] > values['end']:
        raise BedFormatError(f"chromStart {values['start']} is greater than chromEnd {values['end']}",
                             field='chromStart', line_number=line_number)
    return BedRecord(num_fields=n, **values)
