"""Value types produced by the BED reader: the file-wide header and one record per line."""
from dataclasses import dataclass
from typing import Optional

from bedkit.core.strand import Strand


# Constants ------------------------------------------------------------------------------------------------------------
BED_COLUMNS = (
    'chrom', 'chromStart', 'chromEnd', 'name', 'score', 'strand',
    'thickStart', 'thickEnd', 'itemRgb', 'blockCount', 'blockSizes', 'blockStarts'
)
MIN_FIELDS = 3
MAX_FIELDS = len(BED_COLUMNS)


# Classes --------------------------------------------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class BedHeader:
    """
    File-wide shape of a BED file.

    Attributes:
        num_fields: Number of tab-separated fields every record must carry. Zero for an empty file.
    """
    num_fields: int = 0

    @property
    def columns(self) -> tuple[str, ...]:
        """Names of the standard BED columns present in this file."""
        return BED_COLUMNS[:self.num_fields]


@dataclass(frozen=True, slots=True)
class BedRecord:
    """
    One decoded BED line.

    Coordinates are 0-based and half-open. Optional columns not present in the file are ``None``.

    Attributes:
        reference_name: Chromosome or contig name.
        start: Start position (inclusive).
        end: End position (exclusive).
        name: Feature name (column 4).
        score: Integer score in 0-1000 (column 5).
        strand: Strand of the feature (column 6).
        thick_start: Start of the thick (coding) part (column 7).
        thick_end: End of the thick part (column 8).
        item_rgb: Display colour as written in the file, e.g. ``255,0,0`` (column 9).
        block_count: Number of blocks/exons (column 10).
        block_sizes: Block sizes (column 11).
        block_starts: Block starts relative to ``start`` (column 12).
        num_fields: Number of columns this record was decoded from.

    Examples:
        >>> r = BedRecord('chr1', 10, 20, name='peak1')
        >>> r.length
        10
    """
    reference_name: str
    start: int
    end: int
    name: Optional[str] = None
    score: Optional[int] = None
    strand: Optional[Strand] = None
    thick_start: Optional[int] = None
    thick_end: Optional[int] = None
    item_rgb: Optional[str] = None
    block_count: Optional[int] = None
    block_sizes: Optional[tuple[int, ...]] = None
    block_starts: Optional[tuple[int, ...]] = None
    num_fields: int = MIN_FIELDS

    @property
    def length(self) -> int:
        """Length of the interval in bases."""
        return self.end - self.start

    def __repr__(self):
        return f"BedRecord({self.reference_name}:{self.start}-{self.end}, num_fields={self.num_fields})"
