"""Columnar batches of BED records."""
from typing import Iterable, Union

import numpy as np

from bedkit.containers import Batch
from bedkit.containers.record import BedRecord
from bedkit.core.strand import Strand


# Classes --------------------------------------------------------------------------------------------------------------
class BedBatch(Batch):
    """
    A batch of BED records with NumPy views of the numeric columns.

    The records themselves are kept so indexing returns the exact decoded record; the coordinate, strand and score
    columns are materialised as arrays for vectorised work.

    Examples:
        >>> batch = BedBatch.build([BedRecord('chr1', 0, 10), BedRecord('chr1', 5, 8)])
        >>> batch.lengths
        array([10,  3])
    """
    __slots__ = ('_records', '_starts', '_ends', '_strands', '_scores')

    def __init__(self, records: np.ndarray, starts: np.ndarray, ends: np.ndarray, strands: np.ndarray,
                 scores: np.ndarray):
        if not (len(records) == len(starts) == len(ends) == len(strands) == len(scores)):
            raise ValueError("All BedBatch columns must have the same length")
        self._records = records
        self._starts = starts
        self._ends = ends
        self._strands = strands
        self._scores = scores

    @classmethod
    def empty(cls) -> 'BedBatch':
        return cls(np.empty(0, dtype=object), np.empty(0, dtype=np.int64), np.empty(0, dtype=np.int64),
                   np.empty(0, dtype=np.int8), np.empty(0, dtype=np.int32))

    @classmethod
    def build(cls, components: Iterable[BedRecord]) -> 'BedBatch':
        records = list(components)
        if not records: return cls.empty()
        objs = np.empty(len(records), dtype=object)
        objs[:] = records
        return cls(
            objs,
            np.fromiter((r.start for r in records), dtype=np.int64, count=len(records)),
            np.fromiter((r.end for r in records), dtype=np.int64, count=len(records)),
            np.fromiter((Strand.from_symbol(r.strand) for r in records), dtype=np.int8, count=len(records)),
            # Missing scores are stored as -1
            np.fromiter((-1 if r.score is None else r.score for r in records), dtype=np.int32, count=len(records))
        )

    @classmethod
    def concat(cls, batches: Iterable['BedBatch']) -> 'BedBatch':
        batches = [b for b in batches if len(b)]
        if not batches: return cls.empty()
        if len(batches) == 1: return batches[0]
        return cls(*(np.concatenate(cols) for cols in zip(*(
            (b._records, b._starts, b._ends, b._strands, b._scores) for b in batches
        ))))

    def __len__(self) -> int: return len(self._records)

    def __getitem__(self, item: Union[int, slice, np.ndarray]) -> Union[BedRecord, 'BedBatch']:
        if isinstance(item, (int, np.integer)): return self._records[item]
        return BedBatch(self._records[item], self._starts[item], self._ends[item], self._strands[item],
                        self._scores[item])

    def __repr__(self): return f"<BedBatch: {len(self)} records>"

    @property
    def reference_names(self) -> np.ndarray:
        """Chromosome names as an object array."""
        return np.array([r.reference_name for r in self._records], dtype=object)

    @property
    def starts(self) -> np.ndarray: return self._starts
    @property
    def ends(self) -> np.ndarray: return self._ends
    @property
    def strands(self) -> np.ndarray: return self._strands
    @property
    def scores(self) -> np.ndarray: return self._scores
    @property
    def lengths(self) -> np.ndarray: return self._ends - self._starts

    @property
    def nbytes(self) -> int:
        return self._starts.nbytes + self._ends.nbytes + self._strands.nbytes + self._scores.nbytes
