import bz2
import gzip
import lzma
from pathlib import Path
from typing import Callable, Optional

import pytest


BED6_LINES = [
    'chr1\t0\t100\tpeak1\t500\t+',
    'chr1\t150\t150\tpeak2\t0\t-',
    'chr2\t10\t20\tpeak 3\t1000\t.',
]

BED12_LINE = 'chr7\t127471196\t127472363\tPos1\t0\t+\t127471196\t127472363\t255,0,0\t2\t100,200,\t0,967,'


def _compress(data: bytes, compression: Optional[str]) -> bytes:
    if compression is None: return data
    if compression == 'gzip': return gzip.compress(data)
    if compression == 'bz2': return bz2.compress(data)
    if compression == 'lzma': return lzma.compress(data)
    if compression == 'zstandard':
        zstandard = pytest.importorskip('zstandard')
        return zstandard.ZstdCompressor().compress(data)
    raise ValueError(compression)


@pytest.fixture
def write_bed(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing BED lines to a file, optionally compressed."""
    def _write(lines: list[str], name: str = 'test.bed', compression: Optional[str] = None,
               trailing_newline: bool = True) -> Path:
        text = '\n'.join(lines)
        if lines and trailing_newline: text += '\n'
        path = tmp_path / name
        path.write_bytes(_compress(text.encode('utf-8'), compression))
        return path
    return _write


@pytest.fixture
def bed6(write_bed) -> Path:
    return write_bed(BED6_LINES)
