"""Genomic strand representation shared by BED records and batches."""
from typing import Any, ClassVar
from enum import IntEnum


# Classes --------------------------------------------------------------------------------------------------------------
class Strand(IntEnum):
    """
    Enumeration for genomic strands.

    Examples:
        >>> Strand.from_token('-')
        <Strand.REVERSE: -1>
        >>> str(Strand.FORWARD)
        '+'
    """
    FORWARD = 1
    REVERSE = -1
    UNSTRANDED = 0
    _STR_CACHE: ClassVar[dict]
    _FROM_STR_CACHE: ClassVar[dict]

    def __str__(self): return self._STR_CACHE[self]

    @classmethod
    def from_token(cls, token: str) -> 'Strand':
        """
        Decodes a BED strand column.

        Args:
            token: One of ``+``, ``-`` or ``.``.

        Returns:
            The matching Strand.

        Raises:
            ValueError: If the token is not a strand symbol.
        """
        try: return cls._FROM_STR_CACHE[token]
        except KeyError: raise ValueError(f"Invalid strand symbol {token!r}") from None

    @classmethod
    def from_symbol(cls, s: Any) -> 'Strand':
        """Lenient conversion used when building batches from arbitrary values."""
        if s is None: return cls.UNSTRANDED
        if isinstance(s, cls): return s
        if isinstance(s, int):
            try: return cls(s)
            except ValueError: return cls.UNSTRANDED
        if isinstance(s, bytes): s = s.decode('ascii', errors='replace')
        if isinstance(s, str): return cls._FROM_STR_CACHE.get(s, cls.UNSTRANDED)
        return cls.UNSTRANDED

    @classmethod
    def _init_caches(cls):
        cls._STR_CACHE = {cls.FORWARD: '+', cls.REVERSE: '-', cls.UNSTRANDED: '.'}
        cls._FROM_STR_CACHE = {'+': cls.FORWARD, '-': cls.REVERSE, '.': cls.UNSTRANDED}


Strand._init_caches()
