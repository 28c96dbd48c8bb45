"""
This module contains the containers produced by the readers. Each record type may have a batched counterpart for
columnar processing.
"""
from abc import ABC, abstractmethod
from typing import Iterable


# Classes --------------------------------------------------------------------------------------------------------------
class Batch(ABC):
    """
    Abstract base class for all batch containers.

    Batches are columnar containers that store multiple records efficiently (SoA layout with NumPy arrays).
    They enforce the Sequence protocol (len, getitem, iter).
    """
    __slots__ = ()
    @abstractmethod
    def __len__(self) -> int: ...
    @classmethod
    @abstractmethod
    def empty(cls) -> 'Batch':
        """Creates an empty batch."""
        ...
    @classmethod
    @abstractmethod
    def build(cls, components: Iterable[object]) -> 'Batch':
        """Constructs a batch from an iterable of components."""
        ...
    @classmethod
    @abstractmethod
    def concat(cls, batches: Iterable['Batch']) -> 'Batch':
        """Concatenates multiple batches into one."""
        ...
    @abstractmethod
    def __getitem__(self, item): ...
    def __iter__(self):
        for i in range(len(self)): yield self[i]
    def __bool__(self):
        return len(self) > 0
    @property
    def nbytes(self) -> int:
        """Returns the approximate memory usage of the batch in bytes."""
        return 0
