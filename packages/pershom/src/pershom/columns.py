"""
Column Representations
======================
One boundary-matrix column = the set of row indices holding a 1 over GF(2).

Four interchangeable strategies:

    VectorColumn   sorted numpy array, bounded unsigned index dtype.
                   O(1) low, merge-style add.
    ListColumn     sorted Python list, two-pointer merge on add.
    SetColumn      hash set, O(1) per toggled entry, low cached.
    HeapColumn     lazy max-heap of entries; add only pushes, pairs of
                   equal entries cancel when low() inspects the top.

All of them agree on low()/empty()/iteration for the same sequence of
add() calls. "Low" is the LARGEST row index present.

Usage:
    from pershom.columns import get_representation
    Column = get_representation('heap')
    c = Column([0, 2])
    c.add(Column([1, 2]))     # → {0, 1}
    c.low()                   # → 1
"""

import heapq
from abc import ABC, abstractmethod
from collections import Counter
from typing import Dict, Iterable, Iterator, List, Optional, Type, Union

import numpy as np

from pershom.config import get as get_config
from pershom.errors import CapacityError, EmptyColumnError, FiltrationError


def _canonical(indices: Iterable[int], validate: bool = True) -> List[int]:
    """Sorted list of row indices; duplicates and negatives rejected when validating."""
    entries = sorted(int(i) for i in indices)
    if validate and entries:
        if entries[0] < 0:
            raise FiltrationError(f"Negative row index {entries[0]} in column", row=entries[0])
        for a, b in zip(entries, entries[1:]):
            if a == b:
                raise FiltrationError(f"Row index {a} appears twice in column", row=a)
    return entries


class Column(ABC):
    """
    Abstract GF(2) column.

    Subclasses implement storage; everything else (truthiness, equality,
    export) is derived from set/add/low/iteration.
    """

    name = ''

    def __init__(self, indices: Iterable[int] = (), validate: bool = True):
        self.set(indices, validate=validate)

    @abstractmethod
    def set(self, indices: Iterable[int], validate: bool = True) -> None:
        """Replace the entries of this column."""

    @abstractmethod
    def add(self, other: 'Column') -> 'Column':
        """In-place symmetric difference with ``other``. Returns self."""

    @abstractmethod
    def low(self) -> Optional[int]:
        """Largest row index, or None for an empty column."""

    @abstractmethod
    def __iter__(self) -> Iterator[int]:
        """Entries in ascending order."""

    @abstractmethod
    def copy(self) -> 'Column':
        """Independent column with the same entries."""

    def empty(self) -> bool:
        return self.low() is None

    def clear(self) -> None:
        self.set(())

    def low_or_raise(self) -> int:
        """Like low(), but an empty column raises EmptyColumnError."""
        low = self.low()
        if low is None:
            raise EmptyColumnError("low() of an empty column")
        return low

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return not self.empty()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Column):
            return NotImplemented
        return list(self) == list(other)

    def to_array(self) -> np.ndarray:
        """Entries as an ascending int64 array."""
        return np.fromiter(iter(self), dtype=np.int64)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)})"


# ---------------------------------------------------------------------------
# Sorted numpy array
# ---------------------------------------------------------------------------

class VectorColumn(Column):
    """
    Entries kept as a strictly increasing numpy array.

    Parameters
    ----------
    indices : iterable of int
        Initial row indices.
    validate : bool
        Reject duplicate / negative indices.
    dtype : str, optional
        Unsigned index type ('uint16', 'uint32', 'uint64'). Defaults to
        config ``columns.index_dtype``. Indices beyond its range raise
        CapacityError.
    """

    name = 'vector'

    def __init__(self, indices: Iterable[int] = (), validate: bool = True, dtype: Optional[str] = None):
        if dtype is None:
            dtype = get_config('columns.index_dtype', 'uint32')
        self.dtype = np.dtype(dtype)
        super().__init__(indices, validate=validate)

    def _fit(self, entries: np.ndarray) -> np.ndarray:
        if entries.size and entries.dtype != self.dtype:
            bottom = int(entries.min())
            if bottom < 0:
                raise CapacityError(
                    f"Row index {bottom} is negative and cannot be stored as {self.dtype}"
                )
            limit = np.iinfo(self.dtype).max
            top = int(entries.max())
            if top > limit:
                raise CapacityError(
                    f"Row index {top} exceeds {self.dtype} capacity ({limit})"
                )
        return entries.astype(self.dtype, copy=False)

    def set(self, indices: Iterable[int], validate: bool = True) -> None:
        entries = np.asarray(_canonical(indices, validate), dtype=np.int64)
        self._entries = self._fit(entries)

    def add(self, other: Column) -> Column:
        if isinstance(other, VectorColumn):
            theirs = self._fit(other._entries)
        else:
            theirs = self._fit(other.to_array())
        if not theirs.size:
            return self
        if not self._entries.size:
            self._entries = theirs.copy()
            return self
        self._entries = np.setxor1d(self._entries, theirs, assume_unique=True).astype(self.dtype, copy=False)
        return self

    def low(self) -> Optional[int]:
        if self._entries.size == 0:
            return None
        return int(self._entries[-1])

    def empty(self) -> bool:
        return self._entries.size == 0

    def __iter__(self) -> Iterator[int]:
        return (int(i) for i in self._entries)

    def __len__(self) -> int:
        return int(self._entries.size)

    def to_array(self) -> np.ndarray:
        return self._entries.astype(np.int64)

    def copy(self) -> 'VectorColumn':
        clone = VectorColumn.__new__(VectorColumn)
        clone.dtype = self.dtype
        clone._entries = self._entries.copy()
        return clone


# ---------------------------------------------------------------------------
# Sorted Python list
# ---------------------------------------------------------------------------

class ListColumn(Column):
    """Strictly increasing Python list; add() is a linear two-pointer merge."""

    name = 'list'

    def set(self, indices: Iterable[int], validate: bool = True) -> None:
        self._entries = _canonical(indices, validate)

    def add(self, other: Column) -> Column:
        a = self._entries
        b = other._entries if isinstance(other, ListColumn) else list(other)
        merged = []
        i = j = 0
        while i < len(a) and j < len(b):
            if a[i] < b[j]:
                merged.append(a[i])
                i += 1
            elif b[j] < a[i]:
                merged.append(b[j])
                j += 1
            else:
                # Shared entry cancels over GF(2)
                i += 1
                j += 1
        merged.extend(a[i:])
        merged.extend(b[j:])
        self._entries = merged
        return self

    def low(self) -> Optional[int]:
        return self._entries[-1] if self._entries else None

    def empty(self) -> bool:
        return not self._entries

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def copy(self) -> 'ListColumn':
        clone = ListColumn.__new__(ListColumn)
        clone._entries = list(self._entries)
        return clone


# ---------------------------------------------------------------------------
# Hash set
# ---------------------------------------------------------------------------

class SetColumn(Column):
    """Python set with a cached low; the cache is dropped on every add()."""

    name = 'set'

    def set(self, indices: Iterable[int], validate: bool = True) -> None:
        self._entries = set(_canonical(indices, validate))
        self._low = None
        self._low_valid = False

    def add(self, other: Column) -> Column:
        if isinstance(other, SetColumn):
            self._entries ^= other._entries
        else:
            self._entries.symmetric_difference_update(other)
        self._low_valid = False
        return self

    def low(self) -> Optional[int]:
        if not self._low_valid:
            self._low = max(self._entries) if self._entries else None
            self._low_valid = True
        return self._low

    def empty(self) -> bool:
        return not self._entries

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def copy(self) -> 'SetColumn':
        clone = SetColumn.__new__(SetColumn)
        clone._entries = set(self._entries)
        clone._low = self._low
        clone._low_valid = self._low_valid
        return clone


# ---------------------------------------------------------------------------
# Lazy max-heap
# ---------------------------------------------------------------------------

class HeapColumn(Column):
    """
    Max-heap (negated min-heap) that may hold an entry several times.

    An entry is present iff it occurs an odd number of times. add() pushes
    the other column's entries without merging; low() pops pairs of equal
    tops until the top occurs once.
    """

    name = 'heap'

    def set(self, indices: Iterable[int], validate: bool = True) -> None:
        self._heap = [-i for i in _canonical(indices, validate)]
        heapq.heapify(self._heap)

    def add(self, other: Column) -> Column:
        for i in other:
            heapq.heappush(self._heap, -i)
        return self

    def low(self) -> Optional[int]:
        heap = self._heap
        while heap:
            top = heapq.heappop(heap)
            if heap and heap[0] == top:
                heapq.heappop(heap)
                continue
            heapq.heappush(heap, top)
            return -top
        return None

    def _compact(self) -> None:
        counts = Counter(self._heap)
        self._heap = [i for i, c in counts.items() if c % 2]
        heapq.heapify(self._heap)

    def __iter__(self) -> Iterator[int]:
        self._compact()
        return iter(sorted(-i for i in self._heap))

    def __len__(self) -> int:
        self._compact()
        return len(self._heap)

    def copy(self) -> 'HeapColumn':
        self._compact()
        clone = HeapColumn.__new__(HeapColumn)
        clone._heap = list(self._heap)
        return clone


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

REPRESENTATIONS: Dict[str, Type[Column]] = {
    VectorColumn.name: VectorColumn,
    ListColumn.name: ListColumn,
    SetColumn.name: SetColumn,
    HeapColumn.name: HeapColumn,
}


def get_representation(representation: Union[str, Type[Column], None] = None) -> Type[Column]:
    """
    Resolve a representation name (or class) to a Column subclass.
    None means config ``matrix.representation``.
    """
    if representation is None:
        representation = get_config('matrix.representation', 'vector')
    if isinstance(representation, type) and issubclass(representation, Column):
        return representation
    if representation not in REPRESENTATIONS:
        raise KeyError(
            f"Unknown representation: {representation}. Available: {sorted(REPRESENTATIONS)}"
        )
    return REPRESENTATIONS[representation]
