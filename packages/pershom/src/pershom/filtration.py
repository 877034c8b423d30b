"""
Filtration input container.

A filtration here is what the complex-building side hands over: simplices
in their final order, each with a dimension, a boundary (filtration
indices of its faces) and a filtration value. Nothing is reordered or
recomputed; the position in the list is the simplex's identity.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Type, Union

import numpy as np

from pershom.columns import Column
from pershom.matrix import BoundaryMatrix


@dataclass(frozen=True)
class FiltrationEntry:
    """One simplex: dimension, faces (as earlier filtration indices), value."""
    dimension: int
    boundary: Tuple[int, ...] = field(default_factory=tuple)
    value: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'boundary', tuple(int(i) for i in self.boundary))


class Filtration:
    """
    Ordered sequence of FiltrationEntry.

    Parameters
    ----------
    entries : iterable of FiltrationEntry or (dimension, boundary, value)
        Simplices in filtration order.
    """

    def __init__(self, entries: Iterable[Union[FiltrationEntry, Sequence]] = ()):
        self._entries: List[FiltrationEntry] = [
            e if isinstance(e, FiltrationEntry) else FiltrationEntry(*e)
            for e in entries
        ]

    @classmethod
    def from_boundaries(
        cls,
        boundaries: Sequence[Iterable[int]],
        values: Optional[Sequence[float]] = None,
        dimensions: Optional[Sequence[int]] = None,
    ) -> 'Filtration':
        """
        Zip parallel sequences into a filtration.
        Missing values default to the filtration index; missing dimensions
        to ``max(len(boundary) - 1, 0)``.
        """
        boundaries = [tuple(b) for b in boundaries]
        n = len(boundaries)
        if values is None:
            values = range(n)
        if dimensions is None:
            dimensions = [max(len(b) - 1, 0) for b in boundaries]
        if len(values) != n or len(dimensions) != n:
            raise ValueError(
                f"boundaries, values and dimensions must have equal length; "
                f"got {n}, {len(values)}, {len(dimensions)}"
            )
        return cls(
            FiltrationEntry(int(d), b, float(v))
            for b, v, d in zip(boundaries, values, dimensions)
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[FiltrationEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> FiltrationEntry:
        return self._entries[index]

    @property
    def dimensions(self) -> np.ndarray:
        return np.array([e.dimension for e in self._entries], dtype=np.int64)

    @property
    def values(self) -> np.ndarray:
        return np.array([e.value for e in self._entries], dtype=np.float64)

    @property
    def boundaries(self) -> List[Tuple[int, ...]]:
        return [e.boundary for e in self._entries]

    def is_monotone(self) -> bool:
        """True if filtration values never decrease along the order."""
        values = self.values
        return bool(np.all(np.diff(values) >= 0)) if values.size > 1 else True

    def boundary_matrix(
        self,
        representation: Union[str, Type[Column], None] = None,
        validate: Optional[bool] = None,
        **column_kwargs,
    ) -> BoundaryMatrix:
        """Boundary matrix with one column per entry, boundaries taken verbatim."""
        return BoundaryMatrix.from_boundaries(
            self.boundaries,
            dimensions=[e.dimension for e in self._entries],
            representation=representation,
            validate=validate,
            **column_kwargs,
        )

    def __repr__(self) -> str:
        return f"Filtration(n={len(self)})"
