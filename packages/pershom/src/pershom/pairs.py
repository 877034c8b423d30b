"""
Persistence pair extraction.

Turns a reduced boundary matrix into (birth, death, dimension) triples of
filtration indices:

    pivot (low, j)                     → (low, j, dim(low))
    index in no pivot, as row or col   → (i, None, dim(i))   essential

Zero-persistence pairs (equal filtration values at birth and death) are
kept; dropping them is up to whoever consumes the pairs.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Type, Union

import numpy as np

from pershom.columns import Column
from pershom.config import get as get_config
from pershom.filtration import Filtration
from pershom.matrix import BoundaryMatrix, MatrixState
from pershom.reduce import ReductionAlgorithm, ReductionResult, reduce_matrix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PersistencePair:
    """A feature born at index ``birth`` and destroyed at ``death`` (None = never)."""
    birth: int
    death: Optional[int]
    dimension: int

    @property
    def essential(self) -> bool:
        return self.death is None

    def as_tuple(self) -> Tuple[int, Optional[int], int]:
        return (self.birth, self.death, self.dimension)

    def values(self, values: Sequence[float]) -> Tuple[float, float]:
        """(birth value, death value) with inf for an essential pair."""
        death = float('inf') if self.death is None else float(values[self.death])
        return float(values[self.birth]), death


class PersistencePairing:
    """
    Immutable collection of PersistencePair, ordered by ascending birth.
    """

    def __init__(self, pairs: Iterable[PersistencePair] = ()):
        self._pairs: Tuple[PersistencePair, ...] = tuple(sorted(pairs, key=lambda p: p.birth))

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[PersistencePair]:
        return iter(self._pairs)

    def __getitem__(self, index: int) -> PersistencePair:
        return self._pairs[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, PersistencePairing):
            return NotImplemented
        return self._pairs == other._pairs

    def __contains__(self, item) -> bool:
        if isinstance(item, tuple):
            item = PersistencePair(*item)
        return item in self._pairs

    def essential(self) -> List[PersistencePair]:
        return [p for p in self._pairs if p.essential]

    def finite(self) -> List[PersistencePair]:
        return [p for p in self._pairs if not p.essential]

    def by_dimension(self, dimension: int) -> List[PersistencePair]:
        return [p for p in self._pairs if p.dimension == dimension]

    def dimensions(self) -> List[int]:
        """Dimensions that have at least one pair, ascending."""
        return sorted({p.dimension for p in self._pairs})

    def betti(self, dimension: int) -> int:
        """Number of essential classes in ``dimension``."""
        return sum(1 for p in self._pairs if p.essential and p.dimension == dimension)

    def as_tuples(self) -> List[Tuple[int, Optional[int], int]]:
        return [p.as_tuple() for p in self._pairs]

    def to_array(self) -> np.ndarray:
        """(n_pairs, 3) int64 array of birth, death, dimension; death -1 if essential."""
        if not self._pairs:
            return np.empty((0, 3), dtype=np.int64)
        return np.array(
            [(p.birth, -1 if p.death is None else p.death, p.dimension) for p in self._pairs],
            dtype=np.int64,
        )

    def to_values(self, values: Sequence[float]) -> List[Tuple[float, float, int]]:
        """Map index pairs to (birth value, death value or inf, dimension)."""
        return [p.values(values) + (p.dimension,) for p in self._pairs]

    def __repr__(self) -> str:
        return f"PersistencePairing({len(self)} pairs, {len(self.essential())} essential)"


def _pivots_from_matrix(matrix: BoundaryMatrix) -> dict:
    pivots = {}
    for j, column in enumerate(matrix):
        low = column.low()
        if low is None:
            continue
        if low in pivots:
            raise ValueError(
                f"Columns {pivots[low]} and {j} share low {low}; matrix is not reduced"
            )
        pivots[low] = j
    return pivots


def compute_persistence_pairs(
    source: Union[ReductionResult, BoundaryMatrix],
    dimensions: Optional[Sequence[int]] = None,
    include_all_unpaired_creators: Optional[bool] = None,
    max_dimension: Optional[int] = None,
) -> PersistencePairing:
    """
    Extract persistence pairs from a reduction.

    Parameters
    ----------
    source : ReductionResult or BoundaryMatrix
        A reduction result, or a matrix already in REDUCED state.
    dimensions : sequence of int, optional
        Simplex dimension per filtration index. Defaults to the matrix's
        own (original, for a dual matrix).
    include_all_unpaired_creators : bool, optional
        If False, essential pairs in the top dimension are dropped: such
        simplices cannot be destroyed within the complex. Defaults to
        config ``pairs.include_all_unpaired_creators``.
    max_dimension : int, optional
        Keep only pairs of dimension <= max_dimension.

    Returns
    -------
    PersistencePairing
    """
    if isinstance(source, ReductionResult):
        matrix = source.matrix
        pivots = source.pivots
    else:
        matrix = source
        if matrix.state is not MatrixState.REDUCED:
            raise ValueError(f"Matrix must be reduced before pair extraction (state: {matrix.state.value})")
        pivots = _pivots_from_matrix(matrix)

    if include_all_unpaired_creators is None:
        include_all_unpaired_creators = get_config('pairs.include_all_unpaired_creators', True)

    n = matrix.size()
    dims = np.asarray(matrix.primal_dimensions if dimensions is None else dimensions, dtype=np.int64)
    if dims.size != n:
        raise ValueError(f"Got {dims.size} dimensions for a matrix of size {n}")
    top = int(dims.max()) if dims.size else 0

    pairs = []
    paired = np.zeros(n, dtype=bool)
    for low, j in pivots.items():
        if matrix.dual:
            birth, death = n - 1 - j, n - 1 - low
        else:
            birth, death = low, j
        paired[birth] = paired[death] = True
        pairs.append(PersistencePair(birth, death, int(dims[birth])))

    for i in np.flatnonzero(~paired):
        i = int(i)
        d = int(dims[i])
        if not include_all_unpaired_creators and d == top:
            continue
        pairs.append(PersistencePair(i, None, d))

    if max_dimension is not None:
        pairs = [p for p in pairs if p.dimension <= max_dimension]

    pairing = PersistencePairing(pairs)
    logger.debug(
        "Extracted %d persistence pairs (%d essential) from %d columns",
        len(pairing), len(pairing.essential()), n,
    )
    return pairing


def persistence_pairs(
    filtration: Union[Filtration, Sequence[Iterable[int]]],
    dimensions: Optional[Sequence[int]] = None,
    representation: Union[str, Type[Column], None] = None,
    algorithm: Union[str, ReductionAlgorithm, None] = None,
    dualize: bool = False,
    include_all_unpaired_creators: Optional[bool] = None,
    max_dimension: Optional[int] = None,
) -> PersistencePairing:
    """
    Full pipeline: build matrix → reduce → extract pairs.

    Parameters
    ----------
    filtration : Filtration or sequence of boundaries
        Simplices in filtration order.
    dimensions : sequence of int, optional
        Only used with plain boundaries; a Filtration carries its own.
    representation, algorithm
        Column storage and reduction algorithm (config defaults).
    dualize : bool
        Reduce the anti-transposed (coboundary) matrix instead. Same pairs.
    include_all_unpaired_creators, max_dimension
        See compute_persistence_pairs().
    """
    if isinstance(filtration, Filtration):
        matrix = filtration.boundary_matrix(representation=representation)
    else:
        matrix = BoundaryMatrix.from_boundaries(
            filtration, dimensions=dimensions, representation=representation,
        )

    if dualize:
        matrix = matrix.dualize()

    result = reduce_matrix(matrix, algorithm=algorithm)
    return compute_persistence_pairs(
        result,
        include_all_unpaired_creators=include_all_unpaired_creators,
        max_dimension=max_dimension,
    )
