"""
Boundary Matrix Reduction
=========================
Brings a boundary matrix into reduced form over GF(2): afterwards no two
non-empty columns share the same low (largest) row index.

Two algorithms, same result:

    standard   Left to right. While column j's low is claimed by an
               earlier column k, add column k to column j.

    twist      Same inner loop, but dimensions are processed from the top
               down. Once column j is found to claim low i, column i is
               known to reduce to zero and is cleared without work.

Both produce the identical pivot map (low → column).

Usage:
    from pershom.reduce import reduce_matrix
    result = reduce_matrix(matrix, algorithm='twist')
    result.pivots        # {low: column}
    result.stats         # additions, cleared columns, pivots
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Type, Union

import numpy as np

from pershom.config import get as get_config
from pershom.errors import FiltrationError
from pershom.matrix import BoundaryMatrix, MatrixState

logger = logging.getLogger(__name__)


@dataclass
class ReductionStats:
    """Counters for a single reduction run."""
    column_additions: int = 0
    cleared_columns: int = 0
    pivots: int = 0


@dataclass
class ReductionResult:
    """
    Reduced matrix plus its pivot map.

    - matrix: the reduced matrix (the input itself unless copy=True)
    - pivots: low row index → column index, injective
    - stats: work counters
    - algorithm: name of the algorithm that produced it
    """
    matrix: BoundaryMatrix
    pivots: Dict[int, int]
    stats: ReductionStats = field(default_factory=ReductionStats)
    algorithm: str = ''

    @property
    def lows(self) -> List[Optional[int]]:
        """Low of every column after reduction, None for empty columns."""
        lows: List[Optional[int]] = [None] * self.matrix.size()
        for low, j in self.pivots.items():
            lows[j] = low
        return lows

    def pivot_array(self) -> np.ndarray:
        """(k, 2) int64 array of (low, column) rows, sorted by low."""
        if not self.pivots:
            return np.empty((0, 2), dtype=np.int64)
        return np.array(sorted(self.pivots.items()), dtype=np.int64)


class ReductionAlgorithm(ABC):
    """
    Base class. Subclasses decide the column order; the inner elimination
    loop and the state transitions live here.
    """

    name = ''

    def __call__(self, matrix: BoundaryMatrix, copy: bool = False) -> ReductionResult:
        if matrix.state is MatrixState.REDUCING:
            raise RuntimeError(
                "Matrix is already being reduced (or a previous reduction aborted midway)"
            )
        if copy:
            matrix = matrix.copy()

        pivots: Dict[int, int] = {}
        stats = ReductionStats()

        logger.debug("Reducing %r with %s reduction", matrix, self.name)
        matrix.state = MatrixState.REDUCING
        self._reduce(matrix, pivots, stats)
        matrix.state = MatrixState.REDUCED
        logger.debug(
            "%s reduction done: %d pivots, %d column additions, %d cleared columns",
            self.name, stats.pivots, stats.column_additions, stats.cleared_columns,
        )

        return ReductionResult(matrix=matrix, pivots=pivots, stats=stats, algorithm=self.name)

    @abstractmethod
    def _reduce(self, matrix: BoundaryMatrix, pivots: Dict[int, int], stats: ReductionStats) -> None:
        """Reduce every column of ``matrix``, filling ``pivots`` in place."""

    @staticmethod
    def _reduce_column(
        matrix: BoundaryMatrix,
        j: int,
        pivots: Dict[int, int],
        stats: ReductionStats,
    ) -> Optional[int]:
        """
        Eliminate column j against already-claimed lows.
        Returns the low column j ends up claiming, or None if it vanished.
        """
        column = matrix.column(j)
        low = column.low()
        if low is not None and low >= j:
            raise FiltrationError(
                f"Column {j} has low {low}; faces must precede cofaces in the filtration",
                column=j, row=low,
            )

        while low is not None and low in pivots:
            column.add(matrix.column(pivots[low]))
            stats.column_additions += 1
            low = column.low()

        if low is not None:
            pivots[low] = j
            stats.pivots += 1
        return low


class StandardReduction(ReductionAlgorithm):
    """Columns in filtration order, 0 .. n-1."""

    name = 'standard'

    def _reduce(self, matrix, pivots, stats):
        for j in range(matrix.size()):
            self._reduce_column(matrix, j, pivots, stats)


class TwistReduction(ReductionAlgorithm):
    """
    Columns grouped by dimension, highest first; ascending within a group.
    A column of dimension d claiming low i clears column i, provided column i
    has dimension d-1. Any other low is left to plain elimination.
    """

    name = 'twist'

    def _reduce(self, matrix, pivots, stats):
        dims = matrix.dimensions
        for d in range(matrix.max_dimension(), -1, -1):
            for j in np.flatnonzero(dims == d):
                j = int(j)
                low = self._reduce_column(matrix, j, pivots, stats)
                if low is None or dims[low] != d - 1:
                    continue
                if not matrix.column(low).empty():
                    matrix.clear(low)
                    stats.cleared_columns += 1


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

ALGORITHMS: Dict[str, Type[ReductionAlgorithm]] = {
    StandardReduction.name: StandardReduction,
    TwistReduction.name: TwistReduction,
}


def get_algorithm(algorithm: Union[str, ReductionAlgorithm, None] = None) -> ReductionAlgorithm:
    """
    Resolve an algorithm name (or instance) to an algorithm instance.
    None means config ``reduction.algorithm``.
    """
    if isinstance(algorithm, ReductionAlgorithm):
        return algorithm
    if algorithm is None:
        algorithm = get_config('reduction.algorithm', 'standard')
    if algorithm not in ALGORITHMS:
        raise KeyError(f"Unknown algorithm: {algorithm}. Available: {sorted(ALGORITHMS)}")
    return ALGORITHMS[algorithm]()


def reduce_matrix(
    matrix: BoundaryMatrix,
    algorithm: Union[str, ReductionAlgorithm, None] = None,
    copy: bool = False,
) -> ReductionResult:
    """
    Reduce a boundary matrix.

    Parameters
    ----------
    matrix : BoundaryMatrix
        Matrix to reduce. Mutated in place unless ``copy`` is True.
    algorithm : str or ReductionAlgorithm, optional
        'standard' or 'twist'. Defaults to config ``reduction.algorithm``.
    copy : bool
        Reduce a deep copy and leave ``matrix`` untouched.

    Returns
    -------
    ReductionResult
    """
    return get_algorithm(algorithm)(matrix, copy=copy)
