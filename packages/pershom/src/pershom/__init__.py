"""
pershom: Persistent Homology by Boundary Matrix Reduction
==========================================================

Input: simplices in filtration order, each with a dimension, a boundary
(filtration indices of its faces) and a filtration value.
Output: persistence pairs (birth index, death index or None, dimension)
plus the reduced matrix.

Pipeline:

    BoundaryMatrix.from_boundaries(...)   columns in vector/list/set/heap storage
    reduce_matrix(matrix, 'standard')     or 'twist'; pivot map low → column
    compute_persistence_pairs(result)     pairs, ascending birth

Usage:
    import pershom

    # Filled triangle: 3 vertices, 3 edges, 1 face
    boundaries = [[], [], [], [0, 1], [1, 2], [0, 2], [3, 4, 5]]
    pairs = pershom.persistence_pairs(boundaries)
    pairs.as_tuples()
    # → [(0, None, 0), (1, 3, 0), (2, 4, 0), (5, 6, 1)]
"""

__version__ = '0.1.0'

from pershom.columns import (
    Column,
    VectorColumn,
    ListColumn,
    SetColumn,
    HeapColumn,
    REPRESENTATIONS,
    get_representation,
)
from pershom.config import CONFIG, get as get_config, load_overrides, validate_config
from pershom.diagrams import PersistenceDiagram, calculate_persistence_diagrams, diagrams_from_pairs
from pershom.errors import CapacityError, EmptyColumnError, FiltrationError, PershomError
from pershom.filtration import Filtration, FiltrationEntry
from pershom.matrix import BoundaryMatrix, MatrixState
from pershom.pairs import (
    PersistencePair,
    PersistencePairing,
    compute_persistence_pairs,
    persistence_pairs,
)
from pershom.reduce import (
    ALGORITHMS,
    ReductionAlgorithm,
    ReductionResult,
    ReductionStats,
    StandardReduction,
    TwistReduction,
    get_algorithm,
    reduce_matrix,
)

__all__ = [
    # Columns
    'Column',
    'VectorColumn',
    'ListColumn',
    'SetColumn',
    'HeapColumn',
    'REPRESENTATIONS',
    'get_representation',
    # Matrix / input
    'BoundaryMatrix',
    'MatrixState',
    'Filtration',
    'FiltrationEntry',
    # Reduction
    'ALGORITHMS',
    'ReductionAlgorithm',
    'ReductionResult',
    'ReductionStats',
    'StandardReduction',
    'TwistReduction',
    'get_algorithm',
    'reduce_matrix',
    # Pairs / diagrams
    'PersistencePair',
    'PersistencePairing',
    'compute_persistence_pairs',
    'persistence_pairs',
    'PersistenceDiagram',
    'calculate_persistence_diagrams',
    'diagrams_from_pairs',
    # Config / errors
    'CONFIG',
    'get_config',
    'load_overrides',
    'validate_config',
    'PershomError',
    'FiltrationError',
    'CapacityError',
    'EmptyColumnError',
]
