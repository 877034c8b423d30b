"""
Persistence diagrams from persistence pairs.

A diagram collects the pairs of one homological dimension as points
(birth value, death value) in filtration-value space; essential classes
die at +inf. Only construction lives here: no norms, distances or
diagonal removal.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple, Type, Union

import numpy as np

from pershom.columns import Column
from pershom.filtration import Filtration
from pershom.pairs import PersistencePairing, persistence_pairs
from pershom.reduce import ReductionAlgorithm


@dataclass
class PersistenceDiagram:
    """Points (birth, death) of one dimension, in filtration values."""
    dimension: int
    points: np.ndarray = field(default_factory=lambda: np.empty((0, 2), dtype=np.float64))

    def __post_init__(self):
        self.points = np.asarray(self.points, dtype=np.float64).reshape(-1, 2)

    def __len__(self) -> int:
        return int(self.points.shape[0])

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        return ((float(b), float(d)) for b, d in self.points)

    def betti(self) -> int:
        """Number of points at infinity (essential classes)."""
        return int(np.isinf(self.points[:, 1]).sum())

    def persistence(self) -> np.ndarray:
        """death - birth per point; inf for essential classes."""
        return self.points[:, 1] - self.points[:, 0]

    def to_array(self) -> np.ndarray:
        return self.points.copy()


def diagrams_from_pairs(
    pairing: PersistencePairing,
    values: Sequence[float],
) -> List[PersistenceDiagram]:
    """
    One diagram per dimension 0..max pair dimension, points ordered as the
    pairing (ascending birth index). Dimensions without pairs get an empty
    diagram.
    """
    if not len(pairing):
        return []

    values = np.asarray(values, dtype=np.float64)
    top = max(pairing.dimensions())
    diagrams = []
    for d in range(top + 1):
        points = [p.values(values) for p in pairing.by_dimension(d)]
        diagrams.append(PersistenceDiagram(d, np.array(points, dtype=np.float64).reshape(-1, 2)))
    return diagrams


def calculate_persistence_diagrams(
    filtration: Filtration,
    representation: Union[str, Type[Column], None] = None,
    algorithm: Union[str, ReductionAlgorithm, None] = None,
    dualize: bool = False,
    include_all_unpaired_creators: Optional[bool] = None,
    max_dimension: Optional[int] = None,
) -> List[PersistenceDiagram]:
    """
    Reduce the filtration's boundary matrix and return its diagrams,
    indexed by dimension.

    Parameters
    ----------
    filtration : Filtration
        Simplices in order, with dimensions and values.
    representation, algorithm, dualize, include_all_unpaired_creators, max_dimension
        Passed through to pairs.persistence_pairs().
    """
    pairing = persistence_pairs(
        filtration,
        representation=representation,
        algorithm=algorithm,
        dualize=dualize,
        include_all_unpaired_creators=include_all_unpaired_creators,
        max_dimension=max_dimension,
    )
    return diagrams_from_pairs(pairing, filtration.values)
