"""
Boundary matrix over GF(2).

Column j holds the row indices of the codimension-1 faces of simplex j,
where indices are positions in the filtration order. Dense-indexed,
sparse-valued: memory is proportional to the number of boundary entries.

The matrix owns its columns. Reduction mutates them in place through
column()/set_column()/clear(); nothing else does.
"""

import logging
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Type, Union

import numpy as np
from scipy import sparse

from pershom.columns import Column, VectorColumn, get_representation
from pershom.config import get as get_config
from pershom.errors import FiltrationError

logger = logging.getLogger(__name__)


class MatrixState(Enum):
    UNREDUCED = "unreduced"
    REDUCING = "reducing"
    REDUCED = "reduced"


def _check_boundary(j: int, boundary: Sequence[int]) -> None:
    """Faces strictly precede cofaces, and a face is listed once."""
    seen = set()
    for i in boundary:
        i = int(i)
        if i < 0:
            raise FiltrationError(f"Column {j} references negative row {i}", column=j, row=i)
        if i >= j:
            raise FiltrationError(
                f"Column {j} references row {i}; faces must precede cofaces in the filtration",
                column=j, row=i,
            )
        if i in seen:
            raise FiltrationError(f"Column {j} lists row {i} more than once", column=j, row=i)
        seen.add(i)


class BoundaryMatrix:
    """
    Ordered collection of columns, one per simplex.

    Parameters
    ----------
    columns : list of Column
        Column j is the boundary of simplex j. Taken over, not copied.
    dimensions : sequence of int
        Simplex dimension of every column.
    dual : bool
        True for a matrix produced by dualize() (coboundary matrix).
    primal_dimensions : sequence of int, optional
        For a dual matrix, the dimensions of the original simplices in
        original order. Defaults to ``dimensions``.
    """

    def __init__(
        self,
        columns: List[Column],
        dimensions: Sequence[int],
        dual: bool = False,
        primal_dimensions: Optional[Sequence[int]] = None,
    ):
        if len(columns) != len(dimensions):
            raise ValueError(
                f"Got {len(columns)} columns but {len(dimensions)} dimensions"
            )
        self._columns = list(columns)
        self._dimensions = np.asarray(dimensions, dtype=np.int64).reshape(-1)
        self.dual = dual
        if primal_dimensions is None:
            self.primal_dimensions = self._dimensions
        else:
            self.primal_dimensions = np.asarray(primal_dimensions, dtype=np.int64).reshape(-1)
        self.state = MatrixState.UNREDUCED

    @classmethod
    def from_boundaries(
        cls,
        boundaries: Iterable[Iterable[int]],
        dimensions: Optional[Sequence[int]] = None,
        representation: Union[str, Type[Column], None] = None,
        validate: Optional[bool] = None,
        **column_kwargs,
    ) -> 'BoundaryMatrix':
        """
        Build a matrix from per-simplex boundaries, taken verbatim.

        Parameters
        ----------
        boundaries : iterable of iterables of int
            boundaries[j] = filtration indices of the faces of simplex j.
        dimensions : sequence of int, optional
            Simplex dimensions. Defaults to ``max(len(boundary) - 1, 0)``.
        representation : str or Column subclass, optional
            Column storage. Defaults to config ``matrix.representation``.
        validate : bool, optional
            Check every row < its column and no repeated faces. Defaults to
            config ``matrix.validate``.
        column_kwargs
            Passed to the column constructor (e.g. ``dtype`` for 'vector').
        """
        column_cls = get_representation(representation)
        if validate is None:
            validate = get_config('matrix.validate', True)

        boundaries = [list(b) for b in boundaries]
        if dimensions is None:
            dimensions = [max(len(b) - 1, 0) for b in boundaries]
        else:
            dimensions = [int(d) for d in dimensions]
            if len(dimensions) != len(boundaries):
                raise FiltrationError(
                    f"Got {len(boundaries)} boundaries but {len(dimensions)} dimensions"
                )

        columns = []
        for j, boundary in enumerate(boundaries):
            if validate:
                _check_boundary(j, boundary)
                if dimensions[j] < 0:
                    raise FiltrationError(f"Column {j} has negative dimension {dimensions[j]}", column=j)
            columns.append(column_cls(boundary, validate=False, **column_kwargs))

        matrix = cls(columns, dimensions)
        logger.debug(
            "Built %d x %d boundary matrix (%s columns, %d entries)",
            matrix.size(), matrix.size(), column_cls.name, matrix.nnz(),
        )
        return matrix

    # ---------------------------------------------------------------------
    # Column access
    # ---------------------------------------------------------------------

    def size(self) -> int:
        """Number of columns (= number of simplices)."""
        return len(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def column(self, j: int) -> Column:
        return self._columns[j]

    def __iter__(self) -> Iterator[Column]:
        return iter(self._columns)

    def set_column(self, j: int, indices: Iterable[int]) -> None:
        self._columns[j].set(indices)

    def clear(self, j: int) -> None:
        self._columns[j].clear()

    def low(self, j: int) -> Optional[int]:
        return self._columns[j].low()

    def dimension(self, j: int) -> int:
        return int(self._dimensions[j])

    @property
    def dimensions(self) -> np.ndarray:
        """Per-column simplex dimension (read-only view)."""
        view = self._dimensions.view()
        view.flags.writeable = False
        return view

    def max_dimension(self) -> int:
        """Largest column dimension; 0 for an empty matrix."""
        return int(self._dimensions.max()) if self._dimensions.size else 0

    def nnz(self) -> int:
        """Total number of nonzero entries."""
        return sum(len(c) for c in self._columns)

    @property
    def representation(self) -> Optional[Type[Column]]:
        return type(self._columns[0]) if self._columns else None

    # ---------------------------------------------------------------------
    # Derived matrices
    # ---------------------------------------------------------------------

    def copy(self) -> 'BoundaryMatrix':
        """Deep copy. Columns are never shared between matrices."""
        clone = BoundaryMatrix(
            [c.copy() for c in self._columns],
            self._dimensions.copy(),
            dual=self.dual,
            primal_dimensions=self.primal_dimensions.copy(),
        )
        clone.state = self.state
        return clone

    def dualize(self) -> 'BoundaryMatrix':
        """
        Anti-transpose: entry (i, j) moves to (n-1-j, n-1-i).

        The result is the coboundary matrix of the reversed filtration;
        reducing it computes persistent cohomology, which yields the same
        pairs as homology once indices are mapped back through n-1-k.
        Dimensions become ``max_dimension - d``; dualizing a dual matrix
        gives back the original. The input is left intact.
        """
        n = self.size()
        top = self.max_dimension()
        rows: List[List[int]] = [[] for _ in range(n)]
        for j, col in enumerate(self._columns):
            for i in col:
                rows[n - 1 - i].append(n - 1 - j)

        column_cls = self.representation or get_representation()
        column_kwargs = {}
        if isinstance(self._columns[0] if self._columns else None, VectorColumn):
            column_kwargs['dtype'] = self._columns[0].dtype
        columns = [column_cls(entries, validate=False, **column_kwargs) for entries in rows]

        if self.dual:
            return BoundaryMatrix(columns, self.primal_dimensions.copy())

        dims = [top - int(d) for d in self._dimensions[::-1]]
        return BoundaryMatrix(columns, dims, dual=True, primal_dimensions=self._dimensions.copy())

    def entries(self) -> Tuple[np.ndarray, np.ndarray]:
        """(rows, cols) coordinate arrays of all nonzero entries."""
        rows = []
        cols = []
        for j, col in enumerate(self._columns):
            arr = col.to_array()
            rows.append(arr)
            cols.append(np.full(arr.size, j, dtype=np.int64))
        if not rows:
            return np.empty(0, dtype=np.int64), np.empty(0, dtype=np.int64)
        return np.concatenate(rows), np.concatenate(cols)

    def to_dense(self) -> np.ndarray:
        """n x n uint8 array. Only sensible for small matrices."""
        n = self.size()
        dense = np.zeros((n, n), dtype=np.uint8)
        rows, cols = self.entries()
        dense[rows, cols] = 1
        return dense

    def to_sparse(self) -> sparse.csc_matrix:
        """n x n scipy CSC matrix with uint8 ones."""
        n = self.size()
        rows, cols = self.entries()
        data = np.ones(rows.size, dtype=np.uint8)
        return sparse.csc_matrix((data, (rows, cols)), shape=(n, n), dtype=np.uint8)

    # ---------------------------------------------------------------------
    # Display
    # ---------------------------------------------------------------------

    def __str__(self) -> str:
        lines = []
        for j, col in enumerate(self._columns):
            entries = ' '.join(str(i) for i in col)
            lines.append(f"{j} [dim {self.dimension(j)}]: {entries}".rstrip())
        return '\n'.join(lines)

    def __repr__(self) -> str:
        name = self.representation.name if self.representation else 'none'
        return (
            f"BoundaryMatrix(n={self.size()}, nnz={self.nnz()}, "
            f"representation={name!r}, state={self.state.value!r}, dual={self.dual})"
        )
