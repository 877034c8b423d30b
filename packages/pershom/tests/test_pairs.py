"""Tests for persistence pair extraction."""
import math
from itertools import combinations

import numpy as np
import pytest

from pershom.filtration import Filtration
from pershom.matrix import BoundaryMatrix
from pershom.pairs import (
    PersistencePair,
    PersistencePairing,
    compute_persistence_pairs,
    persistence_pairs,
)
from pershom.reduce import reduce_matrix


SINGLE_POINT = [[]]
EDGE = [[], [], [0, 1]]
HOLLOW_TRIANGLE = [[], [], [], [0, 1], [1, 2], [0, 2]]
FILLED_TRIANGLE = [[], [], [], [0, 1], [1, 2], [0, 2], [3, 4, 5]]


def _random_sphere_filtration(rng):
    """Boundary of a tetrahedron, vertices first, then a random valid order."""
    simplices = [s for k in (1, 2, 3) for s in combinations(range(4), k)]
    vertex_values = rng.random(4)
    order = sorted(simplices, key=lambda s: (max(vertex_values[v] for v in s), len(s)))
    index = {s: i for i, s in enumerate(order)}
    return [
        [index[f] for f in combinations(s, len(s) - 1)] if len(s) > 1 else []
        for s in order
    ]


# ---------------------------------------------------------------------------
# Concrete scenarios
# ---------------------------------------------------------------------------

class TestScenarios:

    def test_single_point(self):
        pairs = persistence_pairs(SINGLE_POINT)
        assert pairs.as_tuples() == [(0, None, 0)]

    def test_edge(self):
        # The younger endpoint (larger index) dies when the edge appears
        pairs = persistence_pairs(EDGE)
        assert pairs.as_tuples() == [(0, None, 0), (1, 2, 0)]

    def test_hollow_triangle(self):
        pairs = persistence_pairs(HOLLOW_TRIANGLE)
        assert pairs.as_tuples() == [(0, None, 0), (1, 3, 0), (2, 4, 0), (5, None, 1)]
        assert pairs.betti(0) == 1
        assert pairs.betti(1) == 1

    def test_filled_triangle(self):
        pairs = persistence_pairs(FILLED_TRIANGLE)
        assert pairs.as_tuples() == [(0, None, 0), (1, 3, 0), (2, 4, 0), (5, 6, 1)]
        assert pairs.betti(0) == 1
        assert pairs.betti(1) == 0
        assert (5, 6, 1) in pairs

    def test_empty(self):
        pairs = persistence_pairs([])
        assert len(pairs) == 0
        assert pairs.to_array().shape == (0, 3)

    @pytest.mark.parametrize('algorithm', ['standard', 'twist'])
    @pytest.mark.parametrize('representation', ['vector', 'list', 'set', 'heap'])
    def test_every_configuration(self, algorithm, representation):
        pairs = persistence_pairs(FILLED_TRIANGLE, representation=representation, algorithm=algorithm)
        assert pairs.as_tuples() == [(0, None, 0), (1, 3, 0), (2, 4, 0), (5, 6, 1)]


# ---------------------------------------------------------------------------
# Extraction options and sources
# ---------------------------------------------------------------------------

class TestExtraction:

    def test_from_reduced_matrix(self):
        m = BoundaryMatrix.from_boundaries(FILLED_TRIANGLE)
        reduce_matrix(m)
        from_matrix = compute_persistence_pairs(m)
        from_result = persistence_pairs(FILLED_TRIANGLE)
        assert from_matrix == from_result

    def test_unreduced_matrix_rejected(self):
        m = BoundaryMatrix.from_boundaries(FILLED_TRIANGLE)
        with pytest.raises(ValueError, match='reduced'):
            compute_persistence_pairs(m)

    def test_drop_top_dimensional_creators(self):
        pairs = persistence_pairs(HOLLOW_TRIANGLE, include_all_unpaired_creators=False)
        assert pairs.as_tuples() == [(0, None, 0), (1, 3, 0), (2, 4, 0)]

    def test_max_dimension(self):
        pairs = persistence_pairs(FILLED_TRIANGLE, max_dimension=0)
        assert pairs.dimensions() == [0]
        assert len(pairs) == 3

    def test_explicit_dimensions(self):
        m = BoundaryMatrix.from_boundaries(EDGE)
        result = reduce_matrix(m)
        pairs = compute_persistence_pairs(result, dimensions=[0, 0, 1])
        assert pairs.as_tuples() == [(0, None, 0), (1, 2, 0)]
        with pytest.raises(ValueError):
            compute_persistence_pairs(result, dimensions=[0, 0])

    def test_dualized_matches_primal(self):
        for boundaries in (EDGE, HOLLOW_TRIANGLE, FILLED_TRIANGLE):
            assert persistence_pairs(boundaries, dualize=True) == persistence_pairs(boundaries)

    def test_filtration_input(self):
        f = Filtration.from_boundaries(FILLED_TRIANGLE, values=[0, 0, 0, 1, 1, 2, 3])
        pairs = persistence_pairs(f, algorithm='twist')
        assert pairs.to_values(f.values) == [
            (0.0, math.inf, 0),
            (0.0, 1.0, 0),
            (0.0, 1.0, 0),
            (2.0, 3.0, 1),
        ]


# ---------------------------------------------------------------------------
# Invariants over random filtrations
# ---------------------------------------------------------------------------

class TestPairingInvariants:

    @pytest.mark.parametrize('algorithm', ['standard', 'twist'])
    def test_every_index_used_once(self, algorithm):
        rng = np.random.default_rng(2)
        for _ in range(10):
            boundaries = _random_sphere_filtration(rng)
            pairs = persistence_pairs(boundaries, algorithm=algorithm)
            used = []
            for p in pairs:
                used.append(p.birth)
                if p.death is not None:
                    assert p.death > p.birth
                    used.append(p.death)
            assert sorted(used) == list(range(len(boundaries)))

    def test_sphere_betti_numbers(self):
        rng = np.random.default_rng(4)
        for _ in range(10):
            pairs = persistence_pairs(_random_sphere_filtration(rng), algorithm='twist')
            assert [pairs.betti(d) for d in (0, 1, 2)] == [1, 0, 1]

    def test_death_dimension_one_above_birth(self):
        rng = np.random.default_rng(6)
        boundaries = _random_sphere_filtration(rng)
        dims = [max(len(b) - 1, 0) for b in boundaries]
        for p in persistence_pairs(boundaries).finite():
            assert dims[p.death] == p.dimension + 1

    def test_order_independent_of_algorithm(self):
        rng = np.random.default_rng(8)
        boundaries = _random_sphere_filtration(rng)
        standard = persistence_pairs(boundaries, algorithm='standard')
        twist = persistence_pairs(boundaries, algorithm='twist', dualize=True)
        assert standard.as_tuples() == twist.as_tuples()
        births = [p.birth for p in standard]
        assert births == sorted(births)


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------

class TestPairObjects:

    def test_pair_is_frozen(self):
        p = PersistencePair(1, 2, 0)
        with pytest.raises(AttributeError):
            p.birth = 3

    def test_essential(self):
        assert PersistencePair(0, None, 0).essential
        assert not PersistencePair(0, 1, 0).essential

    def test_zero_persistence_kept(self):
        f = Filtration.from_boundaries(EDGE, values=[0.5, 0.5, 0.5])
        pairs = persistence_pairs(f)
        assert (0.5, 0.5, 0) in pairs.to_values(f.values)

    def test_to_array(self):
        arr = persistence_pairs(HOLLOW_TRIANGLE).to_array()
        np.testing.assert_array_equal(arr, [[0, -1, 0], [1, 3, 0], [2, 4, 0], [5, -1, 1]])

    def test_pairing_sorted_by_birth(self):
        pairing = PersistencePairing([PersistencePair(4, None, 1), PersistencePair(1, 2, 0)])
        assert [p.birth for p in pairing] == [1, 4]
        assert pairing[0] == PersistencePair(1, 2, 0)
        assert len(pairing.essential()) == 1
        assert pairing.by_dimension(1) == [PersistencePair(4, None, 1)]
