"""Tests for persistence diagram construction."""
import numpy as np

from pershom.diagrams import PersistenceDiagram, calculate_persistence_diagrams, diagrams_from_pairs
from pershom.filtration import Filtration
from pershom.pairs import PersistencePair, PersistencePairing


def _filled_triangle(values=(0, 0, 0, 1, 1, 2, 3)):
    return Filtration.from_boundaries(
        [[], [], [], [0, 1], [1, 2], [0, 2], [3, 4, 5]],
        values=values,
    )


class TestCalculateDiagrams:

    def test_one_diagram_per_dimension(self):
        diagrams = calculate_persistence_diagrams(_filled_triangle())
        assert [d.dimension for d in diagrams] == [0, 1]

    def test_points(self):
        d0, d1 = calculate_persistence_diagrams(_filled_triangle())
        np.testing.assert_allclose(d0.to_array(), [[0, np.inf], [0, 1], [0, 1]])
        np.testing.assert_allclose(d1.to_array(), [[2, 3]])

    def test_betti(self):
        d0, d1 = calculate_persistence_diagrams(_filled_triangle())
        assert d0.betti() == 1
        assert d1.betti() == 0

    def test_persistence(self):
        d0, _ = calculate_persistence_diagrams(_filled_triangle())
        np.testing.assert_allclose(d0.persistence(), [np.inf, 1.0, 1.0])

    def test_hollow_triangle_loop_is_essential(self):
        f = Filtration.from_boundaries(
            [[], [], [], [0, 1], [1, 2], [0, 2]],
            values=[0, 0, 0, 1, 1, 2],
        )
        diagrams = calculate_persistence_diagrams(f, algorithm='twist', representation='heap')
        assert list(diagrams[1]) == [(2.0, np.inf)]

    def test_dualized_same_diagrams(self):
        f = _filled_triangle()
        primal = calculate_persistence_diagrams(f)
        dual = calculate_persistence_diagrams(f, dualize=True)
        for a, b in zip(primal, dual):
            np.testing.assert_array_equal(a.points, b.points)

    def test_empty_filtration(self):
        assert calculate_persistence_diagrams(Filtration()) == []


class TestDiagramObject:

    def test_missing_dimension_gets_empty_diagram(self):
        pairing = PersistencePairing([PersistencePair(0, None, 0), PersistencePair(1, None, 2)])
        diagrams = diagrams_from_pairs(pairing, [0.0, 1.0])
        assert [len(d) for d in diagrams] == [1, 0, 1]
        assert diagrams[1].points.shape == (0, 2)

    def test_default_empty(self):
        d = PersistenceDiagram(0)
        assert len(d) == 0
        assert d.betti() == 0
