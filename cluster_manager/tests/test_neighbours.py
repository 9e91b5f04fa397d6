"""
Tests for pair list construction.
"""

import itertools

import pytest
import numpy as np

from cluster_manager.core.neighbours import half_neighbour_list, full_neighbour_list
from cluster_manager.core.structure import Structure
from cluster_manager.utils.exceptions import ConfigurationError


def _brute_force_pairs(structure, cutoff):
    """All pairs i < j within the cutoff of a non-periodic structure."""
    positions = structure.positions
    return [(i, j) for i, j in itertools.combinations(range(len(structure)), 2)
            if np.linalg.norm(positions[j] - positions[i]) <= cutoff]


def _entries(pairs):
    """(centre, neighbour, shift) triples of a pair list."""
    centres = np.repeat(np.arange(pairs.n_parents), pairs.nb_neigh)
    return [(int(i), int(j), tuple(int(s) for s in shift))
            for i, j, shift in zip(centres, pairs.neighbours, pairs.shifts)]


class TestHalfNeighbourList:
    """Test the direct half list builder"""

    def test_linear_chain(self, linear_chain):
        pairs = half_neighbour_list(linear_chain, 1.1)
        assert pairs.neighbours.tolist() == [1, 2, 3]
        assert pairs.nb_neigh.tolist() == [1, 1, 1, 0]
        assert pairs.offsets.tolist() == [0, 1, 2, 3, 3]
        assert not pairs.shifts.any()
        pairs.check()

    def test_cutoff_is_inclusive(self, linear_chain):
        pairs = half_neighbour_list(linear_chain, 1.0)
        assert pairs.neighbours.tolist() == [1, 2, 3]

    def test_matches_brute_force(self, random_open_structure):
        pairs = half_neighbour_list(random_open_structure, 2.5)
        found = [(i, j) for i, j, _ in _entries(pairs)]
        assert found == _brute_force_pairs(random_open_structure, 2.5)

    def test_children_sorted_and_larger(self, random_open_structure):
        pairs = half_neighbour_list(random_open_structure, 3.0)
        for atom in range(pairs.n_parents):
            children = pairs.children(atom)
            assert np.all(children > atom)
            assert np.all(np.diff(children) > 0)

    def test_isolated_atom(self, three_atoms):
        pairs = half_neighbour_list(three_atoms, 1.5)
        assert pairs.neighbours.tolist() == [1]
        assert pairs.nb_neigh.tolist() == [1, 0, 0]

    def test_periodic_minimum_image(self):
        """Atoms near opposite faces are neighbours through the image at shift -1."""
        structure = Structure([[0.5, 0, 0], [9.5, 0, 0]], [1, 1], np.eye(3) * 10.0, [True] * 3)
        pairs = half_neighbour_list(structure, 1.5)
        assert pairs.neighbours.tolist() == [1]
        assert pairs.shifts.tolist() == [[-1, 0, 0]]

    def test_open_axis_has_no_image(self):
        structure = Structure([[0.5, 0, 0], [9.5, 0, 0]], [1, 1], np.eye(3) * 10.0, [False, True, True])
        pairs = half_neighbour_list(structure, 1.5)
        assert len(pairs) == 0
        assert pairs.nb_neigh.tolist() == [0, 0]

    def test_empty_structure(self):
        structure = Structure(np.zeros((0, 3)), np.zeros(0, dtype=int), np.eye(3), [False] * 3)
        pairs = half_neighbour_list(structure, 1.0)
        assert len(pairs) == 0
        assert pairs.offsets.tolist() == [0]

    def test_single_atom(self):
        structure = Structure([[0, 0, 0]], [1], np.eye(3) * 5.0, [False] * 3)
        pairs = half_neighbour_list(structure, 1.0)
        assert pairs.nb_neigh.tolist() == [0]
        assert pairs.offsets.tolist() == [0, 0]

    @pytest.mark.parametrize("cutoff", [0.0, -1.0])
    def test_invalid_cutoff(self, linear_chain, cutoff):
        with pytest.raises(ConfigurationError):
            half_neighbour_list(linear_chain, cutoff)

    def test_degenerate_periodic_cell(self, linear_chain):
        structure = Structure(linear_chain.positions, linear_chain.atom_types, np.zeros((3, 3)), [True] * 3)
        with pytest.raises(ConfigurationError):
            half_neighbour_list(structure, 1.1)
        with pytest.raises(ConfigurationError):
            half_neighbour_list(structure, 1.1, strict=False)

    def test_degenerate_open_cell(self, linear_chain):
        """Strict mode rejects a degenerate cell even when no axis is periodic."""
        structure = Structure(linear_chain.positions, linear_chain.atom_types, np.zeros((3, 3)), [False] * 3)
        with pytest.raises(ConfigurationError):
            half_neighbour_list(structure, 1.1)
        pairs = half_neighbour_list(structure, 1.1, strict=False)
        assert pairs.neighbours.tolist() == [1, 2, 3]


class TestFullNeighbourList:
    """Test the binned full list builder"""

    def test_linear_chain(self, linear_chain):
        pairs = full_neighbour_list(linear_chain, 1.1)
        assert pairs.neighbours.tolist() == [1, 0, 2, 1, 3, 2]
        assert pairs.nb_neigh.tolist() == [1, 2, 2, 1]
        assert pairs.offsets.tolist() == [0, 1, 3, 5, 6]
        pairs.check()

    def test_symmetric(self, random_periodic_structure):
        """Every entry (i, j, S) has its mirror (j, i, -S)."""
        entries = _entries(full_neighbour_list(random_periodic_structure, 3.0))
        assert entries
        mirrored = {(j, i, tuple(-s for s in shift)) for i, j, shift in entries}
        assert mirrored == set(entries)

    def test_matches_half_list(self, random_periodic_structure):
        """With a cutoff below half the cell, the j > i part of the full list is the half list."""
        half = _entries(half_neighbour_list(random_periodic_structure, 2.5))
        full = [entry for entry in _entries(full_neighbour_list(random_periodic_structure, 2.5))
                if entry[1] > entry[0]]
        assert full == half

    def test_open_matches_brute_force(self, random_open_structure):
        full = {(i, j) for i, j, _ in _entries(full_neighbour_list(random_open_structure, 2.5))}
        expected = set(_brute_force_pairs(random_open_structure, 2.5))
        assert full == expected | {(j, i) for i, j in expected}

    def test_slices_sorted(self, random_periodic_structure):
        pairs = full_neighbour_list(random_periodic_structure, 3.0)
        for atom in range(pairs.n_parents):
            start, end = pairs.offsets[atom], pairs.offsets[atom + 1]
            keys = [(int(j),) + tuple(shift) for j, shift in zip(pairs.neighbours[start:end],
                                                                 pairs.shifts[start:end].tolist())]
            assert keys == sorted(keys)

    def test_distances_within_cutoff(self, random_periodic_structure):
        structure = random_periodic_structure
        pairs = full_neighbour_list(structure, 3.0)
        centres = np.repeat(np.arange(pairs.n_parents), pairs.nb_neigh)
        vectors = structure.positions[pairs.neighbours] + pairs.shifts @ structure.cell - structure.positions[centres]
        assert np.all(np.linalg.norm(vectors, axis=1) <= 3.0)

    def test_self_images(self):
        """A single atom in a 3 Å cube sees its six face images at exactly the cutoff."""
        structure = Structure([[0, 0, 0]], [26], np.eye(3) * 3.0, [True] * 3)
        pairs = full_neighbour_list(structure, 3.0)
        assert pairs.neighbours.tolist() == [0] * 6
        assert sorted(map(tuple, pairs.shifts.tolist())) == sorted(
            [(-1, 0, 0), (1, 0, 0), (0, -1, 0), (0, 1, 0), (0, 0, -1), (0, 0, 1)])

    def test_several_images_per_neighbour(self):
        """A cutoff larger than the cell reaches second shells of images."""
        structure = Structure([[0, 0, 0]], [1], np.eye(3), [True] * 3)
        pairs = full_neighbour_list(structure, 1.5)
        # 6 face and 12 edge images
        assert len(pairs) == 18
        assert len({tuple(shift) for shift in pairs.shifts.tolist()}) == 18

    def test_empty_structure(self):
        structure = Structure(np.zeros((0, 3)), np.zeros(0, dtype=int), np.eye(3), [True] * 3)
        pairs = full_neighbour_list(structure, 1.0)
        assert len(pairs) == 0
        assert pairs.offsets.tolist() == [0]

    def test_lenient_degenerate_cell(self, linear_chain):
        structure = Structure(linear_chain.positions, linear_chain.atom_types, np.zeros((3, 3)), [False] * 3)
        pairs = full_neighbour_list(structure, 1.1, strict=False)
        assert pairs.neighbours.tolist() == [1, 0, 2, 1, 3, 2]
        with pytest.raises(ConfigurationError):
            full_neighbour_list(structure, 1.1)
