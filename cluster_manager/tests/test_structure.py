"""
Tests for the structure container and lattice helper.
"""

import pytest
import numpy as np

from cluster_manager.core.structure import Structure
from cluster_manager.core.lattice import Lattice
from cluster_manager.core.managers import build_chain
from cluster_manager.utils.exceptions import ConfigurationError, StructureError


class TestStructure:
    """Test the Structure container"""

    def test_rows_are_atoms(self, linear_chain):
        assert len(linear_chain) == 4
        assert linear_chain.positions.shape == (4, 3)
        np.testing.assert_allclose(linear_chain.positions[3], [3, 0, 0])
        assert not linear_chain.is_periodic

    def test_columns_are_atoms(self):
        """A 3 x N position matrix is transposed."""
        positions = np.array([[0, 1, 2, 3], [0, 0, 0, 0], [0, 0, 0, 0]], dtype=float)
        structure = Structure(positions, [1, 1, 1, 1], np.eye(3), [True, True, True])
        assert structure.positions.shape == (4, 3)
        np.testing.assert_allclose(structure.positions[:, 0], [0, 1, 2, 3])

    def test_square_matrix_is_columns(self, three_atoms):
        """Three atoms given one per column keep their x coordinates 0, 1 and 5."""
        np.testing.assert_allclose(three_atoms.positions, [[0, 0, 0], [1, 0, 0], [5, 0, 0]])

    def test_square_matrix_as_rows(self):
        positions = [[0, 0, 0], [1, 0, 0], [5, 0, 0]]
        structure = Structure(positions, [1, 1, 1], np.eye(3) * 10.0, [False] * 3, layout="rows")
        np.testing.assert_allclose(structure.positions[:, 0], [0, 1, 5])

    def test_three_atoms_by_column_pairs(self, three_atoms):
        manager = build_chain(three_atoms, cutoff=1.5, max_order=3)
        assert [c.atoms for c in manager.iter_clusters(2)] == [(0, 1)]
        assert manager.get_nb_clusters(3) == 0

    def test_rows_layout_rejects_columns(self):
        positions = np.array([[0, 1, 2, 3], [0, 0, 0, 0], [0, 0, 0, 0]], dtype=float)
        with pytest.raises(StructureError):
            Structure(positions, [1, 1, 1, 1], np.eye(3), [True] * 3, layout="rows")

    def test_unknown_layout(self):
        with pytest.raises(StructureError):
            Structure(np.zeros((2, 3)), [1, 1], np.eye(3), [True] * 3, layout="atoms")

    def test_arrays_are_read_only(self, linear_chain):
        with pytest.raises(ValueError):
            linear_chain.positions[0, 0] = 1.0

    def test_empty_structure(self):
        structure = Structure(np.zeros((0, 3)), np.zeros(0, dtype=int), np.eye(3), [False] * 3)
        assert len(structure) == 0

    @pytest.mark.parametrize("positions, atom_types, cell, pbc", [
        (np.zeros((4, 3)), [1, 1, 1], np.eye(3), [True] * 3),
        (np.zeros(3), [1], np.eye(3), [True] * 3),
        (np.zeros((2, 3)), [1, 1], np.eye(2), [True] * 3),
        (np.zeros((2, 3)), [1, 1], np.eye(3), [True, True]),
        (np.zeros((2, 3)), [1.5, 1.0], np.eye(3), [True] * 3),
    ])
    def test_inconsistent_input(self, positions, atom_types, cell, pbc):
        with pytest.raises(StructureError):
            Structure(positions, atom_types, cell, pbc)

    def test_from_pymatgen(self, pymatgen_cubic):
        structure = Structure.from_pymatgen(pymatgen_cubic)
        assert len(structure) == 1
        assert structure.atom_types.tolist() == [26]
        assert structure.pbc.all()
        np.testing.assert_allclose(structure.cell, np.eye(3) * 3.0)

    def test_from_pymatgen_rejects_other_types(self):
        with pytest.raises(StructureError):
            Structure.from_pymatgen({"sites": []})


class TestLattice:
    """Test the Lattice helper"""

    def test_reciprocal_lengths_cubic(self):
        lattice = Lattice(np.eye(3) * 4.0)
        np.testing.assert_allclose(lattice.reciprocal_lengths, [0.25, 0.25, 0.25])
        assert not lattice.is_degenerate

    def test_reciprocal_lengths_are_face_distances(self):
        """For a sheared cell the inverse reciprocal length is the face spacing, not the vector length."""
        cell = [[4.0, 0.0, 0.0], [2.0, 3.0, 0.0], [0.0, 0.0, 5.0]]
        lattice = Lattice(cell)
        face_distances = 1.0 / lattice.reciprocal_lengths
        # volume / |b x c|, volume / |c x a|, volume / |a x b|
        np.testing.assert_allclose(face_distances, [60.0 / np.sqrt(325.0), 3.0, 5.0])

    def test_fractional_round_trip(self):
        lattice = Lattice([[4.0, 0.0, 0.0], [1.0, 3.0, 0.0], [0.0, 0.0, 5.0]])
        cart = np.array([[1.0, 2.0, 3.0], [5.0, -1.0, 0.5]])
        frac = lattice.get_fractional_coords(cart)
        np.testing.assert_allclose(lattice.get_cartesian_coords(frac), cart)

    def test_degenerate_cell(self):
        lattice = Lattice(np.zeros((3, 3)))
        assert lattice.is_degenerate
        np.testing.assert_allclose(lattice.reciprocal_lengths, [0, 0, 0])
        with pytest.raises(ConfigurationError):
            lattice.get_fractional_coords([0.0, 0.0, 0.0])
