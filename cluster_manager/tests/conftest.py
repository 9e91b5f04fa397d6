"""
Configuration for pytest fixtures.

This module contains fixtures and utilities for testing the cluster_manager package.
"""

import pytest
import numpy as np
from pymatgen.core.structure import Structure as PmgStructure
from pymatgen.core.lattice import Lattice as PmgLattice

from cluster_manager.core.structure import Structure


@pytest.fixture
def linear_chain():
    """
    Four atoms on a line with spacing 1.0 in a non-periodic 10 Å box.

    Returns:
        Structure: Linear chain structure
    """
    positions = [[0, 0, 0], [1, 0, 0], [2, 0, 0], [3, 0, 0]]
    return Structure(positions, [1, 1, 2, 2], np.eye(3) * 10.0, [False, False, False])


@pytest.fixture
def three_atoms():
    """
    Three atoms at x = 0, 1 and 5 in a non-periodic 10 Å box, given one atom per column.

    Returns:
        Structure: Structure with one close pair and one isolated atom
    """
    positions = [[0, 1, 5], [0, 0, 0], [0, 0, 0]]
    return Structure(positions, [1, 1, 1], np.eye(3) * 10.0, [False, False, False])


@pytest.fixture
def triangle():
    """Equilateral triangle with unit sides, every pair within 1.1, given one atom per row."""
    positions = [[0, 0, 0], [1, 0, 0], [0.5, np.sqrt(3) / 2, 0]]
    return Structure(positions, [1, 1, 1], np.eye(3) * 10.0, [False, False, False], layout="rows")


@pytest.fixture
def random_open_structure():
    """
    Thirty atoms at random positions in a non-periodic 8 Å box.

    Returns:
        Structure: Random structure with a fixed seed
    """
    rng = np.random.default_rng(42)
    positions = rng.uniform(0.0, 8.0, size=(30, 3))
    atom_types = rng.integers(1, 3, size=30)
    return Structure(positions, atom_types, np.eye(3) * 8.0, [False, False, False])


@pytest.fixture
def random_periodic_structure():
    """
    Thirty atoms at random positions in a periodic 8 Å cube, some outside the cell.

    Returns:
        Structure: Random periodic structure with a fixed seed
    """
    rng = np.random.default_rng(7)
    positions = rng.uniform(-2.0, 10.0, size=(30, 3))
    atom_types = rng.integers(1, 3, size=30)
    return Structure(positions, atom_types, np.eye(3) * 8.0, [True, True, True])


@pytest.fixture
def pymatgen_cubic():
    """
    Simple cubic Fe with a 3 Å lattice constant as a pymatgen Structure.

    Returns:
        pymatgen.core.structure.Structure: One Fe atom per cell
    """
    return PmgStructure(PmgLattice.cubic(3.0), ["Fe"], [[0, 0, 0]])
