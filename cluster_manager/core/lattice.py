"""
Lattice geometry helpers for cluster_manager package.

Thin wrapper around the pymatgen Lattice providing the handful of queries the
cluster builders need: reciprocal lengths (inverse distances between opposite
cell faces) and conversion between Cartesian and fractional coordinates.
"""

import numpy as np
from pymatgen.core.lattice import Lattice as PmgLattice

from ..utils.exceptions import ConfigurationError

# Cells with a smaller absolute volume are treated as degenerate
DEGENERATE_VOLUME = 1e-10


class Lattice:
    """
    Cell geometry of a structure.

    Parameters:
        cell (array-like): 3x3 matrix whose rows are the lattice vectors
    """

    def __init__(self, cell):
        self.matrix = np.array(cell, dtype=float).reshape(3, 3)
        self.volume = abs(float(np.linalg.det(self.matrix)))
        self.is_degenerate = self.volume < DEGENERATE_VOLUME
        self._lattice = None if self.is_degenerate else PmgLattice(self.matrix)

    @property
    def reciprocal_lengths(self):
        """
        Lengths of the crystallographic reciprocal vectors (no 2*pi factor).

        The inverse of each entry is the distance between the two cell faces
        spanned by the other two lattice vectors. A degenerate cell has no
        valid reciprocal lattice and reports zero for every axis.

        Returns:
            numpy.ndarray: Array of shape (3,)
        """
        if self.is_degenerate:
            return np.zeros(3)
        return np.array(self._lattice.reciprocal_lattice_crystallographic.abc)

    def get_fractional_coords(self, cart_coords):
        """
        Convert Cartesian coordinates to fractional coordinates.

        Parameters:
            cart_coords (array-like): Cartesian coordinates, shape (3,) or (N, 3)

        Returns:
            numpy.ndarray: Fractional coordinates with the same shape

        Raises:
            ConfigurationError: If the cell is degenerate
        """
        if self.is_degenerate:
            raise ConfigurationError(
                f"Cannot compute fractional coordinates for a degenerate cell (volume {self.volume:.3e})")
        return self._lattice.get_fractional_coords(cart_coords)

    def get_cartesian_coords(self, frac_coords):
        """Convert fractional coordinates (or integer lattice shifts) to Cartesian coordinates."""
        return np.dot(frac_coords, self.matrix)

    def __repr__(self):
        return f"Lattice(volume={self.volume:.4f}, degenerate={self.is_degenerate})"
