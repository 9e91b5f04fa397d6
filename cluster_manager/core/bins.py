"""
Spatial binning (linked cells) for cluster_manager package.

The cell is cut into a grid of bins at least one cutoff wide along every
reciprocal-lattice direction, so that all partners of an atom within the
cutoff lie in its own bin or in a bounded set of surrounding bins. Surrounding
bins are wrapped on periodic axes, where every wrapped bin records the lattice
shift of the image it stands for, and clamped on non-periodic axes.
"""

import itertools
import math

import numpy as np

from ..utils.exceptions import ConfigurationError
from ..utils.logger import get_logger

logger = get_logger('cluster_manager.bins')


class BinGrid:
    """
    Bin grid of a structure for a given cutoff.

    Parameters:
        structure (Structure): Structure whose atoms are binned
        cutoff (float): Cutoff radius; bins are at least this wide
        strict (bool): If True a degenerate cell raises ConfigurationError.
            If False, a non-periodic structure with a degenerate cell falls
            back to a face distance of 1 along every axis.

    Attributes:
        shape (numpy.ndarray): Number of bins along each axis
        search (numpy.ndarray): Number of bins to look at on each side
        atom_bin (numpy.ndarray): Linear bin index of every atom
        wraps (numpy.ndarray): Lattice shift that brings every atom into the cell
        bin_atoms (list): Sorted atom indices held by every bin
        neighbour_bins (list): For every bin, list of (bin index, shift) pairs
        neighbour_atoms (list): For every bin, atoms of all neighbouring bins
        neighbour_shifts (list): Shift of the bin each neighbour atom was found in
    """

    def __init__(self, structure, cutoff, strict=True):
        if cutoff <= 0:
            raise ConfigurationError(f"Cutoff must be positive, got {cutoff}")
        self.structure = structure
        self.cutoff = float(cutoff)
        self.pbc = structure.pbc

        face_distances = self._face_distances(structure, strict)
        self.shape = np.maximum((face_distances / self.cutoff).astype(int), 1)
        self.search = np.array(
            [int(math.ceil(self.cutoff * n / d)) for n, d in zip(self.shape, face_distances)])
        self.n_bins = int(np.prod(self.shape))

        self._bin_atoms(structure)
        self._link_bins()
        logger.debug(f"Binned {len(structure)} atoms into grid {self.shape.tolist()} "
                     f"(search {self.search.tolist()})")

    def _face_distances(self, structure, strict):
        lattice = structure.lattice
        reciprocal_lengths = lattice.reciprocal_lengths
        face_distances = np.ones(3)
        for axis, length in enumerate(reciprocal_lengths):
            if length > 0:
                face_distances[axis] = 1.0 / length
            elif strict:
                raise ConfigurationError(
                    f"Cell has a non-positive reciprocal length along axis {axis}; "
                    f"cell volume is {lattice.volume:.3e}")
            elif structure.pbc[axis]:
                raise ConfigurationError(
                    f"Periodic axis {axis} requires a non-degenerate cell")
            else:
                logger.warning(f"Degenerate cell along axis {axis}, using a face distance of 1")
        return face_distances

    def _bin_atoms(self, structure):
        n_atoms = len(structure)
        if structure.lattice.is_degenerate:
            scaled = np.zeros((n_atoms, 3))
        else:
            scaled = np.asarray(structure.lattice.get_fractional_coords(structure.positions)).reshape(n_atoms, 3)

        # Periodic axes are wrapped into [0, 1); the wrap is kept to recover real positions
        wraps = np.where(self.pbc, np.floor(scaled), 0.0)
        scaled = scaled - wraps
        bin_index = np.floor(scaled * self.shape).astype(int)
        bin_index = np.clip(bin_index, 0, self.shape - 1)

        self.wraps = wraps.astype(np.int64)
        if n_atoms:
            self.atom_bin = np.ravel_multi_index(tuple(bin_index.T), tuple(self.shape))
        else:
            self.atom_bin = np.zeros(0, dtype=np.int64)

        order = np.argsort(self.atom_bin, kind='stable')
        counts = np.bincount(self.atom_bin, minlength=self.n_bins)
        self.bin_atoms = np.split(order, np.cumsum(counts)[:-1])

    def _neighbours_of_bin(self, bin_coords):
        """List of (linear bin index, shift) covering one search range around a bin."""
        ranges = [range(-s, s + 1) for s in self.search]
        neighbours = []
        for offset in itertools.product(*ranges):
            target = []
            shift = []
            for axis in range(3):
                index = bin_coords[axis] + offset[axis]
                if self.pbc[axis]:
                    # Python divmod floors, so negative indices wrap with shift -1
                    image, index = divmod(index, self.shape[axis])
                elif 0 <= index < self.shape[axis]:
                    image = 0
                else:
                    break
                target.append(index)
                shift.append(image)
            else:
                linear = int(np.ravel_multi_index(tuple(target), tuple(self.shape)))
                neighbours.append((linear, np.array(shift, dtype=np.int64)))
        return neighbours

    def _link_bins(self):
        self.neighbour_bins = []
        self.neighbour_atoms = []
        self.neighbour_shifts = []
        for linear in range(self.n_bins):
            bin_coords = np.unravel_index(linear, tuple(self.shape))
            neighbours = self._neighbours_of_bin(bin_coords)
            self.neighbour_bins.append(neighbours)

            atoms = [self.bin_atoms[index] for index, _ in neighbours]
            shifts = [np.tile(shift, (len(self.bin_atoms[index]), 1)) for index, shift in neighbours]
            if atoms:
                self.neighbour_atoms.append(np.concatenate(atoms))
                self.neighbour_shifts.append(np.concatenate(shifts).reshape(-1, 3))
            else:
                self.neighbour_atoms.append(np.zeros(0, dtype=np.int64))
                self.neighbour_shifts.append(np.zeros((0, 3), dtype=np.int64))

    def candidates(self, atom_index):
        """
        Candidate partners of an atom.

        Returns the atoms of all bins around the atom's bin together with the
        lattice shift of each occurrence, expressed for the unwrapped input
        positions: the displacement to a candidate ``j`` is
        ``positions[j] + shift @ cell - positions[atom_index]``.

        Parameters:
            atom_index (int): Index of the central atom

        Returns:
            tuple: (atom indices, shifts of shape (M, 3))
        """
        bin_index = self.atom_bin[atom_index]
        atoms = self.neighbour_atoms[bin_index]
        shifts = self.neighbour_shifts[bin_index] - self.wraps[atoms] + self.wraps[atom_index]
        return atoms, shifts

    def __repr__(self):
        return f"BinGrid(shape={self.shape.tolist()}, cutoff={self.cutoff})"
