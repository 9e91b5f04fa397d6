"""
Compressed sparse storage of one cluster order.

A ClusterList maps every cluster of order k-1 (the parents) to its children of
order k. The children of parent ``i`` are the atom indices
``neighbours[offsets[i]:offsets[i + 1]]``; the position of a child in
``neighbours`` is the dense linear index of the order-k cluster.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..utils.exceptions import ClusterManagerError


def offsets_from_counts(nb_neigh):
    """Prefix sum of the child counts, starting at zero."""
    offsets = np.zeros(len(nb_neigh) + 1, dtype=np.int64)
    np.cumsum(nb_neigh, out=offsets[1:])
    return offsets


@dataclass
class ClusterList:
    """
    CSR arrays of one cluster order.

    Attributes:
        neighbours (numpy.ndarray): Last atom index of every cluster of this order
        nb_neigh (numpy.ndarray): Number of children of every parent cluster
        offsets (numpy.ndarray): Prefix sum of ``nb_neigh``, one entry longer
        shifts (numpy.ndarray, optional): Integer lattice shift of every
            cluster's last atom, shape (len(neighbours), 3). Only pair lists
            carry shifts.
    """
    neighbours: np.ndarray
    nb_neigh: np.ndarray
    offsets: np.ndarray
    shifts: Optional[np.ndarray] = None

    @classmethod
    def from_counts(cls, neighbours, nb_neigh, shifts=None):
        """Assemble a ClusterList from flat children and per-parent counts."""
        neighbours = np.asarray(neighbours, dtype=np.int64).reshape(-1)
        nb_neigh = np.asarray(nb_neigh, dtype=np.int64).reshape(-1)
        if shifts is not None:
            shifts = np.asarray(shifts, dtype=np.int64).reshape(-1, 3)
        return cls(neighbours, nb_neigh, offsets_from_counts(nb_neigh), shifts)

    @classmethod
    def empty(cls, n_parents=0, with_shifts=False):
        shifts = np.zeros((0, 3), dtype=np.int64) if with_shifts else None
        return cls.from_counts([], np.zeros(n_parents, dtype=np.int64), shifts)

    @property
    def n_parents(self):
        return len(self.nb_neigh)

    def children(self, parent):
        """Atom indices of the children of the parent with dense index ``parent``."""
        return self.neighbours[self.offsets[parent]:self.offsets[parent + 1]]

    def check(self):
        """
        Verify the CSR invariants.

        Raises:
            ClusterManagerError: If offsets, counts and children disagree
        """
        if len(self.offsets) != len(self.nb_neigh) + 1:
            raise ClusterManagerError(
                f"offsets has {len(self.offsets)} entries for {len(self.nb_neigh)} parents")
        if self.offsets[0] != 0:
            raise ClusterManagerError("offsets must start at 0")
        if np.any(np.diff(self.offsets) < 0):
            raise ClusterManagerError("offsets must be non-decreasing")
        if not np.array_equal(np.diff(self.offsets), self.nb_neigh):
            raise ClusterManagerError("offsets are not the prefix sum of nb_neigh")
        if self.offsets[-1] != len(self.neighbours):
            raise ClusterManagerError(
                f"offsets end at {self.offsets[-1]} but there are {len(self.neighbours)} clusters")
        if self.shifts is not None and self.shifts.shape != (len(self.neighbours), 3):
            raise ClusterManagerError(f"shifts have shape {self.shifts.shape}")

    def equals(self, other):
        """Element-wise equality of all arrays."""
        if not isinstance(other, ClusterList):
            return False
        same = (np.array_equal(self.neighbours, other.neighbours)
                and np.array_equal(self.nb_neigh, other.nb_neigh)
                and np.array_equal(self.offsets, other.offsets))
        if self.shifts is None or other.shifts is None:
            return same and self.shifts is None and other.shifts is None
        return same and np.array_equal(self.shifts, other.shifts)

    def __len__(self):
        return len(self.neighbours)
