"""
Pair (order 2) cluster list construction for cluster_manager package.

Two builders produce the same CSR layout with one parent per atom:

- half_neighbour_list: direct O(N^2) cutoff test over all pairs j > i, each
  unordered pair stored once, using the closest periodic image.
- full_neighbour_list: binned O(N*k) search returning, for every atom, all
  neighbours within the cutoff including every periodic image, each image
  being a separate entry with its own lattice shift.
"""

import itertools

import numpy as np

from .bins import BinGrid
from .cluster_list import ClusterList
from ..utils.exceptions import ConfigurationError
from ..utils.logger import get_logger

logger = get_logger('cluster_manager.neighbours')


def _image_shifts(pbc):
    """All shifts in {-1, 0, 1} along periodic axes, zero along the others."""
    ranges = [(-1, 0, 1) if periodic else (0,) for periodic in pbc]
    return np.array(list(itertools.product(*ranges)), dtype=np.int64)


def half_neighbour_list(structure, cutoff, strict=True):
    """
    Build a half neighbour list by testing every pair directly.

    For every atom i, each atom j > i whose distance to i is within the
    cutoff becomes a child of i. On periodic axes the distance is taken to
    the closest image of j, and the lattice shift of that image is stored.

    Parameters:
        structure (Structure): Input structure
        cutoff (float): Cutoff radius, pairs with distance <= cutoff are kept
        strict (bool): If True a degenerate cell raises ConfigurationError,
            also for a non-periodic structure

    Returns:
        ClusterList: Pair list with one parent per atom, children sorted

    Raises:
        ConfigurationError: If the cutoff is not positive, the cell is
            degenerate in strict mode or a periodic structure has a
            degenerate cell
    """
    if cutoff <= 0:
        raise ConfigurationError(f"Cutoff must be positive, got {cutoff}")
    if strict and structure.lattice.is_degenerate:
        raise ConfigurationError(
            f"Cell is degenerate (volume {structure.lattice.volume:.3e}); use strict=False to ignore the cell")

    positions = structure.positions
    n_atoms = len(structure)
    periodic = structure.is_periodic
    if periodic:
        frac = np.asarray(structure.lattice.get_fractional_coords(positions)).reshape(n_atoms, 3)
        images = _image_shifts(structure.pbc)
        image_vectors = structure.lattice.get_cartesian_coords(images)

    neighbours = []
    shifts = []
    nb_neigh = np.zeros(n_atoms, dtype=np.int64)
    for i in range(n_atoms - 1):
        delta = positions[i + 1:] - positions[i]
        base = np.zeros((len(delta), 3), dtype=np.int64)
        if periodic:
            # Start from the rounded minimum image, then refine over neighbouring images
            base = -np.rint(frac[i + 1:] - frac[i]).astype(np.int64) * structure.pbc
            delta = delta + structure.lattice.get_cartesian_coords(base)
            candidates = delta[:, None, :] + image_vectors[None, :, :]
            lengths = np.linalg.norm(candidates, axis=2)
            best = np.argmin(lengths, axis=1)
            distances = lengths[np.arange(len(delta)), best]
            base = base + images[best]
        else:
            distances = np.linalg.norm(delta, axis=1)

        within = np.flatnonzero(distances <= cutoff)
        neighbours.append(within + i + 1)
        shifts.append(base[within])
        nb_neigh[i] = len(within)

    if neighbours:
        pairs = ClusterList.from_counts(np.concatenate(neighbours), nb_neigh, np.concatenate(shifts))
    else:
        pairs = ClusterList.empty(n_atoms, with_shifts=True)
    logger.debug(f"Half neighbour list: {len(pairs)} pairs for {n_atoms} atoms (cutoff {cutoff})")
    return pairs


def full_neighbour_list(structure, cutoff, strict=True, grid=None):
    """
    Build a full neighbour list with a bin grid.

    Every atom lists all atoms within the cutoff, in both directions and for
    every periodic image. An atom may appear several times in the same slice
    (different images) and may be its own neighbour through a non-zero
    shift. Each slice is sorted by atom index, then by shift.

    Parameters:
        structure (Structure): Input structure
        cutoff (float): Cutoff radius, pairs with distance <= cutoff are kept
        strict (bool): Passed to the BinGrid, see BinGrid
        grid (BinGrid, optional): Precomputed grid for this structure and cutoff

    Returns:
        ClusterList: Pair list with one parent per atom and per-entry shifts
    """
    if grid is None:
        grid = BinGrid(structure, cutoff, strict=strict)
    positions = structure.positions
    cell = structure.lattice.matrix
    n_atoms = len(structure)

    neighbours = []
    shifts = []
    nb_neigh = np.zeros(n_atoms, dtype=np.int64)
    for i in range(n_atoms):
        atoms, atom_shifts = grid.candidates(i)
        delta = positions[atoms] - positions[i] + atom_shifts @ cell
        distances = np.linalg.norm(delta, axis=1)
        is_self = (atoms == i) & ~atom_shifts.any(axis=1)
        within = (distances <= cutoff) & ~is_self

        atoms = atoms[within]
        atom_shifts = atom_shifts[within]
        order = np.lexsort((atom_shifts[:, 2], atom_shifts[:, 1], atom_shifts[:, 0], atoms))
        neighbours.append(atoms[order])
        shifts.append(atom_shifts[order])
        nb_neigh[i] = len(order)

    if neighbours:
        pairs = ClusterList.from_counts(np.concatenate(neighbours), nb_neigh, np.concatenate(shifts))
    else:
        pairs = ClusterList.empty(n_atoms, with_shifts=True)
    logger.debug(f"Full neighbour list: {len(pairs)} entries for {n_atoms} atoms (cutoff {cutoff})")
    return pairs
