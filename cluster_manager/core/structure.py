"""
Structure container for cluster_manager package.

A Structure holds the positions, atom types, cell and periodicity of one
simulation frame. It is the only place where atomic data is stored; every
manager in a chain reads it without modifying it.
"""

import numpy as np
from pymatgen.core.structure import Structure as PmgStructure

from .lattice import Lattice
from ..utils.exceptions import StructureError

POSITION_LAYOUTS = ("columns", "rows")


class Structure:
    """
    Atomic structure of one frame.

    Parameters:
        positions (array-like): Cartesian positions. With the default
            ``layout="columns"`` the matrix holds one atom per column,
            shape (3, N); an (N, 3) matrix is also accepted when N != 3.
            With ``layout="rows"`` the matrix must have shape (N, 3).
        atom_types (array-like): Integer species of length N
        cell (array-like): 3x3 matrix whose rows are the lattice vectors
        pbc (sequence of bool): Periodicity flag for each of the three axes
        layout (str): "columns" or "rows", how a 3x3 position matrix is read

    Raises:
        StructureError: If the arrays are dimensionally inconsistent

    Example:
        >>> structure = Structure([[0, 1, 5], [0, 0, 0], [0, 0, 0]], [1, 1, 1], np.eye(3) * 10, [False] * 3)
        >>> structure.positions[2]
        array([5., 0., 0.])
    """

    def __init__(self, positions, atom_types, cell, pbc=(True, True, True), layout="columns"):
        if layout not in POSITION_LAYOUTS:
            raise StructureError(f"Unknown positions layout '{layout}', expected one of {POSITION_LAYOUTS}")
        atom_types = np.asarray(atom_types)
        if atom_types.ndim != 1:
            raise StructureError(f"atom_types must be a vector, got shape {atom_types.shape}")
        if atom_types.size and not np.issubdtype(atom_types.dtype, np.integer):
            raise StructureError(f"atom_types must be integers, got dtype {atom_types.dtype}")
        n_atoms = atom_types.shape[0]

        positions = np.array(positions, dtype=float)
        if positions.size == 0 and n_atoms == 0:
            positions = positions.reshape(0, 3)
        if positions.ndim != 2:
            raise StructureError(f"positions must be a 2D array, got shape {positions.shape}")
        # Columns are atoms first, so a 3x3 matrix is read column-wise unless rows are asked for
        if layout == "columns" and positions.shape == (3, n_atoms):
            positions = positions.T.copy()
        elif positions.shape != (n_atoms, 3):
            raise StructureError(
                f"positions of shape {positions.shape} do not match {n_atoms} atom types ({layout} layout)")

        cell = np.array(cell, dtype=float)
        if cell.shape != (3, 3):
            raise StructureError(f"cell must be a 3x3 matrix, got shape {cell.shape}")

        pbc = np.array(pbc, dtype=bool).ravel()
        if pbc.shape != (3,):
            raise StructureError(f"pbc needs one flag per axis, got {pbc.shape[0]}")

        self.positions = positions
        self.atom_types = atom_types.astype(int)
        self.cell = cell
        self.pbc = pbc
        for array in (self.positions, self.atom_types, self.cell, self.pbc):
            array.flags.writeable = False
        self.lattice = Lattice(cell)

    @classmethod
    def from_pymatgen(cls, structure):
        """
        Build a Structure from a pymatgen Structure.

        Species are mapped to atomic numbers and all three axes are periodic.

        Parameters:
            structure (pymatgen.core.structure.Structure): Input structure

        Returns:
            Structure: Equivalent cluster_manager structure
        """
        if not isinstance(structure, PmgStructure):
            raise StructureError(f"Expected a pymatgen Structure, got {type(structure).__name__}")
        atom_types = [site.specie.Z for site in structure]
        return cls(structure.cart_coords, np.array(atom_types, dtype=int),
                   structure.lattice.matrix, (True, True, True), layout="rows")

    @property
    def is_periodic(self):
        """True if any axis is periodic."""
        return bool(self.pbc.any())

    def __len__(self):
        return self.positions.shape[0]

    def __repr__(self):
        return f"Structure(n_atoms={len(self)}, pbc={self.pbc.tolist()})"
