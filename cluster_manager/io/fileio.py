"""
I/O functions for cluster_manager package.

This module contains functions for importing structures. Cluster lists are
rebuilt from structures and are never written to disk.
"""

import os

from pymatgen.core.structure import Structure as PmgStructure

from ..core.structure import Structure
from ..utils.exceptions import StructureError


def load_structure(filename):
    """Load a structure file into a Structure.

    Any format pymatgen reads (CIF, POSCAR, ...) is accepted. Species are
    stored as atomic numbers and all axes are periodic.

    Args:
        filename (str): Path to the structure file

    Returns:
        Structure: Loaded structure

    Raises:
        FileNotFoundError: If the file does not exist
        StructureError: If pymatgen cannot parse the file
    """
    if not os.path.exists(filename):
        raise FileNotFoundError(f"File not found: {filename}")
    try:
        structure = PmgStructure.from_file(filename)
    except (ValueError, IndexError, KeyError) as e:
        raise StructureError(f"Could not read structure from {filename}: {e}") from e
    return Structure.from_pymatgen(structure)
