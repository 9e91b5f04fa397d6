"""
Cluster Manager
===============

A package for building multi-order cluster lists of atomic structures.

Starting from positions, species, a cell and periodicity flags, it builds
atoms (order 1), neighbour pairs (order 2), triplets (order 3) and higher
orders as compressed sparse lists, and resolves every cluster to a dense
linear index so that per-cluster properties can be stored in flat arrays.
"""

__version__ = "0.1.0"

# Import core functionality
from .core.structure import Structure
from .core.lattice import Lattice
from .core.cluster_list import ClusterList
from .core.bins import BinGrid
from .core.neighbours import half_neighbour_list, full_neighbour_list
from .core.extension import extend_clusters

from .core.managers import (
    LayerConfig,
    ClusterRef,
    ClusterManager,
    AtomManager,
    NeighbourList,
    OrderExtension,
    increase_max_order,
    build_chain
)

from .core.species import SpeciesFilter
from .core.property import ClusterProperty, pair_distances
from .core.graph import pairs_to_graph, connected_clusters

# Import analysis functionality
from .analysis.dataframe import clusters_dataframe, cluster_counts_dataframe

# Import I/O functionality
from .io.fileio import load_structure

# Exceptions
from .utils.exceptions import (
    ClusterManagerError,
    ConfigurationError,
    StructureError,
    UnsupportedOrderError,
    UnsupportedOperationError
)

# Define what gets imported with "from cluster_manager import *"
__all__ = [
    # Core - Structure
    'Structure',
    'Lattice',

    # Core - Construction
    'ClusterList',
    'BinGrid',
    'half_neighbour_list',
    'full_neighbour_list',
    'extend_clusters',

    # Core - Managers
    'LayerConfig',
    'ClusterRef',
    'ClusterManager',
    'AtomManager',
    'NeighbourList',
    'OrderExtension',
    'increase_max_order',
    'build_chain',
    'SpeciesFilter',
    'ClusterProperty',
    'pair_distances',
    'pairs_to_graph',
    'connected_clusters',

    # Analysis
    'clusters_dataframe',
    'cluster_counts_dataframe',

    # I/O
    'load_structure',

    # Exceptions
    'ClusterManagerError',
    'ConfigurationError',
    'StructureError',
    'UnsupportedOrderError',
    'UnsupportedOperationError'
]
