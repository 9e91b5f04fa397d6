"""
Core functionality for cluster_manager package.

This module contains the structure container, the neighbour list builders and
the manager chain that extends cluster lists order by order.
"""

# Import from structure module
from .structure import Structure
from .lattice import Lattice

# Import from cluster list and construction modules
from .cluster_list import ClusterList, offsets_from_counts
from .bins import BinGrid
from .neighbours import half_neighbour_list, full_neighbour_list
from .extension import extend_clusters, extension_candidates

# Import from managers module
from .managers import (
    LayerConfig,
    ClusterRef,
    ClusterManager,
    AtomManager,
    Adaptor,
    NeighbourList,
    OrderExtension,
    increase_max_order,
    build_chain
)
from .species import SpeciesFilter, species_key
from .property import ClusterProperty, pair_distances

# Import from graph module
from .graph import pairs_to_graph, connected_clusters

__all__ = [
    'Structure',
    'Lattice',
    'ClusterList',
    'offsets_from_counts',
    'BinGrid',
    'half_neighbour_list',
    'full_neighbour_list',
    'extend_clusters',
    'extension_candidates',
    'LayerConfig',
    'ClusterRef',
    'ClusterManager',
    'AtomManager',
    'Adaptor',
    'NeighbourList',
    'OrderExtension',
    'increase_max_order',
    'build_chain',
    'SpeciesFilter',
    'species_key',
    'ClusterProperty',
    'pair_distances',
    'pairs_to_graph',
    'connected_clusters'
]
