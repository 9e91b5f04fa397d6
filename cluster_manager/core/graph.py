"""
Graph-related functions for cluster_manager package.

This module converts pair lists into networkx graphs.
"""

import networkx as nx

from .property import pair_distances


def pairs_to_graph(manager):
    """
    Convert the pairs of a manager chain to a networkx graph.

    Every atom becomes a node carrying its ``atom_type``. Every distinct pair
    of different atoms becomes one edge whose ``distance`` attribute is the
    shortest distance found among the pair's periodic images. Self-image
    pairs of a full neighbour list are left out.

    Parameters:
        manager (ClusterManager): Manager chain with pairs

    Returns:
        networkx.Graph: Graph representation of connectivity
    """
    G = nx.Graph()
    for atom in range(manager.get_size()):
        G.add_node(atom, atom_type=manager.get_atom_type(atom))

    distances = pair_distances(manager)
    for pair in manager.iter_clusters(2):
        i, j = pair.atoms
        if i == j:
            continue
        distance = float(distances[pair])
        if G.has_edge(i, j):
            distance = min(distance, G.edges[i, j]["distance"])
        G.add_edge(i, j, distance=distance)
    return G


def connected_clusters(manager):
    """
    Groups of atoms connected through pairs.

    Parameters:
        manager (ClusterManager): Manager chain with pairs

    Returns:
        list: Sorted lists of atom indices, largest group first
    """
    G = pairs_to_graph(manager)
    components = [sorted(component) for component in nx.connected_components(G)]
    return sorted(components, key=lambda component: (-len(component), component[0]))
