#!/usr/bin/env python
"""
Example usage of the cluster_manager package.

This script walks through:
- Building a Structure from a pymatgen crystal
- Building pairs and triplets with a half and a full neighbour list
- Addressing clusters by counters and dense index
- Storing per-cluster properties
- Grouping clusters by species
- Tabular and graph views of the cluster lists
"""

import numpy as np
from pymatgen.core.lattice import Lattice
from pymatgen.core.structure import Structure as PmgStructure

import cluster_manager as cm


def divider(title):
    """Print a section divider with title."""
    print("\n" + "=" * 80)
    print(f" {title} ".center(80, "="))
    print("=" * 80 + "\n")


def example_structure():
    """Rock-salt NaCl conventional cell."""
    divider("1. STRUCTURE")
    pmg = PmgStructure.from_spacegroup("Fm-3m", Lattice.cubic(5.64), ["Na", "Cl"],
                                       [[0, 0, 0], [0.5, 0.5, 0.5]])
    structure = cm.Structure.from_pymatgen(pmg)
    print(structure)
    print(f"Species: {sorted(set(structure.atom_types.tolist()))}")
    return structure


def example_chain(structure):
    """Pairs and triplets up to the nearest-neighbour shell."""
    divider("2. CLUSTER LISTS")
    for kind in ("half", "full"):
        manager = cm.build_chain(structure, cutoff=2.9, max_order=3, kind=kind)
        counts = [manager.get_nb_clusters(order) for order in range(1, 4)]
        print(f"{kind:>4} list: atoms, pairs, triplets = {counts}")
    return cm.build_chain(structure, cutoff=2.9, max_order=3, kind="full")


def example_addressing(manager):
    """Counters, offsets and dense indices."""
    divider("3. ADDRESSING CLUSTERS")
    for cluster in list(manager.iter_clusters(3))[:5]:
        index = manager.get_cluster_index(cluster.counters)
        print(f"atoms {cluster.atoms} counters {cluster.counters} -> index {index}")
    print(f"Triplet children of pair (0, 0) start at {manager.get_offset((0, 0))}")


def example_properties(manager):
    """Pair distances and a per-triplet property."""
    divider("4. PROPERTIES")
    distances = cm.pair_distances(manager)
    print(f"Pair distances: min {distances.values.min():.3f}, max {distances.values.max():.3f}")

    spread = cm.ClusterProperty(manager, order=3)
    for cluster in manager.iter_clusters(3):
        spread[cluster] = len(set(cluster.atoms))
    print(f"Triplets with three distinct atoms: {int(np.sum(spread.values == 3))} of {len(spread)}")


def example_species(manager):
    """Cluster counts by species multiset."""
    divider("5. SPECIES GROUPS")
    species = cm.SpeciesFilter(manager)
    species.update()
    print(cm.cluster_counts_dataframe(manager, species).to_string(index=False))
    print(f"Na-Cl-Na triplets: {len(species.filter([11, 17, 11]))}")


def example_views(manager):
    """pandas and networkx views."""
    divider("6. TABLE AND GRAPH")
    print(cm.clusters_dataframe(manager, 2).head().to_string(index=False))
    G = cm.pairs_to_graph(manager)
    print(f"Graph: {G.number_of_nodes()} atoms, {G.number_of_edges()} bonds")
    print(f"Connected groups: {len(cm.connected_clusters(manager))}")


def main():
    structure = example_structure()
    manager = example_chain(structure)
    example_addressing(manager)
    example_properties(manager)
    example_species(manager)
    example_views(manager)


if __name__ == "__main__":
    main()
