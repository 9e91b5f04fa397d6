"""
Dataframe creation functions for cluster_manager package.

This module contains functions for creating dataframes from cluster lists.
"""

import pandas as pd


def clusters_dataframe(manager, order):
    """
    Create a dataframe with one row per cluster of an order.

    Parameters:
        manager (ClusterManager): Updated manager chain
        order (int): Cluster order

    Returns:
        pandas.DataFrame: Columns ``index``, ``atoms``, ``counters``,
        ``species`` and one ``atom_<k>`` column per atom position
    """
    atom_types = manager.get_structure().atom_types
    records = []
    for cluster in manager.iter_clusters(order):
        record = {
            "index": cluster.index,
            "atoms": cluster.atoms,
            "counters": cluster.counters,
            "species": tuple(int(atom_types[atom]) for atom in cluster.atoms),
        }
        for position, atom in enumerate(cluster.atoms):
            record[f"atom_{position}"] = atom
        records.append(record)

    columns = ["index", "atoms", "counters", "species"] + [f"atom_{k}" for k in range(order)]
    return pd.DataFrame(records, columns=columns)


def cluster_counts_dataframe(manager, species_filter=None):
    """
    Summarize the number of clusters per order.

    Parameters:
        manager (ClusterManager): Updated manager chain
        species_filter (SpeciesFilter, optional): If given, counts are also
            broken down by species multiset

    Returns:
        pandas.DataFrame: Columns ``order``, ``species`` and ``n_clusters``;
        ``species`` is None for the per-order totals
    """
    records = []
    for order in range(1, manager.max_order + 1):
        records.append({"order": order, "species": None, "n_clusters": manager.get_nb_clusters(order)})
        if species_filter is not None:
            for key, indices in species_filter.get_species_groups(order).items():
                records.append({"order": order, "species": key, "n_clusters": len(indices)})
    return pd.DataFrame(records, columns=["order", "species", "n_clusters"])
