"""
Per-cluster property storage for cluster_manager package.

Properties of the clusters of one order (distances, descriptors, ...) are kept
in a flat array with one row per cluster, addressed by the cluster's dense
linear index.
"""

import numpy as np

from .managers import ClusterRef
from ..utils.exceptions import UnsupportedOrderError


class ClusterProperty:
    """
    Flat storage of one value (or vector) per cluster of a given order.

    Parameters:
        manager (ClusterManager): Manager chain providing the clusters
        order (int): Cluster order the property belongs to
        n_components (int): Number of values per cluster
        dtype: numpy dtype of the values

    Example:
        >>> prop = ClusterProperty(manager, order=3)
        >>> for cluster in manager.iter_clusters(3):
        ...     prop[cluster] = len(set(cluster.atoms))
    """

    def __init__(self, manager, order, n_components=1, dtype=float):
        self.manager = manager
        self.order = order
        self.n_components = n_components
        self.values = np.zeros((manager.get_nb_clusters(order), n_components), dtype=dtype)

    def resize(self):
        """Match the storage to the current number of clusters, keeping leading rows."""
        n_clusters = self.manager.get_nb_clusters(self.order)
        values = np.zeros((n_clusters, self.n_components), dtype=self.values.dtype)
        kept = min(n_clusters, len(self.values))
        values[:kept] = self.values[:kept]
        self.values = values

    def _index(self, cluster):
        if isinstance(cluster, ClusterRef):
            if cluster.order != self.order:
                raise UnsupportedOrderError(
                    f"Property of order {self.order} cannot be indexed by a cluster of order {cluster.order}")
            return cluster.index
        return int(cluster)

    def __getitem__(self, cluster):
        row = self.values[self._index(cluster)]
        return row[0] if self.n_components == 1 else row

    def __setitem__(self, cluster, value):
        self.values[self._index(cluster)] = value

    def __len__(self):
        return len(self.values)

    def __repr__(self):
        return f"ClusterProperty(order={self.order}, n_clusters={len(self)}, n_components={self.n_components})"


def pair_distances(manager):
    """
    Distances of all pairs of a manager chain.

    Parameters:
        manager (ClusterManager): Any manager of a chain with pairs

    Returns:
        ClusterProperty: One distance per pair, periodic shifts applied
    """
    pairs = manager.get_cluster_list(2)
    structure = manager.get_structure()
    centres = np.repeat(np.arange(pairs.n_parents), pairs.nb_neigh)
    vectors = (structure.positions[pairs.neighbours] + pairs.shifts @ structure.cell
               - structure.positions[centres])
    distances = ClusterProperty(manager, order=2)
    distances.values[:, 0] = np.linalg.norm(vectors, axis=1)
    return distances
