"""
Species partitioning of cluster lists for cluster_manager package.

The SpeciesFilter adaptor keeps the cluster order of the manager it wraps and
groups the clusters of every order by the multiset of species they contain.
With species 1 and 2 and a chain of maximum order 3, for example, pairs fall
into the groups (1, 1), (1, 2) and (2, 2), and triplets into (1, 1, 1),
(1, 1, 2), (1, 2, 2) and (2, 2, 2).
"""

from collections import defaultdict

import numpy as np

from .managers import Adaptor
from ..utils.exceptions import UnsupportedOperationError
from ..utils.logger import get_logger

logger = get_logger('cluster_manager.species')


def species_key(species):
    """Canonical multiset key: the sorted tuple of species."""
    return tuple(sorted(int(s) for s in species))


class SpeciesFilter(Adaptor):
    """
    Adaptor grouping the clusters of every order by species.

    Parameters:
        manager (ClusterManager): Wrapped manager; its maximum order is kept

    Example:
        >>> species = SpeciesFilter(build_chain(structure, cutoff=3.0, max_order=3))
        >>> species.update()
        >>> species.get_species_groups(2)
        {(8, 26): array([3]), (26, 26): array([0, 1, 2])}
    """

    def __init__(self, manager):
        super().__init__(manager, manager.config.extended(constructs=False))
        self._groups = {}
        self._previous_groups = {}

    def update(self, *args, **kwargs):
        """Update the wrapped chain, then regroup every order."""
        self.manager.update(*args, **kwargs)
        self._previous_groups = self._groups
        self._groups = self._build_groups()

    def _rollback(self):
        self._groups = self._previous_groups
        self.manager._rollback()

    def _build_groups(self):
        atom_types = self.manager.get_structure().atom_types
        groups = {}
        for order in range(1, self.max_order + 1):
            by_species = defaultdict(list)
            for cluster in self.manager.iter_clusters(order):
                by_species[species_key(atom_types[list(cluster.atoms)])].append(cluster.index)
            groups[order] = {key: np.array(indices, dtype=np.int64)
                             for key, indices in sorted(by_species.items())}
            logger.debug(f"Order {order}: {len(groups[order])} species groups")
        return groups

    def get_species_groups(self, order):
        """
        Dense cluster indices of an order grouped by species multiset.

        Parameters:
            order (int): Cluster order

        Returns:
            dict: Sorted species tuple -> array of dense cluster indices
        """
        self._check_order(order)
        if order not in self._groups:
            raise UnsupportedOperationError("Species groups are not built yet, call update() first")
        return self._groups[order]

    def filter(self, species):
        """
        Clusters whose species multiset matches the given species.

        The order is the number of species given, e.g. ``filter([8, 26, 26])``
        returns the triplets made of one species-8 and two species-26 atoms.

        Parameters:
            species (sequence of int): Species of the wanted clusters, any order

        Returns:
            list: ClusterRef of every matching cluster, in dense index order
        """
        key = species_key(species)
        order = len(key)
        wanted = set(self.get_species_groups(order).get(key, np.zeros(0, dtype=np.int64)).tolist())
        return [cluster for cluster in self.iter_clusters(order) if cluster.index in wanted]

    def reorder(self):
        """Reordering the atoms by species is not supported; clusters keep input order."""
        raise UnsupportedOperationError("Reordering atoms by species is not implemented")
