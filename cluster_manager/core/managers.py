"""
Cluster managers for cluster_manager package.

Managers form a chain. The bottom AtomManager holds a Structure and provides
the order 1 clusters (atoms). Every adaptor wraps exactly one manager, exposes
the same read interface and answers queries for the cluster order it
constructs from its own CSR arrays, forwarding everything else to the manager
it wraps:

    AtomManager -> NeighbourList (pairs) -> OrderExtension (triplets) -> ...

Clusters are addressed by counters: the centre atom index followed by the
local position of each further atom inside its parent's children slice. The
dense linear index of a cluster is its position in the flat ``neighbours``
array of its order, which is also where per-cluster properties are stored.
"""

from dataclasses import dataclass, replace
from typing import NamedTuple, Optional, Tuple

import numpy as np

from .cluster_list import ClusterList
from .extension import extend_clusters
from .neighbours import full_neighbour_list, half_neighbour_list
from ..utils.config_utils import load_config
from ..utils.exceptions import (
    ClusterManagerError,
    ConfigurationError,
    UnsupportedOperationError,
    UnsupportedOrderError,
)
from ..utils.logger import get_logger

logger = get_logger('cluster_manager.managers')

# Load configuration
try:
    config = load_config()
    DEFAULT_CUTOFF = config['neighbour_list']['cutoff']
    DEFAULT_NEIGHBOUR_LIST = config['neighbour_list']['kind']
    DEFAULT_STRICT_CELL = config['neighbour_list']['strict_cell']
    DEFAULT_MAX_ORDER = config['clusters']['max_order']
except (KeyError, TypeError, FileNotFoundError):
    # Fallback to default values if config loading fails
    DEFAULT_CUTOFF = 3.0
    DEFAULT_NEIGHBOUR_LIST = "half"
    DEFAULT_STRICT_CELL = True
    DEFAULT_MAX_ORDER = 3

NEIGHBOUR_LIST_KINDS = ("half", "full")


@dataclass(frozen=True)
class LayerConfig:
    """
    Static description of one manager in a chain.

    Attributes:
        max_order (int): Highest cluster order available from this manager
        constructs (bool): True if the manager builds the clusters of max_order
        cutoff (float, optional): Pair cutoff, None below the pair layer
        neighbour_list (str, optional): "half" or "full" once pairs exist
        strict_cell (bool): Whether degenerate cells raise
    """
    max_order: int
    constructs: bool = True
    cutoff: Optional[float] = None
    neighbour_list: Optional[str] = None
    strict_cell: bool = True

    def __post_init__(self):
        if self.max_order < 1:
            raise ConfigurationError(f"max_order must be at least 1, got {self.max_order}")
        if self.cutoff is not None and self.cutoff <= 0:
            raise ConfigurationError(f"Cutoff must be positive, got {self.cutoff}")
        if self.neighbour_list is not None and self.neighbour_list not in NEIGHBOUR_LIST_KINDS:
            raise ConfigurationError(
                f"Unknown neighbour list kind '{self.neighbour_list}', expected one of {NEIGHBOUR_LIST_KINDS}")

    def extended(self, **changes):
        """Copy of this configuration with some fields replaced."""
        return replace(self, **changes)


class ClusterRef(NamedTuple):
    """
    Reference to one cluster.

    Attributes:
        atoms: Atom indices, centre first
        counters: Centre index followed by local positions inside parent slices
        index: Dense linear index of the cluster within its order
    """
    atoms: Tuple[int, ...]
    counters: Tuple[int, ...]
    index: int

    @property
    def order(self):
        return len(self.atoms)

    def back(self):
        """Index of the last atom of the cluster."""
        return self.atoms[-1]


class ClusterManager:
    """
    Read interface shared by all managers of a chain.

    Subclasses provide ``get_size``, ``get_position``, ``get_atom_type``,
    ``get_cluster_list``, ``get_offset`` and ``update``; the cluster queries
    below are expressed through them.
    """

    config: LayerConfig

    @property
    def max_order(self):
        return self.config.max_order

    def _check_order(self, order):
        if not 1 <= order <= self.max_order:
            raise UnsupportedOrderError(
                f"Cluster order {order} is not available, this manager provides orders 1 to {self.max_order}")

    def _atom_index(self, atom):
        if isinstance(atom, ClusterRef):
            if atom.order != 1:
                raise UnsupportedOrderError(f"Expected an atom, got a cluster of order {atom.order}")
            atom = atom.atoms[0]
        atom = int(atom)
        if not 0 <= atom < self.get_size():
            raise IndexError(f"Atom index {atom} out of range for {self.get_size()} atoms")
        return atom

    def _cluster(self, cluster):
        """Accept a ClusterRef or a bare atom index."""
        if isinstance(cluster, ClusterRef):
            return cluster
        atom = self._atom_index(cluster)
        return ClusterRef((atom,), (atom,), atom)

    def get_nb_clusters(self, order):
        """
        Number of clusters of a given order.

        Parameters:
            order (int): Cluster order (1 atoms, 2 pairs, ...)

        Returns:
            int: Number of clusters

        Raises:
            UnsupportedOrderError: If the chain does not build this order
        """
        self._check_order(order)
        if order == 1:
            return self.get_size()
        return len(self.get_cluster_list(order))

    def get_cluster_size(self, cluster):
        """Number of children (next order clusters) of a cluster or atom."""
        cluster = self._cluster(cluster)
        self._check_order(cluster.order + 1)
        return int(self.get_cluster_list(cluster.order + 1).nb_neigh[cluster.index])

    def get_cluster_neighbour(self, cluster, index):
        """
        Atom index of the index-th child of a cluster.

        Parameters:
            cluster (ClusterRef or int): Parent cluster or atom index
            index (int): Local position inside the parent's children slice

        Returns:
            int: Atom index of the child
        """
        cluster = self._cluster(cluster)
        self._check_order(cluster.order + 1)
        clusters = self.get_cluster_list(cluster.order + 1)
        if not 0 <= index < clusters.nb_neigh[cluster.index]:
            raise IndexError(
                f"Cluster {cluster.atoms} has {clusters.nb_neigh[cluster.index]} neighbours, got index {index}")
        return int(clusters.neighbours[clusters.offsets[cluster.index] + index])

    def get_atom_neighbours(self, atom):
        """Pair neighbours of an atom as an array of atom indices."""
        atom = self._atom_index(atom)
        return self.get_cluster_list(2).children(atom)

    def get_cluster_index(self, counters):
        """
        Dense linear index of the cluster addressed by counters.

        Parameters:
            counters (sequence of int): Centre atom index followed by the local
                position of each further atom in its parent slice

        Returns:
            int: Index of the cluster within its order
        """
        counters = tuple(int(c) for c in counters)
        if not counters:
            raise UnsupportedOrderError("Empty counters do not address a cluster")
        self._check_order(len(counters))
        if len(counters) == 1:
            return self._atom_index(counters[0])
        # One parent resolution per order; the slice start is the offset of the parent's children
        parent = self.get_cluster_index(counters[:-1])
        clusters = self.get_cluster_list(len(counters))
        size = clusters.nb_neigh[parent]
        if not 0 <= counters[-1] < size:
            raise IndexError(f"Local index {counters[-1]} out of range for a parent with {size} children")
        return int(clusters.offsets[parent]) + counters[-1]

    def iter_clusters(self, order):
        """
        Iterate over all clusters of an order in dense index order.

        Parameters:
            order (int): Cluster order

        Yields:
            ClusterRef: One reference per cluster
        """
        self._check_order(order)
        if order == 1:
            for atom in range(self.get_size()):
                yield ClusterRef((atom,), (atom,), atom)
            return
        clusters = self.get_cluster_list(order)
        for parent in self.iter_clusters(order - 1):
            start = int(clusters.offsets[parent.index])
            for local in range(int(clusters.nb_neigh[parent.index])):
                yield ClusterRef(parent.atoms + (int(clusters.neighbours[start + local]),),
                                 parent.counters + (local,),
                                 start + local)

    def get_neighbour_position(self, cluster):
        """
        Cartesian position of the last atom of a cluster.

        For pairs the lattice shift found during construction is applied, so
        the position is the image that satisfied the cutoff. Higher orders do
        not track images and are only supported for non-periodic structures.
        """
        cluster = self._cluster(cluster)
        if cluster.order == 1:
            raise UnsupportedOperationError("An atom has no neighbour position, use get_position")
        self._check_order(cluster.order)
        if cluster.order == 2:
            return self.get_position(cluster.back()) + self.get_shift_vector(cluster)
        if np.any(self.get_pbc()):
            raise UnsupportedOperationError(
                f"Neighbour positions of order {cluster.order} clusters are not tracked for periodic structures")
        return self.get_position(cluster.back())

    def get_shift(self, pair):
        """Integer lattice shift of the second atom of a pair."""
        pair = self._cluster(pair)
        if pair.order != 2:
            raise UnsupportedOrderError(f"Shifts are stored for pairs only, got order {pair.order}")
        self._check_order(2)
        return self.get_cluster_list(2).shifts[pair.index].copy()

    def get_shift_vector(self, pair):
        """Cartesian translation of the second atom of a pair."""
        return np.dot(self.get_shift(pair), self.get_cell())

    def get_distance_vector(self, pair):
        """Vector from the first atom of a pair to the image of the second."""
        pair = self._cluster(pair)
        return self.get_neighbour_position(pair) - self.get_position(pair.atoms[0])

    def get_distance(self, pair):
        """Distance between the two atoms of a pair."""
        return float(np.linalg.norm(self.get_distance_vector(pair)))

    def check_consistency(self):
        """
        Verify the cluster lists of every order.

        Checks the CSR invariants, that every order has one parent entry per
        cluster of the previous order and that every cluster is canonical:
        the last atom of an extended cluster is larger than the last atom of
        its parent and not part of it, and half-list pairs are ordered. With
        a half list this makes every cluster strictly increasing.

        Raises:
            ClusterManagerError: On the first violation found
        """
        for order in range(2, self.max_order + 1):
            clusters = self.get_cluster_list(order)
            clusters.check()
            if clusters.n_parents != self.get_nb_clusters(order - 1):
                raise ClusterManagerError(
                    f"Order {order} has {clusters.n_parents} parents, expected {self.get_nb_clusters(order - 1)}")
            if order == 2 and self.config.neighbour_list == "full":
                continue
            for cluster in self.iter_clusters(order):
                parent, last = cluster.atoms[:-1], cluster.back()
                if order == 2 and last <= parent[0]:
                    raise ClusterManagerError(f"Half-list pair {cluster.atoms} is not ordered")
                if last <= parent[-1] or last in parent:
                    raise ClusterManagerError(f"Cluster {cluster.atoms} is not canonical")

    def get_cutoff(self):
        return self.config.cutoff


class AtomManager(ClusterManager):
    """
    Bottom manager of a chain, providing atoms (order 1).

    Parameters:
        structure (Structure): Structure owned by this manager

    Example:
        >>> atoms = AtomManager(structure)
        >>> atoms.get_nb_clusters(1) == len(structure)
        True
    """

    def __init__(self, structure):
        self.structure = structure
        self._previous = structure
        self.config = LayerConfig(max_order=1)

    def update(self, structure=None):
        """Replace the structure if one is given; atoms need no rebuild."""
        self._previous = self.structure
        if structure is not None:
            self.structure = structure
        logger.debug(f"Atom manager holds {self.get_size()} atoms")

    def _rollback(self):
        self.structure = self._previous

    def get_size(self):
        return len(self.structure)

    def get_position(self, atom):
        return np.array(self.structure.positions[self._atom_index(atom)])

    def get_atom_type(self, atom):
        return int(self.structure.atom_types[self._atom_index(atom)])

    def get_cell(self):
        return self.structure.cell

    def get_pbc(self):
        return self.structure.pbc

    def get_structure(self):
        return self.structure

    def get_cluster_list(self, order):
        if order == 1:
            raise UnsupportedOrderError("Atoms are not stored as a cluster list")
        raise UnsupportedOrderError(
            f"Cluster order {order} is not available, add adaptors to increase the maximum order")

    def get_offset(self, counters):
        raise UnsupportedOrderError(
            f"No cluster list for the children of order {len(tuple(counters))} clusters")


class Adaptor(ClusterManager):
    """
    Manager wrapping another manager.

    The adaptor forwards every query it does not serve itself. Subclasses that
    construct a new order implement ``_build`` and store the result in
    ``self._clusters``.

    Parameters:
        manager (ClusterManager): Wrapped manager, not owned
        config (LayerConfig): Configuration of this layer
    """

    def __init__(self, manager, config):
        self.manager = manager
        self.config = config
        self._clusters = None
        self._previous = None

    def update(self, *args, **kwargs):
        """
        Update the wrapped manager, then rebuild this layer from scratch.

        Arguments are passed down to the bottom manager. If the rebuild
        fails, every layer below is restored to its previous state and the
        error is raised.
        """
        self.manager.update(*args, **kwargs)
        try:
            clusters = self._build()
        except Exception:
            self.manager._rollback()
            raise
        self._previous = self._clusters
        self._clusters = clusters

    def _rollback(self):
        self._clusters = self._previous
        self.manager._rollback()

    def _build(self):
        return None

    def _own_clusters(self):
        if self._clusters is None:
            raise ClusterManagerError(
                f"Order {self.max_order} clusters are not built yet, call update() first")
        return self._clusters

    def get_cluster_list(self, order):
        if self.config.constructs and order == self.max_order:
            return self._own_clusters()
        self._check_order(order)
        return self.manager.get_cluster_list(order)

    def get_offset(self, counters):
        """
        Start of the children slice of the cluster addressed by counters.

        Requests for the clusters whose children this layer stores are served
        from its offsets; the parent's position is resolved by the wrapped
        manager. Lower orders are forwarded unchanged.

        Parameters:
            counters (sequence of int): Centre atom followed by local positions

        Returns:
            int: Index into the next order's ``neighbours`` array
        """
        counters = tuple(int(c) for c in counters)
        order = len(counters)
        if not self.config.constructs or order < self.max_order - 1:
            return self.manager.get_offset(counters)
        if order == self.max_order - 1:
            if order == 1:
                parent = self._atom_index(counters[0])
            else:
                # Offset of the parent slice from the wrapped manager plus the local position
                parent = self.manager.get_cluster_index(counters)
            return int(self._own_clusters().offsets[parent])
        raise UnsupportedOrderError(
            f"No cluster list for the children of order {order} clusters (maximum order {self.max_order})")

    def get_size(self):
        return self.manager.get_size()

    def get_position(self, atom):
        return self.manager.get_position(atom)

    def get_atom_type(self, atom):
        return self.manager.get_atom_type(atom)

    def get_cell(self):
        return self.manager.get_cell()

    def get_pbc(self):
        return self.manager.get_pbc()

    def get_structure(self):
        return self.manager.get_structure()


class NeighbourList(Adaptor):
    """
    Adaptor building pairs (order 2) on top of an AtomManager.

    Parameters:
        manager (ClusterManager): Manager providing atoms only
        cutoff (float): Cutoff radius
        kind (str): "half" for a direct half list, "full" for a binned full
            list with periodic images
        strict (bool): Raise on degenerate cells instead of falling back
    """

    def __init__(self, manager, cutoff=None, kind=None, strict=None):
        if manager.max_order != 1:
            raise ConfigurationError(
                f"A neighbour list wraps a manager of maximum order 1, got {manager.max_order}")
        cutoff = DEFAULT_CUTOFF if cutoff is None else cutoff
        kind = DEFAULT_NEIGHBOUR_LIST if kind is None else kind
        strict = DEFAULT_STRICT_CELL if strict is None else strict
        config = manager.config.extended(max_order=2, constructs=True, cutoff=float(cutoff),
                                         neighbour_list=kind, strict_cell=strict)
        super().__init__(manager, config)

    def _build(self):
        structure = self.manager.get_structure()
        if self.config.neighbour_list == "full":
            pairs = full_neighbour_list(structure, self.config.cutoff, strict=self.config.strict_cell)
        else:
            pairs = half_neighbour_list(structure, self.config.cutoff, strict=self.config.strict_cell)
        logger.info(f"Built {len(pairs)} pairs ({self.config.neighbour_list} list) for {len(structure)} atoms")
        return pairs


class OrderExtension(Adaptor):
    """
    Adaptor adding one cluster order on top of a chain that has pairs.

    Parameters:
        manager (ClusterManager): Manager of maximum order k >= 2; this
            adaptor builds order k + 1
    """

    def __init__(self, manager):
        if manager.max_order < 2:
            raise ConfigurationError(
                "Extending clusters needs a neighbour list, wrap the manager in a NeighbourList first")
        super().__init__(manager, manager.config.extended(max_order=manager.max_order + 1, constructs=True))

    def _build(self):
        order = self.max_order - 1
        clusters = extend_clusters((cluster.atoms for cluster in self.manager.iter_clusters(order)),
                                   self.manager.get_atom_neighbours)
        logger.info(f"Built {len(clusters)} clusters of order {self.max_order} "
                    f"from {clusters.n_parents} clusters of order {order}")
        return clusters


def increase_max_order(manager, cutoff=None, kind=None, strict=None):
    """
    Wrap a manager in the adaptor that adds the next cluster order.

    Parameters:
        manager (ClusterManager): Manager to extend
        cutoff (float, optional): Pair cutoff, used when pairs are built
        kind (str, optional): Neighbour list kind, used when pairs are built
        strict (bool, optional): Degenerate cell policy, used when pairs are built

    Returns:
        Adaptor: NeighbourList for an atom manager, OrderExtension otherwise
    """
    if manager.max_order == 1:
        return NeighbourList(manager, cutoff=cutoff, kind=kind, strict=strict)
    return OrderExtension(manager)


def build_chain(structure, cutoff=None, max_order=None, kind=None, strict=None):
    """
    Build and update a manager chain up to a maximum cluster order.

    Parameters:
        structure (Structure): Input structure
        cutoff (float, optional): Pair cutoff (default from configuration)
        max_order (int, optional): Highest cluster order (default from configuration)
        kind (str, optional): "half" or "full" neighbour list
        strict (bool, optional): Raise on degenerate cells

    Returns:
        ClusterManager: Top manager of the chain, already updated

    Example:
        >>> manager = build_chain(structure, cutoff=1.1, max_order=3)
        >>> [c.atoms for c in manager.iter_clusters(3)]
        [(0, 1, 2), (1, 2, 3)]
    """
    max_order = DEFAULT_MAX_ORDER if max_order is None else max_order
    if max_order < 1:
        raise ConfigurationError(f"max_order must be at least 1, got {max_order}")

    manager = AtomManager(structure)
    while manager.max_order < max_order:
        manager = increase_max_order(manager, cutoff=cutoff, kind=kind, strict=strict)
    manager.update()
    return manager
