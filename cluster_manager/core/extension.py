"""
Cluster order extension for cluster_manager package.

Derives the order k+1 cluster list from the order k clusters and the pair
neighbours of their atoms. A cluster C = (a0, ..., a_{k-1}) gains as children
every pair neighbour of any of its atoms whose index is larger than a_{k-1}
and which is not already part of C. Restricting children to indices above the
last atom keeps every cluster canonical, so each set of atoms reachable this
way is produced once per centre.
"""

import numpy as np

from .cluster_list import ClusterList


def extension_candidates(atoms, atom_neighbours):
    """
    Sorted atom indices that extend a cluster by one order.

    Parameters:
        atoms (tuple): Atom indices of the cluster, centre first
        atom_neighbours (callable): Maps an atom index to the array of its
            pair neighbours

    Returns:
        list: Candidate atom indices in increasing order
    """
    last = atoms[-1]
    candidates = set()
    for atom in atoms:
        neighbours = atom_neighbours(atom)
        candidates.update(neighbours[neighbours > last].tolist())
    candidates.difference_update(atoms)
    return sorted(candidates)


def extend_clusters(clusters, atom_neighbours):
    """
    Build the next order cluster list.

    Every parent cluster contributes one entry to ``nb_neigh``, also when it
    has no children, so the result stays dense over all parents.

    Parameters:
        clusters (iterable): Atom index tuples of the current order, in dense
            index order
        atom_neighbours (callable): Maps an atom index to its pair neighbours

    Returns:
        ClusterList: Children of every cluster of the current order
    """
    neighbours = []
    nb_neigh = []
    for atoms in clusters:
        children = extension_candidates(tuple(atoms), atom_neighbours)
        neighbours.extend(children)
        nb_neigh.append(len(children))
    return ClusterList.from_counts(np.array(neighbours, dtype=np.int64),
                                   np.array(nb_neigh, dtype=np.int64))
