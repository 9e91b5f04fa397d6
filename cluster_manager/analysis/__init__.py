"""
Analysis functionality for cluster_manager package.
"""

from .dataframe import clusters_dataframe, cluster_counts_dataframe

__all__ = [
    'clusters_dataframe',
    'cluster_counts_dataframe'
]
