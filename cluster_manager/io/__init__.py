"""
I/O functionality for cluster_manager package.
"""

from .fileio import load_structure

__all__ = [
    'load_structure'
]
