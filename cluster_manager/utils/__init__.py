"""
Utility modules for cluster_manager package.
"""

from . import config_utils
from . import exceptions
from . import logger

__all__ = [
    'config_utils',
    'exceptions',
    'logger'
]
