"""
Custom exceptions for the cluster_manager package.
"""

class ClusterManagerError(Exception):
    """Base exception class for cluster_manager package."""
    pass

class ConfigurationError(ClusterManagerError):
    """Raised when a manager or geometry is configured with invalid parameters."""
    pass

class StructureError(ClusterManagerError):
    """Raised when structure input arrays are dimensionally inconsistent."""
    pass

class UnsupportedOrderError(ClusterManagerError):
    """Raised when a query addresses a cluster order the manager chain cannot produce."""
    pass

class UnsupportedOperationError(ClusterManagerError):
    """Raised when an operation is not implemented for the requested clusters."""
    pass
