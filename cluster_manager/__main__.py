"""
Main entry point for the cluster_manager package.
"""

from .cli import main

if __name__ == '__main__':
    main()
