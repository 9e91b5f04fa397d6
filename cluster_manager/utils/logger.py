"""
Logger configuration for the cluster_manager package.
"""
import os
import logging
from typing import Optional
from rich.logging import RichHandler
from rich.console import Console

def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Set up logging configuration for the package.

    Args:
        verbose (bool): Enable verbose logging (debug-level and INFO messages)
        log_file (str, optional): Path to log file
    """
    # Quiet mode only shows errors on the console
    level = logging.DEBUG if verbose else logging.ERROR

    package_logger = logging.getLogger('cluster_manager')
    package_logger.setLevel(logging.DEBUG)

    # Remove existing handlers to avoid duplicate logs
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    # Separate stderr console so logs do not interleave with tables
    log_console = Console(stderr=True)

    console_handler = RichHandler(
        console=log_console,
        rich_tracebacks=True,
        show_time=verbose,
        show_path=verbose,
        markup=True,
        log_time_format="[%X]" if verbose else None,
        omit_repeated_times=True,
        level=level
    )
    package_logger.addHandler(console_handler)

    # File handler if specified (this will always have detailed logs)
    if log_file:
        os.makedirs(os.path.dirname(log_file) or '.', exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        package_logger.addHandler(file_handler)

    if not verbose:
        logging.getLogger('pymatgen').setLevel(logging.WARNING)

def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name or 'cluster_manager')

# Configure default logging and create the default logger instance
setup_logging()
logger = get_logger('cluster_manager')
