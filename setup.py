"""
Setup configuration for the cluster_manager package.
"""
import sys
import platform
import logging
from setuptools import setup, find_packages

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(levelname)s: %(message)s'
)
logger = logging.getLogger('setup')

def check_lzma_support():
    """Check if LZMA compression is supported in this Python installation."""
    try:
        import lzma
        return True
    except ImportError:
        return False

def linux_distribution_id():
    """Read the distribution id from /etc/os-release, empty if unknown."""
    try:
        with open('/etc/os-release') as f:
            for line in f:
                if line.startswith('ID='):
                    return line.split('=')[1].strip().strip('"')
    except OSError:
        pass
    return ""

def print_lzma_installation_instructions():
    """Print instructions for installing LZMA support."""
    system = platform.system()
    logger.error("Python LZMA support is missing!")
    logger.error("pymatgen needs it to read compressed structure files.\n")

    logger.info("To fix this issue:")
    if system == "Darwin":  # macOS
        logger.info("1. Install xz: brew install xz")
    elif system == "Linux":
        linux_distro = linux_distribution_id()
        if linux_distro.lower() in ['ubuntu', 'debian']:
            logger.info("1. Install liblzma-dev: sudo apt-get install liblzma-dev")
        elif linux_distro.lower() in ['centos', 'rhel', 'fedora']:
            logger.info("1. Install xz-devel: sudo yum install xz-devel")
        else:
            logger.info("1. Install the LZMA development package for your distribution")
    elif system == "Windows":
        logger.info("1. Reinstall Python using the official installer from python.org")

    if 'pyenv' in sys.executable:
        python_version = ".".join(map(str, sys.version_info[:3]))
        logger.info("\nFor pyenv users: Reinstall Python with LZMA support")
        logger.info(f"  pyenv install {python_version}")

    logger.info("\n2. After installing the system requirements, reinstall cluster-manager")

# Check for LZMA support
if not check_lzma_support():
    print_lzma_installation_instructions()
    logger.warning("Installation will continue, but reading structure files may fail.\n")

# Get long description from README.md if it exists
try:
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()
except FileNotFoundError:
    long_description = "Multi-order cluster lists (atoms, pairs, triplets, ...) for atomic structures"

setup(
    name="cluster_manager",
    version="0.1.0",
    description="Multi-order cluster lists (atoms, pairs, triplets, ...) for atomic structures",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["cluster_manager", "cluster_manager.*"]),
    package_data={"cluster_manager": ["config/*.yaml"]},
    include_package_data=True,
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.21",
        "pymatgen>=2023.0",
        "networkx>=2.6",
        "pandas>=1.3",
        "typer>=0.9.0",
        "rich>=13.0.0",
        "pyyaml>=6.0.0,<7.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0,<9.0.0",
            "pytest-cov>=2.12.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "cluster-manager=cluster_manager.cli:app"
        ]
    }
)
