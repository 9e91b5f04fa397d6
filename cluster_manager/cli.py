"""
Command-line interface for cluster_manager package.

This module provides a Typer-based CLI for building cluster lists from
structure files.
"""
import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .core.managers import (
    build_chain,
    DEFAULT_CUTOFF,
    DEFAULT_MAX_ORDER,
    DEFAULT_NEIGHBOUR_LIST,
)
from .core.species import SpeciesFilter
from .io.fileio import load_structure
from .analysis.dataframe import cluster_counts_dataframe
from .utils.config_utils import load_config
from .utils.logger import setup_logging

# Load configuration
try:
    DEFAULT_VERBOSE = load_config()["logging"]["verbose"]
except (KeyError, TypeError, FileNotFoundError):
    DEFAULT_VERBOSE = False

# Create Typer app
app = typer.Typer(help="Cluster Manager CLI")

console = Console()

@app.command("build")
def build_command(
    structure_file: str = typer.Argument(..., help="Structure file (CIF, POSCAR, etc.)"),
    cutoff: float = typer.Option(DEFAULT_CUTOFF, "--cutoff", "-r", help="Pair cutoff radius in Å"),
    max_order: int = typer.Option(DEFAULT_MAX_ORDER, "--max-order", "-m", help="Highest cluster order to build"),
    full: bool = typer.Option(DEFAULT_NEIGHBOUR_LIST == "full", "--full/--half", help="Use a binned full neighbour list instead of a half list"),
    lenient: bool = typer.Option(False, "--lenient", help="Fall back to unit face distances for degenerate cells"),
    species: bool = typer.Option(False, "--species", "-s", help="Break cluster counts down by species"),
    verbose: bool = typer.Option(DEFAULT_VERBOSE, "--verbose", "-v", help="Show construction logs")
):
    """Build cluster lists for a structure and print the cluster counts."""
    setup_logging(verbose=verbose)
    try:
        structure = load_structure(structure_file)
        console.print(f"\nLoaded {len(structure)} atoms from {structure_file}")

        manager = build_chain(structure, cutoff=cutoff, max_order=max_order,
                              kind="full" if full else "half", strict=not lenient)
        species_filter = None
        if species:
            species_filter = SpeciesFilter(manager)
            species_filter.update()

        counts = cluster_counts_dataframe(manager, species_filter)

        table = Table(title=f"Clusters up to order {max_order} (cutoff {cutoff} Å)")
        table.add_column("Order", style="cyan")
        table.add_column("Species", style="yellow")
        table.add_column("Clusters", style="green")
        for row in counts.itertuples(index=False):
            label = "all" if row.species is None else "-".join(str(s) for s in row.species)
            table.add_row(str(row.order), label, str(row.n_clusters))
        console.print(table)

    except Exception as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        raise typer.Exit(code=1)

@app.command("config")
def config_command(
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to configuration file")
):
    """Display the current configuration."""
    try:
        config = load_config(config_path)
        console.print("[bold]Current Configuration:[/bold]")
        console.print(json.dumps(config, indent=2))

    except Exception as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        raise typer.Exit(code=1)

def main():
    """Main entry point for the command-line interface."""
    app()

if __name__ == "__main__":
    main()
