"""CLI for notebook-model using click."""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from notebook_model.errors import NotebookError
from notebook_model.host import open_notebook, validate_document, write_notebook
from notebook_model.notebook import Notebook

console = Console()


def _setup_logging(verbose: bool) -> None:
    """Configure logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False)],
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
def main(verbose: bool) -> None:
    """Notebook Model — inspect and edit .ipynb documents."""
    _setup_logging(verbose)


@main.command()
@click.argument("notebook_path", type=click.Path(exists=True, dir_okay=False))
def info(notebook_path: str) -> None:
    """Print a JSON summary of a notebook."""
    notebook = _open_or_exit(notebook_path)
    document = notebook.document
    metadata = document.metadata

    counts = Counter(cell.cell_type for cell in document.cells)
    summary = {
        "path": str(notebook.path),
        "format_version": ".".join(str(v) for v in document.format_version),
        "kernel": metadata.kernelspec.name if metadata.kernelspec else None,
        "language": metadata.language_info.name if metadata.language_info else None,
        "num_cells": len(document.cells),
        "cell_types": dict(sorted(counts.items())),
        "num_outputs": sum(len(c.outputs) for c in document.code_cells()),
    }
    console.print_json(json.dumps(summary))


@main.command()
@click.argument("notebook_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None)
def normalize(notebook_path: str, output: str | None) -> None:
    """Rewrite a notebook in canonical form (sorted keys, string sources)."""
    notebook = _open_or_exit(notebook_path)
    result = write_notebook(notebook, output)
    console.print(f"[green]Normalized:[/green] {result}")


@main.command(name="clear-outputs")
@click.argument("notebook_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None)
def clear_outputs_cmd(notebook_path: str, output: str | None) -> None:
    """Remove all code cell outputs, keeping execution counts."""
    notebook = _open_or_exit(notebook_path)
    notebook.clear_outputs()
    result = write_notebook(notebook, output)
    console.print(f"[green]Cleared outputs:[/green] {result}")


@main.command()
@click.argument("notebook_path", type=click.Path(exists=True, dir_okay=False))
def validate(notebook_path: str) -> None:
    """Check a notebook against the nbformat schema."""
    notebook = _open_or_exit(notebook_path)
    try:
        validate_document(notebook.document)
    except NotebookError as exc:
        console.print(f"[red]Invalid:[/red] {exc}")
        raise SystemExit(1) from exc
    console.print(f"[green]Valid:[/green] {notebook.path}")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _open_or_exit(notebook_path: str) -> Notebook:
    """Open a notebook, exiting with status 1 if it cannot be decoded."""
    try:
        return open_notebook(Path(notebook_path))
    except NotebookError as exc:
        console.print(f"[red]Cannot read {notebook_path}:[/red] {exc}")
        raise SystemExit(1) from exc
