"""Document host glue: open, save and validate notebooks by path or bytes."""

from __future__ import annotations

import logging
from pathlib import Path

import nbformat

from notebook_model.codec import CodecConfig, decode, encode, format_location
from notebook_model.errors import SchemaError
from notebook_model.models import NotebookDocument
from notebook_model.notebook import Notebook

logger = logging.getLogger(__name__)


def load(source: str | Path | bytes) -> Notebook:
    """Load a notebook from raw bytes or from a file path.

    Args:
        source: Encoded notebook bytes, or a path to an ``.ipynb`` file.

    Returns:
        The decoded notebook; loaded from a path, it remembers that path.

    Raises:
        FileNotFoundError: If *source* is a path that does not exist.
    """
    if isinstance(source, bytes):
        return Notebook(decode(source))
    return open_notebook(source)


def save(notebook: Notebook, config: CodecConfig | None = None) -> bytes:
    """Encode a notebook's document to bytes."""
    return encode(notebook.document, config)


def open_notebook(path: str | Path) -> Notebook:
    """Read and decode the notebook file at *path*."""
    nb_path = Path(path)
    if not nb_path.is_file():
        msg = f"Notebook not found: {nb_path}"
        raise FileNotFoundError(msg)

    logger.info("Opening notebook: %s", nb_path)
    notebook = Notebook(decode(nb_path.read_bytes()), path=nb_path)
    logger.info("Loaded %d cell(s) from %s", len(notebook), nb_path)
    return notebook


def write_notebook(
    notebook: Notebook,
    path: str | Path | None = None,
    config: CodecConfig | None = None,
) -> Path:
    """Encode *notebook* and write it to disk.

    Args:
        notebook: The notebook to persist.
        path: Destination file. Defaults to the path it was opened from.
        config: Encoding options.

    Returns:
        Path to the written file.

    Raises:
        ValueError: If no *path* is given and the notebook has none.
    """
    if path is None:
        if notebook.path is None:
            msg = "Notebook has no path; pass one explicitly"
            raise ValueError(msg)
        path = notebook.path

    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(save(notebook, config))
    notebook.path = out_path

    logger.info("Saved notebook: %s", out_path)
    return out_path


def validate_document(document: NotebookDocument) -> None:
    """Check the encoded document against the official nbformat schema.

    Raises:
        SchemaError: If the encoded notebook violates the schema.
    """
    node = nbformat.from_dict(document.model_dump(mode="json", by_alias=True))
    try:
        nbformat.validate(node)  # type: ignore[no-untyped-call]
    except nbformat.ValidationError as exc:
        path = format_location(exc.path)
        raise SchemaError(path, exc.message) from exc
