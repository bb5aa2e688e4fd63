"""Exceptions raised by the notebook codec and document model."""

from __future__ import annotations


class NotebookError(Exception):
    """Base class for all notebook-model errors."""


class MalformedInputError(NotebookError):
    """Input bytes are not valid UTF-8 JSON."""


class SchemaError(NotebookError):
    """Valid JSON that does not match the notebook schema.

    Attributes:
        field_path: Location of the offending field, e.g.
            ``cells[2].outputs[0].output_type``. ``$`` denotes the root.
        reason: Human-readable description of the mismatch.
    """

    def __init__(self, field_path: str, reason: str) -> None:
        self.field_path = field_path
        self.reason = reason
        super().__init__(f"{field_path}: {reason}")


class UnsupportedVersionError(NotebookError):
    """The notebook declares a major format version this codec cannot read."""

    def __init__(self, found: int) -> None:
        self.found = found
        super().__init__(f"Unsupported nbformat major version: {found}")


class CellIndexError(NotebookError, IndexError):
    """An edit operation referenced a cell index outside the document."""

    def __init__(self, index: int, length: int) -> None:
        self.index = index
        self.length = length
        super().__init__(f"Cell index {index} out of range for {length} cell(s)")
