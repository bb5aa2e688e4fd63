"""Notebook Model — typed nbformat v4 documents with structural editing."""

__version__ = "0.1.0"

from notebook_model.codec import CodecConfig, decode, encode
from notebook_model.errors import (
    CellIndexError,
    MalformedInputError,
    NotebookError,
    SchemaError,
    UnsupportedVersionError,
)
from notebook_model.host import (
    load,
    open_notebook,
    save,
    validate_document,
    write_notebook,
)
from notebook_model.models import (
    CellMetadata,
    CellType,
    CodeCell,
    DisplayDataOutput,
    ErrorOutput,
    ExecuteResultOutput,
    FormatVersion,
    KernelSpec,
    LanguageInfo,
    MarkdownCell,
    NotebookDocument,
    NotebookMetadata,
    OutputType,
    RawCell,
    StreamOutput,
)
from notebook_model.notebook import Notebook, NotebookAction

__all__ = [
    "CellIndexError",
    "CellMetadata",
    "CellType",
    "CodeCell",
    "CodecConfig",
    "DisplayDataOutput",
    "ErrorOutput",
    "ExecuteResultOutput",
    "FormatVersion",
    "KernelSpec",
    "LanguageInfo",
    "MalformedInputError",
    "MarkdownCell",
    "Notebook",
    "NotebookAction",
    "NotebookDocument",
    "NotebookError",
    "NotebookMetadata",
    "OutputType",
    "RawCell",
    "SchemaError",
    "StreamOutput",
    "UnsupportedVersionError",
    "decode",
    "encode",
    "load",
    "open_notebook",
    "save",
    "validate_document",
    "write_notebook",
]
