"""Pydantic models for the in-memory notebook document."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal, NamedTuple

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    JsonValue,
    SerializerFunctionWrapHandler,
    StrictBool,
    StrictInt,
    field_serializer,
    model_serializer,
    model_validator,
)

NBFORMAT = 4
NBFORMAT_MINOR = 0

_INT32_MAX = 2**31 - 1


class FormatVersion(NamedTuple):
    """The (major, minor) schema revision a notebook claims to follow."""

    major: int
    minor: int


CURRENT_FORMAT_VERSION = FormatVersion(NBFORMAT, NBFORMAT_MINOR)


def _join_fragments(value: object) -> object:
    """Concatenate a list of line fragments into one string."""
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return "".join(value)
    return value


def _whole_number(value: object) -> object:
    """Accept ``3.0`` as ``3``; anything fractional is left to fail."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


# A string that may arrive on disk as a list of fragments.
MultilineString = Annotated[str, BeforeValidator(_join_fragments)]

# Whole, non-negative, 32-bit integers (execution counts, version numbers).
WholeNumber = Annotated[
    StrictInt, Field(ge=0, le=_INT32_MAX), BeforeValidator(_whole_number)
]

JsonObject = dict[str, JsonValue]


class CellType(StrEnum):
    """Notebook cell types."""

    CODE = "code"
    MARKDOWN = "markdown"
    RAW = "raw"


class OutputType(StrEnum):
    """Code cell output types."""

    STREAM = "stream"
    DISPLAY_DATA = "display_data"
    EXECUTE_RESULT = "execute_result"
    ERROR = "error"


class _SparseModel(BaseModel):
    """Model whose unset fields are left out when serialized.

    Fields that were absent on disk stay absent after a round trip, while
    fields that were present (even as ``null``) are written back.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @model_serializer(mode="wrap")
    def _omit_unset(self, handler: SerializerFunctionWrapHandler) -> Any:
        data = handler(self)
        for name, info in type(self).model_fields.items():
            if name not in self.model_fields_set:
                data.pop(info.alias or name, None)
                data.pop(name, None)
        return data


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


class KernelSpec(_SparseModel):
    """Kernel the notebook was written for."""

    name: str


class LanguageInfo(_SparseModel):
    """Language of the notebook's code cells."""

    name: str
    version: str | None = None
    display_mode: str | JsonObject | None = Field(
        default=None, alias="codemirror_mode"
    )


class NotebookMetadata(_SparseModel):
    """Top-level notebook metadata."""

    kernelspec: KernelSpec | None = None
    language_info: LanguageInfo | None = None


class CellMetadata(_SparseModel):
    """Per-cell metadata; every field is optional."""

    collapsed: StrictBool | None = None
    scrolled: StrictBool | JsonValue | None = None
    deletable: StrictBool | None = None
    editable: StrictBool | None = None
    format: str | None = None
    name: str | None = None
    tags: set[str] | None = None

    @field_serializer("tags")
    def _sorted_tags(self, tags: set[str] | None) -> list[str] | None:
        if tags is None:
            return None
        return sorted(tags)


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


class StreamOutput(BaseModel):
    """Text written to stdout or stderr."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    output_type: Literal["stream"] = "stream"
    stream_name: str = Field(alias="name")
    text: MultilineString


class DisplayDataOutput(BaseModel):
    """Rich, mime-keyed display payload."""

    model_config = ConfigDict(extra="allow")

    output_type: Literal["display_data"] = "display_data"
    data: JsonObject
    metadata: JsonObject = Field(default_factory=dict)


class ExecuteResultOutput(BaseModel):
    """The value of the last expression of a code cell."""

    model_config = ConfigDict(extra="allow")

    output_type: Literal["execute_result"] = "execute_result"
    execution_count: WholeNumber
    data: JsonObject
    metadata: JsonObject = Field(default_factory=dict)


class ErrorOutput(BaseModel):
    """An exception raised while running a code cell."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    output_type: Literal["error"] = "error"
    error_name: str = Field(alias="ename")
    error_value: str = Field(alias="evalue")
    traceback: list[str]


Output = Annotated[
    StreamOutput | DisplayDataOutput | ExecuteResultOutput | ErrorOutput,
    Field(discriminator="output_type"),
]


# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------


class CodeCell(BaseModel):
    """Source code plus the outputs of its last run."""

    model_config = ConfigDict(extra="allow")

    cell_type: Literal["code"] = "code"
    metadata: CellMetadata = Field(default_factory=CellMetadata)
    source: MultilineString
    execution_count: WholeNumber | None = None
    outputs: list[Output] = Field(default_factory=list)


class _TextCell(BaseModel):
    model_config = ConfigDict(extra="allow")

    metadata: CellMetadata = Field(default_factory=CellMetadata)
    source: MultilineString

    @model_validator(mode="before")
    @classmethod
    def _reject_outputs(cls, data: Any) -> Any:
        if isinstance(data, dict) and "outputs" in data:
            msg = "only code cells can carry outputs"
            raise ValueError(msg)
        return data


class MarkdownCell(_TextCell):
    """Markdown prose, optionally with inline attachments."""

    cell_type: Literal["markdown"] = "markdown"
    attachments: JsonObject | None = None

    @model_serializer(mode="wrap")
    def _omit_unset_attachments(self, handler: SerializerFunctionWrapHandler) -> Any:
        data = handler(self)
        if "attachments" not in self.model_fields_set:
            data.pop("attachments", None)
        return data


class RawCell(_TextCell):
    """Unrendered text passed through untouched."""

    cell_type: Literal["raw"] = "raw"


Cell = Annotated[
    CodeCell | MarkdownCell | RawCell,
    Field(discriminator="cell_type"),
]


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


class NotebookDocument(BaseModel):
    """A complete notebook: version, metadata and ordered cells."""

    model_config = ConfigDict(extra="allow")

    nbformat: WholeNumber = NBFORMAT
    nbformat_minor: WholeNumber = NBFORMAT_MINOR
    metadata: NotebookMetadata = Field(default_factory=NotebookMetadata)
    cells: list[Cell]

    @property
    def format_version(self) -> FormatVersion:
        return FormatVersion(self.nbformat, self.nbformat_minor)

    def code_cells(self) -> list[CodeCell]:
        """Return the code cells in document order."""
        return [c for c in self.cells if isinstance(c, CodeCell)]
