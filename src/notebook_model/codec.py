"""Convert between nbformat v4 JSON bytes and ``NotebookDocument``."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from notebook_model.errors import (
    MalformedInputError,
    SchemaError,
    UnsupportedVersionError,
)
from notebook_model.models import (
    NBFORMAT,
    NBFORMAT_MINOR,
    CellType,
    NotebookDocument,
    OutputType,
    WholeNumber,
)

logger = logging.getLogger(__name__)

SUPPORTED_MAJOR = NBFORMAT
# Newest minor revision whose fields are modelled explicitly.
KNOWN_MINOR = 5

_UNION_TAGS = frozenset(CellType) | frozenset(OutputType)
_TAG_ERRORS = {"union_tag_invalid", "union_tag_not_found"}

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class CodecConfig(BaseModel):
    """Formatting options for ``encode``."""

    indent: int | None = 1
    ensure_ascii: bool = False


class _VersionHeader(BaseModel):
    model_config = ConfigDict(extra="ignore")

    nbformat: WholeNumber = NBFORMAT
    nbformat_minor: WholeNumber = NBFORMAT_MINOR


def decode(data: bytes | str) -> NotebookDocument:
    """Parse notebook JSON into a document.

    ``source`` and stream ``text`` may be strings or lists of fragments;
    both are normalized to a single string. Any schema violation, including
    an unknown ``cell_type`` or ``output_type`` on a single item, fails the
    whole decode.

    Args:
        data: UTF-8 encoded JSON, or already-decoded text.

    Returns:
        The decoded document.

    Raises:
        MalformedInputError: If *data* is not valid UTF-8 JSON.
        SchemaError: If the JSON does not match the notebook schema.
        UnsupportedVersionError: If the major format version is not 4.
    """
    raw = _parse_json(data)
    if not isinstance(raw, dict):
        raise SchemaError("$", "expected a JSON object at the top level")

    header = _validate(_VersionHeader, raw)
    if header.nbformat != SUPPORTED_MAJOR:
        raise UnsupportedVersionError(header.nbformat)
    if header.nbformat_minor > KNOWN_MINOR:
        logger.warning(
            "nbformat 4.%d is newer than 4.%d; unknown fields are kept as-is",
            header.nbformat_minor,
            KNOWN_MINOR,
        )

    document = _validate(NotebookDocument, raw)
    logger.debug(
        "Decoded nbformat %d.%d notebook with %d cell(s)",
        document.nbformat,
        document.nbformat_minor,
        len(document.cells),
    )
    return document


def encode(document: NotebookDocument, config: CodecConfig | None = None) -> bytes:
    """Serialize a document to deterministic UTF-8 JSON.

    Keys are sorted and every ``source`` is written as one string, so
    list-form sources read by ``decode`` are not reproduced.
    """
    config = config or CodecConfig()
    payload = document.model_dump(mode="json", by_alias=True)
    text = json.dumps(
        payload,
        sort_keys=True,
        indent=config.indent,
        ensure_ascii=config.ensure_ascii,
    )
    return (text + "\n").encode("utf-8")


def _parse_json(data: bytes | str) -> Any:
    """Load JSON, mapping every low-level failure to ``MalformedInputError``."""
    try:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        return json.loads(text)
    except UnicodeDecodeError as exc:
        msg = f"Notebook is not valid UTF-8: {exc}"
        raise MalformedInputError(msg) from exc
    except json.JSONDecodeError as exc:
        msg = f"Notebook is not valid JSON: {exc}"
        raise MalformedInputError(msg) from exc
    except RecursionError as exc:
        msg = "Notebook JSON is nested too deeply"
        raise MalformedInputError(msg) from exc


def _validate(model: type[_ModelT], raw: dict[str, Any]) -> _ModelT:
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        error = exc.errors()[0]
        raise SchemaError(_field_path(error), error["msg"]) from exc
    except RecursionError as exc:
        raise SchemaError("$", "value is nested too deeply") from exc


def format_location(location: Iterable[int | str]) -> str:
    """Render an error location as ``cells[0].outputs[1].text``.

    Discriminated unions add the matched tag to the location after a list
    index; those segments are dropped. An empty location renders as ``$``.
    """
    parts: list[str] = []
    previous: int | str | None = None
    for item in location:
        if isinstance(item, int):
            parts.append(f"[{item}]")
        elif not (isinstance(previous, int) and item in _UNION_TAGS):
            parts.append(f".{item}" if parts else str(item))
        previous = item
    return "".join(parts) or "$"


def _field_path(error: Mapping[str, Any]) -> str:
    path = format_location(error["loc"])
    if error["type"] in _TAG_ERRORS:
        discriminator = str(error.get("ctx", {}).get("discriminator", "")).strip("'")
        if discriminator:
            path = discriminator if path == "$" else f"{path}.{discriminator}"
    return path
