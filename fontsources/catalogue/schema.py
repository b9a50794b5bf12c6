"""JSON Schema generation for the source catalogue.

The schema describes the current catalogue version. Readers still accept
newer minor versions, so the schema is a description of what this release
writes rather than a gate on what it reads.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path  # noqa: TC003

import msgspec

from .models import CATALOGUE_VERSION, SourceCatalogue

SCHEMA_ID = "https://github.com/googlefonts/fontsources/schemas/catalogue.json"
_INDENT = 2


def build_catalogue_schema() -> dict[str, typ.Any]:
    """Build the JSON Schema for catalogue documents.

    Returns
    -------
    dict[str, Any]
        JSON Schema describing the catalogue, with ``$id`` set to
        ``SCHEMA_ID`` and a title naming the catalogue version it describes.

    """
    schema = msgspec.json.schema(SourceCatalogue)
    schema["$id"] = SCHEMA_ID
    schema["title"] = f"fontsources catalogue {CATALOGUE_VERSION}"
    return schema


def write_catalogue_schema(path: Path) -> Path:
    """Persist the generated JSON Schema to disk, creating parent directories.

    The document is formatted the same way as catalogues written by
    :func:`~fontsources.catalogue.codec.encode_catalogue`.

    Parameters
    ----------
    path : Path
        Destination path for the schema JSON file.

    Returns
    -------
    Path
        The path written to, for convenience in call chains.

    """
    encoded = msgspec.json.encode(build_catalogue_schema())
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(msgspec.json.format(encoded, indent=_INDENT) + b"\n")
    return path
