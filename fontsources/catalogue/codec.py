"""Encoding and decoding catalogue documents."""

from __future__ import annotations

import typing as typ

import msgspec

from .errors import CatalogueDecodeError, UnsupportedCatalogueVersionError
from .models import CATALOGUE_VERSION, SourceCatalogue, source_sort_key

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .models import FontSource

_INDENT = 2


def parse_version(version: str) -> tuple[int, int]:
    """Split a ``major.minor`` version string.

    Raises
    ------
    CatalogueDecodeError
        If the version is not two dot-separated non-negative integers.

    """
    major, sep, minor = version.partition(".")
    if not sep or not major.isdigit() or not minor.isdigit():
        msg = f"catalogue version must be 'major.minor', got {version!r}"
        raise CatalogueDecodeError(msg)
    return int(major), int(minor)


SUPPORTED_MAJOR = parse_version(CATALOGUE_VERSION)[0]


def build_catalogue(sources: cabc.Iterable[FontSource]) -> SourceCatalogue:
    """Return a current-version catalogue holding ``sources`` in sorted order."""
    return SourceCatalogue(
        version=CATALOGUE_VERSION,
        sources=sorted(sources, key=source_sort_key),
    )


def encode_catalogue(sources: cabc.Iterable[FontSource]) -> bytes:
    """Encode sources as a pretty-printed catalogue at the current version."""
    encoded = msgspec.json.encode(build_catalogue(sources))
    return msgspec.json.format(encoded, indent=_INDENT) + b"\n"


def decode_catalogue(data: bytes | str) -> SourceCatalogue:
    """Decode a catalogue document.

    The version is checked before the sources are validated, so a document
    written by a newer major release fails with a version error rather than
    a schema error.

    Raises
    ------
    UnsupportedCatalogueVersionError
        If the major version exceeds :data:`SUPPORTED_MAJOR`.
    CatalogueDecodeError
        If the document is not valid JSON or does not match the schema.

    """
    try:
        header = msgspec.json.decode(data, type=_VersionHeader)
    except msgspec.DecodeError as exc:
        msg = f"invalid catalogue: {exc}"
        raise CatalogueDecodeError(msg) from exc

    major, _ = parse_version(header.version)
    if major > SUPPORTED_MAJOR:
        raise UnsupportedCatalogueVersionError(header.version, SUPPORTED_MAJOR)

    try:
        return msgspec.json.decode(data, type=SourceCatalogue)
    except msgspec.DecodeError as exc:
        msg = f"invalid catalogue: {exc}"
        raise CatalogueDecodeError(msg) from exc


def load_catalogue(path: Path) -> SourceCatalogue:
    """Read and decode a catalogue file."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        msg = f"could not read catalogue {path}: {exc}"
        raise CatalogueDecodeError(msg) from exc
    return decode_catalogue(data)


def encode_url_list(sources: cabc.Iterable[FontSource]) -> str:
    """Return the sorted, unique repository URLs one per line."""
    urls = sorted({source.repo_url for source in sources})
    return "".join(f"{url}\n" for url in urls)


class _VersionHeader(msgspec.Struct):
    version: str
