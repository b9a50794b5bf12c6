"""Versioned source catalogue: models, codec, schema, and checkout helpers.

Quick examples
--------------

Encode discovered sources::

    >>> from fontsources.catalogue import FontSource, encode_catalogue
    >>> source = FontSource(
    ...     repo_url="https://github.com/googlefonts/bangers",
    ...     rev="0d5c7e3f1a",
    ...     config_files=["sources/config.yaml"],
    ... )
    >>> print(encode_catalogue([source]).decode())

Read a catalogue written by another release::

    >>> from fontsources.catalogue import decode_catalogue
    >>> catalogue = decode_catalogue(Path("sources.json").read_bytes())

List the source files of a catalogued repository::

    >>> from fontsources.catalogue import get_sources
    >>> from fontsources.git import SubprocessGit
    >>> get_sources(source, Path("~/fonts").expanduser(), SubprocessGit())
"""

from __future__ import annotations

from .models import (
    CATALOGUE_VERSION,
    FontSource,
    MissingAuthTokenError,
    SourceCatalogue,
    source_sort_key,
)
from .codec import (
    SUPPORTED_MAJOR,
    build_catalogue,
    decode_catalogue,
    encode_catalogue,
    encode_url_list,
    load_catalogue,
    parse_version,
)
from .errors import CatalogueDecodeError, UnsupportedCatalogueVersionError
from .build_config import BuildConfig, BuildConfigError, load_build_config
from .checkout import config_paths, get_sources, instantiate
from .schema import build_catalogue_schema, write_catalogue_schema

__all__ = [
    "CATALOGUE_VERSION",
    "SUPPORTED_MAJOR",
    "BuildConfig",
    "BuildConfigError",
    "CatalogueDecodeError",
    "FontSource",
    "MissingAuthTokenError",
    "SourceCatalogue",
    "UnsupportedCatalogueVersionError",
    "build_catalogue",
    "build_catalogue_schema",
    "config_paths",
    "decode_catalogue",
    "encode_catalogue",
    "encode_url_list",
    "get_sources",
    "instantiate",
    "load_build_config",
    "load_catalogue",
    "parse_version",
    "source_sort_key",
    "write_catalogue_schema",
]
