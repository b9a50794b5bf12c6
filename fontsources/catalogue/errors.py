"""Errors raised while reading catalogue documents."""

from __future__ import annotations

from fontsources.errors import FontSourcesError


class CatalogueDecodeError(FontSourcesError, ValueError):
    """Raised when a catalogue document is malformed."""


class UnsupportedCatalogueVersionError(CatalogueDecodeError):
    """Raised when a catalogue was written by a newer, incompatible release."""

    def __init__(self, version: str, supported_major: int) -> None:
        """Initialise with the document version and the supported major."""
        self.version = version
        self.supported_major = supported_major
        super().__init__(
            f"unsupported catalogue version {version}; "
            f"this release reads major version {supported_major}"
        )
