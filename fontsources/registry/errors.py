"""Errors raised while reading the font registry."""

from __future__ import annotations

import typing as typ

from fontsources.errors import FontSourcesError

if typ.TYPE_CHECKING:
    from pathlib import Path


class RegistryError(FontSourcesError):
    """Base class for registry errors."""


class MetadataParseError(RegistryError):
    """Raised when a metadata record lacks a required field."""

    def __init__(self, field: str) -> None:
        """Initialise with the missing field name."""
        self.field = field
        super().__init__(f"missing required field '{field}'")

    @classmethod
    def missing_field(cls, field: str) -> MetadataParseError:
        """Return an error for a missing or malformed required field."""
        return cls(field)


class MetadataReadError(RegistryError):
    """Raised when a metadata file cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        """Initialise with the unreadable path and the I/O failure."""
        self.path = path
        self.reason = reason
        super().__init__(f"could not read {path}: '{reason}'")


class RegistryCheckoutError(RegistryError):
    """Raised when the registry checkout cannot be established or listed.

    This is fatal for a discovery run.
    """

    def __init__(self, location: str, reason: str) -> None:
        """Initialise with the registry location and failure reason."""
        self.location = location
        self.reason = reason
        super().__init__(f"registry checkout {location} unavailable: {reason}")
