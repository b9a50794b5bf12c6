"""Font registry access: metadata parsing and candidate reduction."""

from __future__ import annotations

from .candidates import (
    DiscoveryTarget,
    RejectedCandidate,
    RejectionReason,
    SourceCandidateSet,
)
from .checkout import (
    LICENSE_DIRS,
    REGISTRY_URL,
    iter_family_dirs,
    load_registry_metadata,
    registry_checkout,
)
from .errors import (
    MetadataParseError,
    MetadataReadError,
    RegistryCheckoutError,
    RegistryError,
)
from .metadata import (
    METADATA_FILE,
    FontMetadata,
    extract_literal,
    load_metadata,
    normalize_repo_url,
    parse_metadata,
)

__all__ = [
    "LICENSE_DIRS",
    "METADATA_FILE",
    "REGISTRY_URL",
    "DiscoveryTarget",
    "FontMetadata",
    "MetadataParseError",
    "MetadataReadError",
    "RegistryCheckoutError",
    "RegistryError",
    "RejectedCandidate",
    "RejectionReason",
    "SourceCandidateSet",
    "extract_literal",
    "iter_family_dirs",
    "load_metadata",
    "load_registry_metadata",
    "normalize_repo_url",
    "parse_metadata",
    "registry_checkout",
]
