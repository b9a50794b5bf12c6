"""Reduce parsed family records to unique repository targets."""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

from fontsources.common.slug import is_valid_repo_url
from fontsources.logging import get_logger, log_debug, log_warning

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .metadata import FontMetadata

logger = get_logger(__name__)


class RejectionReason(enum.StrEnum):
    """Why a family record did not become a discovery target."""

    NO_REPO_URL = "no_repo_url"
    UNFAMILIAR_URL = "unfamiliar_url"
    MALFORMED_URL = "malformed_url"
    DUPLICATE_REPO = "duplicate_repo"


@dataclasses.dataclass(frozen=True, slots=True)
class DiscoveryTarget:
    """One repository to run config discovery against."""

    repo_url: str
    name: str
    commit: str | None = None
    config_yaml: str | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class RejectedCandidate:
    """A family record dropped during reduction, kept for diagnostics."""

    name: str
    repo_url: str | None
    reason: RejectionReason


@dataclasses.dataclass(frozen=True, slots=True)
class SourceCandidateSet:
    """Deterministic, repo-URL-unique discovery targets.

    Build instances with :meth:`from_metadata`; ``targets`` preserves the
    family-name order in which records were accepted.
    """

    targets: tuple[DiscoveryTarget, ...]
    rejected: tuple[RejectedCandidate, ...] = ()
    total: int = 0

    @classmethod
    def from_metadata(cls, records: cabc.Iterable[FontMetadata]) -> SourceCandidateSet:
        """Filter and deduplicate family records.

        Records are visited in ascending family-name order. Records without a
        repository URL, with a URL on an unfamiliar host, or with a URL that
        does not end in ``org/name`` are dropped. When several families share
        a repository URL the first is kept and the rest are logged as
        duplicates.
        """
        ordered = sorted(records, key=lambda record: record.name)
        targets: list[DiscoveryTarget] = []
        rejected: list[RejectedCandidate] = []
        owners: dict[str, str] = {}

        for record in ordered:
            reason = _rejection_reason(record, owners)
            if reason is not None:
                rejected.append(RejectedCandidate(record.name, record.repo_url, reason))
                _log_rejection(record, reason, owners)
                continue

            repo_url = typ.cast("str", record.repo_url)
            owners[repo_url] = record.name
            targets.append(
                DiscoveryTarget(
                    repo_url=repo_url,
                    name=record.name,
                    commit=record.commit,
                    config_yaml=record.config_yaml,
                )
            )

        return cls(targets=tuple(targets), rejected=tuple(rejected), total=len(ordered))

    def __len__(self) -> int:
        """Return the number of accepted targets."""
        return len(self.targets)

    def __iter__(self) -> cabc.Iterator[DiscoveryTarget]:
        """Iterate accepted targets in family-name order."""
        return iter(self.targets)

    def rejected_for(self, reason: RejectionReason) -> list[RejectedCandidate]:
        """Return the rejected records for one reason."""
        return [entry for entry in self.rejected if entry.reason is reason]


def _rejection_reason(
    record: FontMetadata, owners: dict[str, str]
) -> RejectionReason | None:
    if record.repo_url is None:
        return RejectionReason.NO_REPO_URL
    if record.unfamiliar_repo_url is not None:
        return RejectionReason.UNFAMILIAR_URL
    if not is_valid_repo_url(record.repo_url):
        return RejectionReason.MALFORMED_URL
    if record.repo_url in owners:
        return RejectionReason.DUPLICATE_REPO
    return None


def _log_rejection(
    record: FontMetadata, reason: RejectionReason, owners: dict[str, str]
) -> None:
    match reason:
        case RejectionReason.NO_REPO_URL:
            log_debug(logger, "font %s has no repository_url", record.name)
        case RejectionReason.DUPLICATE_REPO:
            log_warning(
                logger,
                "duplicate repo '%s' for font %s (already used by %s)",
                record.repo_url,
                record.name,
                owners.get(typ.cast("str", record.repo_url)),
            )
        case _:
            log_warning(
                logger,
                "skipping font %s: %s repo url '%s'",
                record.name,
                reason.value.replace("_url", ""),
                record.repo_url,
            )
