"""Detect sources that share a repository but pin different revisions."""

from __future__ import annotations

import collections
import typing as typ

import msgspec

from fontsources.logging import get_logger, log_debug, log_info

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from fontsources.catalogue.models import FontSource

logger = get_logger(__name__)


def majority_rev(revs: cabc.Iterable[str]) -> str:
    """Return the most frequent revision.

    Ties go to the lexicographically greatest revision. The tie-break only
    makes the choice deterministic; it carries no meaning about which
    revision is newer.
    """
    counts = collections.Counter(revs)
    if not counts:
        msg = "majority_rev requires at least one revision"
        raise ValueError(msg)
    return max(counts, key=lambda rev: (counts[rev], rev))


def mark_rev_conflicts(sources: cabc.Iterable[FontSource]) -> list[FontSource]:
    """Flag sources pinned at a non-majority revision of their repository.

    Returns a new list in the input order. Sources at the majority revision,
    and sources whose repository appears at a single revision, are returned
    unchanged; the rest are copies with ``has_rev_conflict`` set so they can
    be checked out beside the majority checkout.
    """
    items = list(sources)
    revs_by_repo: dict[str, list[str]] = collections.defaultdict(list)
    for source in items:
        revs_by_repo[source.repo_url].append(source.rev)

    majority: dict[str, str] = {}
    for repo_url, revs in revs_by_repo.items():
        if len(set(revs)) > 1:
            majority[repo_url] = majority_rev(revs)
            log_info(
                logger,
                "%s is pinned at %d revisions; majority is %s",
                repo_url,
                len(set(revs)),
                majority[repo_url],
            )

    marked: list[FontSource] = []
    for source in items:
        winner = majority.get(source.repo_url)
        if winner is not None and source.rev != winner:
            marked.append(msgspec.structs.replace(source, has_rev_conflict=True))
        else:
            marked.append(source)
    return marked


def merge_pinned(
    discovered: cabc.Iterable[FontSource], pinned: cabc.Iterable[FontSource]
) -> list[FontSource]:
    """Combine discovered and pinned sources without exact duplicates.

    A pinned source replaces a discovered one with the same repository and
    revision, so flags recorded by hand (such as ``auth``) survive. Pinned
    sources come first, then the remaining discovered sources in order.
    """
    merged: dict[tuple[str, str], FontSource] = {}
    for source in pinned:
        merged.setdefault((source.repo_url, source.rev), source)
    for source in discovered:
        key = (source.repo_url, source.rev)
        if key in merged:
            log_debug(logger, "%s@%s already listed; keeping the pinned entry", *key)
            continue
        merged[key] = source
    return list(merged.values())
