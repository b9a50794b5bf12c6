"""Unit tests for revision conflict detection."""
# ruff: noqa: D103

from __future__ import annotations

import pytest

from fontsources.catalogue import FontSource
from fontsources.discovery import majority_rev, mark_rev_conflicts, merge_pinned

REPO = "https://github.com/notofonts/latin-greek-cyrillic"
OTHER = "https://github.com/googlefonts/bangers"


def _source(repo_url: str, rev: str) -> FontSource:
    return FontSource(repo_url=repo_url, rev=rev, config_files=["sources/config.yaml"])


def test_majority_rev_prefers_most_common() -> None:
    assert majority_rev(["aaa", "bbb", "bbb"]) == "bbb"


def test_majority_rev_breaks_ties_by_greatest_rev() -> None:
    assert majority_rev(["aaa", "ccc", "bbb", "aaa", "ccc"]) == "ccc"


def test_majority_rev_requires_input() -> None:
    with pytest.raises(ValueError, match="at least one revision"):
        majority_rev([])


def test_minority_revisions_are_flagged() -> None:
    sources = [
        _source(REPO, "aaa"),
        _source(OTHER, "zzz"),
        _source(REPO, "bbb"),
        _source(REPO, "aaa"),
    ]

    marked = mark_rev_conflicts(sources)

    assert [source.has_rev_conflict for source in marked] == [
        False,
        False,
        True,
        False,
    ]
    assert [source.rev for source in marked] == ["aaa", "zzz", "bbb", "aaa"]


def test_same_revision_duplicates_are_not_conflicts() -> None:
    marked = mark_rev_conflicts([_source(REPO, "aaa"), _source(REPO, "aaa")])

    assert not any(source.has_rev_conflict for source in marked)


def test_every_non_majority_revision_is_flagged_once() -> None:
    marked = mark_rev_conflicts(
        [_source(REPO, "aaa"), _source(REPO, "bbb"), _source(REPO, "ccc")]
    )

    flagged = [source.rev for source in marked if source.has_rev_conflict]
    assert flagged == ["aaa", "bbb"]


def test_input_sources_are_not_mutated() -> None:
    original = _source(REPO, "bbb")

    mark_rev_conflicts([_source(REPO, "aaa"), _source(REPO, "aaa"), original])

    assert original.has_rev_conflict is False


def test_merge_pinned_prefers_pinned_duplicates() -> None:
    discovered = [_source(REPO, "aaa"), _source(OTHER, "zzz")]
    pinned = [FontSource(repo_url=REPO, rev="aaa", auth=True)]

    merged = mark_rev_conflicts(merge_pinned(discovered, pinned))

    assert merged == [pinned[0], _source(OTHER, "zzz")]
    assert merged[0].auth is True


def test_merge_pinned_keeps_other_revisions_for_reconciliation() -> None:
    merged = merge_pinned(
        [_source(REPO, "aaa"), _source(REPO, "aaa")], [_source(REPO, "bbb")]
    )

    assert [source.rev for source in merged] == ["bbb", "aaa"]
