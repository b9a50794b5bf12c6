"""Unit tests for reducing family records to discovery targets."""
# ruff: noqa: D103

from __future__ import annotations

from fontsources.registry import (
    DiscoveryTarget,
    FontMetadata,
    RejectionReason,
    SourceCandidateSet,
)


def _record(name: str, repo_url: str | None = None, **kwargs: str) -> FontMetadata:
    return FontMetadata.build(name, repo_url=repo_url, **kwargs)


def test_targets_are_sorted_by_family_name() -> None:
    candidates = SourceCandidateSet.from_metadata(
        [
            _record("Roboto", "https://github.com/googlefonts/roboto"),
            _record("Abel", "https://github.com/googlefonts/abel"),
        ]
    )

    assert [target.name for target in candidates] == ["Abel", "Roboto"]
    assert len(candidates) == 2
    assert candidates.total == 2


def test_targets_carry_commit_and_declared_config() -> None:
    candidates = SourceCandidateSet.from_metadata(
        [
            _record(
                "Bangers",
                "https://github.com/googlefonts/bangers",
                commit="abc123",
                config_yaml="sources/builder.yaml",
            )
        ]
    )

    assert candidates.targets == (
        DiscoveryTarget(
            repo_url="https://github.com/googlefonts/bangers",
            name="Bangers",
            commit="abc123",
            config_yaml="sources/builder.yaml",
        ),
    )


def test_duplicate_repo_keeps_first_family_by_name() -> None:
    candidates = SourceCandidateSet.from_metadata(
        [
            _record("Noto Serif", "https://github.com/notofonts/latin-greek-cyrillic"),
            _record("Noto Sans", "https://github.com/notofonts/latin-greek-cyrillic"),
        ]
    )

    assert [target.name for target in candidates] == ["Noto Sans"]
    duplicates = candidates.rejected_for(RejectionReason.DUPLICATE_REPO)
    assert [entry.name for entry in duplicates] == ["Noto Serif"]


def test_records_without_usable_urls_are_rejected() -> None:
    candidates = SourceCandidateSet.from_metadata(
        [
            _record("Abel"),
            _record("Bitter", "https://gitlab.com/solmatas/bitter"),
            _record("Cairo", "https://github.com/google fonts/cairo"),
            _record("Dosis", "https://github.com/impallari/dosis"),
        ]
    )

    assert [target.name for target in candidates] == ["Dosis"]
    assert candidates.total == 4
    reasons = {entry.name: entry.reason for entry in candidates.rejected}
    assert reasons == {
        "Abel": RejectionReason.NO_REPO_URL,
        "Bitter": RejectionReason.UNFAMILIAR_URL,
        "Cairo": RejectionReason.MALFORMED_URL,
    }


def test_empty_input() -> None:
    candidates = SourceCandidateSet.from_metadata([])

    assert len(candidates) == 0
    assert candidates.rejected == ()
    assert candidates.total == 0
