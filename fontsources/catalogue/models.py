"""Typed catalogue structures."""

from __future__ import annotations

import os
import typing as typ

import msgspec

from fontsources.common.slug import repo_org_and_name

if typ.TYPE_CHECKING:
    from pathlib import Path

CATALOGUE_VERSION = "1.0"
SHORT_REV_LENGTH = 10
AUTH_TOKEN_VAR = "GITHUB_TOKEN"  # noqa: S105 - environment variable name


class MissingAuthTokenError(RuntimeError):
    """Raised when an ``auth`` source is fetched without a token configured."""

    def __init__(self) -> None:
        """Initialise with a message naming the expected variable."""
        super().__init__(f"{AUTH_TOKEN_VAR} is required to fetch private sources")


class FontSource(msgspec.Struct, kw_only=True, frozen=True, omit_defaults=True):
    """A font source repository pinned at a revision.

    Attributes
    ----------
    repo_url : str
        Repository URL; must end in an ``org/name`` pair.
    rev : str
        Commit the catalogue pins this source to.
    config_files : list[str]
        Repository-relative paths of build config files, primary first.
    auth : bool
        When true the repository is private and is fetched with the token in
        ``GITHUB_TOKEN``. Such sources are never discovered, only loaded from
        a pinned catalogue.
    has_rev_conflict : bool
        When true another source for the same repository is pinned at a
        different revision, so this one is checked out into its own
        ``{name}_{rev}`` directory.

    """

    repo_url: str
    rev: str
    config_files: list[str] = msgspec.field(default_factory=list)
    auth: bool = False
    has_rev_conflict: bool = False

    def __post_init__(self) -> None:
        """Reject repository URLs without an ``org/name`` pair."""
        repo_org_and_name(self.repo_url)

    @property
    def repo_org(self) -> str:
        """Return the user or organisation that owns the repository."""
        return repo_org_and_name(self.repo_url)[0]

    @property
    def repo_name(self) -> str:
        """Return the repository name."""
        return repo_org_and_name(self.repo_url)[1]

    @property
    def short_rev(self) -> str:
        """Return the revision truncated for directory names."""
        return self.rev[:SHORT_REV_LENGTH]

    @property
    def primary_config(self) -> str | None:
        """Return the conventional primary config path, if any."""
        return self.config_files[0] if self.config_files else None

    def repo_path(self, cache_dir: Path) -> Path:
        """Return where this source is checked out under ``cache_dir``.

        This is ``{cache_dir}/{org}/{name}``, or ``{cache_dir}/{org}/{name}_{rev}``
        with a shortened revision when the source has a revision conflict.
        """
        org, name = repo_org_and_name(self.repo_url)
        if self.has_rev_conflict:
            return cache_dir / org / f"{name}_{self.short_rev}"
        return cache_dir / org / name

    def clone_url(self) -> str:
        """Return the URL to clone, embedding the auth token when required."""
        if not self.auth:
            return self.repo_url

        token = os.environ.get(AUTH_TOKEN_VAR, "").strip()
        if not token:
            raise MissingAuthTokenError
        body = self.repo_url.removeprefix("https://").removeprefix("www.")
        suffix = "" if body.endswith(".git") else ".git"
        return f"https://{token}:x-oauth-basic@{body}{suffix}"


class SourceCatalogue(msgspec.Struct, kw_only=True):
    """Versioned container for discovered font sources.

    Attributes
    ----------
    version : str
        ``major.minor`` format version. Readers reject unknown majors and
        accept any minor.
    sources : list[FontSource]
        Sources sorted by repository URL, revision, and config paths.

    """

    version: str = CATALOGUE_VERSION
    sources: list[FontSource] = msgspec.field(default_factory=list)


def source_sort_key(source: FontSource) -> tuple[str, str, list[str]]:
    """Return the deterministic ordering key for catalogue entries."""
    return (source.repo_url, source.rev, source.config_files)
