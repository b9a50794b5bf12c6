"""Base errors shared across fontsources packages."""

from __future__ import annotations


class FontSourcesError(Exception):
    """Base class for fontsources errors."""


class BadRepoUrlError(FontSourcesError, ValueError):
    """Raised when a repository URL does not end in an ``org/name`` pair."""

    def __init__(self, repo_url: str) -> None:
        """Initialise with the rejected URL."""
        self.repo_url = repo_url
        super().__init__(f"unexpected repo url '{repo_url}'")
