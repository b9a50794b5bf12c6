"""Per-repository discovery outcomes that are not a discovered source.

None of these abort a discovery run. :class:`RateLimitedError` is a retry
signal; every other error excludes one repository from the catalogue.
"""

from __future__ import annotations

import typing as typ

from fontsources.errors import BadRepoUrlError, FontSourcesError
from fontsources.git.errors import GitFailureError

if typ.TYPE_CHECKING:
    from pathlib import Path

DEFAULT_RETRY_AFTER = 60.0


class DiscoveryError(FontSourcesError):
    """Base class for discovery errors."""


class NoConfigFoundError(DiscoveryError):
    """Raised when a repository has no config-like file in its sources."""

    def __init__(self, repo_url: str) -> None:
        """Initialise with the repository that lacked a config file."""
        self.repo_url = repo_url
        super().__init__(f"no config file was found in {repo_url}")


class RateLimitedError(DiscoveryError):
    """Raised when the remote host asks us to back off.

    Attributes
    ----------
    retry_after
        Seconds to wait before any worker probes again.

    """

    def __init__(self, repo_url: str, retry_after: float = DEFAULT_RETRY_AFTER) -> None:
        """Initialise with the throttled repository and backoff duration."""
        self.repo_url = repo_url
        self.retry_after = retry_after
        super().__init__(f"rate limited probing {repo_url}; retry in {retry_after}s")


class RateLimitExhaustedError(DiscoveryError):
    """Raised when a repository stays rate limited past the retry budget."""

    def __init__(self, repo_url: str, attempts: int) -> None:
        """Initialise with the repository and the number of attempts made."""
        self.repo_url = repo_url
        self.attempts = attempts
        super().__init__(f"{repo_url} still rate limited after {attempts} attempts")


class HttpFailureError(DiscoveryError):
    """Raised for unexpected probe statuses and transport failures."""

    def __init__(
        self, url: str, *, status_code: int | None = None, reason: str = ""
    ) -> None:
        """Initialise with the probed URL and the status or transport reason."""
        self.url = url
        self.status_code = status_code
        detail = f"HTTP {status_code}" if status_code is not None else reason
        super().__init__(f"{url}: {detail}")


class MissingRevisionError(DiscoveryError):
    """Raised when a pinned commit is absent even after fetching history."""

    def __init__(self, repo_url: str, rev: str) -> None:
        """Initialise with the repository and the missing revision."""
        self.repo_url = repo_url
        self.rev = rev
        super().__init__(f"could not find commit '{rev}' in {repo_url}")


class CacheEscapeError(DiscoveryError):
    """Raised when a checkout path does not resolve strictly inside the cache.

    Nothing is removed or cloned at such a path.
    """

    def __init__(self, path: Path, cache_dir: Path) -> None:
        """Initialise with the offending path and the cache root."""
        self.path = path
        self.cache_dir = cache_dir
        super().__init__(f"refusing to touch {path}: not inside cache {cache_dir}")


class StaleCheckoutError(GitFailureError):
    """Raised after removing a cache directory that was not a git checkout."""

    def __init__(self, path: Path) -> None:
        """Initialise with the removed directory."""
        super().__init__("existing directory is not a git checkout; removed it", path)


__all__ = [
    "DEFAULT_RETRY_AFTER",
    "BadRepoUrlError",
    "CacheEscapeError",
    "DiscoveryError",
    "GitFailureError",
    "HttpFailureError",
    "MissingRevisionError",
    "NoConfigFoundError",
    "RateLimitExhaustedError",
    "RateLimitedError",
    "StaleCheckoutError",
]
