"""Cheap remote checks for conventional config locations.

The probe issues HTTP HEAD requests against the repository's web tree view,
which answers without cloning anything. GitHub throttles these requests
aggressively, so a 429 is surfaced as :class:`RateLimitedError` for the worker
pool to coordinate a shared backoff.
"""

from __future__ import annotations

import datetime as dt
import email.utils
import typing as typ

import httpx

from .errors import DEFAULT_RETRY_AFTER, HttpFailureError, RateLimitedError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

CONVENTIONAL_CONFIG_PATHS = ("sources/config.yaml", "sources/config.yml")
DEFAULT_HTTP_TIMEOUT = 20.0
USER_AGENT = "fontsources/0.1"

_HTTP_OK = 200
_HTTP_NOT_FOUND = 404
_HTTP_TOO_MANY_REQUESTS = 429


def parse_retry_after(value: str | None, *, now: dt.datetime | None = None) -> float:
    """Return the backoff in seconds described by a ``Retry-After`` header.

    Both the delay-seconds and HTTP-date forms are understood. Missing or
    unparseable values fall back to :data:`DEFAULT_RETRY_AFTER`.
    """
    if value is None or not value.strip():
        return DEFAULT_RETRY_AFTER

    text = value.strip()
    if text.isdigit():
        return float(text)

    try:
        when = email.utils.parsedate_to_datetime(text)
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER
    if when.tzinfo is None:
        when = when.replace(tzinfo=dt.UTC)
    current = now or dt.datetime.now(dt.UTC)
    return max(0.0, (when - current).total_seconds())


def config_probe_url(repo_url: str, path: str, rev: str = "HEAD") -> str:
    """Return the web URL probed for ``path`` at ``rev``."""
    return f"{repo_url.rstrip('/')}/tree/{rev}/{path.lstrip('/')}"


class RemoteProbe:
    """Probe a repository for config files over HTTP without cloning it."""

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        token: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialise the probe, creating an HTTP client unless one is given."""
        headers = {"User-Agent": USER_AGENT}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=timeout,
            headers=headers,
            follow_redirects=True,
        )

    def close(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> RemoteProbe:
        """Return the probe for use in a ``with`` block."""
        return self

    def __exit__(self, *exc_info: object) -> None:
        """Close owned HTTP resources on exit."""
        self.close()

    def find_config(
        self,
        repo_url: str,
        *,
        rev: str = "HEAD",
        paths: cabc.Sequence[str] = CONVENTIONAL_CONFIG_PATHS,
    ) -> str | None:
        """Return the first of ``paths`` that exists at ``rev``, if any.

        Returns ``None`` when every path answers 404.

        Raises
        ------
        RateLimitedError
            On HTTP 429, carrying the ``Retry-After`` backoff.
        HttpFailureError
            On any other unexpected status or a transport failure.

        """
        for path in paths:
            url = config_probe_url(repo_url, path, rev)
            try:
                response = self._client.head(url)
            except httpx.HTTPError as exc:
                reason = str(exc) or type(exc).__name__
                raise HttpFailureError(url, reason=reason) from exc

            status = response.status_code
            if status == _HTTP_OK:
                return path
            if status == _HTTP_NOT_FOUND:
                continue
            if status == _HTTP_TOO_MANY_REQUESTS:
                retry_after = parse_retry_after(response.headers.get("Retry-After"))
                raise RateLimitedError(repo_url, retry_after)
            raise HttpFailureError(url, status_code=status)
        return None
