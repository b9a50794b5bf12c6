"""Repository URL decomposition.

Source repositories are identified by URLs such as
``https://github.com/googlefonts/bangers``. Only the trailing two path
segments matter: they name the owning organisation and the repository, and
they key the on-disk cache layout ``{cache}/{org}/{name}``.
"""

from __future__ import annotations

import re
import urllib.parse
from pathlib import Path

from fontsources.errors import BadRepoUrlError

REPO_SEGMENT_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
RESERVED_SEGMENTS = frozenset({".", ".."})
_LOCAL_SCHEMES = frozenset({"file"})


def repo_org_and_name(repo_url: str) -> tuple[str, str]:
    """Split a repository URL into its trailing ``(org, name)`` segments.

    Parameters
    ----------
    repo_url:
        Repository URL; a single trailing slash is ignored.

    Returns
    -------
    tuple[str, str]
        ``(org, name)``.

    Raises
    ------
    BadRepoUrlError
        If the URL lacks a scheme or host, carries a query or fragment, has
        fewer than two path segments, or either trailing segment is ``.``,
        ``..``, or holds characters other than letters, digits, dots,
        underscores, or dashes. ``file:`` URLs need no host.

    Examples
    --------
    >>> repo_org_and_name("https://github.com/hyper-type/hahmlet/")
    ('hyper-type', 'hahmlet')

    """
    try:
        parts = urllib.parse.urlsplit(repo_url)
    except ValueError as exc:
        raise BadRepoUrlError(repo_url) from exc

    if not parts.scheme or parts.query or parts.fragment:
        raise BadRepoUrlError(repo_url)
    if not parts.netloc and parts.scheme not in _LOCAL_SCHEMES:
        raise BadRepoUrlError(repo_url)

    segments = parts.path.removeprefix("/").removesuffix("/").split("/")
    if len(segments) < 2:  # noqa: PLR2004
        raise BadRepoUrlError(repo_url)

    org, name = segments[-2:]
    for segment in (org, name):
        if segment in RESERVED_SEGMENTS or not REPO_SEGMENT_PATTERN.match(segment):
            raise BadRepoUrlError(repo_url)
    return org, name


def is_valid_repo_url(repo_url: str) -> bool:
    """Return True when ``repo_url`` decomposes into ``(org, name)``."""
    try:
        repo_org_and_name(repo_url)
    except BadRepoUrlError:
        return False
    return True


def repo_slug(repo_url: str) -> str:
    """Return the ``org/name`` identifier for a repository URL."""
    org, name = repo_org_and_name(repo_url)
    return f"{org}/{name}"


def repo_cache_path(repo_url: str, cache_dir: Path) -> Path:
    """Return the canonical checkout location ``{cache_dir}/{org}/{name}``."""
    org, name = repo_org_and_name(repo_url)
    return cache_dir / org / name
