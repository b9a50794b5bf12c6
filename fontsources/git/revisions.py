"""Pinning a checkout to a specific revision."""

from __future__ import annotations

import typing as typ

from fontsources.logging import get_logger, log_debug

from .errors import GitFailureError

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .commands import GitCommands

logger = get_logger(__name__)


def checkout_rev(git: GitCommands, checkout: Path, rev: str) -> bool:
    """Check out ``rev``, fetching history until it is present.

    Shallow clones rarely contain an arbitrary pinned commit, so a missing
    revision is first fetched directly and, failing that, the clone is
    unshallowed.

    Returns
    -------
    bool
        False when the revision is still unknown after fetching.

    Raises
    ------
    GitFailureError
        If the final ``git checkout`` fails.

    """
    if not git.has_commit(checkout, rev):
        try:
            git.fetch(checkout, rev=rev)
        except GitFailureError as exc:
            log_debug(
                logger, "fetching %s into %s failed: %s", rev, checkout, exc.stderr
            )

    if not git.has_commit(checkout, rev) and git.is_shallow(checkout):
        git.fetch(checkout, unshallow=True)

    if not git.has_commit(checkout, rev):
        return False

    git.checkout(checkout, rev)
    return True
