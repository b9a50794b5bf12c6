"""Config discovery: per-repository strategies, the worker pool, and revision
reconciliation.

Discover sources for a set of targets::

    >>> from pathlib import Path
    >>> from fontsources.discovery import ConfigDiscoveryEngine, DiscoveryPool
    >>> from fontsources.discovery import RemoteProbe
    >>> from fontsources.git import SubprocessGit
    >>> engine = ConfigDiscoveryEngine(
    ...     Path("~/fonts").expanduser(), git=SubprocessGit(), probe=RemoteProbe()
    ... )
    >>> run = DiscoveryPool(engine).run(targets)
    >>> sources = mark_rev_conflicts(run.sources)
"""

from __future__ import annotations

from .engine import ConfigDiscoveryEngine, ConfigProbe
from .errors import (
    BadRepoUrlError,
    CacheEscapeError,
    DiscoveryError,
    GitFailureError,
    HttpFailureError,
    MissingRevisionError,
    NoConfigFoundError,
    RateLimitedError,
    RateLimitExhaustedError,
    StaleCheckoutError,
)
from .pool import (
    DiscoveryPool,
    DiscoveryRun,
    PoolSettings,
    RateLimitFlag,
    TaskReport,
    TaskState,
)
from .probe import RemoteProbe, parse_retry_after
from .reconcile import majority_rev, mark_rev_conflicts, merge_pinned
from .scan import find_sources_dir, looks_like_config_file, scan_config_files

__all__ = [
    "BadRepoUrlError",
    "CacheEscapeError",
    "ConfigDiscoveryEngine",
    "ConfigProbe",
    "DiscoveryError",
    "DiscoveryPool",
    "DiscoveryRun",
    "GitFailureError",
    "HttpFailureError",
    "MissingRevisionError",
    "NoConfigFoundError",
    "PoolSettings",
    "RateLimitExhaustedError",
    "RateLimitFlag",
    "RateLimitedError",
    "RemoteProbe",
    "StaleCheckoutError",
    "TaskReport",
    "TaskState",
    "find_sources_dir",
    "looks_like_config_file",
    "majority_rev",
    "mark_rev_conflicts",
    "merge_pinned",
    "parse_retry_after",
    "scan_config_files",
]
