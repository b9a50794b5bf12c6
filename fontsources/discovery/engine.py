"""Per-repository config discovery.

For one repository the engine works out which config files exist and which
revision they were found at, trying progressively more expensive strategies:

1. an existing checkout in the cache is authoritative;
2. a remote HTTP probe of the conventional config locations, which never
   clones;
3. a shallow clone into the cache followed by a scan.

The first strategy that gives a definitive answer wins.
"""

from __future__ import annotations

import shutil
import typing as typ

from fontsources.catalogue.models import FontSource
from fontsources.common.slug import repo_cache_path
from fontsources.git.revisions import checkout_rev
from fontsources.logging import get_logger, log_debug, log_info

from .errors import (
    CacheEscapeError,
    MissingRevisionError,
    NoConfigFoundError,
    StaleCheckoutError,
)
from .probe import CONVENTIONAL_CONFIG_PATHS
from .scan import scan_config_files

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from fontsources.git.commands import GitCommands
    from fontsources.registry.candidates import DiscoveryTarget

logger = get_logger(__name__)


class ConfigProbe(typ.Protocol):
    """Remote config lookup used before falling back to a clone."""

    def find_config(
        self,
        repo_url: str,
        *,
        rev: str = "HEAD",
        paths: cabc.Sequence[str] = CONVENTIONAL_CONFIG_PATHS,
    ) -> str | None:
        """Return the first existing path, or None when all are missing."""
        ...


class ConfigDiscoveryEngine:
    """Find config files and the pinned revision for repositories.

    Parameters
    ----------
    cache_dir
        Root of the checkout cache; repositories live at
        ``{cache_dir}/{org}/{name}``.
    git
        Git capability used for checkouts and remote revision lookups.
    probe
        HTTP capability used for the no-clone probe.

    """

    def __init__(
        self, cache_dir: Path, *, git: GitCommands, probe: ConfigProbe
    ) -> None:
        """Initialise the engine with its cache location and capabilities."""
        self.cache_dir = cache_dir
        self._git = git
        self._probe = probe

    def discover(self, target: DiscoveryTarget) -> FontSource:
        """Return the source discovered for ``target``.

        Raises
        ------
        BadRepoUrlError
            If the repository URL has no ``org/name`` pair.
        RateLimitedError
            If the remote probe was throttled; the caller should retry later.
        NoConfigFoundError, MissingRevisionError, GitFailureError, HttpFailureError
            When the repository cannot be included in the catalogue.

        """
        checkout = repo_cache_path(target.repo_url, self.cache_dir)

        if (checkout / ".git").exists():
            log_debug(
                logger, "%s: using existing checkout %s", target.repo_url, checkout
            )
            return self._scan_checkout(target, checkout)

        probed = self._probe_remote(target)
        if probed is not None:
            return probed

        return self._clone_and_scan(target, checkout)

    def _probe_remote(self, target: DiscoveryTarget) -> FontSource | None:
        found = self._probe.find_config(
            target.repo_url,
            rev=target.commit or "HEAD",
            paths=_probe_paths(target),
        )
        if found is None:
            log_debug(logger, "%s: no config at conventional paths", target.repo_url)
            return None

        rev = target.commit or self._git.ls_remote(target.repo_url)
        log_debug(logger, "%s: probe found %s at %s", target.repo_url, found, rev)
        return FontSource(repo_url=target.repo_url, rev=rev, config_files=[found])

    def _clone_and_scan(self, target: DiscoveryTarget, checkout: Path) -> FontSource:
        if not _is_inside(checkout, self.cache_dir):
            raise CacheEscapeError(checkout, self.cache_dir)
        if checkout.exists():
            shutil.rmtree(checkout)
            raise StaleCheckoutError(checkout)

        checkout.parent.mkdir(parents=True, exist_ok=True)
        log_info(logger, "cloning %s", target.repo_url)
        self._git.clone(target.repo_url, checkout, depth=1)
        return self._scan_checkout(target, checkout)

    def _scan_checkout(self, target: DiscoveryTarget, checkout: Path) -> FontSource:
        if target.commit is not None:
            if not checkout_rev(self._git, checkout, target.commit):
                raise MissingRevisionError(target.repo_url, target.commit)
            rev = target.commit
        else:
            rev = self._git.rev_parse(checkout)

        config_files = scan_config_files(checkout)
        declared = target.config_yaml
        if (
            declared is not None
            and declared not in config_files
            and (checkout / declared).is_file()
        ):
            config_files.insert(0, declared)

        if not config_files:
            raise NoConfigFoundError(target.repo_url)
        return FontSource(repo_url=target.repo_url, rev=rev, config_files=config_files)


def _probe_paths(target: DiscoveryTarget) -> tuple[str, ...]:
    declared = target.config_yaml
    if declared is None or declared in CONVENTIONAL_CONFIG_PATHS:
        return CONVENTIONAL_CONFIG_PATHS
    return (declared, *CONVENTIONAL_CONFIG_PATHS)


def _is_inside(path: Path, root: Path) -> bool:
    resolved = path.resolve()
    resolved_root = root.resolve()
    return resolved != resolved_root and resolved.is_relative_to(resolved_root)
