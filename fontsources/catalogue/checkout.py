"""Materialise catalogue sources on disk for downstream builds."""

from __future__ import annotations

import typing as typ
from pathlib import Path, PurePosixPath

from fontsources.discovery.errors import MissingRevisionError, NoConfigFoundError
from fontsources.discovery.scan import find_sources_dir
from fontsources.git.revisions import checkout_rev
from fontsources.logging import get_logger, log_debug, log_info, log_warning

from .build_config import load_build_config

if typ.TYPE_CHECKING:
    from fontsources.git.commands import GitCommands

    from .models import FontSource

logger = get_logger(__name__)


def instantiate(source: FontSource, cache_dir: Path, git: GitCommands) -> Path:
    """Check ``source`` out under ``cache_dir`` at its pinned revision.

    The checkout lives at :meth:`FontSource.repo_path`. A leftover directory
    that is not a git checkout is removed first when it is empty; a non-empty
    one is left alone and the clone fails.

    Returns
    -------
    Path
        The checkout directory.

    Raises
    ------
    GitFailureError
        If cloning or checking out fails.
    MissingRevisionError
        If the pinned revision cannot be found even after fetching.

    """
    font_dir = source.repo_path(cache_dir)

    if font_dir.exists() and not (font_dir / ".git").exists():
        log_debug(logger, "%s exists but is not a repo, removing", font_dir)
        try:
            font_dir.rmdir()
        except OSError as exc:
            log_warning(logger, "could not remove %s: '%s'", font_dir, exc)

    if not font_dir.exists():
        font_dir.parent.mkdir(parents=True, exist_ok=True)
        log_info(logger, "cloning %s", source.repo_url)
        git.clone(source.clone_url(), font_dir, depth=1)

    if not checkout_rev(git, font_dir, source.rev):
        raise MissingRevisionError(source.repo_url, source.rev)
    return font_dir


def config_paths(source: FontSource, font_dir: Path) -> list[Path]:
    """Return on-disk paths of the source's config files in ``font_dir``.

    Entries written by older releases hold only a filename; those resolve
    against the checkout's sources directory.
    """
    sources_dir = find_sources_dir(font_dir)
    paths: list[Path] = []
    for config in source.config_files:
        relative = PurePosixPath(config)
        if len(relative.parts) == 1 and sources_dir is not None:
            paths.append(sources_dir / relative)
        else:
            paths.append(font_dir / relative)
    return paths


def get_sources(source: FontSource, cache_dir: Path, git: GitCommands) -> list[Path]:
    """Return the existing source files named by the source's build configs.

    Each config's ``sources`` entries are resolved relative to the config's own
    directory. Missing files are skipped; the result is sorted and unique.

    Raises
    ------
    NoConfigFoundError
        If the source records no config files.
    BuildConfigError
        If a config file cannot be loaded.

    """
    font_dir = instantiate(source, cache_dir, git)
    configs = config_paths(source, font_dir)
    if not configs:
        raise NoConfigFoundError(source.repo_url)

    found: set[Path] = set()
    for config_path in configs:
        build_config = load_build_config(config_path)
        for entry in build_config.sources:
            candidate = config_path.parent / entry
            if candidate.exists():
                found.add(candidate)
    return sorted(found)
