"""Locate config-like files inside a repository checkout."""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath

SOURCES_DIR = "sources"
CONFIG_STEM_PREFIX = "config"
CONFIG_SUFFIXES = frozenset({".yaml", ".yml"})


def looks_like_config_file(filename: str) -> bool:
    """Return True for names like ``config.yaml`` or ``config-static.yml``."""
    path = PurePosixPath(filename)
    return path.stem.startswith(CONFIG_STEM_PREFIX) and path.suffix in CONFIG_SUFFIXES


def find_sources_dir(checkout: Path) -> Path | None:
    """Return the checkout's sources directory with its on-disk casing.

    The directory may be spelled ``sources``, ``Sources``, or any other casing.
    On case-insensitive filesystems the conventional spelling resolves
    directly and is matched to the real entry by file identity; otherwise the
    entries are compared by name. The match is then canonicalized and the
    checkout prefix stripped, so the returned path carries the casing stored on
    disk.
    """
    try:
        entries = [entry for entry in checkout.iterdir() if entry.is_dir()]
    except OSError:
        return None

    conventional = checkout / SOURCES_DIR
    if conventional.is_dir():
        match = next(
            (entry for entry in entries if os.path.samefile(entry, conventional)),
            conventional,
        )
    else:
        # case-sensitive filesystem: no entry can be samefile with the
        # conventional spelling, so fall back to comparing names
        match = next(
            (entry for entry in entries if entry.name.lower() == SOURCES_DIR), None
        )
        if match is None:
            return None

    try:
        relative = match.resolve().relative_to(checkout.resolve())
    except ValueError:
        # symlinked out of the checkout
        return match
    return checkout / relative


def scan_config_files(checkout: Path) -> list[str]:
    """Return repo-relative POSIX paths of config-like files, shortest first.

    Only the top level of the sources directory is inspected. Matches are
    ordered by filename length, then name, so the conventional primary config
    comes first; every match is kept.
    """
    sources_dir = find_sources_dir(checkout)
    if sources_dir is None:
        return []

    try:
        names = [
            entry.name
            for entry in sources_dir.iterdir()
            if entry.is_file() and looks_like_config_file(entry.name)
        ]
    except OSError:
        return []

    names.sort(key=lambda name: (len(name), name))
    prefix = sources_dir.relative_to(checkout).as_posix()
    return [f"{prefix}/{name}" for name in names]
