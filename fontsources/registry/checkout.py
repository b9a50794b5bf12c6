"""Access to the Google Fonts registry repository.

The registry keeps one directory per family under a license directory
(``ofl/``, ``apache/``, ``ufl/``), each holding a ``METADATA.pb`` record.
"""

from __future__ import annotations

import contextlib
import tempfile
import typing as typ
from pathlib import Path

from fontsources.git.errors import GitFailureError
from fontsources.logging import get_logger, log_info, log_warning

from .errors import RegistryCheckoutError, RegistryError
from .metadata import METADATA_FILE, load_metadata

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from fontsources.git.commands import GitCommands

    from .metadata import FontMetadata

logger = get_logger(__name__)

REGISTRY_URL = "https://github.com/google/fonts"
LICENSE_DIRS = ("ofl", "apache", "ufl")


@contextlib.contextmanager
def registry_checkout(
    path: Path | None, git: GitCommands
) -> cabc.Iterator[Path]:
    """Yield a registry checkout, cloning into a temporary directory if needed.

    Raises
    ------
    RegistryCheckoutError
        If ``path`` is not a directory or the clone fails.

    """
    if path is not None:
        if not path.is_dir():
            raise RegistryCheckoutError(str(path), "not a directory")
        yield path
        return

    with tempfile.TemporaryDirectory(prefix="fontsources-registry-") as tmp:
        target = Path(tmp) / "fonts"
        log_info(logger, "cloning %s", REGISTRY_URL)
        try:
            git.clone(REGISTRY_URL, target, depth=1)
        except GitFailureError as exc:
            raise RegistryCheckoutError(REGISTRY_URL, exc.stderr) from exc
        yield target


def iter_family_dirs(registry_root: Path) -> cabc.Iterator[Path]:
    """Yield family directories in license-directory then name order.

    Raises
    ------
    RegistryCheckoutError
        If none of the license directories can be listed.

    """
    listed = False
    for license_dir in LICENSE_DIRS:
        base = registry_root / license_dir
        if not base.is_dir():
            continue
        try:
            children = sorted(child for child in base.iterdir() if child.is_dir())
        except OSError as exc:
            raise RegistryCheckoutError(str(base), str(exc)) from exc
        listed = True
        yield from children

    if not listed:
        raise RegistryCheckoutError(
            str(registry_root), f"no {'/'.join(LICENSE_DIRS)} directories found"
        )


def load_registry_metadata(registry_root: Path) -> list[FontMetadata]:
    """Parse every family record in the registry.

    Families whose metadata is missing or lacks a name are logged and skipped.
    """
    records: list[FontMetadata] = []
    for family_dir in iter_family_dirs(registry_root):
        try:
            records.append(load_metadata(family_dir / METADATA_FILE))
        except RegistryError as exc:
            log_warning(logger, "no metadata for font %s: '%s'", family_dir, exc)
    return records
