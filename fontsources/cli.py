"""Command-line entry point: catalogue the font sources behind Google Fonts."""

from __future__ import annotations

import argparse
import collections
import dataclasses as dc
import sys
import typing as typ
from pathlib import Path, PurePosixPath

from fontsources.catalogue import (
    CatalogueDecodeError,
    encode_catalogue,
    encode_url_list,
    load_catalogue,
    write_catalogue_schema,
)
from fontsources.config import ConfigError, DiscoveryConfig
from fontsources.discovery import (
    ConfigDiscoveryEngine,
    DiscoveryPool,
    RemoteProbe,
    mark_rev_conflicts,
    merge_pinned,
)
from fontsources.git import SubprocessGit
from fontsources.logging import configure_logging, get_logger, log_info, log_warning
from fontsources.registry import (
    RegistryCheckoutError,
    SourceCandidateSet,
    load_registry_metadata,
    registry_checkout,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from fontsources.catalogue import FontSource

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fontsources", description=__doc__)
    parser.add_argument(
        "fonts_dir",
        type=Path,
        help=(
            "Directory where font source repositories are checked out. The "
            "tool assumes anything in it can be modified or deleted."
        ),
    )
    parser.add_argument(
        "-o",
        "--out",
        type=Path,
        default=None,
        help="Path to write output. If omitted, output is printed to stdout",
    )
    parser.add_argument(
        "-l",
        "--list",
        action="store_true",
        help="Just print a list of repository URLs",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print more info to stderr",
    )
    parser.add_argument(
        "--repo-path",
        type=Path,
        default=None,
        help="Existing google/fonts checkout; cloned to a temp dir when omitted",
    )
    parser.add_argument(
        "--pinned",
        type=Path,
        default=None,
        help="Catalogue of extra, already pinned sources to merge into the output",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of repositories to probe in parallel",
    )
    parser.add_argument(
        "--schema-out",
        type=Path,
        default=None,
        help="Optional path to write the catalogue JSON Schema",
    )
    return parser


def _fail(message: str) -> int:
    print(f"error: {message}", file=sys.stderr)
    return 1


def report_config_stats(sources: cabc.Iterable[FontSource]) -> list[tuple[str, int]]:
    """Log and return how often each config filename occurs, most common first."""
    counts = collections.Counter(
        PurePosixPath(config).name
        for source in sources
        for config in source.config_files
    )
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    for filename, count in ranked:
        log_info(logger, "%-3d %s", count, filename)
    return ranked


def main(argv: list[str] | None = None) -> int:
    """Discover font sources and write the catalogue.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 on a fatal setup or output failure.

    """
    args = _build_parser().parse_args(argv)

    try:
        config = DiscoveryConfig.from_env()
    except ConfigError as exc:
        return _fail(str(exc))
    if args.workers is not None:
        if args.workers < 1:
            return _fail(f"--workers must be positive, got {args.workers}")
        config = dc.replace(config, workers=args.workers)

    requested_level = "DEBUG" if args.verbose else config.log_level
    normalized_level, invalid_level = configure_logging(requested_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid FONTSOURCES_LOG_LEVEL %r, falling back to %s",
            requested_level,
            normalized_level,
        )

    git = SubprocessGit(timeout=config.git_timeout)
    try:
        pinned = load_catalogue(args.pinned).sources if args.pinned else []
        with registry_checkout(args.repo_path, git) as registry_root:
            records = load_registry_metadata(registry_root)
        args.fonts_dir.mkdir(parents=True, exist_ok=True)
    except (RegistryCheckoutError, CatalogueDecodeError, OSError) as exc:
        return _fail(str(exc))

    candidates = SourceCandidateSet.from_metadata(records)
    log_info(
        logger,
        "%d of %d candidates have known repo url",
        len(candidates),
        candidates.total,
    )

    with RemoteProbe(
        timeout=config.http_timeout, token=config.github_token
    ) as probe:
        engine = ConfigDiscoveryEngine(args.fonts_dir, git=git, probe=probe)
        run = DiscoveryPool(engine, config.pool_settings()).run(candidates.targets)

    log_info(
        logger,
        "%d of %d have config files (%d excluded, %d cooldowns)",
        len(run.sources),
        len(candidates),
        len(run.failures),
        run.cooldowns,
    )
    report_config_stats(run.sources)

    sources = mark_rev_conflicts(merge_pinned(run.sources, pinned))
    output = (
        encode_url_list(sources) if args.list else encode_catalogue(sources).decode()
    )

    try:
        if args.out is None:
            sys.stdout.write(output)
        else:
            args.out.write_text(output, encoding="utf-8")
        if args.schema_out is not None:
            write_catalogue_schema(args.schema_out)
    except OSError as exc:
        return _fail(f"could not write output: {exc}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
