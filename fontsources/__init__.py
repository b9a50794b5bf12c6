"""Catalogue the upstream source repositories of Google Fonts families.

The pipeline reads every family's ``METADATA.pb`` from the registry, reduces
the records to unique repositories, discovers each repository's build config
in parallel, flags repositories pinned at conflicting revisions, and emits a
versioned catalogue.

Packages
--------
* :mod:`fontsources.registry` - metadata parsing and candidate reduction.
* :mod:`fontsources.discovery` - per-repository strategies and the worker
  pool.
* :mod:`fontsources.catalogue` - the catalogue format and checkout helpers.
* :mod:`fontsources.git` - the git process capability.
"""

from __future__ import annotations

__version__ = "0.1.0"
