"""Unit tests for catalogue JSON Schema generation."""

from __future__ import annotations

import json
import typing as typ

from fontsources.catalogue import build_catalogue_schema, write_catalogue_schema
from fontsources.catalogue.schema import SCHEMA_ID

if typ.TYPE_CHECKING:
    from pathlib import Path


def test_schema_describes_catalogue_sources() -> None:
    """The schema carries its id and the FontSource definition."""
    schema = build_catalogue_schema()

    assert schema["$id"] == SCHEMA_ID
    assert schema["title"] == "fontsources catalogue 1.0"
    source_schema = schema["$defs"]["FontSource"]
    assert set(source_schema["required"]) == {"repo_url", "rev"}
    assert "has_rev_conflict" in source_schema["properties"]


def test_write_catalogue_schema_creates_parents(tmp_path: Path) -> None:
    """Writing the schema creates missing directories."""
    target = tmp_path / "schemas" / "catalogue.json"

    written = write_catalogue_schema(target)

    assert written == target
    assert json.loads(target.read_text(encoding="utf-8"))["$id"] == SCHEMA_ID
