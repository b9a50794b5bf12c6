"""Google Fonts build config files (``config.yaml``).

The format is the one used by ``gftools builder``; see the
googlefonts-project-template for a complete example. Only the fields useful to
downstream tooling are modelled, and unknown keys are ignored.
"""

from __future__ import annotations

from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

YAML_VERSION = (1, 2)


class BuildConfigError(ValueError):
    """Raised when a config file cannot be read or does not match the schema."""

    def __init__(self, path: Path, reason: str) -> None:
        """Initialise with the config path and failure reason."""
        self.path = path
        self.reason = reason
        super().__init__(f"couldn't load config file {path}: {reason}")


class BuildConfig(msgspec.Struct, kw_only=True, rename="camel"):
    """Build settings for one font project.

    Attributes
    ----------
    sources : list[str]
        Source files, relative to the directory holding the config.
    family_name : str, optional
        Family name override.
    axis_order : list[str]
        Variable font axis tags in output order.

    """

    sources: list[str]
    family_name: str | None = None
    build_variable: bool = True
    build_static: bool = True
    build_ttf: bool = msgspec.field(default=True, name="buildTTF")
    build_otf: bool = msgspec.field(default=False, name="buildOTF")
    axis_order: list[str] = msgspec.field(default_factory=list)
    recipe_provider: str | None = None
    glyph_data: list[str] = msgspec.field(default_factory=list)
    flatten_components: bool = True
    decompose_transformed_components: bool = True
    reverse_outline_direction: bool = True
    check_compatibility: bool = True
    remove_outline_overlaps: bool = True
    expand_features_to_instances: bool = False
    build_small_cap: bool = True
    split_italic: bool = True


def load_build_config(path: Path | str) -> BuildConfig:
    """Parse a build config file using a YAML 1.2 compliant loader."""
    path_obj = Path(path)
    try:
        loaded = _yaml().load(path_obj.read_text(encoding="utf-8"))
    except (OSError, YAMLError) as exc:
        raise BuildConfigError(path_obj, f"failed to parse YAML: {exc}") from exc

    if loaded is None:
        raise BuildConfigError(path_obj, "config file is empty")

    try:
        return msgspec.convert(loaded, type=BuildConfig)
    except msgspec.ValidationError as exc:
        raise BuildConfigError(path_obj, f"schema validation failed: {exc}") from exc


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml
