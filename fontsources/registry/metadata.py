"""Reading the ``METADATA.pb`` records that describe a font family.

The records use the protobuf text format defined by gftools
(``fonts_public.proto``). Only four scalar fields are needed here, so instead of
a conformant text-format parser this module locates each field by its key
prefix and reads the quoted literal that follows. Callers depend only on
:func:`parse_metadata` and :func:`extract_literal`, which keeps the grammar
replaceable.
"""

from __future__ import annotations

import dataclasses
import typing as typ

from .errors import MetadataParseError, MetadataReadError

if typ.TYPE_CHECKING:
    from pathlib import Path

METADATA_FILE = "METADATA.pb"

NAME_KEY = "name: "
REPO_KEY = "repository_url: "
COMMIT_KEY = "commit: "
CONFIG_YAML_KEY = "config_yaml: "

KNOWN_HOSTS = ("github.com",)
_FAMILIAR_PREFIX = "https://github.com/"


@dataclasses.dataclass(frozen=True, slots=True, order=True)
class FontMetadata:
    """Fields of one family record relevant to source discovery.

    Attributes
    ----------
    name
        Family name; the only required field.
    repo_url
        Normalized upstream repository URL, if declared.
    commit
        Commit the family was last onboarded from, if declared.
    config_yaml
        Repository-relative path of the build config, if declared.

    """

    name: str
    repo_url: str | None = None
    commit: str | None = None
    config_yaml: str | None = None

    @classmethod
    def build(
        cls,
        name: str,
        repo_url: str | None = None,
        commit: str | None = None,
        config_yaml: str | None = None,
    ) -> FontMetadata:
        """Normalize raw field values into a record."""
        return cls(
            name=name,
            repo_url=normalize_repo_url(repo_url) if repo_url is not None else None,
            commit=_non_empty(commit),
            config_yaml=_non_empty(config_yaml),
        )

    @property
    def unfamiliar_repo_url(self) -> str | None:
        """Return the repo URL when it is not on a host we can probe."""
        if self.repo_url is None or self.repo_url.startswith(_FAMILIAR_PREFIX):
            return None
        return self.repo_url


def _non_empty(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def extract_literal(text: str) -> str | None:
    """Return the contents of the quoted string literal at the start of ``text``.

    Leading whitespace is skipped and the next character must be ``"``. The
    returned slice ends at the first closing quote that is not preceded by an
    unescaped backslash. Escape sequences are kept verbatim.

    Examples
    --------
    >>> extract_literal(' "foo" ')
    'foo'
    >>> extract_literal(' "foo\\\\"bar" ')
    'foo\\\\"bar'
    >>> extract_literal(' foo" ') is None
    True

    """
    stripped = text.lstrip()
    if not stripped.startswith('"'):
        return None
    body = stripped[1:]

    escaped = False
    for index, char in enumerate(body):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            return body[:index]
    return None


def _field(text: str, key: str) -> str | None:
    position = text.find(key)
    if position < 0:
        return None
    return extract_literal(text[position + len(key) :])


def parse_metadata(text: str) -> FontMetadata:
    """Parse the raw text of a ``METADATA.pb`` record.

    Raises
    ------
    MetadataParseError
        If the required ``name`` field is missing or is not a quoted literal.

    """
    name = _field(text, NAME_KEY)
    if name is None:
        raise MetadataParseError.missing_field("name")

    return FontMetadata.build(
        name,
        repo_url=_field(text, REPO_KEY),
        commit=_field(text, COMMIT_KEY),
        config_yaml=_field(text, CONFIG_YAML_KEY),
    )


def load_metadata(path: Path) -> FontMetadata:
    """Read and parse a ``METADATA.pb`` file."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MetadataReadError(path, str(exc)) from exc
    return parse_metadata(text)


def normalize_repo_url(url: str) -> str | None:
    """Normalize a declared repository URL.

    Surrounding whitespace and trailing slashes are removed, a ``www.`` host
    prefix is dropped, and a known host given without a protocol gains
    ``https://``. Blank values become ``None``.

    Examples
    --------
    >>> normalize_repo_url("github.com/x/y")
    'https://github.com/x/y'
    >>> normalize_repo_url("https://www.github.com/x/y/")
    'https://github.com/x/y'

    """
    cleaned = url.strip().rstrip("/")
    if not cleaned:
        return None

    for scheme in ("https://", "http://"):
        if cleaned.startswith(f"{scheme}www."):
            return scheme + cleaned.removeprefix(f"{scheme}www.")

    bare = cleaned.removeprefix("www.")
    if bare.startswith(KNOWN_HOSTS):
        return f"https://{bare}"
    return cleaned
