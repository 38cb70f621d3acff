"""Configuration loading and management."""

from __future__ import annotations

import re
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path

from .constants import DEFAULT_SLUG_PATTERN


class DuplicateSlugHandling(str, Enum):
    """How colliding slugs within one document are resolved.

    Attributes:
        NUMBERING: Append ``-1``, ``-2``, ... to repeated slugs.
        ERROR: Raise `DuplicateSlugError` on the first collision.
    """

    NUMBERING = "numbering"
    ERROR = "error"


class InvalidSlugHandling(str, Enum):
    """How explicit slug notation with disallowed characters is handled.

    Attributes:
        CONVERT: Slugify the captured text.
        ERROR: Raise `InvalidExplicitSlugError`.
    """

    CONVERT = "convert"
    ERROR = "error"


class ExistingIdHandling(str, Enum):
    """What happens when a heading already carries an ``id``.

    Attributes:
        ALWAYS: Always replace the existing id.
        NEVER: Never replace the existing id.
        EXPLICIT: Replace it only when the heading has explicit slug notation.
        ERROR: Raise `ExistingIdError`.
    """

    ALWAYS = "always"
    NEVER = "never"
    EXPLICIT = "explicit"
    ERROR = "error"


@dataclass(frozen=True)
class SlugConfig:
    """Configuration for assigning heading ids.

    Attributes:
        slug_regex: Pattern matching explicit slug notation at the end of the
            heading text. Accepts a string or a compiled pattern; the first
            capture group holds the slug.
        maintain_case: Keep the original letter case in generated slugs.
        duplicate_slug_handling: Policy for slugs already used in the document.
        invalid_slug_handling: Policy for notation whose content is not a valid slug.
        normalize_unicode: Transliterate Latin accented characters to ASCII when
            deriving slugs from heading text.
        trim_whitespace: Collapse whitespace runs into hyphens and trim around
            explicit notation.
        existing_id_handling: Policy for headings that already have an id.
        assign_id_to_empty_heading: Give blank headings ``<level>-<n>`` ids.
        strict_slug_regex: Require `slug_regex` to contain a capture group
            instead of wrapping the whole pattern in one.

    Examples:
        SlugConfig(maintain_case=True, existing_id_handling="always")
    """

    # Explicit notation
    slug_regex: str | re.Pattern[str] = DEFAULT_SLUG_PATTERN
    strict_slug_regex: bool = False

    # Slug derivation
    maintain_case: bool = False
    normalize_unicode: bool = False
    trim_whitespace: bool = True

    # Policies
    duplicate_slug_handling: DuplicateSlugHandling = DuplicateSlugHandling.NUMBERING
    invalid_slug_handling: InvalidSlugHandling = InvalidSlugHandling.CONVERT
    existing_id_handling: ExistingIdHandling = ExistingIdHandling.EXPLICIT
    assign_id_to_empty_heading: bool = False


class ConfigError(ValueError):
    """Raised for options that cannot configure a transformer.

    Raised before any heading is touched: by `HeadingSlugTransformer` for bad
    options or an unusable `slug_regex`, and by `load_config` for bad config
    files.

    Examples:
        raise ConfigError("`maintain_case` must be a boolean")
    """


# Option names as spelled by the rehype plugin family
_OPTION_ALIASES = {
    "slugRegex": "slug_regex",
    "maintainCase": "maintain_case",
    "duplicateSlugHandling": "duplicate_slug_handling",
    "invalidSlugHandling": "invalid_slug_handling",
    "normalizeUnicode": "normalize_unicode",
    "trimWhitespace": "trim_whitespace",
    "existingIdHandling": "existing_id_handling",
    "assignIdToEmptyHeading": "assign_id_to_empty_heading",
    "strictSlugRegex": "strict_slug_regex",
}

_BOOLEAN_OPTIONS = (
    "maintain_case",
    "normalize_unicode",
    "trim_whitespace",
    "assign_id_to_empty_heading",
    "strict_slug_regex",
)


def coerce_config(options: object) -> SlugConfig:
    """Build a `SlugConfig` from user-supplied options.

    Args:
        options: ``None`` for defaults, an existing `SlugConfig`, or a mapping
            of option names. Keys may use snake_case or the camelCase names of
            the rehype plugin (``maintainCase``, ``slugRegex``, ...).

    Returns:
        SlugConfig: Configuration holding the supplied options. Values are not
        validated yet; see `validate_config`.

    Raises:
        ConfigError: If `options` is not a mapping or contains unknown keys.

    Examples:
        coerce_config({"maintainCase": True})
        coerce_config(None)
    """
    if options is None:
        return SlugConfig()
    if isinstance(options, SlugConfig):
        return options
    if not isinstance(options, Mapping):
        raise ConfigError(
            f"Options must be a mapping or SlugConfig, got {type(options).__name__}"
        )

    known = {field.name for field in fields(SlugConfig)}
    values: dict[str, object] = {}
    for key, value in options.items():
        name = _OPTION_ALIASES.get(key, key)
        if name not in known:
            raise ConfigError(f"Unknown option `{key}`")
        values[name] = value
    return SlugConfig(**values)


# File name and candidate tables, in lookup order within one directory
_CONFIG_SOURCES = (
    ("pyproject.toml", (("tool", "heading-slug"),)),
    (".heading-slug.toml", (("heading-slug",), ("tool", "heading-slug"))),
)

_NOT_FOUND = object()


def load_config(search_path: Path) -> SlugConfig:
    """Find and load the nearest heading-slug settings.

    Each directory from `search_path` up to the filesystem root is checked for
    a ``[tool.heading-slug]`` table in `pyproject.toml`, then for a
    ``[heading-slug]`` (or ``[tool.heading-slug]``) table in
    `.heading-slug.toml`. The first table found wins, even an empty one.
    Files that cannot be read or are not valid TOML are ignored.

    Args:
        search_path: Directory where the lookup starts.

    Returns:
        SlugConfig: Settings from the nearest table, or defaults when there is
        none. Policy values are still plain strings; see `normalize_config`.

    Raises:
        ConfigError: If the table found is not a table or has unknown keys.

    Examples:
        load_config(Path("site/docs"))
    """
    directory = search_path.resolve()

    for candidate in (directory, *directory.parents):
        for filename, table_paths in _CONFIG_SOURCES:
            table, location = _read_table(candidate / filename, table_paths)
            if table is not _NOT_FOUND:
                return _config_from_table(table, location)

    return SlugConfig()


def _read_table(
    config_file: Path, table_paths: tuple[tuple[str, ...], ...]
) -> tuple[object, str]:
    if not config_file.is_file():
        return _NOT_FOUND, ""

    try:
        document = tomllib.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return _NOT_FOUND, ""

    for table_path in table_paths:
        table: object = document
        for key in table_path:
            table = table.get(key, _NOT_FOUND) if isinstance(table, dict) else _NOT_FOUND
        if table is not _NOT_FOUND:
            return table, f"`[{'.'.join(table_path)}]` settings in {config_file}"

    return _NOT_FOUND, ""


def _config_from_table(table: object, location: str) -> SlugConfig:
    if not isinstance(table, dict):
        raise ConfigError(f"Invalid {location}")

    try:
        return coerce_config(table)
    except ConfigError as error:
        raise ConfigError(f"Invalid {location}: {error}") from error


def normalize_config(config: SlugConfig) -> SlugConfig:
    """Convert policy names to their enum members.

    Args:
        config: Configuration that may hold plain strings for policies.

    Returns:
        SlugConfig: Configuration whose policy fields are enum members.

    Raises:
        ConfigError: If a policy name is not one of the accepted values.

    Examples:
        normalize_config(SlugConfig(duplicate_slug_handling="error"))
    """
    return replace(
        config,
        duplicate_slug_handling=_ensure_choice(
            "duplicate_slug_handling", config.duplicate_slug_handling, DuplicateSlugHandling
        ),
        invalid_slug_handling=_ensure_choice(
            "invalid_slug_handling", config.invalid_slug_handling, InvalidSlugHandling
        ),
        existing_id_handling=_ensure_choice(
            "existing_id_handling", config.existing_id_handling, ExistingIdHandling
        ),
    )


def validate_config(config: SlugConfig) -> None:
    """Check the types and values of every setting.

    Args:
        config: Settings to check. Policies may still be plain strings.

    Raises:
        ConfigError: If a flag is not a `bool`, a policy is not one of its
            accepted values, or `slug_regex` is not a usable regular expression.

    Examples:
        validate_config(SlugConfig(normalize_unicode=True))
    """
    config = normalize_config(config)

    _ensure_booleans({name: getattr(config, name) for name in _BOOLEAN_OPTIONS})
    _ensure_pattern(config.slug_regex)


def apply_overrides(config: SlugConfig, **overrides: object) -> SlugConfig:
    """Layer explicitly given settings, such as CLI flags, over `config`.

    Overrides set to None were not given and leave the setting alone. `config`
    itself is returned when nothing is overridden.

    Raises:
        TypeError: If an override is not a `SlugConfig` field.

    Examples:
        apply_overrides(config, maintain_case=True, slug_regex=None)
    """
    given = {name: value for name, value in overrides.items() if value is not None}
    return replace(config, **given) if given else config


def build_config(search_path: Path, **overrides: object) -> SlugConfig:
    """Resolve the settings for documents under `search_path`.

    File settings are loaded with `load_config`, `overrides` are applied on
    top, and the result is normalized and validated.

    Raises:
        ConfigError: If a config file or an override is invalid.

    Examples:
        build_config(Path.cwd(), existing_id_handling="always")
    """
    config = normalize_config(apply_overrides(load_config(search_path), **overrides))
    validate_config(config)
    return config


def pattern_source(slug_regex: str | re.Pattern[str]) -> str:
    """Return the textual source of a `slug_regex` value."""
    if isinstance(slug_regex, re.Pattern):
        return slug_regex.pattern
    return slug_regex


def _ensure_choice(name: str, value: object, choices: type[Enum]) -> Enum:
    if isinstance(value, choices):
        return value
    try:
        return choices(value)
    except (ValueError, TypeError) as error:
        accepted = ", ".join(f'"{member.value}"' for member in choices)
        raise ConfigError(f"`{name}` must be one of: {accepted}") from error


def _ensure_booleans(values: dict[str, object]) -> None:
    for key, value in values.items():
        if not isinstance(value, bool):
            raise ConfigError(f"`{key}` must be a boolean")


def _ensure_pattern(value: object) -> None:
    if isinstance(value, re.Pattern):
        if not isinstance(value.pattern, str):
            raise ConfigError("`slug_regex` must be a text pattern, not bytes")
        return
    if not isinstance(value, str) or not value:
        raise ConfigError("`slug_regex` must be a regular expression string or compiled pattern")
    try:
        re.compile(value)
    except re.error as error:
        raise ConfigError(f"`slug_regex` is not a valid regular expression: {error}") from error
