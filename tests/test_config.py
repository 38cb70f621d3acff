from __future__ import annotations

import re
import textwrap
from pathlib import Path

import pytest

from heading_slug.config import (
    ConfigError,
    DuplicateSlugHandling,
    ExistingIdHandling,
    InvalidSlugHandling,
    SlugConfig,
    apply_overrides,
    build_config,
    coerce_config,
    load_config,
    normalize_config,
    pattern_source,
    validate_config,
)
from heading_slug.constants import DEFAULT_SLUG_PATTERN


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_dotfile(base: Path, body: str) -> Path:
    path = base / ".heading-slug.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_defaults():
    config = SlugConfig()

    assert config.slug_regex == DEFAULT_SLUG_PATTERN
    assert config.maintain_case is False
    assert config.normalize_unicode is False
    assert config.trim_whitespace is True
    assert config.duplicate_slug_handling is DuplicateSlugHandling.NUMBERING
    assert config.invalid_slug_handling is InvalidSlugHandling.CONVERT
    assert config.existing_id_handling is ExistingIdHandling.EXPLICIT
    assert config.assign_id_to_empty_heading is False
    assert config.strict_slug_regex is False


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        r"""
        [tool.heading-slug]
        slug_regex = '\[id:([a-z-]+)\]$'
        maintain_case = true
        duplicate_slug_handling = "error"
        invalid_slug_handling = "error"
        normalize_unicode = true
        trim_whitespace = false
        existing_id_handling = "always"
        assign_id_to_empty_heading = true
        strict_slug_regex = true
        """,
    )

    config = normalize_config(load_config(tmp_path))

    assert config == SlugConfig(
        slug_regex=r"\[id:([a-z-]+)\]$",
        maintain_case=True,
        duplicate_slug_handling=DuplicateSlugHandling.ERROR,
        invalid_slug_handling=InvalidSlugHandling.ERROR,
        normalize_unicode=True,
        trim_whitespace=False,
        existing_id_handling=ExistingIdHandling.ALWAYS,
        assign_id_to_empty_heading=True,
        strict_slug_regex=True,
    )


def test_loads_camel_case_keys(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.heading-slug]
        maintainCase = true
        existingIdHandling = "never"
        """,
    )

    config = load_config(tmp_path)

    assert config.maintain_case is True
    assert config.existing_id_handling == "never"


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [heading-slug]
        normalize_unicode = true
        """,
    )
    nested = tmp_path / "child"
    nested.mkdir()

    config = load_config(nested)

    assert config.normalize_unicode is True


def test_dotfile_accepts_tool_table(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [tool.heading-slug]
        maintain_case = true
        """,
    )

    assert load_config(tmp_path).maintain_case is True


def test_pyproject_wins_over_dotfile_in_same_directory(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.heading-slug]
        existing_id_handling = "never"
        """,
    )
    _write_dotfile(
        tmp_path,
        """
        [heading-slug]
        existing_id_handling = "always"
        """,
    )

    assert load_config(tmp_path).existing_id_handling == "never"


def test_load_config_walks_up_directories(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.heading-slug]
        maintain_case = true
        """,
    )
    nested = tmp_path / "a" / "b" / "c"
    nested.mkdir(parents=True)

    assert load_config(nested).maintain_case is True


def test_pyproject_without_table_is_skipped(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.heading-slug]
        maintain_case = true
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [project]
        name = "docs"
        """,
    )

    assert load_config(child).maintain_case is True


def test_empty_config_table_stops_inheritance(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.heading-slug]
        maintain_case = true
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [tool.heading-slug]
        """,
    )

    assert load_config(child) == SlugConfig()


def test_load_config_returns_defaults_when_missing(tmp_path: Path):
    assert load_config(tmp_path) == SlugConfig()


def test_load_config_skips_invalid_toml(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.heading-slug]
        maintain_case = true
        """,
    )
    invalid_dir = tmp_path / "invalid"
    invalid_dir.mkdir()
    (invalid_dir / "pyproject.toml").write_text("[tool.heading-slug\n", encoding="utf-8")

    assert load_config(invalid_dir).maintain_case is True


def test_load_config_rejects_unknown_keys(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.heading-slug]
        unknown = "value"
        """,
    )

    with pytest.raises(ConfigError, match=r"Invalid `\[tool.heading-slug\]` settings"):
        load_config(tmp_path)


def test_load_config_rejects_non_table(tmp_path: Path):
    _write_dotfile(tmp_path, 'heading-slug = "yes"\n')

    with pytest.raises(ConfigError, match=r"Invalid `\[heading-slug\]` settings"):
        load_config(tmp_path)


def test_coerce_config_passes_instances_through():
    config = SlugConfig(maintain_case=True)

    assert coerce_config(config) is config
    assert coerce_config(None) == SlugConfig()


def test_coerce_config_rejects_non_mappings():
    with pytest.raises(ConfigError, match="Options must be a mapping"):
        coerce_config(42)


def test_normalize_config_converts_policy_names():
    config = normalize_config(
        SlugConfig(
            duplicate_slug_handling="error",
            invalid_slug_handling="convert",
            existing_id_handling="never",
        )
    )

    assert config.duplicate_slug_handling is DuplicateSlugHandling.ERROR
    assert config.invalid_slug_handling is InvalidSlugHandling.CONVERT
    assert config.existing_id_handling is ExistingIdHandling.NEVER


def test_normalize_config_lists_accepted_values():
    with pytest.raises(ConfigError, match='`existing_id_handling` must be one of: "always", "never"'):
        normalize_config(SlugConfig(existing_id_handling="sometimes"))


@pytest.mark.parametrize(
    "name",
    [
        "maintain_case",
        "normalize_unicode",
        "trim_whitespace",
        "assign_id_to_empty_heading",
        "strict_slug_regex",
    ],
)
def test_validate_config_requires_booleans(name: str):
    with pytest.raises(ConfigError, match=f"`{name}` must be a boolean"):
        validate_config(SlugConfig(**{name: "true"}))


@pytest.mark.parametrize("slug_regex", [123, "", "(unclosed", re.compile(rb"bytes$")])
def test_validate_config_rejects_bad_patterns(slug_regex):
    with pytest.raises(ConfigError, match="slug_regex"):
        validate_config(SlugConfig(slug_regex=slug_regex))


def test_validate_config_accepts_compiled_pattern():
    validate_config(SlugConfig(slug_regex=re.compile(r"<<(\w+)>>$")))


def test_pattern_source():
    assert pattern_source(re.compile(r"abc$")) == "abc$"
    assert pattern_source("abc$") == "abc$"


def test_apply_overrides_ignores_none():
    config = SlugConfig()

    assert apply_overrides(config, maintain_case=None) is config
    assert apply_overrides(config, maintain_case=True).maintain_case is True


def test_build_config_applies_overrides_over_file(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.heading-slug]
        maintain_case = true
        existing_id_handling = "never"
        """,
    )

    config = build_config(tmp_path, existing_id_handling="always", maintain_case=None)

    assert config.maintain_case is True
    assert config.existing_id_handling is ExistingIdHandling.ALWAYS


def test_build_config_validates(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.heading-slug]
        trim_whitespace = "no"
        """,
    )

    with pytest.raises(ConfigError, match="`trim_whitespace` must be a boolean"):
        build_config(tmp_path)
