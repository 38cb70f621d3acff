from __future__ import annotations

import pytest

from heading_slug.config import InvalidSlugHandling
from heading_slug.constants import DEFAULT_SLUG_PATTERN
from heading_slug.exceptions import InvalidExplicitSlugError
from heading_slug.extractor import extract_explicit_slug, is_default_pattern
from heading_slug.models import ExplicitSlugResult
from heading_slug.patterns import compile_patterns

CUSTOM_PATTERN = r"SLUG_([a-zA-Z0-9_\-]+)_SLUG$"


def _extract(text: str, slug_regex: str = DEFAULT_SLUG_PATTERN, handling="convert", trim=True):
    patterns = compile_patterns(slug_regex, trim_whitespace=trim)
    return extract_explicit_slug(text, slug_regex, InvalidSlugHandling(handling), patterns)


def test_returns_text_unchanged_without_notation():
    assert _extract("Plain heading") == ExplicitSlugResult(None, "Plain heading")


def test_extracts_valid_slug_and_trims_text():
    assert _extract("Title  {#custom-slug}  ") == ExplicitSlugResult("custom-slug", "Title")


def test_keeps_leading_whitespace_of_heading():
    result = _extract("  Indented Title  \n  {#indented-slug}  ")

    assert result == ExplicitSlugResult("indented-slug", "  Indented Title")


def test_without_trimming_only_notation_is_removed():
    result = _extract("  Indented Title  \n  {#indented-slug}  ", trim=False)

    assert result == ExplicitSlugResult("indented-slug", "  Indented Title  \n    ")


def test_invalid_notation_is_returned_for_conversion():
    assert _extract("Title {#invalid slug!}") == ExplicitSlugResult("invalid slug!", "Title")


def test_invalid_notation_raises_in_error_mode():
    with pytest.raises(InvalidExplicitSlugError, match="Invalid explicit slug notation found") as info:
        _extract("Title {#invalid slug!}", handling="error")

    assert info.value.candidate == "invalid slug!"
    assert info.value.pattern == DEFAULT_SLUG_PATTERN


def test_valid_notation_does_not_raise_in_error_mode():
    assert _extract("Title {#fine}", handling="error") == ExplicitSlugResult("fine", "Title")


def test_empty_notation_is_recognised():
    assert _extract("Title {#}") == ExplicitSlugResult("", "Title")


def test_custom_pattern_falls_back_to_default_notation():
    assert _extract("Default {#default-slug}", CUSTOM_PATTERN) == ExplicitSlugResult(
        "default-slug", "Default"
    )


def test_custom_pattern_takes_precedence():
    assert _extract("Complex SLUG_complex-test_SLUG", CUSTOM_PATTERN) == ExplicitSlugResult(
        "complex-test", "Complex"
    )


def test_malformed_default_notation_is_ignored_with_custom_pattern():
    assert _extract("Title {#bad slug}", CUSTOM_PATTERN) == ExplicitSlugResult(
        None, "Title {#bad slug}"
    )


def test_is_default_pattern():
    assert is_default_pattern(DEFAULT_SLUG_PATTERN)
    assert not is_default_pattern(CUSTOM_PATTERN)
