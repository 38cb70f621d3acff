"""Explicit slug notation in heading text."""

from __future__ import annotations

import re

from .config import InvalidSlugHandling, pattern_source
from .constants import DEFAULT_NOTATION_PATTERN, DEFAULT_SLUG_PATTERN
from .exceptions import InvalidExplicitSlugError
from .models import CompiledPatterns, ExplicitSlugResult


def is_default_pattern(slug_regex: str | re.Pattern[str]) -> bool:
    """Check whether `slug_regex` is the built-in ``{#slug}`` notation."""
    return pattern_source(slug_regex) == DEFAULT_SLUG_PATTERN


def extract_explicit_slug(
    text: str,
    slug_regex: str | re.Pattern[str],
    invalid_slug_handling: InvalidSlugHandling,
    patterns: CompiledPatterns,
) -> ExplicitSlugResult:
    """Split explicit slug notation from the end of heading text.

    Matches are tried in order, first one wins:

    1. The configured notation, strictly matched.
    2. The default ``{#slug}`` notation, when `slug_regex` is custom, so
       documents may mix both styles.
    3. The configured notation with any content in its capture group. The
       captured text is an invalid slug: it raises under
       ``invalid_slug_handling="error"`` and is returned for conversion
       otherwise.

    The matched notation, and the whitespace the pattern absorbed, is removed
    from the returned text in every case.

    Args:
        text: Full text content of the heading.
        slug_regex: Configured explicit slug pattern.
        invalid_slug_handling: Policy for notation with an invalid slug.
        patterns: Patterns compiled from `slug_regex`.

    Returns:
        ExplicitSlugResult: The captured slug (None when there is no notation)
        and the remaining text.

    Raises:
        InvalidExplicitSlugError: If notation with an invalid slug is found and
            `invalid_slug_handling` is ``"error"``.

    Examples:
        extract_explicit_slug("Intro {#start}", DEFAULT_SLUG_PATTERN, "convert", patterns)
        # ExplicitSlugResult(explicit_slug="start", clean_text="Intro")
    """
    match = patterns.trimmed_slug.search(text)
    if match and match.group(1):
        return ExplicitSlugResult(match.group(1), _remove_match(text, match))

    if not is_default_pattern(slug_regex):
        match = DEFAULT_NOTATION_PATTERN.search(text)
        if match and match.group(1):
            return ExplicitSlugResult(match.group(1), _remove_match(text, match))

    match = patterns.any_slug.search(text)
    if match:
        candidate = match.group(1) or ""
        if invalid_slug_handling == InvalidSlugHandling.ERROR:
            raise InvalidExplicitSlugError(candidate, pattern_source(slug_regex))
        return ExplicitSlugResult(candidate, _remove_match(text, match))

    return ExplicitSlugResult(None, text)


def _remove_match(text: str, match: re.Match[str]) -> str:
    return text[: match.start()] + text[match.end() :]
