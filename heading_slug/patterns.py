"""Regular expressions for explicit slug notation."""

from __future__ import annotations

import re

from .config import ConfigError, pattern_source
from .constants import LOOSE_CAPTURE, VALID_SLUG_PATTERN, WHITESPACE_ONLY_PATTERN
from .models import CompiledPatterns


def is_escaped(text: str, pos: int) -> bool:
    """Determine whether a character is escaped by preceding backslashes.

    Counts consecutive backslashes immediately before `pos`; an odd count marks
    the character as escaped.

    Args:
        text: Text containing the character.
        pos: Zero-based index of the character to inspect.

    Returns:
        bool: True when the character is escaped, otherwise False.

    Examples:
        is_escaped("\\\\$", 2)  # False, two backslashes
        is_escaped("\\$", 1)  # True, one backslash
    """
    backslash_count = 0
    i = pos - 1
    while i >= 0 and text[i] == "\\":
        backslash_count += 1
        i -= 1

    return backslash_count % 2 == 1


def strip_end_anchor(source: str) -> str:
    """Remove a trailing ``$`` or ``\\Z`` anchor from a pattern source.

    Escaped dollar signs (``\\$``) are literal characters and are kept.

    Examples:
        strip_end_anchor(r"\\{#(\\w+)\\}$")  # r"\\{#(\\w+)\\}"
        strip_end_anchor(r"\\$\\$(\\w+)\\$\\$$")  # r"\\$\\$(\\w+)\\$\\$"
    """
    if source.endswith("\\Z") and not is_escaped(source, len(source) - 2):
        return source[:-2]
    if source.endswith("$") and not is_escaped(source, len(source) - 1):
        return source[:-1]
    return source


def find_capture_group(fragment: str) -> tuple[int, int] | None:
    """Locate the first capturing group in a regular expression fragment.

    Escaped parentheses, character classes, and ``(?...)`` constructs are
    skipped, except named groups (``(?P<name>...)``), which capture.

    Args:
        fragment: Regular expression source.

    Returns:
        tuple[int, int] | None: Start index of the opening parenthesis and the
            index just past the matching closing parenthesis, or None when the
            fragment has no capturing group.

    Examples:
        find_capture_group(r"\\{#([a-z]+)\\}")  # (3, 11)
        find_capture_group(r"(?:no)-group")  # None
    """
    depth = 0
    target_start: int | None = None
    target_depth = 0
    in_class = False
    i = 0

    while i < len(fragment):
        char = fragment[i]
        if char == "\\":
            i += 2
            continue

        if in_class:
            if char == "]":
                in_class = False
            i += 1
            continue

        if char == "[":
            in_class = True
            i += 1
            # "]" right after "[" or "[^" is a literal member of the class
            if fragment.startswith("^", i):
                i += 1
            if fragment.startswith("]", i):
                i += 1
            continue

        if char == "(":
            capturing = not fragment.startswith("?", i + 1) or fragment.startswith("?P<", i + 1)
            if capturing and target_start is None:
                target_start = i
                target_depth = depth
            depth += 1
        elif char == ")" and depth > 0:
            depth -= 1
            if target_start is not None and depth == target_depth:
                return target_start, i + 1
        i += 1

    return None


def compile_patterns(
    slug_regex: str | re.Pattern[str], trim_whitespace: bool, strict: bool = False
) -> CompiledPatterns:
    """Build the patterns used to recognise explicit slug notation.

    The end anchor is stripped from `slug_regex` and the remaining fragment is
    re-anchored at the end of the text: surrounded by optional whitespace when
    trimming, otherwise followed by a look-ahead for trailing whitespace. A
    fragment without a capture group is wrapped in one unless `strict` is set.
    The loose pattern replaces the capture group's content with a lazy
    wildcard, so it matches everything the strict pattern matches and also
    notation whose content is not a valid slug.

    Args:
        slug_regex: Pattern for explicit notation, usually ending in ``$``.
        trim_whitespace: Absorb whitespace around the notation into the match.
        strict: Require `slug_regex` to contain its own capture group.

    Returns:
        CompiledPatterns: Patterns shared by every document pass.

    Raises:
        ConfigError: If `strict` is set and `slug_regex` has no capture group.

    Examples:
        patterns = compile_patterns(r"\\[id:([a-z-]+)\\]$", trim_whitespace=True)
        patterns.trimmed_slug.search("Title [id:title]").group(1)  # "title"
    """
    flags = slug_regex.flags if isinstance(slug_regex, re.Pattern) else 0
    fragment = strip_end_anchor(pattern_source(slug_regex))

    group = find_capture_group(fragment)
    if group is None:
        if strict:
            raise ConfigError(
                "`slug_regex` must contain a capture group ( ... ) "
                "when `strict_slug_regex` is true"
            )
        fragment = f"({fragment})"
        group = (0, len(fragment))

    start, end = group
    loose_fragment = f"{fragment[:start]}{LOOSE_CAPTURE}{fragment[end:]}"

    return CompiledPatterns(
        trimmed_slug=_anchor_at_end(fragment, trim_whitespace, flags),
        any_slug=_anchor_at_end(loose_fragment, trim_whitespace, flags),
        valid_slug=VALID_SLUG_PATTERN,
        whitespace_only=WHITESPACE_ONLY_PATTERN,
    )


def _anchor_at_end(fragment: str, trim_whitespace: bool, flags: int) -> re.Pattern[str]:
    if trim_whitespace:
        source = rf"\s*(?:{fragment})\s*\Z"
    else:
        source = rf"(?:{fragment})(?=\s*\Z)"

    try:
        return re.compile(source, flags)
    except re.error as error:
        raise ConfigError(f"`slug_regex` cannot be anchored at the end of headings: {error}") from error
