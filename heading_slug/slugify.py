"""Slug generation for heading text."""

from __future__ import annotations

import re
import unicodedata

from .constants import FALLBACK_SLUG, UNICODE_WHITESPACE

# Latin letters that do not decompose into a base letter plus diacritics
_LATIN_REPLACEMENTS = str.maketrans(
    {
        "æ": "ae",
        "Æ": "AE",
        "ø": "o",
        "Ø": "O",
        "þ": "th",
        "Þ": "TH",
        "ð": "dh",
        "Ð": "DH",
        "ß": "ss",
    }
)
_COMBINING_DIACRITICS = re.compile("[\u0300-\u036f]")


def _is_slug_character(char: str) -> bool:
    if char == " " or char == "-":
        return True
    category = unicodedata.category(char)
    # Letters, marks, numbers, and connector punctuation such as "_"
    return category[0] in "LMN" or category == "Pc"


def slugify(value: object, maintain_case: bool = False) -> str:
    """Convert text to a GitHub-style slug.

    Lowercases the text unless `maintain_case` is set, drops every character
    that is not a letter, mark, number, connector punctuation, space, or
    hyphen, then turns each space into a hyphen. Whitespace runs are not
    collapsed and non-Latin scripts are kept as they are.

    Args:
        value: Text to convert. Anything other than a string yields ``""``.
        maintain_case: When True, keep the original letter case.

    Returns:
        str: The slug, which may be empty.

    Examples:
        slugify("Hello World")  # "hello-world"
        slugify("Heading!@#$%^&*()")  # "heading"
        slugify("Café français")  # "café-français"
        slugify("Test Heading", maintain_case=True)  # "Test-Heading"
    """
    if not isinstance(value, str):
        return ""
    if not maintain_case:
        value = value.lower()
    slug = "".join(char for char in value if _is_slug_character(char))
    return slug.replace(" ", "-")


def normalize_unicode(text: str) -> str:
    """Transliterate Latin accented characters to ASCII.

    Decomposes the text, removes combining diacritical marks, and replaces
    Latin letters such as ``æ`` and ``ø`` with ASCII spellings. Other scripts
    (Cyrillic, CJK, Hangul, ...) come back unchanged.

    Args:
        text: Text to normalize.

    Returns:
        str: NFC-normalized text with Latin diacritics removed.

    Examples:
        normalize_unicode("Café français")  # "Cafe francais"
        normalize_unicode("Øresund Æther")  # "Oresund AEther"
        normalize_unicode("안녕 세계")  # "안녕 세계"
    """
    decomposed = unicodedata.normalize("NFD", text)
    stripped = _COMBINING_DIACRITICS.sub("", decomposed).translate(_LATIN_REPLACEMENTS)
    return unicodedata.normalize("NFC", stripped)


def text_to_slug(
    text: str, normalize: bool = False, trim_whitespace: bool = True
) -> str:
    """Derive a base slug candidate from heading text.

    The result still goes through a `Slugger`, which lowercases it and strips
    punctuation.

    Args:
        text: Visible heading text, with explicit notation already removed.
        normalize: Apply `normalize_unicode` first.
        trim_whitespace: Collapse whitespace runs (including Unicode spaces)
            into single hyphens and strip hyphens at both ends.

    Returns:
        str: The base slug, or ``"---"`` when nothing is left.

    Examples:
        text_to_slug("  Padded Heading  ")  # "Padded-Heading"
        text_to_slug("Café", normalize=True)  # "Cafe"
    """
    candidate = normalize_unicode(text) if normalize else text

    if trim_whitespace:
        candidate = UNICODE_WHITESPACE.sub("-", candidate).strip("-")
        return candidate or FALLBACK_SLUG

    return candidate if candidate.strip() else FALLBACK_SLUG


class Slugger:
    """Generate slugs that are unique within one document.

    Repeated slugs get ``-1``, ``-2``, ... appended. Comparison is
    case-insensitive, so ``"Intro"`` and ``"intro"`` collide even when case is
    kept in the output. A numbered result that is itself taken is numbered
    again (``"a"``, ``"a"``, ``"a-1"`` gives ``a``, ``a-1``, ``a-1-1``).

    Attributes:
        occurrences: Lowercased slugs handed out so far, mapped to the last
            suffix used for them.

    Examples:
        slugger = Slugger()
        slugger.slug("Same Heading")  # "same-heading"
        slugger.slug("Same Heading")  # "same-heading-1"
    """

    def __init__(self) -> None:
        self.occurrences: dict[str, int] = {}

    def slug(self, value: object, maintain_case: bool = False) -> str:
        """Slugify `value` and make it unique among the slugs seen so far."""
        original = slugify(value, maintain_case)
        key = original.lower()
        result = original

        while result.lower() in self.occurrences:
            self.occurrences[key] += 1
            result = f"{original}-{self.occurrences[key]}"

        self.occurrences[result.lower()] = 0
        return result
