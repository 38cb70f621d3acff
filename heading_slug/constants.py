"""Constants used across the heading-slug package."""

from __future__ import annotations

import re

# Heading elements
HEADING_LEVELS = ("h1", "h2", "h3", "h4", "h5", "h6")
HEADING_PATTERN = re.compile(r"h[1-6]")

# Explicit slug notation
DEFAULT_SLUG_PATTERN = r"\{#([a-zA-Z0-9_\-\u00C0-\U0010FFFF]+)\}$"
# Default notation honoured alongside a custom `slug_regex`
DEFAULT_NOTATION_PATTERN = re.compile(r"\s*\{#([a-zA-Z0-9_\-\u00C0-\U0010FFFF]+)\}\s*\Z")
VALID_SLUG_PATTERN = re.compile(r"[a-zA-Z0-9_\-\u00C0-\U0010FFFF]+")
WHITESPACE_ONLY_PATTERN = re.compile(r"\s*")
LOOSE_CAPTURE = r"([\s\S]*?)"

# Slug derivation
FALLBACK_SLUG = "---"
UNICODE_WHITESPACE = re.compile(
    r"[\s\u00A0\u1680\u180E\u2000-\u200A\u2028\u2029\u202F\u205F\u3000]+"
)

# HTML parsing and serialisation
# Input opening with a doctype or an <html> tag is a whole document
DOCUMENT_START = re.compile(
    r"\s*(?:<!--.*?-->\s*)*<(?:!doctype|html[\s/>])", re.IGNORECASE | re.DOTALL
)
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

# Files
HTML_EXTENSIONS = (".html", ".htm", ".xhtml")
JSON_EXTENSIONS = (".json",)
SUPPORTED_EXTENSIONS = HTML_EXTENSIONS + JSON_EXTENSIONS
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
