"""
heading-slug: stable, unique ids for the headings of a document tree.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    heading-slug index.html --in-place

Library Usage:
    from heading_slug import HeadingSlugTransformer, parse_html, to_html

    tree = parse_html("<h1>Hello World</h1><h2>Setup {#install}</h2>")
    HeadingSlugTransformer({"maintain_case": False}).transform(tree)
    html = to_html(tree)
    # '<h1 id="hello-world">Hello World</h1><h2 id="install">Setup</h2>'
"""

from .config import (
    ConfigError,
    DuplicateSlugHandling,
    ExistingIdHandling,
    InvalidSlugHandling,
    SlugConfig,
)
from .exceptions import DuplicateSlugError, ExistingIdError, InvalidExplicitSlugError, SlugError
from .html_tree import parse_html, process_html, to_html
from .models import HeadingOutcome, TransformResult
from .slugify import Slugger, normalize_unicode, slugify
from .transformer import HeadingSlugTransformer, assign_heading_ids, heading_slug

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "HeadingSlugTransformer",
    "heading_slug",
    "assign_heading_ids",
    "process_html",
    # HTML adapter
    "parse_html",
    "to_html",
    # Slug primitives
    "Slugger",
    "slugify",
    "normalize_unicode",
    # Configuration
    "SlugConfig",
    "DuplicateSlugHandling",
    "InvalidSlugHandling",
    "ExistingIdHandling",
    # Data models
    "HeadingOutcome",
    "TransformResult",
    # Exceptions
    "ConfigError",
    "SlugError",
    "DuplicateSlugError",
    "InvalidExplicitSlugError",
    "ExistingIdError",
    # Version
    "__version__",
]
