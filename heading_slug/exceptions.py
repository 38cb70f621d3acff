"""Package-specific exception types."""

from __future__ import annotations


class SlugError(ValueError):
    """Base class for errors raised while assigning heading ids.

    Raised per heading; aborts the remainder of the document pass.
    """


class DuplicateSlugError(SlugError):
    """Raised when two headings resolve to the same slug.

    Only raised when `duplicate_slug_handling` is ``"error"``.

    Args:
        slug: Normalized slug that was already assigned.
    """

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(
            f'Duplicate slug found: "{slug}". '
            "Use duplicate_slug_handling='numbering' to auto-resolve duplicates."
        )


class InvalidExplicitSlugError(SlugError):
    """Raised when explicit slug notation holds characters a slug cannot contain.

    Args:
        candidate: Text captured from the notation.
        pattern: Source of the configured `slug_regex`.
    """

    def __init__(self, candidate: str, pattern: str):
        self.candidate = candidate
        self.pattern = pattern
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f'Invalid explicit slug notation found: "{self.candidate}". '
            f"Must match pattern: {self.pattern}"
        )


class ExistingIdError(SlugError):
    """Raised when a heading already carries an id.

    Only raised when `existing_id_handling` is ``"error"``.

    Args:
        existing_id: The id found on the heading.
    """

    def __init__(self, existing_id: str):
        self.existing_id = existing_id
        super().__init__(
            f'Heading already has an id: "{existing_id}". '
            "Use the existing_id_handling option to control this behavior."
        )
