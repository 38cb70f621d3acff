"""Data models for heading-slug."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto

from .constants import HEADING_LEVELS
from .slugify import Slugger


class HeadingOutcome(Enum):
    """What happened to a heading during a pass.

    Attributes:
        SKIPPED_EMPTY: Blank heading left untouched.
        EMPTY_ID: Blank heading given a ``<level>-<n>`` id.
        KEPT_EXISTING: Heading kept the id it already had.
        ASSIGNED: Heading received a slug id.
    """

    SKIPPED_EMPTY = auto()
    EMPTY_ID = auto()
    KEPT_EXISTING = auto()
    ASSIGNED = auto()


@dataclass(frozen=True)
class CompiledPatterns:
    """Regular expressions derived once from a configuration.

    Attributes:
        trimmed_slug: Explicit notation anchored at the end of the text.
        any_slug: Same notation with the capture group accepting any content,
            used to recognise notation whose slug is invalid.
        valid_slug: Characters an explicit slug may use without conversion.
        whitespace_only: Matches blank text.
    """

    trimmed_slug: re.Pattern[str]
    any_slug: re.Pattern[str]
    valid_slug: re.Pattern[str]
    whitespace_only: re.Pattern[str]


@dataclass(frozen=True)
class ExplicitSlugResult:
    """Explicit slug found in a heading, and the text left once it is removed.

    Attributes:
        explicit_slug: Captured slug, or None when the heading has no notation.
        clean_text: Heading text without the notation.
    """

    explicit_slug: str | None
    clean_text: str


def _empty_heading_counters() -> dict[str, int]:
    return dict.fromkeys(HEADING_LEVELS, 0)


@dataclass
class ProcessingState:
    """Mutable state for a single document pass.

    Attributes:
        slugger: Numbers derived and explicit slugs.
        invalid_slugger: Converts invalid explicit slugs; kept apart so
            conversions do not consume numbers from `slugger`.
        used_slugs: Normalized slugs seen when duplicates are an error.
        empty_heading_counters: Blank headings seen so far, per level.
    """

    slugger: Slugger = field(default_factory=Slugger)
    invalid_slugger: Slugger = field(default_factory=Slugger)
    used_slugs: set[str] = field(default_factory=set)
    empty_heading_counters: dict[str, int] = field(default_factory=_empty_heading_counters)


@dataclass
class TransformResult:
    """Summary of a document pass.

    Attributes:
        outcomes: Outcome of each heading, in document order.
        ids: Ids written during the pass, in document order.
    """

    outcomes: list[HeadingOutcome] = field(default_factory=list)
    ids: list[str] = field(default_factory=list)

    @property
    def assigned(self) -> int:
        """Number of headings that received an id."""
        return len(self.ids)
