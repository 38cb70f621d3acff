"""Assign slug ids to the headings of a document tree."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from .config import (
    DuplicateSlugHandling,
    ExistingIdHandling,
    SlugConfig,
    coerce_config,
    normalize_config,
    validate_config,
)
from .exceptions import DuplicateSlugError, ExistingIdError
from .extractor import extract_explicit_slug
from .models import CompiledPatterns, HeadingOutcome, ProcessingState, TransformResult
from .patterns import compile_patterns
from .slugify import Slugger, slugify, text_to_slug
from .tree import Node, extract_heading_text, is_heading_node, iter_nodes, update_text_nodes

logger = logging.getLogger(__name__)


class HeadingSlugTransformer:
    """Give every heading in a document a stable, unique ``id``.

    The configuration is validated and its patterns compiled once, when the
    transformer is created. Each call to `transform` starts from fresh
    duplicate tracking, so documents never share slugs.

    Args:
        config: ``None`` for defaults, a `SlugConfig`, or a mapping of option
            names (snake_case or the rehype plugin's camelCase).

    Raises:
        ConfigError: If the configuration is invalid.

    Examples:
        transformer = HeadingSlugTransformer({"maintain_case": True})
        transformer.transform(tree)
    """

    def __init__(self, config: SlugConfig | Mapping[str, object] | None = None):
        config = normalize_config(coerce_config(config))
        validate_config(config)

        self.config = config
        self.patterns = compile_patterns(
            config.slug_regex, config.trim_whitespace, config.strict_slug_regex
        )

    def transform(self, tree: Node) -> TransformResult:
        """Assign ids to the headings of `tree`, mutating it in place.

        Args:
            tree: Root node of a hast-style tree.

        Returns:
            TransformResult: Outcome of each heading and the ids written.

        Raises:
            SlugError: If a heading violates a policy configured as ``"error"``.
                Headings before it keep the changes already made.
        """
        state = ProcessingState()
        result = TransformResult()

        for node in iter_nodes(tree, "element"):
            if not is_heading_node(node):
                continue

            outcome = process_heading_node(node, self.config, self.patterns, state)
            result.outcomes.append(outcome)
            if outcome in (HeadingOutcome.ASSIGNED, HeadingOutcome.EMPTY_ID):
                result.ids.append(node["properties"]["id"])

        logger.debug(
            "Processed %d headings, assigned %d ids", len(result.outcomes), result.assigned
        )
        return result

    __call__ = transform


def heading_slug(
    options: SlugConfig | Mapping[str, object] | None = None,
) -> HeadingSlugTransformer:
    """Create a transformer, in the manner of a rehype plugin.

    Examples:
        transform = heading_slug({"existingIdHandling": "always"})
        transform(tree)
    """
    return HeadingSlugTransformer(options)


def assign_heading_ids(
    tree: Node, config: SlugConfig | Mapping[str, object] | None = None
) -> TransformResult:
    """Assign heading ids to a single tree."""
    return HeadingSlugTransformer(config).transform(tree)


def process_heading_node(
    node: Node, config: SlugConfig, patterns: CompiledPatterns, state: ProcessingState
) -> HeadingOutcome:
    """Work out and write the id of one heading.

    Args:
        node: Heading element, updated in place.
        config: Validated configuration.
        patterns: Patterns compiled from `config`.
        state: Tracking state of the current document.

    Returns:
        HeadingOutcome: What happened to the heading.

    Raises:
        InvalidExplicitSlugError: If the notation holds an invalid slug and
            invalid slugs are an error.
        ExistingIdError: If the heading has an id and existing ids are an error.
        DuplicateSlugError: If the slug is taken and duplicates are an error.
    """
    heading_text = extract_heading_text(node)
    extracted = extract_explicit_slug(
        heading_text, config.slug_regex, config.invalid_slug_handling, patterns
    )
    explicit_slug = extracted.explicit_slug
    level = node["tagName"]

    if explicit_slug is None and patterns.whitespace_only.fullmatch(extracted.clean_text):
        if not config.assign_id_to_empty_heading:
            logger.debug("Skipping empty <%s>", level)
            return HeadingOutcome.SKIPPED_EMPTY

        state.empty_heading_counters[level] = state.empty_heading_counters.get(level, 0) + 1
        _set_id(node, f"{level}-{state.empty_heading_counters[level]}")
        return HeadingOutcome.EMPTY_ID

    if explicit_slug is not None:
        update_text_nodes(node, extracted.clean_text)

    if not should_overwrite_id(node, explicit_slug, config.existing_id_handling):
        logger.debug("Keeping existing id of <%s>", level)
        return HeadingOutcome.KEPT_EXISTING

    base_slug = determine_base_slug(
        explicit_slug, extracted.clean_text, state.invalid_slugger, config, patterns
    )
    final_slug = generate_final_slug(
        base_slug, state, config.duplicate_slug_handling, config.maintain_case
    )
    _set_id(node, final_slug)
    logger.debug("Assigned id %r to <%s>", final_slug, level)
    return HeadingOutcome.ASSIGNED


def should_overwrite_id(
    node: Node, explicit_slug: str | None, existing_id_handling: ExistingIdHandling
) -> bool:
    """Decide whether a heading's id may be written.

    Headings without a string id can always be written.

    Raises:
        ExistingIdError: If the heading has an id and `existing_id_handling`
            is ``"error"``.
    """
    properties = node.get("properties")
    existing_id = properties.get("id") if isinstance(properties, dict) else None
    if not isinstance(existing_id, str):
        return True

    if existing_id_handling == ExistingIdHandling.ALWAYS:
        return True
    if existing_id_handling == ExistingIdHandling.NEVER:
        return False
    if existing_id_handling == ExistingIdHandling.EXPLICIT:
        return explicit_slug is not None
    raise ExistingIdError(existing_id)


def determine_base_slug(
    explicit_slug: str | None,
    clean_text: str,
    invalid_slugger: Slugger,
    config: SlugConfig,
    patterns: CompiledPatterns,
) -> str:
    """Pick the slug a heading asks for, before duplicates are resolved.

    A valid explicit slug is used verbatim. An invalid one is converted by
    `invalid_slugger`, without Unicode normalization, even when nothing is
    left of it (``{#}`` and ``{#!!!}`` give an empty slug). Without explicit
    notation the slug is derived from the heading text.
    """
    if explicit_slug is not None:
        if patterns.valid_slug.fullmatch(explicit_slug):
            return explicit_slug
        return invalid_slugger.slug(explicit_slug, config.maintain_case)

    return text_to_slug(clean_text, config.normalize_unicode, config.trim_whitespace)


def generate_final_slug(
    base_slug: str,
    state: ProcessingState,
    duplicate_slug_handling: DuplicateSlugHandling,
    maintain_case: bool,
) -> str:
    """Make `base_slug` unique within the document.

    Raises:
        DuplicateSlugError: If duplicates are an error and the slug, compared
            case-insensitively, was already used.
    """
    if duplicate_slug_handling == DuplicateSlugHandling.ERROR:
        normalized = slugify(base_slug, maintain_case)
        key = normalized.lower()
        if key in state.used_slugs:
            raise DuplicateSlugError(normalized)
        state.used_slugs.add(key)

    return state.slugger.slug(base_slug, maintain_case)


def _set_id(node: Node, slug: str) -> None:
    properties = node.get("properties")
    if not isinstance(properties, dict):
        properties = node["properties"] = {}
    properties["id"] = slug
