"""
Assigns slug ids to the headings of an HTML (or hast JSON) document.
Prints the result to stdout, or rewrites the file with --in-place.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from .config import ConfigError, build_config
from .constants import JSON_EXTENSIONS
from .exceptions import SlugError
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    ensure_file_unchanged,
    get_max_file_size,
    normalize_filepath,
    read_document,
    write_document,
)
from .html_tree import parse_html, to_html
from .transformer import HeadingSlugTransformer
from .tree import Node

__all__ = ["cli"]

logger = logging.getLogger(__name__)


@click.command()
@click.version_option()
@click.option("--slug-regex", help="Pattern for explicit slug notation, anchored with $")
@click.option(
    "--maintain-case/--no-maintain-case", default=None, help="Keep letter case in slugs"
)
@click.option(
    "--duplicate-slug-handling",
    type=click.Choice(["numbering", "error"]),
    help="Number repeated slugs or fail",
)
@click.option(
    "--invalid-slug-handling",
    type=click.Choice(["convert", "error"]),
    help="Convert invalid explicit slugs or fail",
)
@click.option(
    "--normalize-unicode/--no-normalize-unicode",
    default=None,
    help="Transliterate Latin accents in derived slugs",
)
@click.option(
    "--trim-whitespace/--no-trim-whitespace",
    default=None,
    help="Collapse and trim whitespace when deriving slugs",
)
@click.option(
    "--existing-id-handling",
    type=click.Choice(["always", "never", "explicit", "error"]),
    help="What to do with headings that already have an id",
)
@click.option(
    "--assign-id-to-empty-heading/--no-assign-id-to-empty-heading",
    default=None,
    help="Give blank headings ids such as h2-1",
)
@click.option(
    "--strict-slug-regex/--no-strict-slug-regex",
    default=None,
    help="Require --slug-regex to contain a capture group",
)
@click.option("--in-place", is_flag=True, help="Rewrite the file instead of printing it")
@click.option("-v", "--verbose", is_flag=True, help="Log every heading to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    slug_regex: str | None = None,
    maintain_case: bool | None = None,
    duplicate_slug_handling: str | None = None,
    invalid_slug_handling: str | None = None,
    normalize_unicode: bool | None = None,
    trim_whitespace: bool | None = None,
    existing_id_handling: str | None = None,
    assign_id_to_empty_heading: bool | None = None,
    strict_slug_regex: bool | None = None,
    in_place: bool = False,
    verbose: bool = False,
):
    """
    Entry point for assigning heading ids to a document.

    Args:
        filepath: Path to the HTML or hast JSON document to process.
        slug_regex: Override for the explicit slug pattern.
        maintain_case: Keep letter case in generated slugs.
        duplicate_slug_handling: `numbering` or `error`.
        invalid_slug_handling: `convert` or `error`.
        normalize_unicode: Transliterate Latin accents in derived slugs.
        trim_whitespace: Collapse and trim whitespace when deriving slugs.
        existing_id_handling: `always`, `never`, `explicit`, or `error`.
        assign_id_to_empty_heading: Give blank headings counter-based ids.
        strict_slug_regex: Require the slug pattern to have a capture group.
        in_place: Rewrite the file atomically instead of printing it.
        verbose: Log every processed heading to stderr.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path is rejected or the configuration is invalid.
        click.ClickException: If the document cannot be read, parsed, processed,
            or written.

    Examples:
        heading-slug site/index.html --existing-id-handling always --in-place
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    base_dir = Path.cwd().resolve()
    try:
        filepath = normalize_filepath(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = build_config(
            filepath.parent,
            slug_regex=slug_regex,
            maintain_case=maintain_case,
            duplicate_slug_handling=duplicate_slug_handling,
            invalid_slug_handling=invalid_slug_handling,
            normalize_unicode=normalize_unicode,
            trim_whitespace=trim_whitespace,
            existing_id_handling=existing_id_handling,
            assign_id_to_empty_heading=assign_id_to_empty_heading,
            strict_slug_regex=strict_slug_regex,
        )
        transformer = HeadingSlugTransformer(config)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size()
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        initial_stat = collect_file_stat(filepath)
        enforce_file_size(initial_stat, max_file_size, filepath)
        content = read_document(filepath)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    try:
        tree = _load_tree(content, filepath)
    except ValueError as error:
        raise click.ClickException(f"Could not parse {filepath}: {error}") from error

    try:
        result = transformer.transform(tree)
    except SlugError as error:
        raise click.ClickException(str(error)) from error

    logger.info("Assigned %d heading ids in %s", result.assigned, filepath)
    output = _dump_tree(tree, filepath)

    if not in_place:
        click.echo(output, nl=False)
        return

    try:
        post_read_stat = collect_file_stat(filepath)
        ensure_file_unchanged(initial_stat, post_read_stat, filepath)
        write_document(
            filepath,
            output,
            post_read_stat,
            initial_stat,
            warn=lambda message: click.echo(message, err=True),
        )
    except IOError as error:
        raise click.ClickException(str(error)) from error


def _is_json(filepath: Path) -> bool:
    return filepath.suffix.lower() in JSON_EXTENSIONS


def _load_tree(content: str, filepath: Path) -> Node:
    if not _is_json(filepath):
        return parse_html(content)

    tree = json.loads(content)
    if not isinstance(tree, dict):
        raise ValueError("a hast tree must be a JSON object")
    return tree


def _dump_tree(tree: Node, filepath: Path) -> str:
    if _is_json(filepath):
        return json.dumps(tree, ensure_ascii=False, indent=2) + "\n"
    return to_html(tree)


if __name__ == "__main__":
    cli()
