"""
Prints the folding ranges of a text file.
Rules come from the nearest configuration file unless a rule is given on the
command line.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from .config import ConfigError, build_config
from .filesystem import (
    DocumentFileError,
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    get_max_line_length,
    load_document,
    normalize_filepath,
)
from .models import FoldingRange
from .provider import FoldingProvider

__all__ = ["cli"]


def _build_rule(
    begin: str | None,
    end: str | None,
    begin_regex: str | None,
    end_regex: str | None,
    offset_top: int | None,
    offset_bottom: int | None,
) -> dict[str, object] | None:
    if begin_regex is not None or end_regex is not None:
        if begin_regex is None or end_regex is None:
            raise click.BadParameter("--begin-regex and --end-regex must be given together")
        rule: dict[str, object] = {"beginRegex": begin_regex, "endRegex": end_regex}
    elif begin is not None or end is not None:
        if begin is None or end is None:
            raise click.BadParameter("--begin and --end must be given together")
        rule = {"begin": begin, "end": end}
    elif offset_top is not None or offset_bottom is not None:
        raise click.BadParameter("offsets require --begin/--end or --begin-regex/--end-regex")
    else:
        return None

    if offset_top is not None:
        rule["offsetTop"] = offset_top
    if offset_bottom is not None:
        rule["offsetBottom"] = offset_bottom
    return rule


def format_ranges(ranges: list[FoldingRange], output_format: str, one_based: bool) -> str:
    """Render ranges for terminal output.

    Args:
        ranges: Ranges to render.
        output_format: ``"text"`` for one ``start-end`` pair per line, or
            ``"json"`` for a list of ``{"start", "end"}`` objects.
        one_based: Whether to shift line numbers so the first line is 1.

    Returns:
        str: Rendered output, ending with a newline unless empty.
    """
    shift = 1 if one_based else 0
    pairs = [(r.start_line + shift, r.end_line + shift) for r in ranges]
    if output_format == "json":
        return json.dumps([{"start": start, "end": end} for start, end in pairs]) + "\n"
    return "".join(f"{start}-{end}\n" for start, end in pairs)


@click.command()
@click.version_option()
@click.option("--begin", help="Literal text opening a region")
@click.option("--end", help="Literal text closing a region")
@click.option("--begin-regex", help="Regular expression opening a region")
@click.option("--end-regex", help="Regular expression closing a region")
@click.option("--offset-top", type=int, help="Adjustment applied to range start lines")
@click.option("--offset-bottom", type=int, help="Adjustment applied to range end lines")
@click.option("--clamp/--no-clamp", default=None, help="Clamp ranges to the document")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format",
)
@click.option("--one-based", is_flag=True, help="Print 1-based line numbers")
@click.option("-v", "--verbose", is_flag=True, help="Report dropped rules and other details")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    begin: str | None = None,
    end: str | None = None,
    begin_regex: str | None = None,
    end_regex: str | None = None,
    offset_top: int | None = None,
    offset_bottom: int | None = None,
    clamp: bool | None = None,
    output_format: str = "text",
    one_based: bool = False,
    verbose: bool = False,
):
    """
    Entry point for printing the folding ranges of a file.

    Args:
        filepath: Path to the file to scan.
        begin: Literal begin marker of an ad-hoc rule.
        end: Literal end marker of an ad-hoc rule.
        begin_regex: Regex begin marker of an ad-hoc rule.
        end_regex: Regex end marker of an ad-hoc rule.
        offset_top: Start-line offset of the ad-hoc rule.
        offset_bottom: End-line offset of the ad-hoc rule.
        clamp: Override for clamping ranges to the document bounds.
        output_format: ``text`` or ``json``.
        one_based: Print line numbers starting at 1.
        verbose: Enable debug logging.

    Returns:
        None.

    Raises:
        click.BadParameter: If CLI parameters reference invalid paths, form an
            incomplete rule, or produce an invalid configuration.
        click.ClickException: If the file cannot be read or exceeds limits.

    Examples:
        explicit-folding main.c --begin "#pragma region" --end "#pragma endregion"
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    base_dir = Path.cwd().resolve()
    try:
        filepath = normalize_filepath(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    rule = _build_rule(begin, end, begin_regex, end_regex, offset_top, offset_bottom)
    try:
        config = build_config(
            filepath.parent,
            rules=[rule] if rule is not None else None,
            clamp=clamp,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
        max_line_length = get_max_line_length(default=config.max_line_length)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        initial_stat = collect_file_stat(filepath)
        enforce_file_size(initial_stat, max_file_size, filepath)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    try:
        document = load_document(filepath, max_line_length)
    except DocumentFileError as error:
        raise click.ClickException(str(error)) from error

    provider = FoldingProvider.from_settings(config)
    if config.rules and not provider.patterns:
        click.echo("Warning: none of the configured folding rules could be compiled", err=True)

    ranges = provider.provide_folding_ranges(document)
    click.echo(format_ranges(ranges, output_format, one_based), nl=False)


if __name__ == "__main__":
    cli()
