"""CLI — click-based command-line interface."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from i18nlint.config import LintOptions, load_config
from i18nlint.gate import EXIT_ERROR, decide
from i18nlint.models import I18nLintError, LintResult
from i18nlint.report import render_json, render_text
from i18nlint.scanner.scanner import collect_files, lint


@click.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("-a", "--attributes", "attributes", default=None,
              help="Comma-separated attributes to check (empty string disables).")
@click.option("-t", "--template-delimiters", "delimiters", default=None,
              help="Template delimiters as 'open,close', e.g. '<%,%>'.")
@click.option("-i", "--ignore-tags", "ignore_tags", default=None,
              help="Comma-separated tags whose contents are never checked.")
@click.option("--format", "fmt", default="text",
              type=click.Choice(["text", "json"], case_sensitive=False),
              help="Output format.")
@click.option("--json-out", "json_out", default=None,
              type=click.Path(), help="Write JSON report to file.")
@click.option("--exclude", "excludes", multiple=True,
              help="Extra glob patterns to exclude (repeatable).")
@click.option("--config", "config_path", default=None,
              type=click.Path(exists=True, dir_okay=False),
              help="Config file to use instead of .i18nlint.yml lookup.")
@click.option("--warn-only", is_flag=True, default=False,
              help="Report findings but exit 0.")
@click.option("--color/--no-color", default=True, help="Colorize text output.")
@click.option("-v", "--verbose", is_flag=True, default=False,
              help="Log debug output to stderr.")
def main(
    paths: tuple[str, ...],
    attributes: str | None,
    delimiters: str | None,
    ignore_tags: str | None,
    fmt: str,
    json_out: str | None,
    excludes: tuple[str, ...],
    config_path: str | None,
    warn_only: bool,
    color: bool,
    verbose: bool,
) -> None:
    """i18n-lint — find hardcoded, untranslated text in HTML templates."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    # --- load config (.i18nlint.yml) ---
    cfg = load_config(scan_path=str(Path(paths[0]).resolve()), config_path=config_path)
    base = cfg.to_options()

    # CLI flags override config values
    try:
        options = LintOptions(
            attributes=attributes if attributes is not None else base.attributes,
            template_delimiters=delimiters if delimiters is not None else base.template_delimiters,
            ignore_tags=ignore_tags if ignore_tags is not None else base.ignore_tags,
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="'--template-delimiters'") from exc

    effective_excludes = list(excludes) + cfg.exclude

    result = LintResult(paths=list(paths))
    for path in paths:
        result.files.extend(
            str(f) for f in collect_files(path, cfg.include or None, effective_excludes)
        )

    # --- scan ---
    for fpath in result.files:
        try:
            result.records.extend(lint(fpath, options))
        except (OSError, I18nLintError) as exc:
            click.echo(f"Error: {fpath}: {exc}", err=True)
            sys.exit(EXIT_ERROR)

    # --- output ---
    if fmt == "json":
        output = render_json(result)
    else:
        output = render_text(result, color=color)

    click.echo(output)

    if json_out:
        Path(json_out).write_text(render_json(result), encoding="utf-8")
        click.echo(f"JSON report written to {json_out}", err=True)

    sys.exit(decide(result, warn_only=warn_only))
