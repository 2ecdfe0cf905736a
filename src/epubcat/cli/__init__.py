# ABOUTME: CLI for epubcat, built on Click.
# ABOUTME: Scans a directory for EPUBs and writes their metadata as a JSON array.

from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape

from epubcat.cli.options import dir_option, output_option, pretty_option
from epubcat.core.cataloger import catalog_directory
from epubcat.core.scanner import ScanError
from epubcat.formats.epub import EpubReadError
from epubcat.metadata.mapping import catalog_to_json

# Diagnostics only; metadata goes to stdout or the output file
console = Console(stderr=True, soft_wrap=True)


def _report_error(path: Path, exc: EpubReadError) -> None:
    console.print(f"[red]Error processing[/red] {escape(str(path))}: {escape(str(exc))}")


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise SystemExit(1)


@click.command()
@click.argument("path", required=False, type=click.Path())
@dir_option
@output_option
@pretty_option
@click.version_option(package_name="epubcat")
@click.pass_context
def cli(
    ctx: click.Context,
    path: str | None,
    directory: str | None,
    output: str | None,
    pretty: bool,
) -> None:
    """Extract metadata from every EPUB under a directory as JSON."""
    # An empty -dir counts as not given
    root_arg = directory or path
    if not root_arg:
        click.echo(ctx.get_help(), err=True)
        raise SystemExit(1)
    root = Path(root_arg)

    try:
        result = catalog_directory(root, on_error=_report_error)
    except ScanError as exc:
        _fail(str(exc))

    text = catalog_to_json(result.books, pretty=pretty)

    if not output:
        click.echo(text)
    else:
        try:
            Path(output).write_text(text + "\n", encoding="utf-8")
        except OSError as exc:
            _fail(f"Failed to write {output}: {exc}")

    if result.errors:
        console.print(
            f"[yellow]{result.errors} file(s) could not be read, "
            f"{len(result.books)} cataloged.[/yellow]"
        )
