# ABOUTME: Click options for the epubcat CLI.
# ABOUTME: Accepts both single-dash (-dir) and double-dash (--dir) spellings.

import click

dir_option = click.option(
    "-dir",
    "--dir",
    "directory",
    type=click.Path(),
    default=None,
    help="Directory containing epub files (overrides PATH).",
)

output_option = click.option(
    "-output",
    "--output",
    "output",
    type=click.Path(),
    default=None,
    help="Output JSON file (default: stdout).",
)

pretty_option = click.option(
    "-pretty",
    "--pretty",
    "pretty",
    type=click.BOOL,
    default=True,
    show_default=True,
    metavar="true|false",
    help="Pretty-print the JSON output.",
)
