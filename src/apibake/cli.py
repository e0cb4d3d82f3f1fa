"""CLI entry point for apibake."""

import sys
from datetime import date
from pathlib import Path

import click

from apibake import __version__
from apibake.config import CONFIG_FILE, PdfStyle, export_style, load_style, parse_footer_options
from apibake.errors import ConfigError, OutputError, SpecError
from apibake.loader import collect_input_files, load_spec, section_name_for
from apibake.parser.openapi import OpenApiParser
from apibake.pdf.writer import PdfWriter


@click.group()
@click.version_option(__version__, prog_name="ApiBake")
def main():
    """ApiBake: convert OpenAPI 3 specifications into PDF documentation."""
    pass


@main.command()
@click.argument("inputs", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("-o", "--out", "output", default="output.pdf", type=click.Path(dir_okay=False, path_type=Path), help="Output PDF file name.")
@click.option("--title", default="API Spec", help="Document title.")
@click.option("--subtitle", default="", help="Document sub title.")
@click.option("--separate-schemas", is_flag=True, help="When multiple API files are parsed, create a separate schemas section for each.")
@click.option("--footer", default="page-number", help='Content of the common page footer. Options: "page-number". To turn off: "".')
@click.option("--empty-body", is_flag=True, help='Print "Empty body." for requests and responses without content.')
@click.option("--config", "config_path", default=None, envvar="APIBAKE_CONFIG", type=click.Path(exists=True, dir_okay=False, path_type=Path), help=f"Path to {CONFIG_FILE}. See export-config.")
def build(
    inputs: tuple[Path, ...],
    output: Path,
    title: str,
    subtitle: str,
    separate_schemas: bool,
    footer: str,
    empty_body: bool,
    config_path: Path | None,
):
    """Render OpenAPI files (or folders of them) into one PDF."""
    try:
        footer_options = parse_footer_options(footer)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--footer")

    try:
        style = load_style(config_path) if config_path else PdfStyle()
    except ConfigError as e:
        raise click.ClickException(str(e))

    files, errors = collect_input_files(list(inputs))
    for msg in errors:
        click.echo(msg, err=True)

    if not files:
        click.echo("No .json or .yaml files found.")
        sys.exit(1)

    output.parent.mkdir(parents=True, exist_ok=True)
    doc = PdfWriter(output, style=style, footer=footer_options)
    doc.add_title_page(title, subtitle, date.today().isoformat())

    parser = OpenApiParser(doc, merge_schemas=not separate_schemas, show_empty_body=empty_body)

    for file_path in files:
        click.echo(f"Parsing: {file_path}")
        try:
            spec = load_spec(file_path)
            parser.parse(spec, section_name_for(file_path))
        except (SpecError, OSError) as e:
            msg = f"ERROR: while parsing {file_path}: {e}"
            click.echo(msg, err=True)
            errors.append(msg)

    try:
        parser.done()
        click.echo(f"Saving output to {output}")
    except OutputError as e:
        msg = f"ERROR: while saving {output}: {e}"
        click.echo(msg, err=True)
        errors.append(msg)

    if parser.warnings:
        click.echo(f"{len(parser.warnings)} warning(s), see above.")

    if errors:
        click.echo("Errors summary:", err=True)
        for msg in errors:
            click.echo(f" - {msg}", err=True)
        sys.exit(1)


@main.command("export-config")
@click.option("-o", "--output", default=CONFIG_FILE, type=click.Path(dir_okay=False, path_type=Path), help="Where to write the default style config.")
def export_config(output: Path):
    """Save the default style config into a JSON file for editing."""
    export_style(output)
    click.echo(f"Default config exported into {output}")
