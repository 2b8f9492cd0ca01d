"""dslpdf CLI - render JSON DSL documents to PDF."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from rich.console import Console

from . import __version__
from .core.autofixer import DSLAutoFixer
from .core.config import load_settings
from .core.validator import validate_dsl
from .generators.templates import list_templates
from .pipeline import Pipeline, load_dsl

console = Console()

BANNER = r"""
     _     _            _  __
  __| |___| |_ __  __| |/ _|
 / _` / __| | '_ \/ _` | |_
| (_| \__ \ | |_) | (_| |  _|
 \__,_|___/_| .__/\__,_|_|
            |_|
  DSL -> PDF Renderer  v{version}
"""


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_or_exit(source: str):
    try:
        return load_dsl(source)
    except (OSError, ValueError) as exc:
        console.print(f"[bold red]Cannot read {source}:[/] {exc}")
        raise SystemExit(2)


@click.group()
@click.version_option(version=__version__, prog_name="dslpdf")
def main():
    """dslpdf - Render declarative JSON documents (text, images, charts) to PDF."""
    pass


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-o", "--output",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output PDF path (default: SOURCE with a .pdf suffix).",
)
@click.option(
    "--no-fix",
    is_flag=True,
    default=False,
    help="Skip the RTL/font auto-fix pass.",
)
@click.option(
    "--template",
    type=click.Choice([t.name for t in list_templates()], case_sensitive=False),
    default=None,
    help="Page template, overriding the document's own.",
)
@click.option(
    "--fonts-dir",
    type=click.Path(file_okay=False),
    envvar="DSLPDF_FONTS_DIR",
    default=None,
    help="Directory holding DejaVuSans / NotoSansArabic TTF files.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML or JSON settings file.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose logging.")
def render(
    source: str,
    output_path: str | None,
    no_fix: bool,
    template: str | None,
    fonts_dir: str | None,
    config_path: str | None,
    verbose: bool,
):
    """Render a DSL document to PDF.

    SOURCE is a JSON (or YAML) file holding the document.
    """
    _setup_logging(verbose)
    console.print(BANNER.format(version=__version__))

    settings = load_settings(config_path, fonts_dir=fonts_dir)
    pipeline = Pipeline(settings=settings)
    result = pipeline.run(
        source,
        output_path or Path(source).with_suffix(".pdf"),
        auto_fix=not no_fix,
        template=template,
    )

    if not result.ok:
        raise SystemExit(1)


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
def validate(source: str):
    """Check a DSL document and list every structural problem."""
    dsl = _load_or_exit(source)
    result = validate_dsl(dsl)

    if result.valid:
        console.print(f"[green]OK[/] {source} is a valid DSL document")
        return

    console.print(f"[bold red]{source}: {len(result.errors)} error(s)[/]")
    for err in result.errors:
        console.print(f"  [red]-[/] {err}")
    raise SystemExit(1)


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-o", "--output",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the fixed document here instead of stdout.",
)
def fix(source: str, output_path: str | None):
    """Apply the RTL/font auto-fix pass and print the resulting JSON."""
    dsl = _load_or_exit(source)
    fixed, report = DSLAutoFixer().fix_with_report(dsl)
    text = json.dumps(fixed, ensure_ascii=False, indent=2)

    if output_path:
        Path(output_path).write_text(text + "\n", encoding="utf-8")
        console.print(f"[green]OK[/] {report.fixes_applied} fix(es) -> {output_path}")
    else:
        click.echo(text)


@main.command()
def templates():
    """List available page templates."""
    from rich.table import Table as RichTable

    table = RichTable(title="Available Templates", show_lines=False)
    table.add_column("Name", style="bold cyan")
    table.add_column("Page Size")
    table.add_column("Margins")
    table.add_column("Header")
    table.add_column("Footer")

    for t in list_templates():
        w, h = t.size
        m = t.margins
        table.add_row(
            t.name,
            f"{w:g} x {h:g} pt",
            f"{m.top:g}/{m.right:g}/{m.bottom:g}/{m.left:g}",
            t.header.text if t.header else "-",
            t.footer.text if t.footer else "-",
        )

    console.print(table)


if __name__ == "__main__":
    main()
