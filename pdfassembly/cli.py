"""
Command-line interface for pdfassembly.
"""

import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pdfassembly import ranges
from pdfassembly.assembler import assemble, page
from pdfassembly.config import AssemblyConfig, CompressionMode, Strategy
from pdfassembly.exceptions import BuildCancelled, PDFAssemblyError
from pdfassembly.planner import PlanBuilder
from pdfassembly.tempfiles import TempFileManager
from pdfassembly.types import ExecutionPlan, FileRef, Job
from pdfassembly.utils import format_file_size, get_logger

console = Console()


def _parse_page_option(value):
    """Split ``FILE[:RANGE[:ROTATION]]`` into its parts."""

    parts = value.split(":")
    # Keep Windows drive letters ("C:\\docs\\a.pdf") attached to the path.
    if len(parts) > 1 and len(parts[0]) == 1 and parts[0].isalpha() and parts[1][:1] in ("\\", "/"):
        parts = [parts[0] + ":" + parts[1]] + parts[2:]
    if len(parts) > 3:
        raise click.BadParameter(f"Expected FILE[:RANGE[:ROTATION]], got '{value}'")
    file, page_range, rotation = (parts + ["", ""])[:3]
    try:
        return page(file or None, page_range, rotation or None)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


def _render_plan(plan: ExecutionPlan) -> None:
    table = Table(title=f"Execution plan ({plan.strategy})")
    table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("Kind", style="magenta")
    table.add_column("Command", style="green")
    for index, step in enumerate(plan.steps, start=1):
        table.add_row(str(index), step.kind.value, escape(step.describe()))
    console.print()
    console.print(table)
    console.print(f"[dim]Temporary files: {len(plan.temp_files)}[/dim]")


def _print_error(error: PDFAssemblyError) -> None:
    console.print(f"\n[bold red]✗ Error:[/bold red] {escape(str(error))}")
    console.print(f"[dim]{error.code} {escape(str(error.params))}[/dim]")


@click.group()
@click.version_option(version="1.0.0")
@click.option('--verbose', '-v', is_flag=True, help='Log every tool invocation')
def cli(verbose):
    """
    PDF Assembly CLI - Build a PDF from page ranges of other PDFs.
    """
    get_logger("pdfassembly", logging.DEBUG if verbose else logging.WARNING)


@cli.command(name="build")
@click.argument('output', type=click.Path(dir_okay=False))
@click.option(
    '--page', '-p', 'pages',
    multiple=True,
    required=True,
    help='Page specification FILE[:RANGE[:ROTATION]], repeatable, in output order'
)
@click.option(
    '--file', '-f', 'files',
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help='Declared source file; with a single file, FILE may be omitted in --page'
)
@click.option('--compress/--no-compress', default=False, help='Compress the output')
@click.option(
    '--strategy',
    type=click.Choice([strategy.value for strategy in Strategy]),
    default=Strategy.ROTATE_THEN_CONCAT.value,
    show_default=True,
    help='How rotated pages are compiled'
)
@click.option(
    '--compression',
    type=click.Choice([mode.value for mode in CompressionMode]),
    default=CompressionMode.GHOSTSCRIPT.value,
    show_default=True,
    help='Compression backend'
)
@click.option('--labelled', is_flag=True, help='Assemble with a labelled pdftk cat call')
@click.option('--page-counter', type=click.Choice(["qpdf", "pypdf"]), default="qpdf", show_default=True)
@click.option('--temp-dir', type=click.Path(file_okay=False), default=None, help='Directory for intermediate files')
@click.option('--dry-run', is_flag=True, help='Print the plan without running it')
def build(output, pages, files, compress, strategy, compression, labelled, page_counter, temp_dir, dry_run):
    """
    Assemble OUTPUT from page specifications.

    Examples:

        pdf-assemble build out.pdf -p a.pdf -p b.pdf:1-3,7+:90

        pdf-assemble build out.pdf -f a.pdf -p :1-2 -p :5+:180 --compress
    """
    specs = [_parse_page_option(value) for value in pages]
    job = Job(
        page_specs=tuple(specs),
        compress=compress,
        output_path=output,
        files=tuple(FileRef(file) for file in files),
    )
    config = AssemblyConfig.detect(
        strategy=strategy,
        compression=compression,
        labelled_assembly=labelled,
        page_counter=page_counter,
        temp_dir=temp_dir,
    )

    if dry_run:
        try:
            with TempFileManager(config.temp_dir) as temps:
                plan = PlanBuilder(config, config.create_runner(), temps).build(job)
                _render_plan(plan)
        except BuildCancelled:
            return
        except PDFAssemblyError as exc:
            _print_error(exc)
            sys.exit(1)
        return

    console.print(f"\n[bold cyan]Assembling {len(specs)} page specification(s)...[/bold cyan]")
    result = assemble(job, config=config)
    if not result.ok:
        if result.error is not None:
            _print_error(result.error)
            sys.exit(1)
        return

    console.print(f"\n[bold green]✓ Wrote {escape(str(result.output_path))}[/bold green]")
    if result.output_path is not None and result.output_path.exists():
        console.print(f"[dim]Size: {format_file_size(result.output_path.stat().st_size)}[/dim]")
    console.print(f"[dim]Steps run: {len(result.steps)}[/dim]\n")


@cli.command(name="check-range")
@click.argument('page_range', default="")
def check_range(page_range):
    """
    Validate PAGE_RANGE and show its normalized form.

    Example:

        pdf-assemble check-range "1-3, 7+"
    """
    if not ranges.validate(page_range):
        console.print(f"[bold red]✗ Invalid range:[/bold red] '{escape(page_range)}'")
        sys.exit(1)
    console.print(f"[bold green]✓[/bold green] {ranges.normalize(page_range)}")


if __name__ == "__main__":  # pragma: no cover
    cli()
