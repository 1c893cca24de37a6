"""
Command-line interface for Batch Converter.
"""

import logging
import os
import sys

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeRemainingColumn
from rich.table import Table

from batch_converter import __version__
from batch_converter.batch import BatchRunner
from batch_converter.config import log_level_from_env
from batch_converter.converter import Converter
from batch_converter.exceptions import ConverterError

console = Console()


class RichProgress:
    """Progress sink drawing a rich progress bar for a batch."""

    def __init__(self, progress: Progress) -> None:
        self._progress = progress
        self._task = None

    def start(self):
        self._task = self._progress.add_task("Converting", total=None)

    def progress(self, current, total, label):
        self._progress.update(
            self._task,
            total=total,
            completed=current - 1,
            description=f"Converting: {os.path.basename(label)}",
        )

    def finish(self, result):
        if self._task is None:
            return
        self._progress.update(
            self._task,
            total=result.total or 1,
            completed=result.total or 1,
            description="Done" if result.ok else "Finished with errors",
        )


def _fail(message):
    console.print(f"\n[bold red]✗ Error:[/bold red] {message}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """
    Batch Converter - Convert documents in bulk from a JSON job file.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else log_level_from_env(),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _common_options(func):
    func = click.option(
        '--style', 'style_path',
        type=click.Path(exists=True, dir_okay=False),
        help='Style file applied to every input document'
    )(func)
    func = click.option(
        '--force', is_flag=True,
        help='Load documents even if version checks fail'
    )(func)
    func = click.option(
        '--sound-profile',
        default=None,
        help='Sound profile stored with every converted document'
    )(func)
    func = click.option(
        '--extension',
        default=None,
        help="Extension run before export (e.g. 'pkg.module:func?key=value')"
    )(func)
    return func


@cli.command(name="batch")
@click.argument('job_file', type=click.Path())
@_common_options
def batch(job_file, style_path, force, sound_profile, extension):
    """
    Run every job listed in a JSON batch job file.

    Examples:

        batch-converter batch jobs.json

        batch-converter batch jobs.json --style house-style.json --force
    """
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeRemainingColumn(),
        console=console
    ) as progress:
        runner = BatchRunner(
            style_path=style_path,
            force=force,
            sound_profile=sound_profile,
            extension=extension,
            progress=RichProgress(progress),
        )
        try:
            result = runner.run_file(job_file)
        except ConverterError as e:
            _fail(e)

    console.print("\n[bold]Batch Conversion Summary[/bold]")
    console.print("=" * 50)

    summary_table = Table(show_header=False)
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Value", style="green")
    summary_table.add_row("Total Jobs", str(result.total))
    summary_table.add_row("✓ Successful", f"[green]{result.total - len(result.errors)}[/green]")
    summary_table.add_row("✗ Failed", f"[red]{len(result.errors)}[/red]")
    console.print(summary_table)

    if not result.ok:
        console.print("\n[bold red]Failed Jobs:[/bold red]")
        for failure in result.errors:
            console.print(f"  ✗ {failure.input} → {failure.output}: {failure.error}")

    console.print()
    sys.exit(0 if result.ok else 1)


@cli.command(name="convert")
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('output', type=click.Path())
@click.option(
    '--transpose', '-t',
    default="",
    help='Transform options as JSON (e.g. \'{"rotate": 90}\')'
)
@_common_options
def convert(input_file, output, transpose, style_path, force, sound_profile, extension):
    """
    Convert a single document. The output suffix selects the format.

    Examples:

        batch-converter convert score.pdf score.txt

        batch-converter convert score.pdf 'parts/*.pdf'

        batch-converter convert score.pdf rotated.pdf -t '{"rotate": 90}'
    """
    try:
        Converter().convert_file_json(
            input_file,
            output,
            transpose,
            style_path=style_path,
            force=force,
            sound_profile=sound_profile,
            extension=extension,
        )
    except ConverterError as e:
        _fail(e)

    console.print(f"\n[bold green]✓ Converted:[/bold green] {input_file} → {output}\n")


@cli.command(name="parts")
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('output_template', type=str)
@click.option(
    '--style', 'style_path',
    type=click.Path(exists=True, dir_okay=False),
    help='Style file applied to the input document'
)
@click.option('--force', is_flag=True, help='Load the document even if version checks fail')
def parts(input_file, output_template, style_path, force):
    """
    Export every part of a document; '*' in the name is replaced by the part name.

    Example:

        batch-converter parts score.pdf 'parts/score-*.pdf'
    """
    try:
        Converter().convert_parts(input_file, output_template, style_path=style_path, force=force)
    except ConverterError as e:
        _fail(e)

    console.print(f"\n[bold green]✓ Exported parts of:[/bold green] {input_file}\n")


@cli.command(name="writers")
def list_writers():
    """
    List the output kinds that have a registered writer.
    """
    converter = Converter()

    table = Table(title="Registered Writers")
    table.add_column("Kind", style="cyan", no_wrap=True)
    table.add_column("Writer", style="green")
    table.add_column("Page by page", style="magenta")

    for kind in converter.writers.names():
        writer = converter.writers.writer(kind)
        table.add_row(
            kind,
            type(writer).__name__,
            "Yes" if kind in converter.settings.page_kinds else "No",
        )

    console.print()
    console.print(table)
    console.print()


if __name__ == '__main__':
    cli()
