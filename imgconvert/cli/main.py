"""
Main CLI Application
Typer entry point: imgconvert <input file> <output file> <format>
"""

from typing import Annotated, List, Optional

import structlog
import typer
from rich.console import Console
from rich.markup import escape

from imgconvert import __version__
from imgconvert.cli.utils.errors import ErrorHandler
from imgconvert.config import settings
from imgconvert.core.constants import (
    CLI_EXPECTED_ARGS,
    CLI_PROG_NAME,
    CLI_USAGE,
    EXIT_USAGE,
)
from imgconvert.core.conversion.manager import ConversionManager
from imgconvert.utils.logging import setup_logging

logger = structlog.get_logger()

app = typer.Typer(
    name=CLI_PROG_NAME,
    help="Convert an image to JPEG, PNG, GIF, BMP or TIFF",
    add_completion=False,
    pretty_exceptions_enable=False,
    rich_markup_mode="rich",
    context_settings={
        "help_option_names": ["-h", "--help"],
        # Paths such as "-in.png" are positionals, not options
        "ignore_unknown_options": True,
    },
)


def _version_callback(value: bool):
    if value:
        typer.echo(f"{CLI_PROG_NAME} {__version__}")
        raise typer.Exit()


@app.command()
def main(
    args: Annotated[
        Optional[List[str]],
        typer.Argument(
            help="<input file> <output file> <format> (jpeg, jpg, png, gif, bmp, tiff)",
            show_default=False,
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log conversion steps to stderr")
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
):
    """
    Convert an image file to another format.

    The input format is detected from the file content.

    [bold green]Example:[/bold green]
      [cyan]imgconvert photo.jpg photo.png png[/cyan]

    Put [cyan]--[/cyan] before the paths when one of them could be read as
    an option, e.g. [cyan]imgconvert -- -v.png out.gif gif[/cyan]
    """
    console = Console(highlight=False, soft_wrap=True)

    setup_logging(
        log_level="DEBUG" if verbose else settings.log_level,
        json_logs=settings.json_logs,
        enable_file_logging=settings.enable_file_logging,
        log_dir=settings.log_dir,
        max_log_size_mb=settings.max_log_size_mb,
        backup_count=settings.log_backup_count,
    )

    logger.debug("CLI invoked", arg_count=len(args or []))

    if not args or len(args) != CLI_EXPECTED_ARGS:
        console.print(CLI_USAGE)
        raise typer.Exit(EXIT_USAGE)

    input_path, output_path, format_token = args

    result = ConversionManager().convert_file(input_path, output_path, format_token)

    if result.source_format:
        console.print(f"Input image format: {escape(result.source_format)}")

    error_handler = ErrorHandler()
    if not result.succeeded:
        error_handler.report(result, console)
        raise typer.Exit(error_handler.exit_code(result))

    console.print("[green]Image conversion successful![/green]")


def run():
    """Console script entry point."""
    app(prog_name=CLI_PROG_NAME)


if __name__ == "__main__":
    run()
