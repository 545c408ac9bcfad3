"""Console progress reporting."""

from __future__ import annotations

import traceback

import typer

from raml_oas_converter.errors import ConverterError
from raml_oas_converter.schemas import ConversionRequest

STARTED_MESSAGE = "\n# Converting RAML to OAS2 ..."


class ConsoleReporter:
    """Report conversion progress on stdout and failure details on stderr.

    Parameters
    ----------
    debug : bool, default=False
        Print the failure traceback after the error message.
    color : bool | None, default=None
        Force ANSI styling on (``True``) or off (``False``). ``None`` styles
        only when the stream is a terminal.
    """

    def __init__(self, debug: bool = False, color: bool | None = None) -> None:
        self.debug = debug
        self.color = color

    def started(self, request: ConversionRequest) -> None:
        """Print the starting notice without a trailing newline."""
        del request
        typer.echo(STARTED_MESSAGE, nl=False, color=self.color)

    def succeeded(self, request: ConversionRequest) -> None:
        """Print a green ``done`` marker."""
        del request
        done = typer.style("done", fg=typer.colors.GREEN)
        typer.echo(f" {done}.", color=self.color)

    def failed(self, request: ConversionRequest, error: ConverterError) -> None:
        """Print a red ``failed`` marker, then the error on stderr."""
        del request
        failed = typer.style("failed", fg=typer.colors.RED)
        typer.echo(f" {failed}.", color=self.color)
        typer.echo(f"{type(error).__name__}: {error}", err=True, color=self.color)
        if self.debug:
            typer.echo("\nTraceback:", err=True, color=self.color)
            typer.echo(
                "".join(
                    traceback.format_exception(type(error), error, error.__traceback__)
                ),
                err=True,
                color=self.color,
            )
