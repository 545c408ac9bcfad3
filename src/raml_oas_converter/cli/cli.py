#!/usr/bin/env python3
"""
raml_oas_converter.cli.cli

Typer-based CLI for converting RAML API definitions to Swagger 2.0 (OAS2).

Examples
--------
Convert ``tmpdoc/api.raml`` into ``api.swagger.json`` under the current
directory:

    raml-to-oas2 convert

Convert explicit files and validate the result:

    uv pip install -e ".[validate]"
    raml-to-oas2 convert docs/api.raml build/api.swagger.json --validate
"""

from __future__ import annotations

import logging
import sys
import traceback
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import typer
from pydantic import ValidationError

from raml_oas_converter.errors import ConverterError, PluginError
from raml_oas_converter.schemas import DEFAULT_DESTINATION, DEFAULT_SOURCE, RunnerConfig

app = typer.Typer(
    name="raml-to-oas2",
    help="Convert RAML API definitions to Swagger 2.0 (OAS2) JSON.",
    no_args_is_help=True,
)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


# -----------------------------
# Dependency checks / utilities
# -----------------------------
@dataclass(frozen=True)
class MissingDep:
    """Represent a missing optional dependency."""

    import_name: str
    extra_name: str
    purpose: str


def _is_importable(module: str) -> bool:
    """Check whether a module can be resolved."""
    try:
        import importlib.util

        return importlib.util.find_spec(module) is not None
    except Exception:
        return False


def _require_deps(missing: Sequence[MissingDep]) -> None:
    """Raise a Typer error if any required deps are missing.

    Parameters
    ----------
    missing : Sequence[MissingDep]
        Optional dependency requirements for a command.
    """
    not_found = [d for d in missing if not _is_importable(d.import_name)]
    if not not_found:
        return

    extras = sorted({d.extra_name for d in not_found})
    details = "\n".join(
        f"- Missing '{d.import_name}' ({d.purpose}). Install extra: .[{d.extra_name}]"
        for d in not_found
    )

    uv_hint = f'uv pip install -e ".[{",".join(extras)}]"'
    pip_hint = f'pip install "raml-oas-converter[{",".join(extras)}]"'

    msg = (
        "Missing optional dependencies for this command.\n\n"
        f"{details}\n\n"
        "Install with uv (recommended):\n"
        f"  {uv_hint}\n\n"
        "Or with pip:\n"
        f"  {pip_hint}\n"
    )
    raise typer.BadParameter(msg)


def _load_registry(plugin_modules: list[str] | None):
    """Create the plugin registry, surfacing plugin errors as bad parameters."""
    from raml_oas_converter.plugins.registry import create_default_registry

    try:
        return create_default_registry(extra_modules=plugin_modules)
    except PluginError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _print_conversion_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly conversion error.

    Returns
    -------
    int
        Process exit code.
    """
    label = typer.style(f"✗ {type(exc).__name__}:", fg=typer.colors.RED)
    typer.echo(f"{label} {exc}", err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo(
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            err=True,
        )
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks on error."),
    verbose: bool = typer.Option(False, "--verbose", help="Log debug messages to stderr."),
) -> None:
    """Initialize shared CLI state."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT)
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("convert")
def convert_cmd(
    ctx: typer.Context,
    source: Path | None = typer.Argument(
        None,
        help=f"RAML source. Defaults to <root>/{DEFAULT_SOURCE.as_posix()}.",
    ),
    destination: Path | None = typer.Argument(
        None,
        help=f"Swagger JSON destination. Defaults to <root>/{DEFAULT_DESTINATION}.",
    ),
    root: Path | None = typer.Option(
        None,
        "--root",
        file_okay=False,
        help="Directory default and relative paths are resolved against (default: cwd).",
    ),
    indent: int = typer.Option(2, "--indent", min=0, help="JSON indentation."),
    validate: bool = typer.Option(
        False, "--validate", help="Validate the Swagger document before writing it."
    ),
    plugin_module: list[str] | None = typer.Option(
        None,
        "--plugin-module",
        help="Plugin module import path or file path (repeatable).",
    ),
    color: bool | None = typer.Option(
        None, "--color/--no-color", help="Force or disable colored status output."
    ),
) -> None:
    """Convert a RAML document to Swagger 2.0 JSON.

    Notes
    -----
    - ``--validate`` requires the `validate` extra (openapi-spec-validator).
    - A failed conversion leaves an existing destination file untouched.
    """
    debug: bool = bool(ctx.obj.get("debug", False))

    if validate:
        _require_deps(
            [MissingDep("openapi_spec_validator", "validate", "OAS2 document validation")]
        )

    try:
        config = RunnerConfig(
            root=root or Path.cwd(),
            source=source or DEFAULT_SOURCE,
            destination=destination or DEFAULT_DESTINATION,
        )
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    registry = _load_registry(plugin_module)

    try:
        from raml_oas_converter.adapters.reporters import ConsoleReporter
        from raml_oas_converter.application.use_cases import (
            ConversionRunner,
            build_conversion_options,
        )
        from raml_oas_converter.conversion import Converter
        from raml_oas_converter.types import Formats

        converter = Converter(
            Formats.RAML,
            Formats.OAS20,
            options=build_conversion_options(indent=indent, validate=validate),
            registry=registry,
        )
        runner = ConversionRunner(
            converter=converter,
            reporter=ConsoleReporter(debug=debug, color=color),
        )
        outcome = runner.run(config.to_request())
    except ConverterError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    if not outcome.succeeded:
        raise typer.Exit(code=outcome.exit_code)


@app.command("doctor")
def doctor_cmd() -> None:
    """Print installed toolchain versions and registered plugins."""
    import importlib.metadata as metadata

    modules = [
        "pydantic",
        "PyYAML",
        "typer",
        "openapi-spec-validator",
        "fastapi",
        "uvicorn",
    ]

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in modules:
        try:
            version = metadata.version(module)
            typer.echo(f"{module}: {version}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")

    try:
        from raml_oas_converter.plugins.registry import create_default_registry

        registry = create_default_registry()
        typer.echo(f"plugins: {', '.join(registry.names())}")
    except Exception:
        typer.echo("plugins: <unavailable>")


if __name__ == "__main__":
    app()
