"""Top-level API for RAML to Swagger 2.0 (OAS2) conversion."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from raml_oas_converter.types import Formats

if TYPE_CHECKING:
    from raml_oas_converter.application.results import ConversionOutcome

__version__ = "0.1.0"


def convert_raml_to_oas2(
    text: str,
    base_dir: Path | None = None,
    *,
    indent: int | None = 2,
    validate: bool = False,
) -> str:
    """Convert RAML text into Swagger 2.0 JSON text.

    Parameters
    ----------
    text : str
        RAML document including its ``#%RAML`` header.
    base_dir : Path | None, optional
        Directory used to resolve ``!include`` and ``uses`` references.
    indent : int | None, default=2
        JSON indentation; ``None`` renders a single line.
    validate : bool, default=False
        Validate the result with ``openapi-spec-validator``.

    Returns
    -------
    str
        Swagger 2.0 document as JSON.
    """
    from .application.options import ConversionOptions
    from .conversion import Converter

    converter = Converter(
        Formats.RAML,
        Formats.OAS20,
        options=ConversionOptions(indent=indent, validate=validate),
    )
    return converter.convert_data(text, base_dir)


def convert_raml_file_to_oas2(
    source_path: Path,
    destination_path: Path | None = None,
    *,
    indent: int | None = 2,
    validate: bool = False,
) -> ConversionOutcome:
    """Convert a RAML file and write the Swagger JSON next to it by default.

    When ``destination_path`` is omitted it defaults to
    ``source_path.with_suffix(".swagger.json")``.
    """
    from .api import convert_raml_file_to_oas2 as _impl

    resolved_destination = destination_path or source_path.with_suffix(".swagger.json")
    return _impl(
        source_path=source_path,
        destination_path=resolved_destination,
        indent=indent,
        validate=validate,
    )


__all__ = [
    "Formats",
    "convert_raml_to_oas2",
    "convert_raml_file_to_oas2",
]
