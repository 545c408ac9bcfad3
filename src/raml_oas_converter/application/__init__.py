"""Application-layer use-cases and option objects."""

from __future__ import annotations

from pathlib import Path

from raml_oas_converter.application.options import ConversionOptions
from raml_oas_converter.application.ports import (
    DocumentConverter,
    DocumentWriter,
    Reporter,
)
from raml_oas_converter.application.results import ConversionOutcome


def convert_raml_file(
    *,
    source_path: Path,
    destination_path: Path,
    options: ConversionOptions,
    converter: DocumentConverter | None = None,
    writer: DocumentWriter | None = None,
    reporter: Reporter | None = None,
) -> ConversionOutcome:
    """Convert a RAML file via lazy use-case import."""
    from raml_oas_converter.application.use_cases import convert_raml_file as _impl

    return _impl(
        source_path=source_path,
        destination_path=destination_path,
        options=options,
        converter=converter,
        writer=writer,
        reporter=reporter,
    )


__all__ = [
    "ConversionOptions",
    "ConversionOutcome",
    "convert_raml_file",
]
