"""Public file-based conversion API (delegates to application use-cases)."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from raml_oas_converter.application.ports import Reporter
from raml_oas_converter.application.results import ConversionOutcome
from raml_oas_converter.application.use_cases import (
    build_conversion_options,
    convert_raml_file,
)
from raml_oas_converter.schemas import DEFAULT_DESTINATION, DEFAULT_SOURCE, RunnerConfig


def convert_raml_file_to_oas2(
    source_path: Path,
    destination_path: Path,
    indent: Optional[int] = 2,
    validate: bool = False,
    reporter: Optional[Reporter] = None,
) -> ConversionOutcome:
    """Convert a RAML file into a Swagger 2.0 JSON file."""
    options = build_conversion_options(indent=indent, validate=validate)
    return convert_raml_file(
        source_path=source_path,
        destination_path=destination_path,
        options=options,
        reporter=reporter,
    )


def convert_project_docs(
    root: Path,
    source: Path = DEFAULT_SOURCE,
    destination: Path = DEFAULT_DESTINATION,
    indent: Optional[int] = 2,
    validate: bool = False,
    reporter: Optional[Reporter] = None,
) -> ConversionOutcome:
    """Convert ``<root>/tmpdoc/api.raml`` into ``<root>/api.swagger.json``.

    ``source`` and ``destination`` override the default layout and are
    resolved against ``root`` when relative.
    """
    request = RunnerConfig(root=root, source=source, destination=destination).to_request()
    return convert_raml_file_to_oas2(
        source_path=request.source_path,
        destination_path=request.destination_path,
        indent=indent,
        validate=validate,
        reporter=reporter,
    )
