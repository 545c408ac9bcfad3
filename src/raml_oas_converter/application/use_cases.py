"""Application use-cases orchestrating conversion workflows."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from raml_oas_converter.adapters.reporters import ConsoleReporter
from raml_oas_converter.adapters.writers import FileDocumentWriter
from raml_oas_converter.application.options import ConversionOptions
from raml_oas_converter.application.ports import (
    DocumentConverter,
    DocumentWriter,
    Reporter,
)
from raml_oas_converter.application.results import ConversionOutcome
from raml_oas_converter.conversion import Converter
from raml_oas_converter.errors import ConversionFailure, ConverterError
from raml_oas_converter.schemas import ConversionRequest
from raml_oas_converter.types import Formats

logger = logging.getLogger(__name__)


class ConversionRunner:
    """Run one conversion and report its outcome.

    The destination is written only after the converter returns, so a
    failed run leaves any earlier destination file untouched.

    Parameters
    ----------
    converter : DocumentConverter
        Produces the target document text for a source path.
    writer : DocumentWriter | None, optional
        Persists the document; defaults to :class:`FileDocumentWriter`.
    reporter : Reporter | None, optional
        Receives progress events; defaults to :class:`ConsoleReporter`.
    """

    def __init__(
        self,
        converter: DocumentConverter,
        writer: DocumentWriter | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        self.converter = converter
        self.writer = writer or FileDocumentWriter()
        self.reporter = reporter or ConsoleReporter()

    def _convert(self, request: ConversionRequest) -> str:
        try:
            return self.converter.convert_file(request.source_path)
        except ConverterError:
            raise
        except Exception as exc:
            raise ConversionFailure(str(exc)) from exc

    def run(self, request: ConversionRequest) -> ConversionOutcome:
        """Convert ``request.source_path`` and write ``request.destination_path``.

        Failures are reported and returned in the outcome, never raised.
        """
        self.reporter.started(request)
        try:
            content = self._convert(request)
            written = self.writer.write(request.destination_path, content)
        except ConverterError as exc:
            logger.debug("conversion of %s failed: %s", request.source_path, exc)
            self.reporter.failed(request, exc)
            return ConversionOutcome(
                source_path=request.source_path,
                destination_path=request.destination_path,
                error=exc,
            )

        logger.debug("wrote %d bytes to %s", written, request.destination_path)
        self.reporter.succeeded(request)
        return ConversionOutcome(
            source_path=request.source_path,
            destination_path=request.destination_path,
            written_bytes=written,
        )


def build_conversion_options(
    *,
    indent: int | None = 2,
    validate: bool = False,
) -> ConversionOptions:
    """Build typed option object from command/API params."""
    return ConversionOptions(indent=indent, validate=validate)


def convert_raml_file(
    *,
    source_path: Path,
    destination_path: Path,
    options: ConversionOptions,
    converter: DocumentConverter | None = None,
    writer: DocumentWriter | None = None,
    reporter: Reporter | None = None,
) -> ConversionOutcome:
    """Use-case: convert a RAML file into a Swagger 2.0 JSON file.

    Raises
    ------
    ConversionFailure
        If the request itself is invalid (e.g. an empty path). Conversion
        failures are reported through the outcome instead.
    """
    try:
        request = ConversionRequest(
            source_path=source_path,
            destination_path=destination_path,
        )
    except ValidationError as exc:
        raise ConversionFailure(f"Invalid conversion parameters: {exc}") from exc

    converter = converter or Converter(Formats.RAML, Formats.OAS20, options=options)
    runner = ConversionRunner(converter=converter, writer=writer, reporter=reporter)
    return runner.run(request)
