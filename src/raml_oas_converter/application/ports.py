"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from raml_oas_converter.errors import ConverterError
from raml_oas_converter.schemas import ConversionRequest


class DocumentConverter(Protocol):
    """Convert a source document file into target document text."""

    def convert_file(self, path: Path) -> str:
        """Return the converted document for the file at ``path``."""


class DocumentWriter(Protocol):
    """Persist converted document text."""

    def write(self, path: Path, content: str) -> int:
        """Write ``content`` to ``path`` and return the number of bytes written."""


class Reporter(Protocol):
    """Report conversion progress to the user."""

    def started(self, request: ConversionRequest) -> None:
        """Announce that a conversion is starting."""

    def succeeded(self, request: ConversionRequest) -> None:
        """Announce that the destination document was written."""

    def failed(self, request: ConversionRequest, error: ConverterError) -> None:
        """Announce a failed conversion along with its cause."""
