"""Plugin protocol for document format conversion."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from raml_oas_converter.types import Document, Formats

PluginOptions = Mapping[str, Any]


@runtime_checkable
class ConverterPlugin(Protocol):
    """Protocol implemented by conversion plugins."""

    name: str

    def can_handle(
        self,
        source_format: Formats,
        target_format: Formats,
    ) -> bool:
        """Check whether plugin converts between the given formats.

        Parameters
        ----------
        source_format : Formats
            Format of the source document.
        target_format : Formats
            Requested output format.

        Returns
        -------
        bool
            ``True`` if plugin can perform this conversion.
        """

    def convert(
        self,
        text: str,
        base_dir: Path | None,
        options: PluginOptions,
    ) -> Document:
        """Convert source document text into the target document.

        Parameters
        ----------
        text : str
            Full source document.
        base_dir : Path | None
            Directory relative references are resolved against.
        options : Mapping[str, Any]
            Raw plugin options.

        Returns
        -------
        Document
            Target document as a JSON-compatible mapping.
        """
