"""Format converter facade over the plugin registry."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from raml_oas_converter.application.options import ConversionOptions
from raml_oas_converter.errors import (
    ConversionFailure,
    ConverterError,
    UnsupportedFormatError,
)
from raml_oas_converter.plugins.registry import PluginRegistry, create_default_registry
from raml_oas_converter.types import Document, Formats
from raml_oas_converter.validate import validate_oas2_if_requested

logger = logging.getLogger(__name__)


class Converter:
    """Convert documents from ``source_format`` to ``target_format``.

    Parameters
    ----------
    source_format : Formats | str
        Format of the documents handed to the converter (e.g. ``"RAML"``).
    target_format : Formats | str
        Output format (e.g. ``"OAS20"``).
    options : ConversionOptions | None, optional
        Serialization and validation options.
    registry : PluginRegistry | None, optional
        Plugin registry; defaults to the built-in plugins.
    plugin_name : str | None, optional
        Explicit plugin to use instead of format-based lookup.

    Raises
    ------
    UnsupportedFormatError
        If no registered plugin converts between the two formats.
    """

    def __init__(
        self,
        source_format: Formats | str,
        target_format: Formats | str,
        *,
        options: ConversionOptions | None = None,
        registry: PluginRegistry | None = None,
        plugin_name: str | None = None,
    ) -> None:
        try:
            self.source_format = Formats.parse(source_format)
            self.target_format = Formats.parse(target_format)
        except ValueError as exc:
            raise UnsupportedFormatError(str(exc)) from exc
        self.options = options or ConversionOptions()
        registry = registry or create_default_registry()
        self._plugin = registry.resolve(
            self.source_format, self.target_format, plugin_name=plugin_name
        )

    @property
    def plugin_name(self) -> str:
        """Name of the plugin performing conversions."""
        return self._plugin.name

    def convert_document(
        self,
        text: str,
        base_dir: Path | None = None,
        *,
        source: str = "<string>",
    ) -> Document:
        """Convert source text into the target document mapping."""
        try:
            document = self._plugin.convert(text, base_dir, {"source": source})
        except ConverterError:
            raise
        except Exception as exc:
            raise ConversionFailure(f"Unexpected error converting {source}: {exc}") from exc
        if self.target_format is Formats.OAS20:
            validate_oas2_if_requested(document, self.options.validate)
        return document

    def serialize(self, document: Document) -> str:
        """Render ``document`` as JSON text."""
        return json.dumps(
            document,
            indent=self.options.indent,
            ensure_ascii=False,
            default=str,
        )

    def convert_data(self, text: str, base_dir: Path | None = None) -> str:
        """Convert source text and return the serialized target document."""
        return self.serialize(self.convert_document(text, base_dir))

    def convert_file(self, path: Path) -> str:
        """Convert the document stored at ``path``.

        Raises
        ------
        ConversionFailure
            If the file cannot be read or converted.
        """
        path = Path(path)
        logger.debug(
            "converting %s from %s to %s",
            path,
            self.source_format.value,
            self.target_format.value,
        )
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConversionFailure(f"Unable to read {path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise ConversionFailure(f"{path} is not UTF-8 text: {exc}") from exc
        document = self.convert_document(text, path.parent, source=str(path))
        return self.serialize(document)

    async def convert_file_async(self, path: Path) -> str:
        """Run :meth:`convert_file` in a worker thread."""
        return await asyncio.to_thread(self.convert_file, path)

    async def convert_data_async(self, text: str) -> str:
        """Run :meth:`convert_data` in a worker thread."""
        return await asyncio.to_thread(self.convert_data, text)
