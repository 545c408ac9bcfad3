"""Built-in conversion plugins."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from raml_oas_converter.oas2.builder import build_swagger
from raml_oas_converter.raml.loader import load_raml
from raml_oas_converter.types import Document, Formats


class RamlToOas2Plugin:
    """Convert RAML 0.8/1.0 API definitions into Swagger 2.0 documents."""

    name = "raml_to_oas2"

    def can_handle(
        self,
        source_format: Formats,
        target_format: Formats,
    ) -> bool:
        """Return ``True`` for the RAML -> OAS20 pair."""
        return source_format is Formats.RAML and target_format is Formats.OAS20

    def convert(
        self,
        text: str,
        base_dir: Path | None,
        options: Mapping[str, Any],
    ) -> Document:
        """Parse RAML text and build the Swagger document.

        Raises
        ------
        RamlParseError
            If the RAML document cannot be parsed or references unknown
            types, traits, or resource types.
        """
        source = str(options.get("source", "<string>"))
        api = load_raml(text, base_dir, source=source)
        return build_swagger(api)
