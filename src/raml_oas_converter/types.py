"""Shared type aliases for converter modules."""

from __future__ import annotations

from enum import Enum
from typing import Any


class Formats(str, Enum):
    """Document format tags understood by the converter."""

    RAML = "RAML"
    OAS20 = "OAS20"

    @classmethod
    def parse(cls, value: str | Formats) -> Formats:
        """Return the format for a tag, ignoring case and surrounding spaces."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().upper()
        try:
            return cls(normalized)
        except ValueError as exc:
            known = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unknown format '{value}'. Known formats: {known}"
            ) from exc


type Document = dict[str, Any]
type JsonSchema = dict[str, Any]
