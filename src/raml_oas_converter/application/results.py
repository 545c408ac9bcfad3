"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from raml_oas_converter.errors import ConverterError


@dataclass(frozen=True)
class ConversionOutcome:
    """Structured outcome of one conversion run."""

    source_path: Path
    destination_path: Path
    error: ConverterError | None = None
    written_bytes: int = 0

    @property
    def succeeded(self) -> bool:
        """Return ``True`` when the destination document was written."""
        return self.error is None

    @property
    def exit_code(self) -> int:
        """Process exit code matching this outcome."""
        if self.error is None:
            return 0
        code = getattr(self.error, "exit_code", None)
        if isinstance(code, int) and code > 0:
            return code
        return 1
