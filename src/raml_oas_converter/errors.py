"""Exception hierarchy for RAML to OAS conversion."""

from __future__ import annotations


class ConverterError(Exception):
    """Base class for all converter errors.

    Attributes
    ----------
    exit_code : int
        Process exit code used by command-line entrypoints.
    """

    exit_code: int = 1


class ConversionFailure(ConverterError):
    """Conversion of a source document failed."""


class RamlParseError(ConversionFailure):
    """Source document is not a readable RAML API definition."""


class ValidationFailure(ConversionFailure):
    """Emitted document did not pass OpenAPI validation."""


class OutputWriteError(ConversionFailure):
    """Converted document could not be written to its destination."""


class UnsupportedFormatError(ConverterError):
    """No plugin converts between the requested formats."""


class PluginError(ConverterError):
    """Plugin registration, import, or resolution failed."""
