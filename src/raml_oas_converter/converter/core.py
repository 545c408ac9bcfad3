"""Upload conversion shared by the HTTP transport."""

from __future__ import annotations

import re
from dataclasses import dataclass
from hashlib import sha256
from pathlib import PureWindowsPath

from raml_oas_converter.application.options import ConversionOptions
from raml_oas_converter.conversion import Converter
from raml_oas_converter.errors import ConversionFailure, ConverterError
from raml_oas_converter.types import Formats

DEFAULT_OUTPUT_STEM = "api"
OUTPUT_SUFFIX = ".swagger.json"

_HEX_DIGEST = re.compile(r"[0-9a-f]{64}")


@dataclass(frozen=True)
class UploadRequest:
    """Uploaded RAML document metadata.

    Parameters
    ----------
    filename : str
        Name the client gave the document; only used to name the output.
    expected_sha256 : str | None, default=None
        Digest the uploaded bytes must match.
    validate : bool, default=False
        Validate the generated Swagger document before returning it.
    """

    filename: str
    expected_sha256: str | None = None
    validate: bool = False


@dataclass(frozen=True)
class DocumentOutcome:
    """Swagger JSON produced from an upload."""

    output_bytes: bytes
    output_filename: str
    output_sha256: str


def expected_digest(value: str | None) -> str | None:
    """Lower-case ``value``; blank means no digest was supplied."""
    digest = (value or "").strip().lower()
    if not digest:
        return None
    if _HEX_DIGEST.fullmatch(digest) is None:
        raise ValueError("expected_sha256 must be a 64-character hex digest")
    return digest


def output_filename_for(filename: str) -> str:
    """``music.raml`` -> ``music.swagger.json``, ignoring client directories."""
    # PureWindowsPath splits on both separators.
    name = PureWindowsPath(filename.strip()).name
    stem = name.rsplit(".", 1)[0] if "." in name.strip(".") else name.strip(".")
    return f"{stem or DEFAULT_OUTPUT_STEM}{OUTPUT_SUFFIX}"


async def convert_document_bytes(
    data: bytes,
    request: UploadRequest,
    *,
    converter: Converter | None = None,
) -> tuple[str, DocumentOutcome]:
    """Convert an uploaded RAML document.

    Uploads are converted in memory, so ``!include`` and ``uses`` references
    cannot be resolved.

    Returns
    -------
    tuple[str, DocumentOutcome]
        SHA-256 of the upload and the converted document.

    Raises
    ------
    ValueError
        If the digest is malformed or does not match.
    ConverterError
        If the document cannot be converted.
    """
    input_sha = sha256(data).hexdigest()
    expected = expected_digest(request.expected_sha256)
    if expected is not None and expected != input_sha:
        raise ValueError("input SHA-256 mismatch")
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ConversionFailure(f"uploaded document is not UTF-8 text: {exc}") from exc

    converter = converter or Converter(
        Formats.RAML, Formats.OAS20, options=ConversionOptions(validate=request.validate)
    )
    try:
        swagger = await converter.convert_data_async(text)
    except ConverterError:
        raise
    except Exception as exc:
        raise ConversionFailure(str(exc)) from exc

    output = swagger.encode("utf-8")
    return input_sha, DocumentOutcome(
        output_bytes=output,
        output_filename=output_filename_for(request.filename),
        output_sha256=sha256(output).hexdigest(),
    )
