"""OpenAPI validation helpers."""

from __future__ import annotations

from raml_oas_converter.errors import ValidationFailure
from raml_oas_converter.types import Document


def validate_oas2_if_requested(document: Document, validate: bool) -> None:
    """Validate a Swagger 2.0 document when validation is enabled.

    Parameters
    ----------
    document : Document
        Swagger document to check.
    validate : bool
        Whether validation should be executed.

    Raises
    ------
    ValidationFailure
        If the validator is not installed or the document is invalid.
    """
    if not validate:
        return

    try:
        from openapi_spec_validator import OpenAPIV2SpecValidator, validate as _validate
    except Exception as exc:  # pragma: no cover - dependency guarded by CLI
        raise ValidationFailure(
            "Validation requires openapi-spec-validator to be installed."
        ) from exc

    try:
        _validate(document, cls=OpenAPIV2SpecValidator)
    except Exception as exc:
        raise ValidationFailure(f"OAS2 validation failed: {exc}") from exc
