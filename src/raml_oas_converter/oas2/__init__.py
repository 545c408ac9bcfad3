"""Swagger 2.0 (OAS2) document emission."""

from .builder import Oas2DocumentBuilder, build_swagger

__all__ = ["Oas2DocumentBuilder", "build_swagger"]
