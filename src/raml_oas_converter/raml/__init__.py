"""RAML parsing: document loading, templates, and data types."""

from .loader import RamlApi, load_raml, load_raml_file

__all__ = ["RamlApi", "load_raml", "load_raml_file"]
