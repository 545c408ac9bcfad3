"""Pydantic schemas for runtime validation of conversion inputs."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_SOURCE = Path("tmpdoc") / "api.raml"
DEFAULT_DESTINATION = Path("api.swagger.json")


def _reject_blank_path(value: object) -> object:
    if value is None:
        raise ValueError("path is required.")
    if isinstance(value, str) and not value.strip():
        raise ValueError("path must be a non-empty string.")
    return value


class ConversionRequest(BaseModel):
    """Validated source/destination pair for a single conversion run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source_path: Path
    destination_path: Path

    @field_validator("source_path", "destination_path", mode="before")
    @classmethod
    def _validate_path(cls, value: object) -> object:
        return _reject_blank_path(value)


class RunnerConfig(BaseModel):
    """Project layout the conversion paths are derived from.

    ``source`` and ``destination`` are resolved against ``root`` unless they
    are already absolute.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    root: Path
    source: Path = DEFAULT_SOURCE
    destination: Path = DEFAULT_DESTINATION

    @field_validator("root", "source", "destination", mode="before")
    @classmethod
    def _validate_path(cls, value: object) -> object:
        return _reject_blank_path(value)

    def to_request(self) -> ConversionRequest:
        """Build the conversion request for this layout."""
        return ConversionRequest(
            source_path=self.root / self.source,
            destination_path=self.root / self.destination,
        )


class PluginResolutionConfig(BaseModel):
    """Validated input for plugin registry resolution."""

    model_config = ConfigDict(extra="forbid")

    source_format: str = Field(min_length=1)
    target_format: str = Field(min_length=1)
    plugin_name: str | None = None
