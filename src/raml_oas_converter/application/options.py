"""Typed option objects shared across conversion use-cases."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ConversionOptions:
    """Options applied while producing the target document."""

    indent: int | None = 2
    validate: bool = False
