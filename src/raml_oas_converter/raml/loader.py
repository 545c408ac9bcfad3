"""RAML document loading on top of PyYAML."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from raml_oas_converter.errors import RamlParseError

logger = logging.getLogger(__name__)

RAML_HEADER = re.compile(
    r"^#%RAML[ \t]+(?P<version>0\.8|1\.0)(?:[ \t]+(?P<fragment>\w+))?[ \t]*$"
)
YAML_INCLUDE_SUFFIXES = {".raml", ".yaml", ".yml"}
NAMED_SECTIONS = ("types", "schemas", "traits", "resourceTypes", "securitySchemes")


@dataclass(frozen=True)
class RamlApi:
    """Parsed RAML API definition.

    Parameters
    ----------
    version : str
        RAML version declared in the header (``"0.8"`` or ``"1.0"``).
    root : dict[str, Any]
        Root mapping of the document with libraries merged in.
    base_dir : Path | None
        Directory that relative includes were resolved against.
    """

    version: str
    root: dict[str, Any]
    base_dir: Path | None = None
    libraries: tuple[str, ...] = field(default_factory=tuple)

    def section(self, name: str) -> dict[str, Any]:
        """Return a named section (``types``, ``traits``...) as a mapping."""
        value = self.root.get(name)
        return dict(value) if isinstance(value, Mapping) else {}


def _read_include(target: Path) -> Any:
    try:
        text = target.read_text(encoding="utf-8")
    except OSError as exc:
        raise RamlParseError(f"Unable to read included file {target}: {exc}") from exc
    if target.suffix.lower() in YAML_INCLUDE_SUFFIXES:
        return _parse_yaml(text, target.parent, source=str(target))
    return text


def _include_loader(base_dir: Path | None) -> type[yaml.SafeLoader]:
    """Build a safe loader class that resolves ``!include`` against ``base_dir``."""

    class _Loader(yaml.SafeLoader):
        pass

    def _construct_include(loader: yaml.SafeLoader, node: yaml.Node) -> Any:
        ref = str(loader.construct_scalar(node)).strip()
        if base_dir is None:
            raise RamlParseError(
                f"Cannot resolve '!include {ref}' without a base directory."
            )
        logger.debug("resolving include %s relative to %s", ref, base_dir)
        return _read_include(base_dir / ref)

    _Loader.add_constructor("!include", _construct_include)
    return _Loader


def _parse_yaml(text: str, base_dir: Path | None, *, source: str) -> Any:
    try:
        return yaml.load(text, Loader=_include_loader(base_dir))  # noqa: S506
    except yaml.YAMLError as exc:
        raise RamlParseError(f"Invalid YAML in {source}: {exc}") from exc


def _normalize_keys(node: Any) -> Any:
    """Turn non-string mapping keys (e.g. response codes) into strings."""
    if isinstance(node, Mapping):
        return {str(key): _normalize_keys(value) for key, value in node.items()}
    if isinstance(node, list):
        return [_normalize_keys(item) for item in node]
    return node


def _normalize_named_section(value: Any, name: str) -> dict[str, Any]:
    """Flatten RAML 0.8 style ``[{a: ...}, {b: ...}]`` sections into a mapping."""
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, list):
        merged: dict[str, Any] = {}
        for entry in value:
            if not isinstance(entry, Mapping):
                raise RamlParseError(f"Entries of '{name}' must be mappings.")
            merged.update(entry)
        return merged
    raise RamlParseError(f"Section '{name}' must be a mapping or a list of mappings.")


def _merge_library(
    root: dict[str, Any],
    namespace: str,
    library: Mapping[str, Any],
) -> None:
    for section in NAMED_SECTIONS:
        entries = _normalize_named_section(library.get(section), section)
        if not entries:
            continue
        target = root.setdefault(section, {})
        for name, declaration in entries.items():
            target[f"{namespace}.{name}"] = declaration


def _load_libraries(root: dict[str, Any], base_dir: Path | None) -> list[str]:
    uses = root.get("uses")
    if uses is None:
        return []
    if not isinstance(uses, Mapping):
        raise RamlParseError("'uses' must map namespaces to library paths.")
    if base_dir is None:
        raise RamlParseError("Libraries cannot be resolved without a base directory.")

    loaded: list[str] = []
    for namespace, ref in uses.items():
        qualified = str(namespace)
        path = base_dir / str(ref)
        library = _read_include(path)
        if not isinstance(library, Mapping):
            raise RamlParseError(f"Library '{qualified}' at {path} is not a mapping.")
        library = _normalize_keys(library)
        nested = _load_libraries(library, path.parent)
        loaded.extend(f"{qualified}.{name}" for name in nested)
        _merge_library(root, qualified, library)
        loaded.append(qualified)
        logger.debug("merged library %s from %s", qualified, path)
    return loaded


def load_raml(
    text: str,
    base_dir: Path | None = None,
    *,
    source: str = "<string>",
) -> RamlApi:
    """Parse RAML text into a :class:`RamlApi`.

    Parameters
    ----------
    text : str
        Full RAML document, including its ``#%RAML`` header line.
    base_dir : Path | None, optional
        Directory used for ``!include`` and ``uses`` resolution.
    source : str, optional
        Label used in error messages.

    Raises
    ------
    RamlParseError
        If the document is empty, lacks a RAML header, is not valid YAML, or
        does not describe an API.
    """
    if not text.strip():
        raise RamlParseError("RAML document is empty")

    header = text.lstrip("\ufeff").splitlines()[0].strip()
    match = RAML_HEADER.match(header)
    if match is None:
        raise RamlParseError(
            f"Missing or invalid RAML header in {source}: "
            "expected '#%RAML 1.0' or '#%RAML 0.8'"
        )
    fragment = match.group("fragment")
    if fragment:
        raise RamlParseError(
            f"{source} is a RAML {fragment} fragment, not an API definition"
        )

    loaded = _parse_yaml(text, base_dir, source=source)
    if not isinstance(loaded, Mapping):
        raise RamlParseError(f"RAML root of {source} must be a mapping")
    root = _normalize_keys(loaded)
    if not root.get("title"):
        raise RamlParseError(f"RAML document {source} has no 'title'")

    for section in NAMED_SECTIONS:
        if section in root:
            root[section] = _normalize_named_section(root[section], section)
    libraries = _load_libraries(root, base_dir)

    logger.debug("loaded RAML %s document %s", match.group("version"), source)
    return RamlApi(
        version=match.group("version"),
        root=root,
        base_dir=base_dir,
        libraries=tuple(libraries),
    )


def load_raml_file(path: Path) -> RamlApi:
    """Read and parse the RAML file at ``path``."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RamlParseError(f"Unable to read RAML source {path}: {exc}") from exc
    return load_raml(text, path.parent, source=str(path))
