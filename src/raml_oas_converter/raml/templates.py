"""Resource type and trait application for RAML resources."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

from raml_oas_converter.errors import RamlParseError

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")

_PLACEHOLDER = re.compile(r"<<\s*([^|>\s]+)((?:\s*\|\s*![a-z]+)*)\s*>>")
_FUNCTION = re.compile(r"!([a-z]+)")
_WORDS = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")


def _words(value: str) -> list[str]:
    return _WORDS.findall(value)


def singularize(value: str) -> str:
    """Naive English singular form."""
    lowered = value.lower()
    if lowered.endswith("ies") and len(value) > 3:
        return value[:-3] + ("Y" if value[-3:].isupper() else "y")
    if lowered.endswith(("sses", "xes", "zes", "ches", "shes")):
        return value[:-2]
    if lowered.endswith("s") and not lowered.endswith("ss"):
        return value[:-1]
    return value


def pluralize(value: str) -> str:
    """Naive English plural form."""
    lowered = value.lower()
    if lowered.endswith("y") and len(value) > 1 and lowered[-2] not in "aeiou":
        return value[:-1] + "ies"
    if lowered.endswith(("s", "x", "z", "ch", "sh")):
        return value + "es"
    return value + "s"


def lowercamelcase(value: str) -> str:
    """``user-profile`` -> ``userProfile``."""
    words = _words(value)
    if not words:
        return value
    return words[0].lower() + "".join(word.capitalize() for word in words[1:])


def uppercamelcase(value: str) -> str:
    """``user-profile`` -> ``UserProfile``."""
    words = _words(value)
    if not words:
        return value
    return "".join(word.capitalize() for word in words)


TRANSFORMS: dict[str, Callable[[str], str]] = {
    "singularize": singularize,
    "pluralize": pluralize,
    "uppercase": str.upper,
    "lowercase": str.lower,
    "lowercamelcase": lowercamelcase,
    "uppercamelcase": uppercamelcase,
    "lowerunderscorecase": lambda value: "_".join(w.lower() for w in _words(value)),
    "upperunderscorecase": lambda value: "_".join(w.upper() for w in _words(value)),
    "lowerhyphencase": lambda value: "-".join(w.lower() for w in _words(value)),
    "upperhyphencase": lambda value: "-".join(w.upper() for w in _words(value)),
}


def _apply_functions(value: str, functions: str) -> str:
    for name in _FUNCTION.findall(functions):
        try:
            value = TRANSFORMS[name](value)
        except KeyError as exc:
            raise RamlParseError(f"Unknown template function '!{name}'") from exc
    return value


def substitute(node: Any, params: Mapping[str, Any]) -> Any:
    """Replace ``<<name | !function>>`` placeholders throughout ``node``.

    A string that consists of exactly one placeholder takes the parameter
    value as-is, so non-string parameters keep their type.
    """
    if isinstance(node, Mapping):
        return {
            substitute(key, params): substitute(value, params)
            for key, value in node.items()
        }
    if isinstance(node, list):
        return [substitute(item, params) for item in node]
    if not isinstance(node, str) or "<<" not in node:
        return node

    def _lookup(match: re.Match[str]) -> Any:
        name = match.group(1)
        if name not in params:
            raise RamlParseError(f"No value supplied for template parameter '{name}'")
        return params[name]

    whole = _PLACEHOLDER.fullmatch(node.strip())
    if whole is not None and not whole.group(2):
        return _lookup(whole)

    def _replace(match: re.Match[str]) -> str:
        return _apply_functions(str(_lookup(match)), match.group(2))

    return _PLACEHOLDER.sub(_replace, node)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``override`` onto ``base``; the override wins on conflicts."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        elif value is None and key in merged:
            continue
        else:
            merged[key] = value
    return merged


def resource_path_name(path: str) -> str:
    """Rightmost path segment that is not a URI parameter."""
    for segment in reversed([part for part in path.split("/") if part]):
        if "{" not in segment:
            return segment
    return ""


def _reference(ref: Any, kind: str) -> tuple[str, dict[str, Any]]:
    """Split a ``name`` or ``{name: {param: value}}`` reference."""
    if isinstance(ref, str):
        return ref, {}
    if isinstance(ref, Mapping) and len(ref) == 1:
        name, params = next(iter(ref.items()))
        if params is not None and not isinstance(params, Mapping):
            raise RamlParseError(f"Parameters of {kind} '{name}' must be a mapping.")
        return str(name), dict(params or {})
    raise RamlParseError(f"Invalid {kind} reference: {ref!r}")


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _join_traits(first: Any, second: Any) -> list[Any]:
    joined: list[Any] = []
    for ref in _as_list(first) + _as_list(second):
        if ref not in joined:
            joined.append(ref)
    return joined


def merge_template(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge a resource onto its template, concatenating ``is`` lists.

    Traits named by the template (on the resource or on one of its methods)
    stay applied next to the ones the resource itself declares.
    """
    merged = deep_merge(base, override)
    if "is" in base and "is" in override:
        merged["is"] = _join_traits(base["is"], override["is"])
    for method in HTTP_METHODS:
        inherited, own = base.get(method), override.get(method)
        if (
            isinstance(inherited, Mapping)
            and isinstance(own, Mapping)
            and "is" in inherited
            and "is" in own
        ):
            merged[method] = {
                **merged[method],
                "is": _join_traits(inherited["is"], own["is"]),
            }
    return merged


class TemplateExpander:
    """Apply ``resourceTypes`` and ``traits`` to resource declarations."""

    def __init__(
        self,
        resource_types: Mapping[str, Any],
        traits: Mapping[str, Any],
    ) -> None:
        self._resource_types = resource_types
        self._traits = traits

    def _lookup(self, table: Mapping[str, Any], name: str, kind: str) -> dict[str, Any]:
        if name not in table:
            raise RamlParseError(f"Unknown {kind} '{name}'")
        body = table[name]
        if body is None:
            return {}
        if not isinstance(body, Mapping):
            raise RamlParseError(f"{kind.capitalize()} '{name}' must be a mapping.")
        return dict(body)

    def _resource_type_body(
        self,
        ref: Any,
        path: str,
        declared_methods: set[str],
        seen: tuple[str, ...] = (),
    ) -> dict[str, Any]:
        name, user_params = _reference(ref, "resource type")
        if name in seen:
            raise RamlParseError(f"Cyclic resource type inheritance through '{name}'")
        params = {
            **user_params,
            "resourcePath": path,
            "resourcePathName": resource_path_name(path),
        }
        body = self._lookup(self._resource_types, name, "resource type")

        resolved: dict[str, Any] = {}
        for key, value in body.items():
            method = key[:-1] if key.endswith("?") else key
            if method in HTTP_METHODS:
                if key.endswith("?") and method not in declared_methods:
                    continue
                resolved[method] = substitute(value or {}, {**params, "methodName": method})
            elif key not in {"usage", "displayName"}:
                resolved[key] = substitute(value, params)

        parent = resolved.pop("type", None)
        if parent is not None:
            inherited = self._resource_type_body(
                parent, path, declared_methods, (*seen, name)
            )
            resolved = merge_template(inherited, resolved)
        return resolved

    def _apply_traits(
        self,
        method: str,
        body: Mapping[str, Any],
        refs: list[Any],
        path: str,
    ) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for ref in refs:
            if ref is None:
                continue
            name, user_params = _reference(ref, "trait")
            trait = self._lookup(self._traits, name, "trait")
            trait.pop("usage", None)
            trait.pop("displayName", None)
            params = {
                **user_params,
                "resourcePath": path,
                "resourcePathName": resource_path_name(path),
                "methodName": method,
            }
            result = deep_merge(result, substitute(trait, params))
        return deep_merge(result, body)

    def expand(self, resource: Mapping[str, Any], path: str) -> dict[str, Any]:
        """Return ``resource`` with its resource type and traits merged in.

        Parameters
        ----------
        resource : Mapping[str, Any]
            Resource declaration (child resources are left untouched).
        path : str
            Full resource path, used for ``<<resourcePath>>``.
        """
        node = dict(resource)
        declared = {key for key in node if key in HTTP_METHODS}

        type_ref = node.pop("type", None)
        if type_ref is not None:
            inherited = self._resource_type_body(type_ref, path, declared)
            children = {key: node[key] for key in node if key.startswith("/")}
            own = {key: value for key, value in node.items() if not key.startswith("/")}
            node = merge_template(inherited, own)
            node.update(children)

        resource_traits = _as_list(node.pop("is", None))
        for method in HTTP_METHODS:
            if method not in node:
                continue
            body = dict(node[method] or {})
            method_traits = _as_list(body.pop("is", None))
            refs = resource_traits + method_traits
            node[method] = self._apply_traits(method, body, refs, path) if refs else body
        return node
