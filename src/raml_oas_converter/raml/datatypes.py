"""Translation of RAML data types and schemas into JSON schema objects."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from raml_oas_converter.errors import RamlParseError
from raml_oas_converter.types import JsonSchema

DEFINITIONS_PREFIX = "#/definitions/"

BUILTIN_TYPES: dict[str, JsonSchema] = {
    "string": {"type": "string"},
    "number": {"type": "number"},
    "integer": {"type": "integer"},
    "boolean": {"type": "boolean"},
    "object": {"type": "object"},
    "array": {"type": "array"},
    "file": {"type": "string", "format": "binary"},
    "date-only": {"type": "string", "format": "date"},
    "time-only": {"type": "string", "format": "time"},
    "datetime-only": {"type": "string", "format": "date-time"},
    "datetime": {"type": "string", "format": "date-time"},
    "date": {"type": "string", "format": "date"},
    "any": {},
    "nil": {},
}

# facet name -> JSON schema keyword
COPIED_FACETS = {
    "description": "description",
    "displayName": "title",
    "default": "default",
    "enum": "enum",
    "pattern": "pattern",
    "minLength": "minLength",
    "maxLength": "maxLength",
    "minimum": "minimum",
    "maximum": "maximum",
    "multipleOf": "multipleOf",
    "format": "format",
    "minItems": "minItems",
    "maxItems": "maxItems",
    "uniqueItems": "uniqueItems",
    "minProperties": "minProperties",
    "maxProperties": "maxProperties",
    "additionalProperties": "additionalProperties",
    "discriminator": "discriminator",
}

JSON_SCHEMA_DROPPED_KEYS = {"$schema", "id"}


def annotation_extensions(node: Mapping[str, Any]) -> dict[str, Any]:
    """Map ``(annotation)`` keys onto ``x-annotation`` vendor extensions."""
    return {
        f"x-{key[1:-1]}": value
        for key, value in node.items()
        if isinstance(key, str) and key.startswith("(") and key.endswith(")")
    }


def first_example(node: Mapping[str, Any]) -> tuple[bool, Any]:
    """Return ``(found, value)`` for ``example`` or the first of ``examples``."""
    if "example" in node:
        example = node["example"]
        if isinstance(example, Mapping) and "value" in example and (
            "strict" in example or "displayName" in example
        ):
            return True, example["value"]
        return True, example
    examples = node.get("examples")
    if isinstance(examples, Mapping) and examples:
        value = next(iter(examples.values()))
        if isinstance(value, Mapping) and "value" in value:
            return True, value["value"]
        return True, value
    return False, None


def _split_union(expression: str) -> list[str]:
    members: list[str] = []
    depth = 0
    current = ""
    for char in expression:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "|" and depth == 0:
            members.append(current.strip())
            current = ""
        else:
            current += char
    members.append(current.strip())
    return [member for member in members if member]


def _encloses(expression: str) -> bool:
    depth = 0
    for index, char in enumerate(expression):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0 and index < len(expression) - 1:
                return False
    return True


def _strip_parentheses(expression: str) -> str:
    while (
        expression.startswith("(")
        and expression.endswith(")")
        and _encloses(expression)
    ):
        expression = expression[1:-1].strip()
    return expression


def _with_siblings(base: JsonSchema, extra: JsonSchema) -> JsonSchema:
    """Combine ``base`` with extra keywords, wrapping ``$ref`` in ``allOf``."""
    if not extra:
        return base
    if "$ref" in base:
        return {"allOf": [base], **extra}
    return {**base, **extra}


class SchemaTranslator:
    """Translate RAML type declarations into JSON schema objects.

    Parameters
    ----------
    type_names : Iterable[str]
        Names of user-defined types (``types``/``schemas``) that may be
        referenced; references become ``#/definitions/<name>`` pointers.
    """

    def __init__(self, type_names: Iterable[str]) -> None:
        self._names = set(type_names)

    def _resolve_name(self, name: str) -> str | None:
        if name in self._names:
            return name
        suffixed = [known for known in self._names if known.endswith(f".{name}")]
        if len(suffixed) == 1:
            return suffixed[0]
        return None

    def is_named_type(self, expression: str) -> bool:
        """Return ``True`` when ``expression`` names a user-defined type."""
        return self._resolve_name(expression.strip()) is not None

    def expression(self, expression: str) -> JsonSchema:
        """Translate a type expression such as ``User[]`` or ``A | B``."""
        expression = _strip_parentheses(expression.strip())
        members = _split_union(expression)
        if len(members) > 1:
            first = self.expression(members[0])
            return _with_siblings(first, {"x-raml-union": members})
        if expression.endswith("?"):
            return self.expression(expression[:-1])
        if expression.endswith("[]"):
            return {"type": "array", "items": self.expression(expression[:-2])}
        if expression in BUILTIN_TYPES:
            return dict(BUILTIN_TYPES[expression])
        resolved = self._resolve_name(expression)
        if resolved is not None:
            return {"$ref": f"{DEFINITIONS_PREFIX}{resolved}"}
        raise RamlParseError(f"Unknown type '{expression}'")

    def _json_schema(self, text: str) -> JsonSchema:
        try:
            loaded = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RamlParseError(f"Invalid inline JSON schema: {exc}") from exc
        if not isinstance(loaded, dict):
            raise RamlParseError("Inline JSON schema must be an object.")
        return {
            key: value
            for key, value in loaded.items()
            if key not in JSON_SCHEMA_DROPPED_KEYS
        }

    def _from_string(self, declaration: str) -> JsonSchema:
        text = declaration.strip()
        if text.startswith("{"):
            return self._json_schema(text)
        if text.startswith("<"):
            # XML schemas have no JSON schema counterpart.
            return {}
        return self.expression(text)

    def _properties(self, properties: Mapping[str, Any]) -> tuple[JsonSchema, list[str]]:
        translated: JsonSchema = {}
        required: list[str] = []
        for raw_name, declaration in properties.items():
            name = str(raw_name)
            optional = name.endswith("?")
            if optional:
                name = name[:-1]
            if isinstance(declaration, Mapping) and "required" in declaration:
                optional = not bool(declaration["required"])
            translated[name] = self.translate(declaration)
            if not optional:
                required.append(name)
        return translated, required

    def translate(self, declaration: Any) -> JsonSchema:
        """Translate a RAML type declaration (string, mapping or ``None``)."""
        if declaration is None:
            return {"type": "string"}
        if isinstance(declaration, str):
            return self._from_string(declaration)
        if not isinstance(declaration, Mapping):
            raise RamlParseError(f"Unsupported type declaration: {declaration!r}")

        base_ref = declaration.get("type", declaration.get("schema"))
        if base_ref is None:
            if "properties" in declaration:
                base_ref = "object"
            elif "items" in declaration:
                base_ref = "array"
            else:
                base_ref = "string"

        if isinstance(base_ref, list):
            base: JsonSchema = {"allOf": [self.translate(item) for item in base_ref]}
        elif isinstance(base_ref, Mapping):
            base = self.translate(base_ref)
        else:
            base = self._from_string(str(base_ref))

        own: JsonSchema = {}
        properties = declaration.get("properties")
        if isinstance(properties, Mapping):
            translated, required = self._properties(properties)
            own["type"] = "object"
            own["properties"] = translated
            if required:
                own["required"] = required
        if "items" in declaration:
            own["type"] = "array"
            own["items"] = self.translate(declaration["items"])
        for facet, keyword in COPIED_FACETS.items():
            if facet in declaration:
                own[keyword] = declaration[facet]
        if isinstance(own.get("additionalProperties"), Mapping):
            own["additionalProperties"] = self.translate(own["additionalProperties"])
        found, example = first_example(declaration)
        if found:
            own["example"] = example
        own.update(annotation_extensions(declaration))

        if ("$ref" in base or "allOf" in base) and "properties" in own:
            structural = {
                key: own.pop(key)
                for key in ("type", "properties", "required")
                if key in own
            }
            parents = base["allOf"] if "allOf" in base and "$ref" not in base else [base]
            return {"allOf": [*parents, structural], **own}
        return _with_siblings(base, own)

    def definitions(self, declarations: Mapping[str, Any]) -> dict[str, JsonSchema]:
        """Translate a ``types``/``schemas`` section into OAS2 ``definitions``."""
        return {str(name): self.translate(value) for name, value in declarations.items()}
