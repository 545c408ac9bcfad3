"""Unit tests for RAML type translation."""

from __future__ import annotations

import pytest

from raml_oas_converter.errors import RamlParseError
from raml_oas_converter.raml.datatypes import (
    SchemaTranslator,
    annotation_extensions,
    first_example,
)


@pytest.fixture
def translator() -> SchemaTranslator:
    return SchemaTranslator(["User", "lib.Address"])


@pytest.mark.parametrize(
    ("expression", "expected"),
    [
        ("string", {"type": "string"}),
        ("datetime", {"type": "string", "format": "date-time"}),
        ("file", {"type": "string", "format": "binary"}),
        ("any", {}),
        ("User", {"$ref": "#/definitions/User"}),
        ("Address", {"$ref": "#/definitions/lib.Address"}),
        ("integer[]", {"type": "array", "items": {"type": "integer"}}),
        ("(User)[]", {"type": "array", "items": {"$ref": "#/definitions/User"}}),
        ("string?", {"type": "string"}),
    ],
)
def test_type_expressions(
    translator: SchemaTranslator, expression: str, expected: dict[str, object]
) -> None:
    """Translate builtin, named, array and optional type expressions."""
    assert translator.expression(expression) == expected


def test_union_maps_to_first_member(translator: SchemaTranslator) -> None:
    """Unions keep their first member and list all members in an extension."""
    assert translator.expression("(string | User)") == {
        "type": "string",
        "x-raml-union": ["string", "User"],
    }
    assert translator.expression("User | nil") == {
        "allOf": [{"$ref": "#/definitions/User"}],
        "x-raml-union": ["User", "nil"],
    }


def test_unknown_type_fails(translator: SchemaTranslator) -> None:
    """Unknown names are parse errors."""
    with pytest.raises(RamlParseError, match="Unknown type 'Ghost'"):
        translator.expression("Ghost")


def test_object_declaration_with_required_properties(
    translator: SchemaTranslator,
) -> None:
    """Properties are required unless marked optional."""
    schema = translator.translate(
        {
            "displayName": "Person",
            "properties": {
                "name": "string",
                "nickname?": "string",
                "age": {"type": "integer", "minimum": 0, "required": False},
                "home": "Address",
            },
        }
    )

    assert schema == {
        "type": "object",
        "title": "Person",
        "properties": {
            "name": {"type": "string"},
            "nickname": {"type": "string"},
            "age": {"type": "integer", "minimum": 0},
            "home": {"$ref": "#/definitions/lib.Address"},
        },
        "required": ["name", "home"],
    }


def test_inheritance_with_properties_uses_all_of(translator: SchemaTranslator) -> None:
    """Extending a named type wraps parent and own structure in ``allOf``."""
    schema = translator.translate(
        {"type": "User", "description": "Admin", "properties": {"level": "integer"}}
    )
    assert schema == {
        "allOf": [
            {"$ref": "#/definitions/User"},
            {
                "type": "object",
                "properties": {"level": {"type": "integer"}},
                "required": ["level"],
            },
        ],
        "description": "Admin",
    }


def test_array_declaration_and_facets(translator: SchemaTranslator) -> None:
    """``items`` and array facets are carried over."""
    schema = translator.translate({"type": "array", "items": "User", "minItems": 1})
    assert schema == {
        "type": "array",
        "items": {"$ref": "#/definitions/User"},
        "minItems": 1,
    }


def test_inline_json_schema_drops_draft_keys(translator: SchemaTranslator) -> None:
    """Inline JSON schemas are parsed and stripped of ``$schema``/``id``."""
    schema = translator.translate(
        '{"$schema": "http://json-schema.org/draft-04/schema#", "id": "x",'
        ' "type": "object"}'
    )
    assert schema == {"type": "object"}


def test_inline_xml_schema_has_no_counterpart(translator: SchemaTranslator) -> None:
    """XML schemas translate to an unconstrained schema."""
    assert translator.translate("<xs:schema/>") == {}


def test_invalid_inline_json_fails(translator: SchemaTranslator) -> None:
    """Broken JSON is reported."""
    with pytest.raises(RamlParseError, match="Invalid inline JSON schema"):
        translator.translate("{not json")


def test_examples_and_annotations(translator: SchemaTranslator) -> None:
    """Copy the first example and map annotations to vendor extensions."""
    schema = translator.translate(
        {"type": "string", "examples": {"a": "first", "b": "second"}, "(internal)": True}
    )
    assert schema == {"type": "string", "example": "first", "x-internal": True}


def test_first_example_unwraps_value_form() -> None:
    """Expanded example declarations yield their ``value``."""
    assert first_example({"example": {"value": 3, "strict": False}}) == (True, 3)
    assert first_example({"example": {"value": 3}}) == (True, {"value": 3})
    assert first_example({}) == (False, None)


def test_annotation_extensions_ignores_plain_keys() -> None:
    """Only parenthesised keys are annotations."""
    assert annotation_extensions({"(a)": 1, "b": 2}) == {"x-a": 1}


def test_definitions_translate_every_declaration(translator: SchemaTranslator) -> None:
    """Each declared type becomes a definition."""
    assert translator.definitions({"Id": "string", "Empty": None}) == {
        "Id": {"type": "string"},
        "Empty": {"type": "string"},
    }
