"""Unit tests for Swagger 2.0 document assembly."""

from __future__ import annotations

from raml_oas_converter.oas2.builder import build_swagger
from raml_oas_converter.raml.loader import load_raml


def _build(body: str, version: str = "1.0") -> dict[str, object]:
    return build_swagger(load_raml(f"#%RAML {version}\n{body}"))


def test_minimal_document() -> None:
    """A title-only API yields the Swagger skeleton."""
    document = _build("title: Empty\n")
    assert document == {
        "swagger": "2.0",
        "info": {"title": "Empty", "version": ""},
        "paths": {},
    }


def test_info_and_server_fields() -> None:
    """Map version, description, baseUri, protocols and media types."""
    document = _build(
        "title: Demo\n"
        "version: v3\n"
        "description: Demo API\n"
        "baseUri: https://{tenant}.example.com/{version}/\n"
        "baseUriParameters:\n"
        "  tenant:\n"
        "    default: acme\n"
        "protocols: [HTTP, HTTPS]\n"
        "mediaType: [application/json, application/xml]\n"
        "(owner): platform\n"
    )

    assert document["info"] == {
        "title": "Demo",
        "version": "v3",
        "description": "Demo API",
    }
    assert document["host"] == "acme.example.com"
    assert document["basePath"] == "/v3"
    assert document["schemes"] == ["http", "https"]
    assert document["consumes"] == ["application/json", "application/xml"]
    assert document["produces"] == ["application/json", "application/xml"]
    assert document["x-owner"] == "platform"


def test_nested_resources_and_path_parameters() -> None:
    """Nested resources flatten into full paths with path-level parameters."""
    document = _build(
        "title: Nested\n"
        "/users:\n"
        "  get:\n"
        "  /{userId}:\n"
        "    uriParameters:\n"
        "      userId:\n"
        "        type: integer\n"
        "        description: User id\n"
        "    get:\n"
        "    /posts/{postId}:\n"
        "      delete:\n"
    )
    paths = document["paths"]

    assert list(paths) == ["/users", "/users/{userId}", "/users/{userId}/posts/{postId}"]
    assert paths["/users"]["get"]["operationId"] == "get_users"
    assert paths["/users/{userId}"]["parameters"] == [
        {
            "name": "userId",
            "in": "path",
            "required": True,
            "type": "integer",
            "description": "User id",
        }
    ]
    deepest = paths["/users/{userId}/posts/{postId}"]
    assert [param["name"] for param in deepest["parameters"]] == ["userId", "postId"]
    assert deepest["parameters"][1]["type"] == "string"
    assert deepest["delete"]["operationId"] == "delete_users_userId_posts_postId"
    assert deepest["delete"]["responses"] == {"default": {"description": ""}}


def test_resources_without_methods_are_not_emitted() -> None:
    """Only resources with operations get a path item."""
    document = _build("title: T\n/a:\n  /b:\n    get:\n")
    assert list(document["paths"]) == ["/a/b"]


def test_query_and_header_parameters() -> None:
    """RAML 1.0 parameters are required unless stated otherwise."""
    document = _build(
        "title: Params\n"
        "/search:\n"
        "  get:\n"
        "    displayName: Search\n"
        "    queryParameters:\n"
        "      q: string\n"
        "      tags:\n"
        "        type: string[]\n"
        "        required: false\n"
        "      page?:\n"
        "        type: integer\n"
        "        example: 2\n"
        "    headers:\n"
        "      X-Trace: string\n"
    )
    operation = document["paths"]["/search"]["get"]

    assert operation["summary"] == "Search"
    assert operation["parameters"] == [
        {"name": "q", "in": "query", "required": True, "type": "string"},
        {
            "name": "tags",
            "in": "query",
            "required": False,
            "type": "array",
            "items": {"type": "string"},
            "collectionFormat": "multi",
        },
        {
            "name": "page",
            "in": "query",
            "required": False,
            "type": "integer",
            "x-example": 2,
        },
        {"name": "X-Trace", "in": "header", "required": True, "type": "string"},
    ]


def test_raml08_parameters_are_optional_by_default() -> None:
    """RAML 0.8 named parameters default to ``required: false``."""
    document = _build(
        "title: Old\n"
        "/items:\n"
        "  get:\n"
        "    queryParameters:\n"
        "      q:\n"
        "        type: string\n"
        "        repeat: true\n",
        version="0.8",
    )
    parameter = document["paths"]["/items"]["get"]["parameters"][0]
    assert parameter["required"] is False
    assert parameter["type"] == "array"
    assert parameter["collectionFormat"] == "multi"


def test_body_parameter_and_operation_media_types() -> None:
    """JSON bodies become a single ``body`` parameter."""
    document = _build(
        "title: Bodies\n"
        "mediaType: application/json\n"
        "types:\n"
        "  Pet:\n"
        "    properties:\n"
        "      name: string\n"
        "/pets:\n"
        "  post:\n"
        "    body:\n"
        "      description: New pet\n"
        "      type: Pet\n"
        "  put:\n"
        "    body:\n"
        "      application/xml:\n"
        "        type: Pet\n"
    )
    pets = document["paths"]["/pets"]

    assert pets["post"]["parameters"] == [
        {
            "name": "body",
            "in": "body",
            "required": True,
            "schema": {
                "allOf": [{"$ref": "#/definitions/Pet"}],
                "description": "New pet",
            },
            "description": "New pet",
        }
    ]
    assert "consumes" not in pets["post"]
    assert pets["put"]["consumes"] == ["application/xml"]
    assert document["definitions"] == {
        "Pet": {
            "type": "object",
            "properties": {"name": {"type": "string"}},
            "required": ["name"],
        }
    }


def test_form_bodies_become_form_data_parameters() -> None:
    """Form media types map their properties to ``formData`` parameters."""
    document = _build(
        "title: Forms\n"
        "/upload:\n"
        "  post:\n"
        "    body:\n"
        "      multipart/form-data:\n"
        "        properties:\n"
        "          file:\n"
        "            type: file\n"
        "            description: Payload\n"
        "          note?: string\n"
    )
    operation = document["paths"]["/upload"]["post"]

    assert operation["consumes"] == ["multipart/form-data"]
    assert operation["parameters"] == [
        {
            "name": "file",
            "in": "formData",
            "required": True,
            "type": "file",
            "description": "Payload",
        },
        {"name": "note", "in": "formData", "required": False, "type": "string"},
    ]


def test_responses_with_schema_examples_and_headers() -> None:
    """Responses carry description, schema, per-media-type examples and headers."""
    document = _build(
        "title: Responses\n"
        "/status:\n"
        "  get:\n"
        "    responses:\n"
        "      200:\n"
        "        description: Current status\n"
        "        headers:\n"
        "          X-Rate-Limit?: integer\n"
        "        body:\n"
        "          application/json:\n"
        "            type: object\n"
        "            example: {ok: true}\n"
        "      503:\n"
    )
    operation = document["paths"]["/status"]["get"]

    assert operation["produces"] == ["application/json"]
    assert operation["responses"] == {
        "200": {
            "description": "Current status",
            "schema": {"type": "object", "example": {"ok": True}},
            "examples": {"application/json": {"ok": True}},
            "headers": {"X-Rate-Limit": {"type": "integer"}},
        },
        "503": {"description": ""},
    }


def test_security_and_deprecation() -> None:
    """Root and method ``securedBy`` map to security requirements."""
    document = _build(
        "title: Secure\n"
        "securitySchemes:\n"
        "  basic:\n"
        "    type: Basic Authentication\n"
        "securedBy: [basic]\n"
        "/open:\n"
        "  get:\n"
        "    securedBy: [null]\n"
        "    deprecated: true\n"
        "    protocols: [HTTPS]\n"
    )

    assert document["securityDefinitions"] == {"basic": {"type": "basic"}}
    assert document["security"] == [{"basic": []}]
    operation = document["paths"]["/open"]["get"]
    assert operation["security"] == [{}]
    assert operation["deprecated"] is True
    assert operation["schemes"] == ["https"]


def test_operation_ids_are_unique() -> None:
    """Colliding operation ids get a numeric suffix."""
    document = _build("title: Ids\n/a-b:\n  get:\n/a_b:\n  get:\n")
    assert document["paths"]["/a-b"]["get"]["operationId"] == "get_ab"
    assert document["paths"]["/a_b"]["get"]["operationId"] == "get_ab_2"


def test_empty_version_is_not_rendered_into_base_path() -> None:
    """A blank ``version`` leaves no ``None`` segment in the base path."""
    document = _build("title: Blank\nversion:\nbaseUri: http://x.com/{version}/api\n")

    assert document["info"]["version"] == ""
    assert document["host"] == "x.com"
    assert document["basePath"] == "/api"


def test_named_scalar_types_keep_facets_on_parameters() -> None:
    """Parameters typed with a user-defined scalar copy its facets inline."""
    document = _build(
        "title: Facets\n"
        "types:\n"
        "  Status:\n"
        "    type: string\n"
        "    enum: [a, b]\n"
        "  Code:\n"
        "    type: Status\n"
        "    pattern: ^[ab]$\n"
        "/items:\n"
        "  get:\n"
        "    queryParameters:\n"
        "      status: Status\n"
        "      codes: Code[]\n"
        "    headers:\n"
        "      X-Status:\n"
        "        type: Status\n"
        "        description: Filter\n"
    )
    parameters = document["paths"]["/items"]["get"]["parameters"]

    assert parameters == [
        {
            "name": "status",
            "in": "query",
            "required": True,
            "type": "string",
            "enum": ["a", "b"],
        },
        {
            "name": "codes",
            "in": "query",
            "required": True,
            "type": "array",
            "items": {"type": "string", "enum": ["a", "b"], "pattern": "^[ab]$"},
            "collectionFormat": "multi",
        },
        {
            "name": "X-Status",
            "in": "header",
            "required": True,
            "type": "string",
            "enum": ["a", "b"],
            "description": "Filter",
        },
    ]
    assert document["definitions"]["Status"] == {"type": "string", "enum": ["a", "b"]}
