"""Swagger 2.0 document assembly from a parsed RAML API."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from raml_oas_converter.oas2.security import security_definitions, security_requirements
from raml_oas_converter.raml.datatypes import (
    DEFINITIONS_PREFIX,
    SchemaTranslator,
    annotation_extensions,
    first_example,
)
from raml_oas_converter.raml.loader import RamlApi
from raml_oas_converter.raml.templates import HTTP_METHODS, TemplateExpander
from raml_oas_converter.types import Document, JsonSchema

logger = logging.getLogger(__name__)

SWAGGER_VERSION = "2.0"
DEFAULT_MEDIA_TYPE = "application/json"
FORM_MEDIA_TYPES = {"application/x-www-form-urlencoded", "multipart/form-data"}
SUPPORTED_SCHEMES = {"http", "https", "ws", "wss"}
PARAMETER_KEYWORDS = {
    "type",
    "format",
    "items",
    "collectionFormat",
    "default",
    "maximum",
    "exclusiveMaximum",
    "minimum",
    "exclusiveMinimum",
    "maxLength",
    "minLength",
    "pattern",
    "maxItems",
    "minItems",
    "uniqueItems",
    "enum",
    "multipleOf",
    "description",
}
ITEMS_KEYWORDS = PARAMETER_KEYWORDS - {"description"}
BODY_TYPE_KEYS = {"type", "schema", "properties", "items"}

_URI_PARAMETER = re.compile(r"\{([^}/]+)\}")
_NON_WORD = re.compile(r"[^A-Za-z0-9]+")
_REPEATED_SLASHES = re.compile(r"/{2,}")


def _media_type_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(item) for item in value]
    return [str(value)]


def _primitive(schema: JsonSchema, keywords: set[str]) -> dict[str, Any]:
    """Reduce a JSON schema to what Swagger 2.0 allows on non-body parameters."""
    result = {
        key: value
        for key, value in schema.items()
        if key in keywords or key.startswith("x-")
    }
    if result.get("type") in (None, "object") or "$ref" in schema:
        result["type"] = "string"
    if result["type"] == "array":
        items = schema.get("items")
        item_schema = items if isinstance(items, Mapping) else {}
        result["items"] = _primitive(item_schema, ITEMS_KEYWORDS)
    return result


def _is_file(schema: JsonSchema) -> bool:
    return schema.get("type") == "string" and schema.get("format") == "binary"


class Oas2DocumentBuilder:
    """Assemble a Swagger 2.0 document from a :class:`RamlApi`.

    Parameters
    ----------
    api : RamlApi
        Parsed RAML definition with libraries merged in.
    """

    def __init__(self, api: RamlApi) -> None:
        self._api = api
        self._root = api.root
        self._types = {**api.section("schemas"), **api.section("types")}
        self._translator = SchemaTranslator(self._types)
        self._definitions = self._translator.definitions(self._types)
        self._expander = TemplateExpander(
            resource_types=api.section("resourceTypes"),
            traits=api.section("traits"),
        )
        self._media_types = _media_type_list(self._root.get("mediaType"))
        self._security = security_definitions(api.section("securitySchemes"))
        self._operation_ids: set[str] = set()

    @property
    def _properties_required_by_default(self) -> bool:
        return self._api.version != "0.8"

    def build(self) -> Document:
        """Return the Swagger 2.0 document as a plain mapping."""
        document: Document = {"swagger": SWAGGER_VERSION, "info": self._info()}
        document.update(self._server())
        if self._media_types:
            document["consumes"] = list(self._media_types)
            document["produces"] = list(self._media_types)

        paths: dict[str, Any] = {}
        self._walk(self._root, "", {}, None, paths)
        document["paths"] = paths

        definitions = self._definitions
        if definitions:
            document["definitions"] = definitions
        if self._security:
            document["securityDefinitions"] = self._security
        security = security_requirements(self._root.get("securedBy"), self._security)
        if security is not None:
            document["security"] = security
        document.update(annotation_extensions(self._root))
        logger.debug(
            "built swagger document with %d paths and %d definitions (libraries: %s)",
            len(paths),
            len(definitions),
            ", ".join(self._api.libraries) or "none",
        )
        return document

    @property
    def _version(self) -> str:
        version = self._root.get("version")
        return "" if version is None else str(version)

    def _info(self) -> dict[str, Any]:
        info: dict[str, Any] = {
            "title": str(self._root["title"]),
            "version": self._version,
        }
        if self._root.get("description"):
            info["description"] = str(self._root["description"])
        return info

    def _server(self) -> dict[str, Any]:
        server: dict[str, Any] = {}
        base_uri = self._root.get("baseUri")
        protocols = [
            str(item).lower() for item in _media_type_list(self._root.get("protocols"))
        ]
        if base_uri:
            uri = str(base_uri).replace("{version}", self._version)
            for name, declaration in (self._root.get("baseUriParameters") or {}).items():
                if isinstance(declaration, Mapping) and "default" in declaration:
                    uri = uri.replace(f"{{{name}}}", str(declaration["default"]))
            if "://" not in uri and not uri.startswith("/"):
                uri = f"//{uri}"
            parts = urlsplit(uri)
            if parts.netloc:
                server["host"] = parts.netloc
            base_path = _REPEATED_SLASHES.sub("/", parts.path).rstrip("/")
            if base_path:
                if not base_path.startswith("/"):
                    base_path = f"/{base_path}"
                server["basePath"] = base_path
            if not protocols and parts.scheme.lower() in SUPPORTED_SCHEMES:
                protocols = [parts.scheme.lower()]
        if protocols:
            server["schemes"] = protocols
        return server

    def _walk(
        self,
        resources: Mapping[str, Any],
        parent_path: str,
        uri_parameters: Mapping[str, Any],
        secured_by: Any,
        paths: dict[str, Any],
    ) -> None:
        for key, value in resources.items():
            if not key.startswith("/"):
                continue
            path = parent_path.rstrip("/") + key
            node = self._expander.expand(value or {}, path)
            declared = {
                str(name).rstrip("?"): declaration
                for name, declaration in (node.get("uriParameters") or {}).items()
            }
            scoped_parameters = {**uri_parameters, **declared}
            resource_secured_by = node.get("securedBy", secured_by)

            operations = {
                method: self._operation(
                    method, path, node[method] or {}, resource_secured_by
                )
                for method in HTTP_METHODS
                if method in node
            }
            if operations:
                item = paths.setdefault(path, {})
                path_parameters = [
                    self._parameter(
                        name, scoped_parameters.get(name), "path", required=True
                    )
                    for name in _URI_PARAMETER.findall(path)
                ]
                if path_parameters:
                    item["parameters"] = path_parameters
                item.update(operations)
            self._walk(node, path, scoped_parameters, resource_secured_by, paths)

    def _operation_id(self, method: str, path: str) -> str:
        slug = "_".join(
            _NON_WORD.sub("", segment) for segment in path.split("/") if segment
        )
        base = f"{method}_{slug}" if slug else method
        candidate = base
        counter = 2
        while candidate in self._operation_ids:
            candidate = f"{base}_{counter}"
            counter += 1
        self._operation_ids.add(candidate)
        return candidate

    def _operation(
        self,
        method: str,
        path: str,
        node: Mapping[str, Any],
        secured_by: Any,
    ) -> dict[str, Any]:
        operation: dict[str, Any] = {"operationId": self._operation_id(method, path)}
        if node.get("displayName"):
            operation["summary"] = str(node["displayName"])
        if node.get("description"):
            operation["description"] = str(node["description"])

        parameters: list[dict[str, Any]] = []
        for name, declaration in (node.get("queryParameters") or {}).items():
            parameters.append(self._parameter(str(name), declaration, "query"))
        for name, declaration in (node.get("headers") or {}).items():
            parameters.append(self._parameter(str(name), declaration, "header"))
        body_parameters, consumes = self._request_body(node.get("body"))
        parameters.extend(body_parameters)
        if parameters:
            operation["parameters"] = parameters
        if consumes and consumes != self._media_types:
            operation["consumes"] = consumes

        responses, produces = self._responses(node.get("responses"))
        if produces and produces != self._media_types:
            operation["produces"] = produces
        operation["responses"] = responses

        protocols = _media_type_list(node.get("protocols"))
        if protocols:
            operation["schemes"] = [item.lower() for item in protocols]
        security = security_requirements(
            node.get("securedBy", secured_by), self._security
        )
        if security is not None:
            operation["security"] = security
        if node.get("deprecated") is True:
            operation["deprecated"] = True
        operation.update(annotation_extensions(node))
        return operation

    def _inline_refs(
        self, schema: JsonSchema, seen: frozenset[str] = frozenset()
    ) -> JsonSchema:
        """Copy referenced definitions into ``schema``.

        Non-body parameters cannot point at ``definitions``, so a named
        scalar type only keeps its facets when it is inlined.
        """
        ref = schema.get("$ref")
        if isinstance(ref, str) and ref.startswith(DEFINITIONS_PREFIX):
            name = ref[len(DEFINITIONS_PREFIX) :]
            target = self._definitions.get(name)
            if target is None or name in seen:
                return schema
            siblings = {key: value for key, value in schema.items() if key != "$ref"}
            return {**self._inline_refs(target, seen | {name}), **siblings}
        parents = schema.get("allOf")
        if isinstance(parents, list):
            merged: JsonSchema = {}
            for parent in parents:
                if isinstance(parent, Mapping):
                    merged.update(self._inline_refs(dict(parent), seen))
            siblings = {key: value for key, value in schema.items() if key != "allOf"}
            return {**merged, **siblings}
        items = schema.get("items")
        if isinstance(items, Mapping):
            return {**schema, "items": self._inline_refs(dict(items), seen)}
        return schema

    def _parameter(
        self,
        name: str,
        declaration: Any,
        location: str,
        *,
        required: bool | None = None,
    ) -> dict[str, Any]:
        optional = name.endswith("?")
        name = name.rstrip("?")
        if required is None:
            required = self._properties_required_by_default
            if isinstance(declaration, Mapping) and "required" in declaration:
                required = bool(declaration["required"])
            if optional:
                required = False

        schema = self._inline_refs(self._translator.translate(declaration))
        if isinstance(declaration, Mapping) and declaration.get("repeat"):
            schema = {"type": "array", "items": schema}

        parameter: dict[str, Any] = {"name": name, "in": location, "required": required}
        if location == "formData" and _is_file(schema):
            parameter["type"] = "file"
            if schema.get("description"):
                parameter["description"] = schema["description"]
        else:
            primitive = _primitive(schema, PARAMETER_KEYWORDS)
            if primitive["type"] == "array" and location in {"query", "formData"}:
                primitive["collectionFormat"] = "multi"
            parameter.update(primitive)
        if isinstance(declaration, Mapping):
            found, example = first_example(declaration)
            if found:
                parameter["x-example"] = example
        return parameter

    def _bodies(self, body: Any) -> dict[str, Any]:
        """Key a body declaration by media type."""
        if body is None:
            return {}
        if isinstance(body, Mapping) and any("/" in str(key) for key in body):
            return {str(key): value for key, value in body.items()}
        media_types = self._media_types or [DEFAULT_MEDIA_TYPE]
        return {media_type: body for media_type in media_types}

    def _body_schema(self, declaration: Any) -> JsonSchema:
        if declaration is None:
            return {}
        if isinstance(declaration, Mapping) and not BODY_TYPE_KEYS & set(declaration):
            declaration = {**declaration, "type": "any"}
        return self._translator.translate(declaration)

    def _form_parameters(self, declaration: Any) -> list[dict[str, Any]]:
        if not isinstance(declaration, Mapping):
            declaration = {"type": declaration}
        fields = declaration.get("formParameters") or declaration.get("properties")
        type_ref = declaration.get("type")
        if not fields and isinstance(type_ref, str) and isinstance(
            self._types.get(type_ref), Mapping
        ):
            fields = self._types[type_ref].get("properties")
        return [
            self._parameter(str(name), field, "formData")
            for name, field in (fields or {}).items()
        ]

    def _request_body(self, body: Any) -> tuple[list[dict[str, Any]], list[str]]:
        bodies = self._bodies(body)
        if not bodies:
            return [], []
        regular = {
            key: value for key, value in bodies.items() if key not in FORM_MEDIA_TYPES
        }
        if regular:
            declaration = next(iter(regular.values()))
            parameter: dict[str, Any] = {
                "name": "body",
                "in": "body",
                "required": True,
                "schema": self._body_schema(declaration),
            }
            if isinstance(declaration, Mapping) and declaration.get("description"):
                parameter["description"] = str(declaration["description"])
            return [parameter], list(bodies)
        return self._form_parameters(next(iter(bodies.values()))), list(bodies)

    def _header(self, name: str, declaration: Any) -> dict[str, Any]:
        header = self._parameter(name, declaration, "header", required=False)
        for key in ("name", "in", "required", "x-example"):
            header.pop(key, None)
        return header

    def _responses(self, responses: Any) -> tuple[dict[str, Any], list[str]]:
        translated: dict[str, Any] = {}
        produces: list[str] = []
        for code, declaration in (responses or {}).items():
            declaration = declaration or {}
            response: dict[str, Any] = {
                "description": str(declaration.get("description") or "")
            }
            bodies = self._bodies(declaration.get("body"))
            if bodies:
                first = next(iter(bodies.values()))
                if first is not None:
                    response["schema"] = self._body_schema(first)
                examples = {}
                for media_type, body in bodies.items():
                    if isinstance(body, Mapping):
                        found, example = first_example(body)
                        if found:
                            examples[media_type] = example
                if examples:
                    response["examples"] = examples
                produces.extend(key for key in bodies if key not in produces)
            headers = declaration.get("headers") or {}
            if headers:
                response["headers"] = {
                    str(name).rstrip("?"): self._header(str(name), header)
                    for name, header in headers.items()
                }
            response.update(annotation_extensions(declaration))
            translated[str(code)] = response
        if not translated:
            translated["default"] = {"description": ""}
        return translated, produces


def build_swagger(api: RamlApi) -> Document:
    """Convert a parsed RAML API into a Swagger 2.0 document."""
    return Oas2DocumentBuilder(api).build()
