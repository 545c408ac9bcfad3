"""RAML security schemes to Swagger 2.0 security definitions."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

# RAML 1.0 and 0.8 grant names -> Swagger 2.0 OAuth2 flows
OAUTH2_FLOWS = {
    "authorization_code": "accessCode",
    "code": "accessCode",
    "implicit": "implicit",
    "token": "implicit",
    "password": "password",
    "owner": "password",
    "client_credentials": "application",
    "credentials": "application",
}


def _oauth2_definitions(
    name: str, scheme: Mapping[str, Any]
) -> dict[str, dict[str, Any]]:
    settings = scheme.get("settings") or {}
    grants = settings.get("authorizationGrants") or ["authorization_code"]
    if isinstance(grants, str):
        grants = [grants]
    scopes = settings.get("scopes") or []
    if isinstance(scopes, str):
        scopes = [scopes]

    definitions: dict[str, dict[str, Any]] = {}
    for grant in grants:
        flow = OAUTH2_FLOWS.get(str(grant))
        if flow is None:
            logger.warning("skipping unsupported OAuth 2.0 grant %r on %s", grant, name)
            continue
        definition: dict[str, Any] = {"type": "oauth2", "flow": flow}
        if flow in {"accessCode", "implicit"} and settings.get("authorizationUri"):
            definition["authorizationUrl"] = settings["authorizationUri"]
        if flow in {"accessCode", "password", "application"} and settings.get(
            "accessTokenUri"
        ):
            definition["tokenUrl"] = settings["accessTokenUri"]
        definition["scopes"] = {str(scope): "" for scope in scopes}
        if scheme.get("description"):
            definition["description"] = scheme["description"]
        key = name if not definitions else f"{name}_{flow}"
        definitions[key] = definition
    return definitions


def _api_key_definition(name: str, scheme: Mapping[str, Any]) -> dict[str, Any] | None:
    described = scheme.get("describedBy") or {}
    for section, location in (("headers", "header"), ("queryParameters", "query")):
        entries = described.get(section)
        if isinstance(entries, Mapping) and entries:
            param_name = str(next(iter(entries))).rstrip("?")
            definition: dict[str, Any] = {
                "type": "apiKey",
                "name": param_name,
                "in": location,
            }
            if scheme.get("description"):
                definition["description"] = scheme["description"]
            return definition
    logger.warning(
        "skipping security scheme %s: no header or query parameter described", name
    )
    return None


def security_definitions(schemes: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
    """Translate a RAML ``securitySchemes`` section.

    Parameters
    ----------
    schemes : Mapping[str, Any]
        Security schemes keyed by name.

    Returns
    -------
    dict[str, dict[str, Any]]
        Swagger ``securityDefinitions``; schemes without a Swagger 2.0
        counterpart (OAuth 1.0, Digest) are skipped with a warning.
    """
    definitions: dict[str, dict[str, Any]] = {}
    for name, scheme in schemes.items():
        if not isinstance(scheme, Mapping):
            logger.warning("skipping malformed security scheme %s", name)
            continue
        kind = str(scheme.get("type", ""))
        if kind == "OAuth 2.0":
            definitions.update(_oauth2_definitions(name, scheme))
        elif kind == "Basic Authentication":
            definition: dict[str, Any] = {"type": "basic"}
            if scheme.get("description"):
                definition["description"] = scheme["description"]
            definitions[name] = definition
        elif kind == "Pass Through" or kind.startswith("x-"):
            api_key = _api_key_definition(name, scheme)
            if api_key is not None:
                definitions[name] = api_key
        else:
            logger.warning("skipping security scheme %s of unsupported type %r", name, kind)
    return definitions


def _grant_variants(name: str, definitions: Mapping[str, Any]) -> list[str]:
    """``name`` followed by the per-grant definitions derived from it."""
    base = definitions[name]
    if not isinstance(base, Mapping) or base.get("type") != "oauth2":
        return [name]
    return [name] + [
        key
        for key, definition in definitions.items()
        if key != name
        and isinstance(definition, Mapping)
        and definition.get("type") == "oauth2"
        and key == f"{name}_{definition.get('flow')}"
    ]


def security_requirements(
    secured_by: Any,
    definitions: Mapping[str, Any],
) -> list[dict[str, list[str]]] | None:
    """Translate ``securedBy`` into a Swagger security requirement list.

    ``null`` entries become ``{}`` (anonymous access allowed). References to
    schemes that were not translated are dropped. An OAuth 2.0 scheme with
    several grants contributes one alternative per grant definition.
    """
    if secured_by is None:
        return None
    entries = secured_by if isinstance(secured_by, list) else [secured_by]
    requirements: list[dict[str, list[str]]] = []
    for entry in entries:
        if entry is None or entry == "null":
            requirements.append({})
            continue
        scopes: list[str] = []
        if isinstance(entry, Mapping):
            name, params = next(iter(entry.items()))
            if isinstance(params, Mapping):
                scopes = [str(scope) for scope in params.get("scopes") or []]
        else:
            name = str(entry)
        if name not in definitions:
            logger.warning("dropping securedBy reference to untranslated scheme %s", name)
            continue
        requirements.extend(
            {variant: list(scopes)} for variant in _grant_variants(name, definitions)
        )
    return requirements
