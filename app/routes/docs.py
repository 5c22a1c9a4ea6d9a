"""Routes serving the OpenAPI document and Swagger UI of the validation API."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

import azure.functions as func
from azure_functions_openapi.openapi import get_openapi_json
from azure_functions_openapi.swagger_ui import render_swagger_ui

from app import app
from app.constants import API_DESCRIPTION, API_ROUTE_PREFIX, API_TAGS, API_TITLE, API_VERSION

_DEFS_REF = "#/$defs/"
_COMPONENTS_REF = "#/components/schemas/"


def _collect_schema_defs(node: Any, schemas: Dict[str, Any]) -> Any:
    """Move nested pydantic ``$defs`` into ``schemas`` and rewrite their references."""

    if isinstance(node, list):
        return [_collect_schema_defs(item, schemas) for item in node]
    if not isinstance(node, dict):
        return node

    for name, schema in (node.get("$defs") or {}).items():
        schemas.setdefault(name, _collect_schema_defs(schema, schemas))

    rewritten: Dict[str, Any] = {}
    for key, value in node.items():
        if key == "$defs":
            continue
        if key == "$ref" and isinstance(value, str) and value.startswith(_DEFS_REF):
            rewritten[key] = _COMPONENTS_REF + value[len(_DEFS_REF):]
        else:
            rewritten[key] = _collect_schema_defs(value, schemas)
    return rewritten


def _normalise_openapi_spec(raw_json: str) -> str:
    spec = json.loads(raw_json)
    schemas: Dict[str, Any] = {}
    spec = _collect_schema_defs(spec, schemas)

    components = spec.setdefault("components", {}).setdefault("schemas", {})
    for name, schema in schemas.items():
        components.setdefault(name, schema)

    spec.setdefault("info", {}).setdefault("description", API_DESCRIPTION)
    known_tags = {tag.get("name") for tag in spec.setdefault("tags", [])}
    spec["tags"].extend(
        {"name": name, "description": description} for name, description in API_TAGS.items() if name not in known_tags
    )

    servers = spec.setdefault("servers", [])
    if not any(server.get("url") == API_ROUTE_PREFIX for server in servers):
        # Swagger UI must call the routes under the Functions host prefix
        servers.append({"url": API_ROUTE_PREFIX})
    return json.dumps(spec)


@app.function_name(name="openapi_spec")
@app.route(route="openapi.json", methods=[func.HttpMethod.GET], auth_level=func.AuthLevel.ANONYMOUS)
def openapi_spec(req: func.HttpRequest) -> func.HttpResponse:
    """Serve the generated OpenAPI document."""

    logging.info("[openapi_spec] Serving OpenAPI document.")
    normalised = _normalise_openapi_spec(get_openapi_json(title=API_TITLE, version=API_VERSION))
    return func.HttpResponse(normalised, mimetype="application/json", status_code=200)


@app.function_name(name="swagger_ui")
@app.route(route="docs", methods=[func.HttpMethod.GET], auth_level=func.AuthLevel.ANONYMOUS)
def swagger_ui(req: func.HttpRequest) -> func.HttpResponse:
    return render_swagger_ui(title=f"{API_TITLE} Swagger UI", openapi_url=f"{API_ROUTE_PREFIX}/openapi.json")
