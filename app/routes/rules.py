"""Routes exposing the registered validation rules as JSON."""

from __future__ import annotations

import logging

import azure.functions as func
from azure_functions_openapi.decorator import openapi as openapi_doc

from app import app
from app.constants import EXPAND_DETAILS
from app.models import RuleListResponse, RuleSetResponse
from app.responses import json_message, json_payload
from app.dependencies import validation_rules


def _handle_list_rules(req: func.HttpRequest) -> func.HttpResponse:
    expand = (req.params.get("expand") or "").lower()
    resource_types = list(validation_rules.list_resource_types())

    if expand in EXPAND_DETAILS:
        details = [validation_rules.describe_rules(resource_type) for resource_type in resource_types]
        return json_payload({"rules": details})

    return json_payload({"resourceTypes": resource_types})


def _handle_get_rules(req: func.HttpRequest) -> func.HttpResponse:
    resource_type = (req.route_params.get("resource_type") or "").strip()
    if not resource_type:
        return json_message("Resource type is required.", status_code=400)

    try:
        description = validation_rules.describe_rules(resource_type)
    except KeyError as exc:
        logging.info("[get_validation_rules] Unknown resource type '%s'.", resource_type)
        return json_message(str(exc.args[0]), status_code=404)

    return json_payload(description)


@app.function_name(name="list_validation_rules")
@app.route(route="rules", methods=[func.HttpMethod.GET], auth_level=func.AuthLevel.ANONYMOUS)
@openapi_doc(
    summary="List resource types with validation rules",
    description="Returns the resource types with registered rules. Use expand=details to include the rules.",
    tags=["Validation Rules"],
    parameters=[
        {
            "name": "expand",
            "in": "query",
            "required": False,
            "schema": {"type": "string", "enum": sorted(EXPAND_DETAILS)},
            "description": "Include the rules of every resource type.",
        }
    ],
    response_model=RuleListResponse,
    operation_id="listValidationRules",
    route="/rules",
    method="get",
)
def list_validation_rules(req: func.HttpRequest) -> func.HttpResponse:
    """Return the collection of known resource types."""

    return _handle_list_rules(req)


@app.function_name(name="get_validation_rules")
@app.route(route="rules/{resource_type}", methods=[func.HttpMethod.GET], auth_level=func.AuthLevel.ANONYMOUS)
@openapi_doc(
    summary="Retrieve the rules of a resource type",
    description="Returns the ordered rules, with descriptions and severity overrides, for a resource type.",
    tags=["Validation Rules"],
    response_model=RuleSetResponse,
    operation_id="getValidationRules",
    route="/rules/{resource_type}",
    method="get",
)
def get_validation_rules(req: func.HttpRequest) -> func.HttpResponse:
    """Return the rule details for a single resource type."""

    return _handle_get_rules(req)
