"""HTTP routes validating resource configurations and Terraform plans."""

from __future__ import annotations

import logging

import azure.functions as func
from azure_functions_openapi.decorator import openapi as openapi_doc
from pydantic import ValidationError

from app import app
from app.errors import handle_validation_error
from app.models import (
    PlanValidationResponse,
    ResourceValidationRequest,
    ResourceValidationResponse,
)
from app.responses import build_report_response, json_message
from app.dependencies import iter_resource_configs, validate_resource, validate_resources


def _handle_validate_resource(req: func.HttpRequest) -> func.HttpResponse:
    """Core implementation shared with tests for single resource validation."""

    logging.info("[validate_resource] Validating resource configuration.")

    resource_type = (req.route_params.get("resource_type") or "").strip()
    if not resource_type:
        return json_message("Resource type is required.", status_code=400)

    try:
        payload = req.get_json()
    except ValueError:
        return json_message("Invalid JSON payload.", status_code=400)

    try:
        request = ResourceValidationRequest.model_validate(payload)
    except ValidationError as exc:
        return json_message(f"Invalid validation request: {exc.errors()[0]['msg']}", status_code=400)

    try:
        report = validate_resource(
            resource_type,
            request.config,
            address=request.address,
            unknown=request.unknown,
        )
        return build_report_response(report)
    except Exception as exc:  # pragma: no cover - centralised error handling
        return handle_validation_error(exc, log_prefix="validate_resource")


@app.function_name(name="validate_resource")
@app.route(route="validate/{resource_type}", methods=[func.HttpMethod.POST])
@openapi_doc(
    summary="Validate one resource configuration",
    description=(
        "Runs every rule registered for the resource type against the supplied configuration "
        "and returns the resulting diagnostics. Values flagged in 'unknown' are treated as "
        "known after apply and never produce errors."
    ),
    tags=["Validation"],
    request_model=ResourceValidationRequest,
    response_model=ResourceValidationResponse,
    operation_id="validateResource",
    route="/validate/{resource_type}",
    method="post",
)
def validate_resource_route(req: func.HttpRequest) -> func.HttpResponse:
    """Validate a single resource configuration."""

    return _handle_validate_resource(req)


def _handle_validate_plan(req: func.HttpRequest) -> func.HttpResponse:
    """Core implementation shared with tests for plan validation."""

    logging.info("[validate_plan] Validating Terraform plan.")

    try:
        plan = req.get_json()
    except ValueError:
        return json_message("Invalid JSON payload.", status_code=400)

    try:
        report = validate_resources(list(iter_resource_configs(plan)))
        return build_report_response(report)
    except Exception as exc:  # pragma: no cover - centralised error handling
        return handle_validation_error(exc, log_prefix="validate_plan")


@app.function_name(name="validate_plan")
@app.route(route="validate", methods=[func.HttpMethod.POST])
@openapi_doc(
    summary="Validate a Terraform plan",
    description=(
        "Accepts the output of 'terraform show -json' and validates the planned configuration "
        "of every created or updated resource. All diagnostics are returned together."
    ),
    tags=["Validation"],
    response_model=PlanValidationResponse,
    operation_id="validatePlan",
    route="/validate",
    method="post",
)
def validate_plan_route(req: func.HttpRequest) -> func.HttpResponse:
    """Validate every resource change of a Terraform plan."""

    return _handle_validate_plan(req)
