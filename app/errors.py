"""Shared error helpers for HTTP routes."""

from __future__ import annotations

import logging

import azure.functions as func

from .responses import json_message
from .dependencies import InvalidRequestError, PlanFormatError, SchemaMismatchError


def handle_validation_error(exc: Exception, *, log_prefix: str) -> func.HttpResponse:
    if isinstance(exc, (InvalidRequestError, PlanFormatError)):
        return json_message(str(exc), status_code=400)
    if isinstance(exc, SchemaMismatchError):
        # Known value with a shape the resource schema does not allow
        return json_message(f"Configuration does not match the resource schema: {exc}", status_code=400)
    if isinstance(exc, ValueError):
        return json_message(str(exc), status_code=400)
    if isinstance(exc, KeyError):
        return json_message(str(exc.args[0]) if exc.args else "Not found.", status_code=404)

    logging.exception("[%s] Unexpected error", log_prefix)
    return json_message("Error validating configuration.", status_code=500)
