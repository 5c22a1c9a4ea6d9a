"""Centralised imports for route dependencies."""

from __future__ import annotations

import logging
from typing import Iterable

from adapters.terraform_plan import PlanFormatError, iter_resource_configs
from core import validation_rules
from core.config_value import SchemaMismatchError
from core.validation_service import (
    InvalidRequestError,
    PlanReport,
    ValidationReport,
    validate_resource,
    validate_resources,
)

__all__: Iterable[str] = (
    "InvalidRequestError",
    "PlanFormatError",
    "PlanReport",
    "SchemaMismatchError",
    "ValidationReport",
    "iter_resource_configs",
    "logging",
    "validate_resource",
    "validate_resources",
    "validation_rules",
)
