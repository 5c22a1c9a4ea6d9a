"""Shared orchestrator for validating resource configurations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from core.config_value import ConfigValue, ObjectValue, from_python
from core.diagnostics import Diagnostics
from core.validation_rules import load_rule_set

logger = logging.getLogger(__name__)


class InvalidRequestError(ValueError):
    """Raised when a validation payload is not a resource configuration object."""


@dataclass(frozen=True)
class ResourceConfig:
    """One resource configuration as handed over by a host."""

    address: Optional[str]
    resource_type: str
    config: Any
    unknown: Any = None


@dataclass
class ValidationReport:
    resource_type: str
    address: Optional[str] = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    rules_applied: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return self.diagnostics.has_error()

    @property
    def valid(self) -> bool:
        return not self.has_errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "resourceType": self.resource_type,
            "address": self.address,
            "rulesApplied": list(self.rules_applied),
            "diagnostics": self.diagnostics.to_list(),
        }


@dataclass
class PlanReport:
    resources: List[ValidationReport] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(len(report.diagnostics.errors) for report in self.resources)

    @property
    def warning_count(self) -> int:
        return sum(len(report.diagnostics.warnings) for report in self.resources)

    @property
    def has_errors(self) -> bool:
        return any(report.has_errors for report in self.resources)

    @property
    def valid(self) -> bool:
        return not self.has_errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errorCount": self.error_count,
            "warningCount": self.warning_count,
            "resources": [report.to_dict() for report in self.resources],
        }


def _to_tree(config: Any, unknown: Any) -> ConfigValue:
    if isinstance(config, ConfigValue):
        return config
    try:
        return from_python(config, unknown)
    except TypeError as exc:
        raise InvalidRequestError(str(exc)) from exc


def validate_resource(
    resource_type: str,
    config: Any,
    *,
    address: Optional[str] = None,
    unknown: Any = None,
) -> ValidationReport:
    """Run every rule registered for ``resource_type`` against one configuration.

    Rules run independently in registration order; a rule never sees another
    rule's diagnostics. A null configuration yields an empty report.
    """

    if not resource_type or not str(resource_type).strip():
        raise InvalidRequestError("A resource type is required.")
    normalised_type = str(resource_type).strip().lower()
    report = ValidationReport(resource_type=normalised_type, address=address)

    root = _to_tree(config, unknown)
    if root.is_null:
        logger.debug("Skipping %s: configuration is null", address or normalised_type)
        return report
    if root.is_unknown:
        logger.debug("Skipping %s: configuration is not known yet", address or normalised_type)
        return report
    if not isinstance(root, ObjectValue):
        raise InvalidRequestError("The resource configuration must be an object.")

    rule_set = load_rule_set(normalised_type)
    if rule_set is None:
        logger.debug("No validation rules registered for '%s'", normalised_type)
        return report

    record = rule_set.build(root)
    for item in rule_set.rules:
        report.diagnostics.extend(item(record))
        report.rules_applied.append(item.name)

    if report.has_errors:
        logger.info(
            "Validation of %s found %d error(s)",
            address or normalised_type,
            len(report.diagnostics.errors),
        )
    return report


def validate_resources(configs: Iterable[ResourceConfig]) -> PlanReport:
    """Validate many resources and collect every report before anything is applied."""

    plan = PlanReport()
    for item in configs:
        plan.resources.append(
            validate_resource(item.resource_type, item.config, address=item.address, unknown=item.unknown)
        )
    logger.info(
        "Validated %d resource(s): %d error(s), %d warning(s)",
        len(plan.resources),
        plan.error_count,
        plan.warning_count,
    )
    return plan
