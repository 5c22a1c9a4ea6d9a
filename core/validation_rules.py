"""Registration of validation rules per resource type."""

from __future__ import annotations

import importlib
import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Sequence, Type

from core.config_value import ObjectValue
from core.diagnostics import Diagnostics, Severity
from core.models import ResourceModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rule:
    """Named pure check over one resource record."""

    name: str
    description: str
    check: Callable[[Any], Diagnostics]
    severity: Optional[Severity] = None

    def __call__(self, resource: Any) -> Diagnostics:
        diagnostics = self.check(resource)
        if self.severity is None:
            return diagnostics
        return Diagnostics(item.with_severity(self.severity) for item in diagnostics)

    def with_severity(self, severity: Severity) -> "Rule":
        return replace(self, severity=severity)

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {"name": self.name, "description": self.description}
        if self.severity is not None:
            data["severity"] = self.severity.value
        return data


def rule(name: str, description: str) -> Callable[[Callable[[Any], Diagnostics]], Rule]:
    """Decorator turning a check function into a :class:`Rule`."""

    def decorator(check: Callable[[Any], Diagnostics]) -> Rule:
        return Rule(name=name, description=description, check=check)

    return decorator


@dataclass(frozen=True)
class ResourceRuleSet:
    """Ordered rules for one resource type plus the record they operate on."""

    resource_type: str
    model: Type[ResourceModel]
    rules: Sequence[Rule] = ()

    def build(self, root: ObjectValue) -> ResourceModel:
        return self.model.from_config(root)

    def rule_names(self) -> Sequence[str]:
        return tuple(item.name for item in self.rules)

    def to_dict(self) -> Dict[str, object]:
        return {
            "resourceType": self.resource_type,
            "rules": [item.to_dict() for item in self.rules],
        }


class ValidationRuleProvider(Protocol):
    """Contract for pluggable rule providers."""

    def get_rule_set(self, resource_type: str) -> Optional[ResourceRuleSet]:
        """Return the rule set registered for the resource type, if any."""

    def list_resource_types(self) -> Sequence[str]:
        """Enumerate resource types with registered rules."""


class DictionaryRuleProvider:
    """In-memory provider useful for tests and composed providers."""

    def __init__(self, rule_sets: Iterable[ResourceRuleSet]) -> None:
        self._rule_sets: Dict[str, ResourceRuleSet] = {
            rule_set.resource_type.lower(): rule_set for rule_set in rule_sets
        }

    def get_rule_set(self, resource_type: str) -> Optional[ResourceRuleSet]:
        return self._rule_sets.get(resource_type.lower())

    def list_resource_types(self) -> Sequence[str]:
        return tuple(sorted(self._rule_sets))


_RULES_PATH_ENV = "VALIDATION_RULES_PATH"
_PROVIDER_ENV = "VALIDATION_RULE_PROVIDER"


def _load_default_provider() -> ValidationRuleProvider:
    from providers.bunnynet_rules import BunnyNetRuleProvider  # Local import to avoid circular dependency

    provider: ValidationRuleProvider = BunnyNetRuleProvider()
    rules_path = os.environ.get(_RULES_PATH_ENV)
    if rules_path:
        from providers.json_rules import JsonRuleProvider

        provider = JsonRuleProvider(rules_path=rules_path, base=provider)
    return provider


def _load_provider_from_env() -> Optional[ValidationRuleProvider]:
    provider_path = os.environ.get(_PROVIDER_ENV)
    if not provider_path:
        return None

    try:
        module_path, _, attr_name = provider_path.rpartition(".")
        if not module_path or not attr_name:
            raise ValueError(f"{_PROVIDER_ENV} must be in 'module.attr' format")

        module = importlib.import_module(module_path)
        factory = getattr(module, attr_name)
        provider = factory() if callable(factory) else factory
        if not hasattr(provider, "get_rule_set"):
            raise TypeError("Provider must define a 'get_rule_set' method")
        return provider  # type: ignore[return-value]
    except Exception:  # pragma: no cover - defensive logging only
        logger.exception("Failed to load validation rule provider from environment")
        return None


_provider: Optional[ValidationRuleProvider] = None


def set_rule_provider(provider: ValidationRuleProvider) -> None:
    """Override the active rule provider at runtime."""

    global _provider
    _provider = provider


def reset_rule_provider() -> None:
    """Drop the active provider so the next lookup reloads it from the environment."""

    global _provider
    _provider = None


def get_rule_provider() -> ValidationRuleProvider:
    """Return the currently active rule provider, loading it on first use."""

    global _provider
    if _provider is None:
        _provider = _load_provider_from_env() or _load_default_provider()
    return _provider


def load_rule_set(resource_type: str) -> Optional[ResourceRuleSet]:
    """Return the rule set for the requested resource type, or ``None``."""

    return get_rule_provider().get_rule_set(resource_type)


def list_resource_types() -> Sequence[str]:
    """Return the resource types known to the active provider."""

    seen: set[str] = set()
    ordered: List[str] = []
    for item in get_rule_provider().list_resource_types():
        normalised = str(item).lower()
        if normalised not in seen:
            seen.add(normalised)
            ordered.append(normalised)
    return tuple(ordered)


def describe_rules(resource_type: str) -> Dict[str, object]:
    """Provide a JSON-compatible description of the rules for a resource type."""

    normalised = resource_type.strip().lower()
    rule_set = load_rule_set(normalised)
    if rule_set is None:
        raise KeyError(f"Unknown resource type '{resource_type}'. Known types: {sorted(list_resource_types())}")
    return rule_set.to_dict()
