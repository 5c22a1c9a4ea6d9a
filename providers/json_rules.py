"""Rule provider that layers JSON overrides on top of another provider."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from core.attribute_path import AttributePath
from core.config_value import CollectionValue, ConfigValue, ScalarValue
from core.diagnostics import Diagnostics, Severity
from core.models import ResourceModel
from core.validation_rules import ResourceRuleSet, Rule, ValidationRuleProvider

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _RuleLayer:
    path: Path
    priority: int
    enabled: bool
    name: str
    resources_config: Dict[str, Mapping[str, Any]]


@dataclass(slots=True)
class _ResourceOverride:
    disabled: set = field(default_factory=set)
    severity: Dict[str, Severity] = field(default_factory=dict)
    validators: Dict[str, Rule] = field(default_factory=dict)


class JsonRuleProvider:
    """Apply JSON rule layers (disable, re-grade or add rules) over a base provider."""

    def __init__(
        self,
        *,
        rules_path: str | Path,
        base: Optional[ValidationRuleProvider] = None,
    ) -> None:
        self._path = Path(rules_path)
        if not self._path.exists():
            raise FileNotFoundError(f"Validation rules path '{self._path}' does not exist.")
        if base is None:
            from providers.bunnynet_rules import BunnyNetRuleProvider

            base = BunnyNetRuleProvider()
        self._base = base
        self._rule_sets: Dict[str, ResourceRuleSet] = {}
        self.reload()

    def reload(self) -> None:
        """Reload rule layers from disk."""

        layers = _load_rule_layers(self._path)
        if not layers:
            raise ValueError(f"No enabled rule layers found under '{self._path}'.")

        overrides: Dict[str, _ResourceOverride] = {}
        for layer in layers:
            logger.debug("Applying rule layer '%s' from %s", layer.name, layer.path)
            for key, config in layer.resources_config.items():
                override = overrides.setdefault(key, _ResourceOverride())
                _merge_override(override, config, source=layer.path)

        rule_sets: Dict[str, ResourceRuleSet] = {}
        for resource_type in self._base.list_resource_types():
            rule_set = self._base.get_rule_set(resource_type)
            if rule_set is not None:
                rule_sets[resource_type.lower()] = rule_set

        for key, override in overrides.items():
            rule_set = rule_sets.get(key) or ResourceRuleSet(resource_type=key, model=ResourceModel)
            rule_sets[key] = _apply_override(rule_set, override)

        self._rule_sets = rule_sets

    def get_rule_set(self, resource_type: str) -> Optional[ResourceRuleSet]:
        return self._rule_sets.get(resource_type.lower())

    def list_resource_types(self) -> Sequence[str]:
        return tuple(sorted(self._rule_sets))


def _merge_override(override: _ResourceOverride, config: Mapping[str, Any], *, source: Path) -> None:
    disabled = config.get("disabled_rules") or ()
    if isinstance(disabled, (str, bytes)) or not isinstance(disabled, Iterable):
        raise ValueError(f"'disabled_rules' in '{source}' must be an array of rule names.")
    override.disabled.update(str(name) for name in disabled)

    severity = config.get("severity") or {}
    if not isinstance(severity, Mapping):
        raise ValueError(f"'severity' in '{source}' must map rule names to 'error' or 'warning'.")
    for name, level in severity.items():
        try:
            override.severity[str(name)] = Severity(str(level).lower())
        except ValueError:
            raise ValueError(f"Unknown severity '{level}' for rule '{name}' in '{source}'.") from None

    for rule in _build_validators(config.get("validators")):
        override.validators[rule.name] = rule


def _apply_override(rule_set: ResourceRuleSet, override: _ResourceOverride) -> ResourceRuleSet:
    rules: List[Rule] = [item for item in rule_set.rules if item.name not in override.validators]
    rules.extend(override.validators.values())

    known = {item.name for item in rules}
    for name in sorted((override.disabled | set(override.severity)) - known):
        logger.warning("Rule '%s' is not registered for '%s'", name, rule_set.resource_type)

    effective: List[Rule] = []
    for item in rules:
        if item.name in override.disabled:
            continue
        level = override.severity.get(item.name)
        effective.append(item.with_severity(level) if level is not None else item)
    return replace(rule_set, rules=tuple(effective))


def _load_rule_layers(path: Path) -> list[_RuleLayer]:
    if path.is_dir():
        candidates = sorted(file for file in path.glob("*.json") if file.is_file())
        layers = [_parse_rule_layer(candidate) for candidate in candidates]
    else:
        layers = [_parse_rule_layer(path)]

    enabled_layers = [layer for layer in layers if layer.enabled]
    enabled_layers.sort(key=lambda layer: (layer.priority, layer.path.name))
    return enabled_layers


def _parse_rule_layer(path: Path) -> _RuleLayer:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, Mapping):
        raise ValueError(f"Rule file '{path}' must contain a JSON object at the top level.")

    metadata = data.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        raise ValueError(f"Rule file '{path}' must contain an object for 'metadata'.")

    priority = int(metadata.get("priority", 0))
    enabled = bool(metadata.get("enabled", True))
    name = str(metadata.get("name") or path.stem)

    resources_config_raw = data.get("resources") or {}
    if not isinstance(resources_config_raw, Mapping):
        raise ValueError(f"'resources' in '{path}' must be an object mapping resource types to definitions.")

    resources_config: Dict[str, Mapping[str, Any]] = {}
    for key, value in resources_config_raw.items():
        if not isinstance(value, Mapping):
            raise ValueError(f"Rule definition for '{key}' in '{path}' must be an object.")
        resources_config[str(key).lower()] = value

    return _RuleLayer(
        path=path,
        priority=priority,
        enabled=enabled,
        name=name,
        resources_config=resources_config,
    )


def _build_validators(config: Optional[Mapping[str, object]]) -> Sequence[Rule]:
    if not config:
        return ()
    if not isinstance(config, Mapping):
        raise ValueError("'validators' must be an object.")

    rules: list[Rule] = []

    allowed_values = config.get("allowed_values")
    if isinstance(allowed_values, Mapping):
        rules.append(_make_allowed_values_rule(allowed_values))

    required_fields = config.get("required")
    if isinstance(required_fields, Iterable) and not isinstance(required_fields, (str, bytes)):
        rules.append(_make_required_fields_rule(required_fields))

    require_any = config.get("require_any")
    if isinstance(require_any, Mapping):
        rules.append(_make_require_any_rule(require_any))

    return tuple(rules)


def _make_allowed_values_rule(config: Mapping[str, object]) -> Rule:
    normalised: Dict[str, set[str]] = {}
    for attribute, values in config.items():
        if not isinstance(values, Iterable) or isinstance(values, (str, bytes)):
            raise ValueError("'allowed_values' entries must be arrays of strings.")
        normalised[str(attribute)] = {
            str(value).lower().strip() for value in values if str(value).strip()
        }

    def check(resource: ResourceModel) -> Diagnostics:
        diagnostics = Diagnostics()
        for attribute, allowed in normalised.items():
            value = resource.raw.get(attribute)
            # blocks and collections are not compared
            if not isinstance(value, ScalarValue):
                continue
            if str(value.scalar()).lower().strip() not in allowed:
                diagnostics.add_attribute_error(
                    AttributePath.root(attribute),
                    "Invalid attribute value",
                    f"{attribute} must be one of {sorted(allowed)}",
                )
        return diagnostics

    return Rule(name="allowed_values", description="Attributes must use one of the configured values", check=check)


def _make_required_fields_rule(fields: Iterable[object]) -> Rule:
    required = [str(item) for item in fields]

    def check(resource: ResourceModel) -> Diagnostics:
        diagnostics = Diagnostics()
        for attribute in required:
            value = resource.raw.get(attribute)
            if value.is_unknown or _has_value(value):
                continue
            diagnostics.add_attribute_error(
                AttributePath.root(attribute),
                "Missing required attribute",
                f"{attribute} is required for this resource type",
            )
        return diagnostics

    return Rule(name="required", description=f"Requires {', '.join(required)}", check=check)


def _make_require_any_rule(config: Mapping[str, object]) -> Rule:
    groups: Dict[str, tuple[str, ...]] = {}
    for label, options in config.items():
        if not isinstance(options, Iterable) or isinstance(options, (str, bytes)):
            raise ValueError("'require_any' entries must be arrays of attribute names.")
        attributes = tuple(str(option) for option in options)
        if not attributes:
            raise ValueError("'require_any' groups must contain at least one attribute name.")
        groups[str(label)] = attributes

    def check(resource: ResourceModel) -> Diagnostics:
        diagnostics = Diagnostics()
        for label, options in groups.items():
            values = [resource.raw.get(option) for option in options]
            if any(value.is_unknown or _has_value(value) for value in values):
                continue
            joined = ", ".join(options)
            diagnostics.add_error("Missing required attribute", f"One of ({joined}) must be provided for '{label}'.")
        return diagnostics

    return Rule(name="require_any", description="Requires one attribute out of each configured group", check=check)


def _has_value(value: ConfigValue) -> bool:
    if not value.is_known:
        return False
    if isinstance(value, CollectionValue):
        return bool(value.elements)
    if isinstance(value, ScalarValue) and isinstance(value.value, str):
        return bool(value.value.strip())
    return True
