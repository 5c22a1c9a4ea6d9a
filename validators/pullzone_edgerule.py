"""Rules for ``bunnynet_pullzone_edgerule`` resources."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from core.attribute_path import AttributePath
from core.config_value import UNKNOWN
from core.diagnostics import Diagnostics, format_set
from core.enums import (
    EDGE_RULE_TRIGGER_MATCH_TYPES,
    EDGE_RULE_TRIGGER_TYPES,
    REDIRECT_STATUS_CODES,
)
from core.models import EdgeRule
from core.validation_rules import rule

_REDIRECT = "Redirect"


def _action_problem(action_type: Optional[str], parameter1: Optional[str], parameter2: Optional[str]) -> Optional[str]:
    if action_type == _REDIRECT:
        if not parameter1:
            return "parameter1 must not be empty"
        if not parameter2:
            return "parameter2 must not be empty"
        if parameter2 not in REDIRECT_STATUS_CODES:
            return "parameter2 must be one of: " + format_set(REDIRECT_STATUS_CODES)
    return None


def _has_unknown(values: Iterable[object]) -> bool:
    return any(value is UNKNOWN for value in values)


@rule("action_parameters", "The action parameters must be valid for the action type")
def action_parameters(edge_rule: EdgeRule) -> Diagnostics:
    """Validate Redirect parameters on either the ``actions`` list or the flattened ``action`` shape.

    The list shape wins whenever it is set; both shapes are never checked together.
    """

    diagnostics = Diagnostics()
    if edge_rule.actions is UNKNOWN:
        return diagnostics

    if edge_rule.actions is not None:
        candidates: Tuple[Tuple[object, object, object], ...] = tuple(
            (action.type, action.parameter1, action.parameter2) for action in edge_rule.actions
        )
        location = AttributePath.root("actions")
    else:
        candidates = ((edge_rule.action, edge_rule.action_parameter1, edge_rule.action_parameter2),)
        location = AttributePath.root("action")

    if any(_has_unknown(candidate) for candidate in candidates):
        return diagnostics

    for action_type, parameter1, parameter2 in candidates:
        problem = _action_problem(action_type, parameter1, parameter2)  # type: ignore[arg-type]
        if problem:
            diagnostics.add_attribute_error(location, "Invalid attribute configuration", problem)
            break
    return diagnostics


@rule("action_shape", "Exactly one of action or actions must be specified")
def action_shape(edge_rule: EdgeRule) -> Diagnostics:
    diagnostics = Diagnostics()
    if edge_rule.action is UNKNOWN or edge_rule.actions is UNKNOWN:
        return diagnostics

    has_action = edge_rule.action is not None
    has_actions = edge_rule.actions is not None
    if not has_action and not has_actions:
        diagnostics.add_error(
            "Invalid Attribute Combination",
            "At least one attribute out of [action,actions] must be specified",
        )
    elif has_action and has_actions:
        diagnostics.add_attribute_error(
            AttributePath.root("action"),
            "Invalid Attribute Combination",
            'Attribute "actions" cannot be specified when "action" is specified',
        )
    return diagnostics


@rule("triggers", "The trigger object must be valid.")
def triggers(edge_rule: EdgeRule) -> Diagnostics:
    """The first invalid trigger field stops the whole rule."""

    diagnostics = Diagnostics()
    if edge_rule.triggers is UNKNOWN:
        return diagnostics

    location = AttributePath.root("triggers")
    match_types = tuple(EDGE_RULE_TRIGGER_MATCH_TYPES.values())
    trigger_types = tuple(EDGE_RULE_TRIGGER_TYPES.values())

    for trigger in edge_rule.triggers:
        if trigger.match_type is UNKNOWN:
            return diagnostics
        if trigger.match_type not in match_types:
            diagnostics.add_attribute_error(
                location,
                "Trigger match_type must be valid",
                f'Trigger "match_type" must be one of {format_set(match_types)}.',
            )
            return diagnostics

        if trigger.patterns is UNKNOWN:
            return diagnostics
        if len(trigger.patterns) < 1:
            diagnostics.add_attribute_error(
                location,
                "Trigger patterns must be valid",
                'Trigger "patterns" must have at least one element.',
            )
            return diagnostics

        if trigger.type is UNKNOWN:
            return diagnostics
        if trigger.type not in trigger_types:
            diagnostics.add_attribute_error(
                location,
                "Trigger type must be valid",
                f'Trigger "type" must be one of {format_set(trigger_types)}.',
            )
            return diagnostics
    return diagnostics


RULES = (triggers, action_parameters, action_shape)
