"""Read resource configurations out of ``terraform show -json`` plan output."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterator, Mapping, Union

from core.validation_service import ResourceConfig

logger = logging.getLogger(__name__)


class PlanFormatError(ValueError):
    """Raised when a plan document does not have the expected shape."""


def load_plan(path: Union[str, Path]) -> Mapping[str, Any]:
    """Load a plan JSON document from disk."""

    plan_path = Path(path)
    try:
        data = json.loads(plan_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise PlanFormatError(f"Plan file '{plan_path}' is not valid JSON: {exc}") from exc
    if not isinstance(data, Mapping):
        raise PlanFormatError(f"Plan file '{plan_path}' must contain a JSON object at the top level.")
    return data


def iter_resource_configs(plan: Mapping[str, Any]) -> Iterator[ResourceConfig]:
    """Yield the planned configuration of every changed resource.

    Data sources and changes whose only action is ``delete`` are skipped.
    """

    if not isinstance(plan, Mapping):
        raise PlanFormatError("Plan must be a JSON object.")
    changes = plan.get("resource_changes") or []
    if not isinstance(changes, list):
        raise PlanFormatError("'resource_changes' must be an array.")

    for position, entry in enumerate(changes):
        if not isinstance(entry, Mapping):
            raise PlanFormatError(f"resource_changes[{position}] must be an object.")
        resource_type = entry.get("type")
        if not resource_type:
            raise PlanFormatError(f"resource_changes[{position}] is missing 'type'.")
        address = entry.get("address") or f"{resource_type}.{entry.get('name', position)}"

        change = entry.get("change") or {}
        if not isinstance(change, Mapping):
            raise PlanFormatError(f"'change' of {address} must be an object.")
        if entry.get("mode", "managed") != "managed":
            logger.debug("Skipping %s: not a managed resource", address)
            continue
        actions = change.get("actions") or []
        if list(actions) == ["delete"]:
            logger.debug("Skipping %s: resource is being destroyed", address)
            continue

        yield ResourceConfig(
            address=str(address),
            resource_type=str(resource_type),
            config=change.get("after"),
            unknown=change.get("after_unknown"),
        )
