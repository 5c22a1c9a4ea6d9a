"""Rules for ``bunnynet_compute_container_app`` resources."""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional, Tuple

from core.attribute_path import AttributePath
from core.config_value import UNKNOWN
from core.diagnostics import Diagnostics, format_set
from core.enums import (
    CONTAINER_APP_VERSION,
    CONTAINER_PROBE_KINDS,
    CONTAINER_PROBE_TYPES,
    ENDPOINT_TYPE_ANYCAST,
    ENDPOINT_TYPE_CDN,
    ENDPOINT_TYPE_INTERNAL_IP,
)
from core.models import ContainerApp, Endpoint, Probe
from core.validation_rules import rule

# sentinel returned by _endpoint_error when an unknown value was reached
_DEFER = object()

_VERSION_NOTICE = (
    "This resource had a backwards incompatible change in v0.11.0.\n\n"
    "Please make sure to read through "
    "https://github.com/BunnyWay/terraform-provider-bunnynet/releases/tag/v0.11.0\n\n"
    f"To suppress this error message, add `version = {CONTAINER_APP_VERSION}` to this resource."
)


@rule("version", "Make sure the resource addresses backwards compatibility breaks.")
def version(app: ContainerApp) -> Diagnostics:
    diagnostics = Diagnostics()
    if app.version is UNKNOWN:
        return diagnostics
    if app.version is None or app.version != CONTAINER_APP_VERSION:
        diagnostics.add_attribute_error(AttributePath.root("version"), "Missing version attribute", _VERSION_NOTICE)
    return diagnostics


@rule("regions_required_allowed", "Any required region must also be defined as an allowed region.")
def regions_required_allowed(app: ContainerApp) -> Diagnostics:
    diagnostics = Diagnostics()
    if app.regions_allowed is UNKNOWN or app.regions_required is UNKNOWN:
        return diagnostics

    allowed = set(app.regions_allowed)
    missing = [region for region in dict.fromkeys(app.regions_required) if region not in allowed]
    if missing:
        diagnostics.add_attribute_error(
            AttributePath.root("regions_allowed"),
            "Incompatible Attribute Combination",
            f'"regions_allowed" must also contain all required regions. Missing: {format_set(missing)}',
        )
    return diagnostics


@rule("endpoint_name_unique", "Endpoint name must be unique")
def endpoint_name_unique(app: ContainerApp) -> Diagnostics:
    """Endpoint names are unique across every container of the app, not per container."""

    diagnostics = Diagnostics()
    if app.containers is UNKNOWN:
        return diagnostics
    if not app.containers:
        diagnostics.add_error("No containers found", "No containers found")
        return diagnostics

    locations: Dict[str, List[Tuple[int, int]]] = {}
    for c_index, container in enumerate(app.containers):
        if container.endpoints is UNKNOWN:
            return diagnostics
        for e_index, endpoint in enumerate(container.endpoints):
            if endpoint.name is UNKNOWN:
                return diagnostics
            locations.setdefault(endpoint.name or "", []).append((c_index, e_index))

    for name, found in locations.items():
        if len(found) > 1:
            diagnostics.add_error(
                "Invalid endpoint configuration",
                f"container.endpoint.name should be unique. Found {len(found)} endpoints with name {name}",
            )
    return diagnostics


@rule("volume_mounts", "Volumes can only be mounted once")
def volume_mounts(app: ContainerApp) -> Diagnostics:
    diagnostics = Diagnostics()
    if app.containers is UNKNOWN or app.volumes is UNKNOWN:
        return diagnostics
    if not app.containers:
        diagnostics.add_error("No containers found", "No containers found")
        return diagnostics

    names: Counter = Counter()
    paths: Counter = Counter()
    for container in app.containers:
        if container.volume_mounts is UNKNOWN:
            return diagnostics
        for mount in container.volume_mounts:
            if mount.name is UNKNOWN or mount.path is UNKNOWN:
                return diagnostics
            names[mount.name or ""] += 1
            paths[mount.path or ""] += 1

    declared = set()
    for volume in app.volumes:
        if volume.name is UNKNOWN:
            return diagnostics
        declared.add(volume.name or "")

    for name, count in names.items():
        if name not in declared:
            diagnostics.add_error("Invalid endpoint configuration", f'The volume "{name}" does not exist')
        elif count > 1:
            diagnostics.add_error("Invalid endpoint configuration", f'The volume "{name}" can only be mounted once')

    for mount_path, count in paths.items():
        if count > 1:
            diagnostics.add_error(
                "Invalid endpoint configuration",
                f'There are multiple volumes mounted at the path "{mount_path}"',
            )
    return diagnostics


@rule("volume_name_unique", "Volume names should be unique")
def volume_name_unique(app: ContainerApp) -> Diagnostics:
    diagnostics = Diagnostics()
    if app.volumes is UNKNOWN:
        return diagnostics

    seen = set()
    for position, volume in enumerate(app.volumes):
        if volume.name is UNKNOWN:
            continue
        if volume.name in seen:
            diagnostics.add_attribute_error(
                AttributePath.root("volume").index(position).attr("name"),
                "Invalid endpoint configuration",
                f'A volume with name "{volume.name}" was already declared',
            )
            continue
        seen.add(volume.name)
    return diagnostics


def _endpoint_error(endpoint: Endpoint) -> Optional[object]:
    """Return the first problem of an endpoint, ``_DEFER`` or ``None``.

    Values are only looked at when the check sequence reaches them.
    """

    endpoint_type = endpoint.type
    if endpoint_type is UNKNOWN or endpoint.cdn is UNKNOWN:
        return _DEFER

    cdn_count = len(endpoint.cdn)
    if endpoint_type == ENDPOINT_TYPE_CDN:
        if cdn_count == 0:
            return 'There should be one "cdn" configuration for this endpoint type'
        if cdn_count > 1:
            return 'There should be only one "cdn" configuration for this endpoint type'
    elif cdn_count > 0:
        return 'There should be no "cdn" configuration for this endpoint type'

    if endpoint_type == ENDPOINT_TYPE_CDN:
        origin_ssl = endpoint.cdn[0].origin_ssl
        if origin_ssl is UNKNOWN:
            return _DEFER
        if origin_ssl is None:
            return 'There should be one "origin_ssl" configuration in the "cdn" block'

    if endpoint.ports is UNKNOWN:
        return _DEFER
    if not endpoint.ports:
        return 'There should be at least one "port" configuration for this endpoint type'
    if endpoint_type != ENDPOINT_TYPE_ANYCAST and len(endpoint.ports) > 1:
        return 'There should be only one "port" configuration for this endpoint type'

    for port in endpoint.ports:
        if port.container is UNKNOWN:
            return _DEFER
        if port.container is None:
            return 'There should be at least one "container" port configured for this endpoint type'

        if port.exposed is UNKNOWN:
            return _DEFER
        if endpoint_type == ENDPOINT_TYPE_ANYCAST and port.exposed is None:
            return 'There should be at least one "exposed" port configured for this endpoint type'
        if endpoint_type != ENDPOINT_TYPE_ANYCAST and port.exposed is not None:
            return 'There should be no "exposed" port configured for this endpoint type'

        if port.protocols is UNKNOWN:
            return _DEFER
        if endpoint_type in (ENDPOINT_TYPE_ANYCAST, ENDPOINT_TYPE_INTERNAL_IP) and not port.protocols:
            return 'There should be at least one "protocols" configured for this endpoint type'
        if endpoint_type == ENDPOINT_TYPE_CDN and port.protocols:
            return 'There should be no "protocols" configured for this endpoint type'

    return None


@rule("container_endpoint", "Validates endpoint configuration")
def container_endpoint(app: ContainerApp) -> Diagnostics:
    """Check ``cdn`` and ``port`` blocks against the endpoint type.

    Each endpoint reports at most one error, the first failing check.
    """

    diagnostics = Diagnostics()
    if app.containers is UNKNOWN:
        return diagnostics

    for c_index, container in enumerate(app.containers):
        if container.endpoints is UNKNOWN:
            continue
        for e_index, endpoint in enumerate(container.endpoints):
            problem = _endpoint_error(endpoint)
            if problem is None or problem is _DEFER:
                continue
            diagnostics.add_attribute_error(
                AttributePath.root("container").index(c_index).attr("endpoint").index(e_index),
                f"Invalid endpoint.{endpoint.label} configuration",
                str(problem),
            )
    return diagnostics


def _probe_errors(probe: Probe) -> List[str]:
    if probe.type is UNKNOWN:
        return []
    if probe.type is None:
        return ["probe type must be set"]
    if probe.type not in CONTAINER_PROBE_TYPES:
        return ["probe type must be one of: " + ", ".join(f'"{item}"' for item in CONTAINER_PROBE_TYPES)]

    problems = []
    if probe.port is not UNKNOWN and (probe.port is None or not 0 <= probe.port <= 65535):
        problems.append('Attribute "port" must be between 0 and 65535')

    for block, count in (("http", probe.http_blocks), ("grpc", probe.grpc_blocks)):
        if count is UNKNOWN:
            continue
        if probe.type == block:
            if count == 0:
                problems.append(f"Missing {block} block")
            if count > 1:
                problems.append(f"Too many {block} blocks")
        elif count > 0:
            problems.append(f"Unexpected {block} block")
    return problems


@rule("container_probe", "Validates probe configuration")
def container_probe(app: ContainerApp) -> Diagnostics:
    diagnostics = Diagnostics()
    if app.containers is UNKNOWN:
        return diagnostics

    for c_index, container in enumerate(app.containers):
        for kind in CONTAINER_PROBE_KINDS:
            probes = container.probes.get(kind, ())
            if probes is UNKNOWN:
                continue
            for p_index, probe in enumerate(probes):
                location = AttributePath.root("container").index(c_index).attr(kind).index(p_index)
                for problem in _probe_errors(probe):
                    diagnostics.add_attribute_error(location, "Invalid probe configuration", problem)
    return diagnostics


RULES = (
    version,
    regions_required_allowed,
    endpoint_name_unique,
    volume_mounts,
    volume_name_unique,
    container_endpoint,
    container_probe,
)
