"""Rules for ``bunnynet_dns_record`` resources."""

from __future__ import annotations

from core.attribute_path import AttributePath
from core.config_value import UNKNOWN
from core.diagnostics import Diagnostics
from core.enums import DNS_HOSTNAME_RECORD_TYPES
from core.models import DnsRecord
from core.validation_rules import rule

_PULLZONE_RECORD_TYPE = "PullZone"


@rule("hostname", "The value must not end with a dot")
def hostname(record: DnsRecord) -> Diagnostics:
    diagnostics = Diagnostics()
    if record.value is UNKNOWN or record.type is UNKNOWN:
        return diagnostics

    location = AttributePath.root("value")
    if not record.value:
        diagnostics.add_attribute_error(location, "Invalid attribute configuration", "Attribute cannot be empty")
        return diagnostics
    if record.type in DNS_HOSTNAME_RECORD_TYPES and record.value.endswith("."):
        diagnostics.add_attribute_error(location, "Invalid attribute configuration", "The value must not end with a dot")
    return diagnostics


@rule("pullzone_id", "pullzone_id is only available for type = PullZone")
def pullzone_id(record: DnsRecord) -> Diagnostics:
    diagnostics = Diagnostics()
    if record.type is UNKNOWN or record.type is None or record.pullzone_id is UNKNOWN:
        return diagnostics

    location = AttributePath.root("pullzone_id")
    if record.type == _PULLZONE_RECORD_TYPE:
        if record.pullzone_id is None:
            diagnostics.add_attribute_error(location, "Invalid attribute configuration", "pullzone_id is required")
    elif record.pullzone_id is not None:
        diagnostics.add_attribute_error(
            location, "Invalid attribute configuration", "pullzone_id is only available for type = PullZone"
        )
    return diagnostics


RULES = (hostname, pullzone_id)
