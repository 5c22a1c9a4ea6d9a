"""Rules for ``bunnynet_dns_zone`` resources."""

from __future__ import annotations

from core.attribute_path import AttributePath
from core.config_value import UNKNOWN
from core.diagnostics import Diagnostics
from core.enums import DNS_ZONE_NAMESERVER_DEFAULTS
from core.models import DnsZone
from core.validation_rules import rule


@rule("custom_nameserver", "When using custom nameservers, the nameservers must be defined.")
def custom_nameserver(zone: DnsZone) -> Diagnostics:
    """Default nameservers are required unless ``nameserver_custom`` is set; omitted counts as default."""

    diagnostics = Diagnostics()
    if zone.nameserver_custom is UNKNOWN:
        return diagnostics
    must_be_default = not zone.nameserver_custom

    for name, default in DNS_ZONE_NAMESERVER_DEFAULTS.items():
        value = getattr(zone, name)
        if value is UNKNOWN:
            continue
        if value is None:
            value = default

        if must_be_default and value != default:
            diagnostics.add_attribute_error(
                AttributePath.root(name), "Attribute must be default", f'"{name}" must be equal to the default value'
            )
        elif not must_be_default and value == default:
            diagnostics.add_attribute_error(
                AttributePath.root(name), "Attribute must be defined", f'"{name}" must be different than the default value'
            )
    return diagnostics


RULES = (custom_nameserver,)
