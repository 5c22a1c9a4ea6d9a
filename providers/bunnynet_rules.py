"""Built-in rule provider for the bunny.net Terraform resources."""

from __future__ import annotations

from typing import Optional, Sequence

from core import models
from core.validation_rules import DictionaryRuleProvider, ResourceRuleSet
from validators import (
    compute_container_app,
    dns_record,
    dns_zone,
    pullzone,
    pullzone_edgerule,
    pullzone_hostname,
    pullzone_shield,
    storage_zone,
    stream_library,
)

RULE_SETS: Sequence[ResourceRuleSet] = (
    ResourceRuleSet("bunnynet_compute_container_app", models.ContainerApp, compute_container_app.RULES),
    ResourceRuleSet("bunnynet_pullzone", models.Pullzone, pullzone.RULES),
    ResourceRuleSet("bunnynet_pullzone_edgerule", models.EdgeRule, pullzone_edgerule.RULES),
    ResourceRuleSet("bunnynet_pullzone_hostname", models.PullzoneHostname, pullzone_hostname.RULES),
    ResourceRuleSet("bunnynet_pullzone_shield", models.Shield, pullzone_shield.RULES),
    ResourceRuleSet("bunnynet_storage_zone", models.StorageZone, storage_zone.RULES),
    ResourceRuleSet("bunnynet_dns_record", models.DnsRecord, dns_record.RULES),
    ResourceRuleSet("bunnynet_dns_zone", models.DnsZone, dns_zone.RULES),
    ResourceRuleSet("bunnynet_stream_library", models.StreamLibrary, stream_library.RULES),
)


class BunnyNetRuleProvider:
    """Rule provider registering every bunny.net resource validator."""

    def __init__(self, rule_sets: Optional[Sequence[ResourceRuleSet]] = None) -> None:
        self._base = DictionaryRuleProvider(RULE_SETS if rule_sets is None else rule_sets)

    def get_rule_set(self, resource_type: str) -> Optional[ResourceRuleSet]:
        return self._base.get_rule_set(resource_type)

    def list_resource_types(self) -> Sequence[str]:
        return self._base.list_resource_types()


def get_provider() -> BunnyNetRuleProvider:
    """Factory used by the VALIDATION_RULE_PROVIDER environment variable."""

    return BunnyNetRuleProvider()
