"""Rules for ``bunnynet_storage_zone`` resources."""

from __future__ import annotations

from typing import Sequence

from core.attribute_path import AttributePath
from core.config_value import UNKNOWN
from core.diagnostics import Diagnostics
from core.enums import STORAGE_ZONE_EDGE_MAIN_REGION, STORAGE_ZONE_EDGE_REGIONS, STORAGE_ZONE_STANDARD_REGIONS
from core.models import StorageZone
from core.validation_rules import rule

_REGION = AttributePath.root("region")
_REPLICATION_REGIONS = AttributePath.root("replication_regions")


def _invalid_value(value: str, catalog: Sequence[str]) -> str:
    return f'"{value}" is an invalid value. Must be one of: {", ".join(catalog)}'


def _check_replication(zone: StorageZone, catalog: Sequence[str], diagnostics: Diagnostics) -> bool:
    """Report every replication region outside the catalog; return ``True`` when all are valid."""

    valid = True
    for item in zone.replication_regions:
        if item not in catalog:
            diagnostics.add_attribute_error(
                _REPLICATION_REGIONS, "Invalid replication_regions attribute", _invalid_value(item, catalog)
            )
            valid = False
    return valid


@rule("region", "Validates region and replication_regions for the zone tier")
def region(zone: StorageZone) -> Diagnostics:
    """Invalid main region stops the rule; invalid replication regions accumulate."""

    diagnostics = Diagnostics()
    if zone.zone_tier is UNKNOWN or zone.region is UNKNOWN or zone.replication_regions is UNKNOWN:
        return diagnostics

    if zone.zone_tier == "Edge":
        if zone.region != STORAGE_ZONE_EDGE_MAIN_REGION:
            diagnostics.add_attribute_error(
                _REGION,
                "Invalid region attribute",
                f'Storage zones in the Edge tier must have "{STORAGE_ZONE_EDGE_MAIN_REGION}" as the main region.',
            )
            return diagnostics
        _check_replication(zone, STORAGE_ZONE_EDGE_REGIONS, diagnostics)
        return diagnostics

    if zone.zone_tier == "Standard":
        if zone.region not in STORAGE_ZONE_STANDARD_REGIONS:
            diagnostics.add_attribute_error(
                _REGION, "Invalid region attribute", _invalid_value(zone.region or "", STORAGE_ZONE_STANDARD_REGIONS)
            )
            return diagnostics
        if not _check_replication(zone, STORAGE_ZONE_STANDARD_REGIONS, diagnostics):
            return diagnostics
        if zone.region in zone.replication_regions:
            diagnostics.add_attribute_error(
                _REPLICATION_REGIONS,
                "Invalid replication_regions attribute",
                f'"{zone.region}" is already defined as the "region" attribute',
            )
    return diagnostics


RULES = (region,)
