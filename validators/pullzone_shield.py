"""Rules for ``bunnynet_pullzone_shield`` resources.

Bot detection and whitelabel are gated on the free plan only. Real-time threat
intelligence is only accepted on the Advanced plan, so higher plans are
rejected for it as well.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.attribute_path import AttributePath
from core.config_value import UNKNOWN
from core.diagnostics import Diagnostics
from core.enums import SHIELD_FREE_TIER_RANK, SHIELD_PLAN_RANKS, SHIELD_THREAT_INTELLIGENCE_TIER
from core.models import Shield
from core.validation_rules import rule

logger = logging.getLogger(__name__)

_FREE_TIER_SUMMARY = "Bunny Shield is free tier"


def _is_free_tier(shield: Shield) -> Optional[bool]:
    """Return ``None`` while the tier is unknown."""

    if shield.tier is UNKNOWN:
        return None
    rank = SHIELD_PLAN_RANKS.get(shield.tier or "")
    if rank is None:
        logger.debug("Unrecognised shield tier %r; plan gating skipped", shield.tier)
        return False
    return rank == SHIELD_FREE_TIER_RANK


@rule("bot_detection", 'bot_detection requires a paid "tier"')
def bot_detection(shield: Shield) -> Diagnostics:
    diagnostics = Diagnostics()
    if not _is_free_tier(shield):
        return diagnostics
    if shield.bot_detection is UNKNOWN or shield.bot_detection is None:
        return diagnostics

    diagnostics.add_attribute_error(
        AttributePath.root("bot_detection"),
        _FREE_TIER_SUMMARY,
        "Bot Detection is only available for paid Bunny Shield plans.",
    )
    return diagnostics


@rule("whitelabel", 'whitelabel requires a paid "tier"')
def whitelabel(shield: Shield) -> Diagnostics:
    diagnostics = Diagnostics()
    if not _is_free_tier(shield):
        return diagnostics
    if shield.whitelabel is not True:
        return diagnostics

    diagnostics.add_attribute_error(
        AttributePath.root("whitelabel"),
        _FREE_TIER_SUMMARY,
        "Whitelabel is only available for paid Bunny Shield plans.",
    )
    return diagnostics


@rule(
    "realtime_threat_intelligence",
    f'waf.realtime_threat_intelligence requires the "{SHIELD_THREAT_INTELLIGENCE_TIER}" tier',
)
def realtime_threat_intelligence(shield: Shield) -> Diagnostics:
    diagnostics = Diagnostics()
    if shield.tier is UNKNOWN or shield.tier == SHIELD_THREAT_INTELLIGENCE_TIER:
        return diagnostics
    if shield.waf is UNKNOWN or shield.waf is None:
        return diagnostics
    if shield.waf.realtime_threat_intelligence is not True:
        return diagnostics

    diagnostics.add_attribute_error(
        AttributePath.root("waf"),
        "Bunny Shield plan not supported",
        f"Real-time Threat Intelligence is only available for the {SHIELD_THREAT_INTELLIGENCE_TIER} "
        "Bunny Shield plan.",
    )
    return diagnostics


@rule("access_list_unique", "Each access_list can only be defined once")
def access_list_unique(shield: Shield) -> Diagnostics:
    """Any unresolved entry or id skips the check; the first duplicate stops it."""

    diagnostics = Diagnostics()
    if shield.access_lists is UNKNOWN:
        return diagnostics
    if any(entry.id is UNKNOWN or entry.id is None for entry in shield.access_lists):
        return diagnostics

    seen = set()
    for entry in shield.access_lists:
        if entry.id in seen:
            diagnostics.add_attribute_error(
                AttributePath.root("access_list"),
                "Duplicate access list",
                f'There are multiple access_list entries with id = "{entry.id}"',
            )
            break
        seen.add(entry.id)
    return diagnostics


RULES = (bot_detection, realtime_threat_intelligence, whitelabel, access_list_unique)
