"""Static enumeration tables and catalogs shared by the validators.

Backend codes map to the string identifiers used in configurations. The
reverse direction is computed once at import time.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple


def _frozen(table: Mapping) -> Mapping:
    return MappingProxyType(dict(table))


def _inverted(table: Mapping[int, str]) -> Mapping[str, int]:
    return MappingProxyType({name: code for code, name in table.items()})


EDGE_RULE_ACTION_TYPES: Mapping[int, str] = _frozen({
    0: "ForceSSL",
    1: "Redirect",
    2: "OriginUrl",
    3: "OverrideCacheTime",
    4: "BlockRequest",
    5: "SetResponseHeader",
    6: "SetRequestHeader",
    7: "ForceDownload",
    8: "DisableTokenAuthentication",
    9: "EnableTokenAuthentication",
    10: "OverrideCacheTimePublic",
    11: "IgnoreQueryString",
    12: "DisableOptimizer",
    13: "ForceCompression",
    14: "SetStatusCode",
    15: "BypassPermaCache",
    16: "OverrideBrowserCacheTime",
    17: "OriginStorage",
    18: "SetNetworkRateLimit",
    19: "SetConnectionLimit",
    20: "SetRequestsPerSecondLimit",
})

EDGE_RULE_TRIGGER_TYPES: Mapping[int, str] = _frozen({
    0: "Url",
    1: "RequestHeader",
    2: "ResponseHeader",
    3: "UrlExtension",
    4: "CountryCode",
    5: "RemoteIP",
    6: "UrlQueryString",
    7: "RandomChance",
    8: "StatusCode",
    9: "RequestMethod",
    10: "CookieValue",
    11: "CountryStateCode",
})

EDGE_RULE_TRIGGER_MATCH_TYPES: Mapping[int, str] = _frozen({
    0: "MatchAny",
    1: "MatchAll",
    2: "MatchNone",
})

# Codes are ordered from the lowest to the highest plan.
SHIELD_PLAN_TIERS: Mapping[int, str] = _frozen({
    0: "Basic",
    1: "Advanced",
    2: "Business",
    3: "Enterprise",
})

EDGE_RULE_ACTION_CODES = _inverted(EDGE_RULE_ACTION_TYPES)
EDGE_RULE_TRIGGER_CODES = _inverted(EDGE_RULE_TRIGGER_TYPES)
EDGE_RULE_TRIGGER_MATCH_CODES = _inverted(EDGE_RULE_TRIGGER_MATCH_TYPES)
SHIELD_PLAN_RANKS = _inverted(SHIELD_PLAN_TIERS)

SHIELD_FREE_TIER_RANK = 0
SHIELD_THREAT_INTELLIGENCE_TIER = "Advanced"

REDIRECT_STATUS_CODES: Tuple[str, ...] = ("301", "302", "307", "308")

STORAGE_ZONE_EDGE_MAIN_REGION = "DE"
STORAGE_ZONE_STANDARD_REGIONS: Tuple[str, ...] = ("BR", "DE", "JH", "LA", "NY", "SE", "SG", "SYD", "UK")
STORAGE_ZONE_EDGE_REGIONS: Tuple[str, ...] = (
    "BR", "CZ", "ES", "HK", "JH", "JP", "LA", "MI", "NY", "SE", "SG", "SYD", "UK", "WA",
)

ENDPOINT_TYPE_CDN = "CDN"
ENDPOINT_TYPE_ANYCAST = "Anycast"
ENDPOINT_TYPE_INTERNAL_IP = "InternalIP"

CONTAINER_PROBE_TYPES: Tuple[str, ...] = ("http", "tcp", "grpc")
CONTAINER_PROBE_KINDS: Tuple[str, ...] = ("startup_probe", "readiness_probe", "liveness_probe")
CONTAINER_APP_VERSION = 2

PERMACACHE_CACHE_EXPIRATION_TIME = 31919000
COMPUTE_SCRIPT_ORIGIN_URL = "https://bunnycdn.com"
SCRIPTING_ROUTING_FILTER = "scripting"

DNS_HOSTNAME_RECORD_TYPES: Tuple[str, ...] = ("CNAME", "MX", "NS", "PTR", "SRV")
DNS_ZONE_NAMESERVER_DEFAULTS: Mapping[str, str] = _frozen({
    "nameserver1": "kiki.bunny.net",
    "nameserver2": "coco.bunny.net",
    "soa_email": "hostmaster@bunny.net",
})

STREAM_PREMIUM_ENCODING_TIER = "Premium"
STREAM_PREMIUM_OUTPUT_CODECS: Tuple[str, ...] = ("vp9",)
