"""Rules for ``bunnynet_pullzone`` resources."""

from __future__ import annotations

from core.attribute_path import AttributePath
from core.config_value import UNKNOWN
from core.diagnostics import Diagnostics
from core.enums import COMPUTE_SCRIPT_ORIGIN_URL, PERMACACHE_CACHE_EXPIRATION_TIME, SCRIPTING_ROUTING_FILTER
from core.models import Pullzone
from core.validation_rules import rule


@rule("origin_compute_script", 'Validations for origin.type = "ComputeScript"')
def origin_compute_script(pullzone: Pullzone) -> Diagnostics:
    diagnostics = Diagnostics()
    origin, routing = pullzone.origin, pullzone.routing
    if origin is UNKNOWN or routing is UNKNOWN or origin is None or routing is None:
        return diagnostics
    if origin.type is UNKNOWN or origin.url is UNKNOWN or routing.filters is UNKNOWN:
        return diagnostics
    if origin.type != "ComputeScript":
        return diagnostics

    if origin.url != COMPUTE_SCRIPT_ORIGIN_URL:
        diagnostics.add_error(
            "Invalid origin.url value",
            f'ComputeScript requires origin.url to be set as "{COMPUTE_SCRIPT_ORIGIN_URL}".',
        )
    if SCRIPTING_ROUTING_FILTER not in routing.filters:
        diagnostics.add_error(
            "Invalid routing.filters value",
            f'ComputeScript requires routing.filters to contain the "{SCRIPTING_ROUTING_FILTER}" element.',
        )
    return diagnostics


@rule("middleware_script", 'middleware_script requires the "scripting" routing filter')
def middleware_script(pullzone: Pullzone) -> Diagnostics:
    diagnostics = Diagnostics()
    origin, routing = pullzone.origin, pullzone.routing
    if origin is UNKNOWN or routing is UNKNOWN or origin is None or routing is None:
        return diagnostics
    if origin.middleware_script is UNKNOWN or routing.filters is UNKNOWN:
        return diagnostics

    if (origin.middleware_script or 0) > 0 and SCRIPTING_ROUTING_FILTER not in routing.filters:
        diagnostics.add_error(
            "Invalid routing.filters value",
            f'Defining a middleware script requires the "{SCRIPTING_ROUTING_FILTER}" routing filter',
        )
    return diagnostics


@rule("permacache_expiration", "When using permacache, the cache_expiration_time must be set to 1y.")
def permacache_expiration(pullzone: Pullzone) -> Diagnostics:
    diagnostics = Diagnostics()
    if pullzone.permacache_storagezone is None:
        return diagnostics
    expiration = pullzone.cache_expiration_time
    if expiration is UNKNOWN or expiration is None or expiration == PERMACACHE_CACHE_EXPIRATION_TIME:
        return diagnostics

    diagnostics.add_attribute_error(
        AttributePath.root("cache_expiration_time"),
        "Attribute must be default",
        f'"cache_expiration_time" must be {PERMACACHE_CACHE_EXPIRATION_TIME}. It can also be omitted.',
    )
    return diagnostics


@rule("cache_stale_background_update", "When using cache_stale, the use_background_update must be true.")
def cache_stale_background_update(pullzone: Pullzone) -> Diagnostics:
    diagnostics = Diagnostics()
    if pullzone.cache_stale is UNKNOWN or not pullzone.cache_stale:
        return diagnostics
    if pullzone.use_background_update is not False:
        return diagnostics

    diagnostics.add_attribute_error(
        AttributePath.root("use_background_update"),
        "Attribute must be default",
        '"use_background_update" must be true. It can also be omitted.',
    )
    return diagnostics


RULES = (origin_compute_script, middleware_script, permacache_expiration, cache_stale_background_update)
