import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.config_value import UNKNOWN, from_python
from core.models import Pullzone, PullzoneHostname
from validators import pullzone as rules
from validators import pullzone_hostname as hostname_rules


def _pullzone(**attributes):
    return Pullzone.from_config(from_python(attributes))


def _hostname(**attributes):
    return PullzoneHostname.from_config(from_python(attributes))


def test_compute_script_origin_requires_url_and_scripting_filter():
    pullzone = _pullzone(
        origin={"type": "ComputeScript", "url": "https://example.com"},
        routing={"filters": ["all"]},
    )

    diagnostics = rules.origin_compute_script(pullzone)

    assert [item.summary for item in diagnostics] == ["Invalid origin.url value", "Invalid routing.filters value"]


def test_compute_script_origin_passes_when_configured():
    pullzone = _pullzone(
        origin={"type": "ComputeScript", "url": "https://bunnycdn.com"},
        routing={"filters": ["scripting"]},
    )

    assert len(rules.origin_compute_script(pullzone)) == 0


def test_other_origin_types_are_ignored():
    pullzone = _pullzone(origin={"type": "OriginUrl", "url": "https://example.com"}, routing={"filters": ["all"]})

    assert len(rules.origin_compute_script(pullzone)) == 0


def test_compute_script_defers_on_unknown_url():
    pullzone = _pullzone(origin={"type": "ComputeScript", "url": UNKNOWN}, routing={"filters": ["all"]})

    assert len(rules.origin_compute_script(pullzone)) == 0


def test_middleware_script_requires_scripting_filter():
    pullzone = _pullzone(origin={"type": "OriginUrl", "middleware_script": 42}, routing={"filters": ["all"]})

    assert [item.summary for item in rules.middleware_script(pullzone)] == ["Invalid routing.filters value"]

    pullzone = _pullzone(origin={"type": "OriginUrl", "middleware_script": 42}, routing={"filters": ["scripting"]})
    assert len(rules.middleware_script(pullzone)) == 0


def test_permacache_requires_one_year_expiration():
    diagnostics = rules.permacache_expiration(_pullzone(permacache_storagezone=7, cache_expiration_time=3600))

    assert [str(item.path) for item in diagnostics] == ["cache_expiration_time"]
    assert "31919000" in diagnostics[0].detail


@pytest.mark.parametrize(
    "attributes",
    [
        {"permacache_storagezone": 7, "cache_expiration_time": 31919000},
        {"permacache_storagezone": 7, "cache_expiration_time": None},
        {"permacache_storagezone": 7, "cache_expiration_time": UNKNOWN},
        {"permacache_storagezone": None, "cache_expiration_time": 3600},
    ],
)
def test_permacache_expiration_passes(attributes):
    assert len(rules.permacache_expiration(_pullzone(**attributes))) == 0


def test_cache_stale_requires_background_update():
    diagnostics = rules.cache_stale_background_update(
        _pullzone(cache_stale=["offline"], use_background_update=False)
    )

    assert [str(item.path) for item in diagnostics] == ["use_background_update"]


@pytest.mark.parametrize(
    "attributes",
    [
        {"cache_stale": ["offline"], "use_background_update": True},
        {"cache_stale": ["offline"], "use_background_update": None},
        {"cache_stale": [], "use_background_update": False},
        {"cache_stale": UNKNOWN, "use_background_update": False},
    ],
)
def test_cache_stale_passes(attributes):
    assert len(rules.cache_stale_background_update(_pullzone(**attributes))) == 0


def test_custom_certificate_requires_tls():
    diagnostics = hostname_rules.custom_certificate(_hostname(certificate="-----BEGIN", tls_enabled=False))

    assert [str(item.path) for item in diagnostics] == ["tls_enabled"]
    assert len(hostname_rules.custom_certificate(_hostname(certificate="-----BEGIN", tls_enabled=True))) == 0
    assert len(hostname_rules.custom_certificate(_hostname(certificate="-----BEGIN", tls_enabled=UNKNOWN))) == 0


def test_force_ssl_requires_tls():
    diagnostics = hostname_rules.force_ssl_requires_tls(_hostname(force_ssl=True, tls_enabled=False))

    assert [str(item.path) for item in diagnostics] == ["force_ssl"]
    assert diagnostics[0].summary == "Incompatible Attribute Combination"
    assert len(hostname_rules.force_ssl_requires_tls(_hostname(force_ssl=False, tls_enabled=False))) == 0
