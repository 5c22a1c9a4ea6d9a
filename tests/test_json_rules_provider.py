import json
import logging
import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.config_value import UNKNOWN, from_python
from core.diagnostics import Severity
from core.models import ResourceModel
from providers.bunnynet_rules import BunnyNetRuleProvider
from providers.json_rules import JsonRuleProvider


def _write_rules(tmp_path, filename, payload):
    rules_file = tmp_path / filename
    rules_file.write_text(json.dumps(payload), encoding="utf-8")
    return rules_file


def _run(rule_set, config):
    record = rule_set.build(from_python(config))
    diagnostics = []
    for item in rule_set.rules:
        diagnostics.extend(item(record))
    return diagnostics


def _base_rule_payload():
    return {
        "metadata": {"name": "base", "priority": 0},
        "resources": {
            "bunnynet_compute_container_app": {
                "disabled_rules": ["version"],
            }
        },
    }


def test_provider_keeps_builtin_rule_sets(tmp_path):
    _write_rules(tmp_path, "base.json", _base_rule_payload())

    provider = JsonRuleProvider(rules_path=tmp_path)

    assert set(BunnyNetRuleProvider().list_resource_types()) <= set(provider.list_resource_types())
    edge_rules = provider.get_rule_set("bunnynet_pullzone_edgerule")
    assert edge_rules.rule_names() == ("triggers", "action_parameters", "action_shape")


def test_provider_disables_rules(tmp_path):
    _write_rules(tmp_path, "base.json", _base_rule_payload())

    provider = JsonRuleProvider(rules_path=tmp_path)
    rule_set = provider.get_rule_set("BUNNYNET_COMPUTE_CONTAINER_APP")

    assert "version" not in rule_set.rule_names()
    assert rule_set.rule_names()[0] == "regions_required_allowed"


def test_provider_merges_layers_by_priority(tmp_path):
    _write_rules(tmp_path, "base.json", _base_rule_payload())
    overlay = {
        "metadata": {"name": "overlay", "priority": 10},
        "resources": {
            "bunnynet_compute_container_app": {
                "severity": {"volume_name_unique": "warning"},
            },
            "bunnynet_pullzone_shield": {
                "severity": {"whitelabel": "WARNING"},
            },
        },
    }
    _write_rules(tmp_path, "overlay.json", overlay)

    provider = JsonRuleProvider(rules_path=tmp_path)
    app_rules = {item.name: item for item in provider.get_rule_set("bunnynet_compute_container_app").rules}

    assert "version" not in app_rules
    assert app_rules["volume_name_unique"].severity is Severity.WARNING

    shield_rules = provider.get_rule_set("bunnynet_pullzone_shield")
    diagnostics = _run(shield_rules, {"tier": "Basic", "whitelabel": True})
    assert [item.severity for item in diagnostics] == [Severity.WARNING]


def test_provider_skips_disabled_layers(tmp_path):
    _write_rules(tmp_path, "base.json", _base_rule_payload())
    disabled = {
        "metadata": {"name": "disabled", "priority": 999, "enabled": False},
        "resources": {"bunnynet_storage_zone": {"disabled_rules": ["region"]}},
    }
    _write_rules(tmp_path, "disabled.json", disabled)

    provider = JsonRuleProvider(rules_path=tmp_path)

    assert provider.get_rule_set("bunnynet_storage_zone").rule_names() == ("region",)


def test_provider_rejects_only_disabled_layers(tmp_path):
    disabled = {"metadata": {"enabled": False}, "resources": {}}
    _write_rules(tmp_path, "disabled.json", disabled)

    with pytest.raises(ValueError):
        JsonRuleProvider(rules_path=tmp_path)


def test_provider_requires_existing_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        JsonRuleProvider(rules_path=tmp_path / "missing.json")


def test_provider_builds_declarative_validators(tmp_path):
    strict = {
        "metadata": {"name": "strict", "priority": 50},
        "resources": {
            "bunnynet_video_library": {
                "validators": {
                    "allowed_values": {"region": ["de", "ny"]},
                    "required": ["name"],
                    "require_any": {"storage": ["storage_zone_id", "replication_regions"]},
                }
            }
        },
    }
    _write_rules(tmp_path, "strict.json", strict)

    provider = JsonRuleProvider(rules_path=tmp_path)
    rule_set = provider.get_rule_set("bunnynet_video_library")

    assert rule_set.model is ResourceModel
    assert rule_set.rule_names() == ("allowed_values", "required", "require_any")
    assert _run(rule_set, {"name": "videos", "region": "DE", "storage_zone_id": 4}) == []

    diagnostics = _run(rule_set, {"name": " ", "region": "uk", "replication_regions": []})
    assert [item.summary for item in diagnostics] == [
        "Invalid attribute value",
        "Missing required attribute",
        "Missing required attribute",
    ]
    assert [str(item.path) for item in diagnostics] == ["region", "name", ""]
    assert diagnostics[0].detail == "region must be one of ['de', 'ny']"
    assert diagnostics[2].detail == "One of (storage_zone_id, replication_regions) must be provided for 'storage'."


def test_declarative_validators_skip_unknown_values(tmp_path):
    payload = {
        "resources": {
            "bunnynet_video_library": {
                "validators": {"allowed_values": {"region": ["de"]}, "required": ["name"]},
            }
        },
    }
    rules_file = _write_rules(tmp_path, "rules.json", payload)

    rule_set = JsonRuleProvider(rules_path=rules_file).get_rule_set("bunnynet_video_library")

    assert _run(rule_set, {"name": UNKNOWN, "region": UNKNOWN}) == []


def test_declarative_validator_replaces_builtin_rule_of_same_name(tmp_path):
    payload = {
        "resources": {
            "bunnynet_dns_record": {"validators": {"required": ["zone"]}},
        },
    }
    rules_file = _write_rules(tmp_path, "rules.json", payload)

    rule_set = JsonRuleProvider(rules_path=rules_file).get_rule_set("bunnynet_dns_record")

    assert rule_set.rule_names() == ("hostname", "pullzone_id", "required")


def test_unknown_rule_names_are_logged(tmp_path, caplog):
    payload = {"resources": {"bunnynet_dns_zone": {"disabled_rules": ["does_not_exist"]}}}
    rules_file = _write_rules(tmp_path, "rules.json", payload)

    with caplog.at_level(logging.WARNING, logger="providers.json_rules"):
        provider = JsonRuleProvider(rules_path=rules_file)

    assert provider.get_rule_set("bunnynet_dns_zone").rule_names() == ("custom_nameserver",)
    assert "does_not_exist" in caplog.text


def test_provider_rejects_unknown_severity(tmp_path):
    payload = {"resources": {"bunnynet_dns_zone": {"severity": {"custom_nameserver": "fatal"}}}}
    rules_file = _write_rules(tmp_path, "rules.json", payload)

    with pytest.raises(ValueError, match="Unknown severity 'fatal'"):
        JsonRuleProvider(rules_path=rules_file)


def test_provider_reload_picks_up_directory_changes(tmp_path):
    _write_rules(tmp_path, "base.json", _base_rule_payload())

    provider = JsonRuleProvider(rules_path=tmp_path)
    assert "version" not in provider.get_rule_set("bunnynet_compute_container_app").rule_names()

    _write_rules(tmp_path, "base.json", {"resources": {}})

    provider.reload()
    assert "version" in provider.get_rule_set("bunnynet_compute_container_app").rule_names()


def test_provider_uses_supplied_base(tmp_path):
    rules_file = _write_rules(tmp_path, "rules.json", {"resources": {}})
    base = BunnyNetRuleProvider(rule_sets=())

    provider = JsonRuleProvider(rules_path=rules_file, base=base)

    assert provider.list_resource_types() == ()


@pytest.mark.parametrize("invalid", [None, 123, "text"])
def test_provider_rejects_invalid_resource_config(tmp_path, invalid):
    payload = {"resources": {"bunnynet_dns_zone": invalid}}
    rules_file = _write_rules(tmp_path, "rules.json", payload)

    with pytest.raises(ValueError):
        JsonRuleProvider(rules_path=rules_file)


def test_allowed_values_ignore_block_attributes(tmp_path):
    payload = {
        "resources": {
            "bunnynet_pullzone_shield": {
                "validators": {"allowed_values": {"waf": ["x"], "access_list": ["y"], "tier": ["advanced"]}},
            }
        },
    }
    rules_file = _write_rules(tmp_path, "rules.json", payload)

    rule_set = JsonRuleProvider(rules_path=rules_file).get_rule_set("bunnynet_pullzone_shield")
    diagnostics = _run(
        rule_set,
        {"tier": "Basic", "waf": {"realtime_threat_intelligence": False}, "access_list": [{"id": 1, "action": "Block"}]},
    )

    assert [str(item.path) for item in diagnostics] == ["tier"]
    assert diagnostics[0].detail == "tier must be one of ['advanced']"
