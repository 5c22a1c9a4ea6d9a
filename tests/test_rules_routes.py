import json
from types import SimpleNamespace

import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.routes import docs as docs_routes
from app.routes import rules as rules_routes
from core import validation_rules
from providers.bunnynet_rules import BunnyNetRuleProvider


@pytest.fixture(autouse=True)
def _default_provider():
    validation_rules.set_rule_provider(BunnyNetRuleProvider())
    yield
    validation_rules.reset_rule_provider()


def test_list_rules_returns_resource_types():
    request = SimpleNamespace(params={}, headers={}, route_params={})

    response = rules_routes._handle_list_rules(request)

    assert response.status_code == 200
    body = json.loads(response.get_body())
    assert "bunnynet_compute_container_app" in body["resourceTypes"]
    assert len(body["resourceTypes"]) == 9


def test_list_rules_expands_details():
    request = SimpleNamespace(params={"expand": "Details"}, headers={}, route_params={})

    body = json.loads(rules_routes._handle_list_rules(request).get_body())

    storage = next(item for item in body["rules"] if item["resourceType"] == "bunnynet_storage_zone")
    assert [rule["name"] for rule in storage["rules"]] == ["region"]


def test_get_rules_returns_rule_set():
    request = SimpleNamespace(params={}, headers={}, route_params={"resource_type": "bunnynet_pullzone_edgerule"})

    response = rules_routes._handle_get_rules(request)

    assert response.status_code == 200
    body = json.loads(response.get_body())
    assert [rule["name"] for rule in body["rules"]] == ["triggers", "action_parameters", "action_shape"]


def test_get_rules_returns_404_for_unknown_type():
    request = SimpleNamespace(params={}, headers={}, route_params={"resource_type": "bunnynet_video_library"})

    response = rules_routes._handle_get_rules(request)

    assert response.status_code == 404
    assert "Unknown resource type 'bunnynet_video_library'" in json.loads(response.get_body())["message"]


def test_get_rules_requires_resource_type():
    request = SimpleNamespace(params={}, headers={}, route_params={})

    assert rules_routes._handle_get_rules(request).status_code == 400


def test_openapi_spec_hoists_definitions():
    raw = json.dumps(
        {
            "paths": {"/rules": {"get": {"schema": {"$ref": "#/$defs/RuleEntry", "$defs": {"RuleEntry": {}}}}}},
        }
    )

    spec = json.loads(docs_routes._normalise_openapi_spec(raw))

    assert spec["components"]["schemas"] == {"RuleEntry": {}}
    assert spec["paths"]["/rules"]["get"]["schema"] == {"$ref": "#/components/schemas/RuleEntry"}
    assert {"url": "/api"} in spec["servers"]
    assert [tag["name"] for tag in spec["tags"]] == ["Validation", "Validation Rules"]
    assert spec["info"]["description"].startswith("Cross-field validation")


def test_routes_are_registered_with_function_app():
    from app import app

    names = {function.get_function_name() for function in app.get_functions()}

    assert {
        "validate_resource",
        "validate_plan",
        "list_validation_rules",
        "get_validation_rules",
        "openapi_spec",
        "swagger_ui",
    } <= names
