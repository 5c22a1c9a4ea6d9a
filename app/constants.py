"""Shared constants for the configuration validation routes."""

API_TITLE = "Edge Config Validation API"
API_VERSION = "1.0.0"
API_DESCRIPTION = (
    "Cross-field validation of bunny.net Terraform resource configurations. "
    "Values that are only known after apply never produce errors."
)
API_ROUTE_PREFIX = "/api"
API_TAGS = {
    "Validation": "Validate single resource configurations or whole Terraform plans.",
    "Validation Rules": "Inspect the rules registered per resource type.",
}
EXPAND_DETAILS = {"details", "full"}
