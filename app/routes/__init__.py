"""Route modules registered with the shared FunctionApp."""

from . import docs, rules, validate  # noqa: F401

__all__ = ["docs", "rules", "validate"]
