"""Pydantic models shared across HTTP routes."""

from __future__ import annotations

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field


class ResourceValidationRequest(BaseModel):
    """Schema describing the payload used to validate one resource configuration."""

    model_config = ConfigDict(populate_by_name=True)

    config: Dict[str, Any] | None = Field(
        ...,
        description="Resource configuration as planned (the 'after' object of a Terraform resource change).",
    )
    unknown: Dict[str, Any] | None = Field(
        default=None,
        description="Mirror of 'config' where true marks values that are only known after apply.",
        alias="afterUnknown",
    )
    address: str | None = Field(default=None, description="Optional resource address used in the report.")


class DiagnosticEntry(BaseModel):
    severity: Literal["error", "warning"]
    summary: str
    detail: str
    path: str | None = Field(default=None, description="Attribute path, e.g. container[0].endpoint[1].")


class ResourceValidationResponse(BaseModel):
    """Diagnostics produced for one resource configuration."""

    valid: bool
    resourceType: str
    address: str | None = None
    rulesApplied: List[str] = Field(default_factory=list)
    diagnostics: List[DiagnosticEntry] = Field(default_factory=list)


class PlanValidationResponse(BaseModel):
    """Diagnostics produced for every resource change of a plan."""

    valid: bool
    errorCount: int
    warningCount: int
    resources: List[ResourceValidationResponse] = Field(default_factory=list)


class RuleEntry(BaseModel):
    name: str
    description: str
    severity: Literal["error", "warning"] | None = None


class RuleSetResponse(BaseModel):
    resourceType: str
    rules: List[RuleEntry] = Field(default_factory=list)


class RuleListResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    resourceTypes: List[str] | None = None
    rules: List[RuleSetResponse] | None = None


class MessageResponse(BaseModel):
    message: str
