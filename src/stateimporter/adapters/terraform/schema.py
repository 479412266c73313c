"""Pydantic models for the parts of ``terraform show -json`` output we read."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _none_to_empty(value: object) -> object:
    return {} if value is None else value


class PlanBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ResourceChangeDetail(PlanBaseModel):
    actions: list[str] = Field(default_factory=list[str])
    after: dict[str, object] = Field(default_factory=dict[str, object])
    after_unknown: dict[str, object] = Field(default_factory=dict[str, object])

    _normalize_after = field_validator("after", "after_unknown", mode="before")(_none_to_empty)


class ResourceChange(PlanBaseModel):
    address: str
    mode: str
    type: str
    name: str
    change: ResourceChangeDetail = Field(default_factory=ResourceChangeDetail)


class PlanDocument(PlanBaseModel):
    format_version: str | None = None
    terraform_version: str | None = None
    resource_changes: list[ResourceChange] = Field(default_factory=list[ResourceChange])
