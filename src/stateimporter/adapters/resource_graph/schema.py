"""Pydantic models describing Azure Resource Graph query payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _none_to_blank(value: object) -> object:
    return "" if value is None else value


class ResourceGraphBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class QueryRequestOptions(ResourceGraphBaseModel):
    authorization_scope_filter: str = Field(
        default="AtScopeAndBelow", alias="authorizationScopeFilter"
    )
    result_format: str = Field(default="objectArray", alias="resultFormat")
    skip_token: str | None = Field(default=None, alias="$skipToken")


class QueryRequest(ResourceGraphBaseModel):
    query: str
    subscriptions: list[str] | None = None
    management_groups: list[str] | None = Field(default=None, alias="managementGroups")
    options: QueryRequestOptions = Field(default_factory=QueryRequestOptions)

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ResourcePayload(ResourceGraphBaseModel):
    id: str
    type: str = ""
    name: str = ""
    location: str = ""

    _normalize_blank = field_validator("type", "name", "location", mode="before")(_none_to_blank)


class QueryResponse(ResourceGraphBaseModel):
    total_records: int = Field(default=0, alias="totalRecords")
    count: int = 0
    result_truncated: str | None = Field(default=None, alias="resultTruncated")
    skip_token: str | None = Field(default=None, alias="$skipToken")
    data: list[ResourcePayload] = Field(default_factory=list[ResourcePayload])


class ErrorDetail(ResourceGraphBaseModel):
    code: str = ""
    message: str = ""


class ErrorResponse(ResourceGraphBaseModel):
    error: ErrorDetail
