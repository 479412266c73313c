"""Terminal reconciliation records handed to exporters and directive writers."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import Action, IssueType, MappedOrigin


@dataclass(frozen=True, slots=True, kw_only=True)
class MappedResource:
    origin: MappedOrigin
    action: Action
    resource_type: str
    resource_address: str = ""
    resource_id: str = ""
    api_version: str = ""
    issue_type: IssueType | None = None
