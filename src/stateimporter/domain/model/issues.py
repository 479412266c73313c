"""Issues raised by a reconciliation pass and their human-entered resolutions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import Action, IssueType

if TYPE_CHECKING:
    from .resources import DeclaredResource, ObservedResource


@dataclass(frozen=True, slots=True, kw_only=True)
class Resolution:
    """How a reviewer resolved one issue.

    ``action_id`` points at another issue (``Replace`` on a missing resource).
    ``selected_id`` is the candidate picked for a ``Use`` on an ambiguous match.
    """

    action: Action
    action_id: str = ""
    selected_id: str = ""


@dataclass(slots=True, kw_only=True)
class Issue:
    """One gap or ambiguity between declared and observed resources.

    Descriptor fields are denormalized so the issue can be reviewed without
    the inventories at hand. For unused-resource issues the resource address
    is the observed resource ID.
    """

    issue_id: str
    issue_type: IssueType
    resource_address: str
    resource_name: str = ""
    resource_type: str = ""
    resource_sub_type: str = ""
    resource_location: str = ""
    candidate_ids: list[str] = field(default_factory=list[str])
    resolution: Resolution | None = None

    @property
    def is_resolved(self) -> bool:
        return self.resolution is not None

    @classmethod
    def from_declared(
        cls,
        resource: DeclaredResource,
        *,
        issue_id: str,
        issue_type: IssueType,
    ) -> Issue:
        return cls(
            issue_id=issue_id,
            issue_type=issue_type,
            resource_address=resource.address,
            resource_name=resource.resource_name,
            resource_type=resource.type,
            resource_sub_type=resource.sub_type,
            resource_location=resource.location,
            candidate_ids=resource.candidate_ids,
        )

    @classmethod
    def from_observed(cls, resource: ObservedResource, *, issue_id: str) -> Issue:
        return cls(
            issue_id=issue_id,
            issue_type=IssueType.UNUSED_RESOURCE_ID,
            resource_address=resource.id,
            resource_name=resource.name,
            resource_type=resource.type,
            resource_location=resource.location,
            candidate_ids=[resource.id],
        )
