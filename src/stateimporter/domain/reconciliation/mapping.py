"""Assemble terminal mapped-resource records for one reconciliation pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from stateimporter.domain.model import (
    REMOVAL_ACTIONS,
    Action,
    IssueType,
    MappedOrigin,
    MappedResource,
)

if TYPE_CHECKING:
    from stateimporter.domain.model import DeclaredResource, ObservedResource

    from .resolve import AppliedResolution


@dataclass(slots=True)
class FinalMapper:
    """Collect at most one record per declared address and per observed ID."""

    _declared: dict[str, MappedResource] = field(default_factory=dict[str, MappedResource])
    _observed: dict[str, MappedResource] = field(default_factory=dict[str, MappedResource])

    def bind(
        self,
        resource: DeclaredResource,
        target: ObservedResource,
        *,
        action: Action = Action.USE,
        issue_type: IssueType | None = None,
    ) -> MappedResource:
        return self._add_declared(
            MappedResource(
                origin=MappedOrigin.FROM_DECLARED,
                action=action,
                resource_type=resource.type,
                resource_address=resource.address,
                resource_id=target.id,
                api_version=resource.api_version,
                issue_type=issue_type,
            )
        )

    def ignore(self, resource: DeclaredResource, *, issue_type: IssueType) -> MappedResource:
        return self._add_declared(
            MappedResource(
                origin=MappedOrigin.FROM_DECLARED,
                action=Action.IGNORE,
                resource_type=resource.type,
                resource_address=resource.address,
                api_version=resource.api_version,
                issue_type=issue_type,
            )
        )

    def remove(self, resource: ObservedResource, *, action: Action) -> MappedResource:
        if action not in REMOVAL_ACTIONS:
            raise ValueError(f"Not a removal action: {action}")
        record = MappedResource(
            origin=MappedOrigin.FROM_OBSERVED,
            action=action,
            resource_type=resource.type,
            resource_id=resource.id,
            issue_type=IssueType.UNUSED_RESOURCE_ID,
        )
        if resource.id in self._observed:
            raise ValueError(f"Observed resource already mapped: {resource.id}")
        self._observed[resource.id] = record
        return record

    def record_declared(
        self,
        resource: DeclaredResource,
        applied: AppliedResolution,
    ) -> MappedResource:
        """Record the outcome of a ledger resolution for a declared resource."""

        if applied.action is Action.IGNORE:
            return self.ignore(resource, issue_type=applied.issue_type)
        if applied.target is None:
            raise ValueError(f"Resolution for {resource.address} has no target resource")
        return self.bind(
            resource,
            applied.target,
            action=applied.action,
            issue_type=applied.issue_type,
        )

    def record_observed(self, applied: AppliedResolution) -> MappedResource | None:
        """Record the outcome of a ledger resolution for an unused observed resource.

        Ignored resources are dropped from the mapping.
        """

        if applied.action is Action.IGNORE or applied.target is None:
            return None
        return self.remove(applied.target, action=applied.action)

    def mapped_resources(self) -> list[MappedResource]:
        return [*self._declared.values(), *self._observed.values()]

    def _add_declared(self, record: MappedResource) -> MappedResource:
        if record.resource_address in self._declared:
            raise ValueError(f"Declared resource already mapped: {record.resource_address}")
        self._declared[record.resource_address] = record
        return record
