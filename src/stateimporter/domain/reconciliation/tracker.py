"""One full reconciliation pass over the declared and observed inventories.

Declared resources are processed strictly in input order. Every observed
resource that shows up in a candidate list is marked consumed at that point,
including candidates of ambiguous matches; whatever is left unconsumed after
the last declared resource is reported as unused.

When a ledger is supplied, every issue is handed to the resolution applier
before it is recorded. A missing ledger entry then aborts the pass instead of
being reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from stateimporter.domain.model import Issue, IssueType

from .disambiguate import disambiguate
from .errors import IssueCollisionError
from .identity import identity_hash
from .mapping import FinalMapper
from .match import match

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stateimporter.domain.model import DeclaredResource, ObservedResource

    from .resolve import ResolutionApplier

log = getLogger(__name__)


@dataclass(slots=True)
class IssueTracker:
    applier: ResolutionApplier | None = None
    mapper: FinalMapper = field(default_factory=FinalMapper)
    issues: dict[str, Issue] = field(default_factory=dict[str, Issue])
    consumed: dict[str, ObservedResource] = field(default_factory=dict[str, "ObservedResource"])
    _seen_keys: dict[str, str] = field(init=False, default_factory=dict[str, str])

    def run(
        self,
        declared: Sequence[DeclaredResource],
        observed: Sequence[ObservedResource],
    ) -> None:
        for resource in declared:
            self.track_declared(resource, observed)
        self.track_unused(observed)

    def track_declared(
        self,
        resource: DeclaredResource,
        observed: Sequence[ObservedResource],
    ) -> None:
        resource.candidates.clear()
        match(resource, observed)

        if not resource.candidates:
            log.warning(
                f"No matching resource ID found for Name: {resource.resource_name}, "
                f"Type: {resource.type}, Address: {resource.address}"
            )
            self._raise_declared(resource, IssueType.NO_RESOURCE_ID)
            return

        for candidate in resource.candidates:
            self.consumed.setdefault(candidate.id, candidate)

        if len(resource.candidates) > 1 and disambiguate(resource) is None:
            log.warning(
                f"More than 1 Resource ID has been matched for Name: {resource.resource_name}, "
                f"Type: {resource.type}, Address: {resource.address}"
            )
            self._raise_declared(resource, IssueType.MULTIPLE_RESOURCE_IDS)
            return

        self.mapper.bind(resource, resource.candidates[0])

    def track_unused(self, observed: Sequence[ObservedResource]) -> None:
        for resource in observed:
            if resource.id in self.consumed:
                continue
            issue = Issue.from_observed(resource, issue_id=self._identity(resource.id))
            if self.applier is None:
                log.warning(f"Resource ID {resource.id} is not used in the Terraform plan")
                self._record(issue)
                continue
            self.mapper.record_observed(self.applier.apply(issue))

    def _raise_declared(self, resource: DeclaredResource, issue_type: IssueType) -> None:
        issue = Issue.from_declared(
            resource,
            issue_id=self._identity(resource.address),
            issue_type=issue_type,
        )
        if self.applier is None:
            self._record(issue)
            return
        applied = self.applier.apply(issue)
        if applied.target is not None:
            resource.candidates[:] = [applied.target]
        self.mapper.record_declared(resource, applied)

    def _identity(self, key: str) -> str:
        issue_id = identity_hash(key)
        previous = self._seen_keys.setdefault(issue_id, key)
        if previous != key:
            raise IssueCollisionError(
                f"Issue ID {issue_id} is shared by {previous!r} and {key!r}"
            )
        return issue_id

    def _record(self, issue: Issue) -> None:
        self.issues[issue.issue_id] = issue
