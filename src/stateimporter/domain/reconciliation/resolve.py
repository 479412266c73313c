"""Apply reviewed ledger resolutions to issues raised during a pass.

Responsibilities of this stage:
- look up the ledger entry for every issue the tracker would raise
- check that the entry still describes the same kind of issue
- turn the recorded action into a concrete outcome (bind, ignore, remove)

Cross-issue ``Replace`` references are followed exactly one hop; chains are
rejected when the ledger is built. Resolving one issue never resolves another.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from stateimporter.domain.model import (
    LEGAL_ACTIONS,
    Action,
    IssueType,
    ObservedResource,
    Resolution,
)

from .errors import (
    InvalidActionError,
    StaleResolutionError,
    UnknownActionTargetError,
    UnreviewedIssueError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from stateimporter.domain.model import Issue

    from .ledger import ResolutionLedger

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class AppliedResolution:
    """Outcome of applying one ledger resolution.

    ``target`` is the observed resource the issue's subject ends up bound to
    (declared-side issues) or slated for removal (unused resources).
    """

    issue_id: str
    issue_type: IssueType
    action: Action
    target: ObservedResource | None = None


@dataclass(slots=True)
class ResolutionApplier:
    ledger: ResolutionLedger
    observed: Iterable[ObservedResource] = ()
    _observed_by_id: dict[str, ObservedResource] = field(
        init=False, default_factory=dict[str, ObservedResource]
    )
    _observed_by_folded_id: dict[str, ObservedResource] = field(
        init=False, default_factory=dict[str, ObservedResource]
    )

    def __post_init__(self) -> None:
        for resource in self.observed:
            self._observed_by_id.setdefault(resource.id, resource)
            self._observed_by_folded_id.setdefault(resource.id.lower(), resource)

    def _lookup(self, resource_id: str) -> ObservedResource | None:
        """Find an observed resource by exact ID, falling back to a case-insensitive match."""

        found = self._observed_by_id.get(resource_id)
        if found is None:
            found = self._observed_by_folded_id.get(resource_id.lower())
        return found

    def apply(self, issue: Issue) -> AppliedResolution:
        """Resolve ``issue`` from the ledger and attach the resolution to it."""

        resolution = self._resolution_for(issue)
        if issue.issue_type is IssueType.NO_RESOURCE_ID:
            applied = self._apply_missing(issue, resolution)
        elif issue.issue_type is IssueType.MULTIPLE_RESOURCE_IDS:
            applied = self._apply_ambiguous(issue, resolution)
        else:
            applied = self._apply_unused(issue, resolution)
        issue.resolution = resolution
        log.debug(
            f"Applied resolution for Issue ID: {issue.issue_id}, Type: {issue.issue_type}, "
            f"Action: {applied.action}"
        )
        return applied

    def _resolution_for(self, issue: Issue) -> Resolution:
        entry = self.ledger.get(issue.issue_id)
        if entry is None or entry.resolution is None:
            raise UnreviewedIssueError(
                "No matching issue resolution found for Issue ID, check your ledger and try "
                f"again: {issue.issue_id} Name: {issue.resource_name}, "
                f"Type: {issue.resource_type}, Address: {issue.resource_address}",
                issue_id=issue.issue_id,
            )
        if entry.issue_type is not issue.issue_type:
            raise StaleResolutionError(
                f"Issue ID {issue.issue_id} was reviewed as {entry.issue_type} but is now "
                f"{issue.issue_type}; export and review the issues again"
            )
        resolution = entry.resolution
        if resolution.action not in LEGAL_ACTIONS[issue.issue_type]:
            raise InvalidActionError(
                f"Action {resolution.action} is not valid for {issue.issue_type} "
                f"(Issue ID: {issue.issue_id})",
                issue_id=issue.issue_id,
            )
        return resolution

    def _apply_missing(self, issue: Issue, resolution: Resolution) -> AppliedResolution:
        if resolution.action is Action.IGNORE:
            return self._outcome(issue, Action.IGNORE)

        target_id = self.ledger.resolved_resource_id(resolution.action_id)
        target = self._lookup(target_id) if target_id else None
        if target is None:
            raise UnknownActionTargetError(
                f"Action ID {resolution.action_id} for Issue ID {issue.issue_id} does not "
                "refer to an observed resource in this run",
                issue_id=issue.issue_id,
                action_id=resolution.action_id,
            )
        return self._outcome(issue, Action.REPLACE, target=target)

    def _apply_ambiguous(self, issue: Issue, resolution: Resolution) -> AppliedResolution:
        if resolution.action is Action.IGNORE:
            return self._outcome(issue, Action.IGNORE)

        candidate_id = _select_candidate(issue.candidate_ids, resolution.selected_id)
        target = self._observed_by_id.get(candidate_id) if candidate_id else None
        if target is not None:
            return self._outcome(issue, Action.USE, target=target)
        raise StaleResolutionError(
            f"Selected resource {resolution.selected_id} is not a candidate for Issue ID "
            f"{issue.issue_id}: {issue.candidate_ids}"
        )

    def _apply_unused(self, issue: Issue, resolution: Resolution) -> AppliedResolution:
        target = self._observed_by_id.get(issue.resource_address)
        if resolution.action is Action.IGNORE:
            log.debug(f"Ignoring Issue ID: {issue.issue_id}, Action: {resolution.action}")
        else:
            log.debug(
                f"Destroying via Replace or Destroy Issue ID: {issue.issue_id}, "
                f"Action: {resolution.action}"
            )
        return self._outcome(issue, resolution.action, target=target)

    @staticmethod
    def _outcome(
        issue: Issue,
        action: Action,
        *,
        target: ObservedResource | None = None,
    ) -> AppliedResolution:
        return AppliedResolution(
            issue_id=issue.issue_id,
            issue_type=issue.issue_type,
            action=action,
            target=target,
        )


def _select_candidate(candidate_ids: Iterable[str], selected_id: str) -> str | None:
    """Pick the candidate a reviewer selected; exact spelling wins over a case-insensitive match."""

    candidates = list(candidate_ids)
    if selected_id in candidates:
        return selected_id
    folded = selected_id.lower()
    return next((candidate for candidate in candidates if candidate.lower() == folded), None)
