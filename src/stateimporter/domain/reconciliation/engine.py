"""Entry point for a reconciliation pass over pre-loaded inventories."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .resolve import ResolutionApplier
from .tracker import IssueTracker

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stateimporter.domain.model import (
        DeclaredResource,
        Issue,
        MappedResource,
        ObservedResource,
    )

    from .ledger import ResolutionLedger

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationResult:
    """Issues left for review and the terminal mapping of one pass.

    A resource that raised an unresolved issue never appears in ``mapped``.
    """

    issues: dict[str, Issue] = field(default_factory=dict[str, "Issue"])
    mapped: list[MappedResource] = field(default_factory=list["MappedResource"])
    consumed_ids: frozenset[str] = frozenset()

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)


@dataclass(slots=True)
class ReconciliationEngine:
    """Match declared resources to observed resources, optionally applying a ledger.

    Without a ledger every gap or ambiguity is returned as an issue. With a
    ledger every issue must have a reviewed resolution, otherwise the pass
    aborts with ``UnreviewedIssueError``.
    """

    ledger: ResolutionLedger | None = None

    def reconcile(
        self,
        declared: Sequence[DeclaredResource],
        observed: Sequence[ObservedResource],
    ) -> ReconciliationResult:
        applier = None
        if self.ledger is not None:
            applier = ResolutionApplier(self.ledger, observed)

        tracker = IssueTracker(applier=applier)
        tracker.run(declared, observed)

        result = ReconciliationResult(
            issues=dict(tracker.issues),
            mapped=tracker.mapper.mapped_resources(),
            consumed_ids=frozenset(tracker.consumed),
        )
        log.info(
            f"Reconciled {len(declared)} declared and {len(observed)} observed resources: "
            f"{len(result.issues)} issues, {len(result.mapped)} mapped"
        )
        return result
