"""Fatal reconciliation errors.

Every error here aborts a run. Soft findings (issues raised when no ledger
was supplied) are never exceptions; they are returned for human review.
"""

from __future__ import annotations


class ReconciliationError(RuntimeError):
    """Base class for conditions that abort a reconciliation run."""


class ResolutionConfigurationError(ReconciliationError):
    """Raised when the supplied resolution ledger is malformed or inconsistent."""


class LedgerFormatError(ResolutionConfigurationError):
    """Raised when the ledger's shape (header, row width, issue type) is invalid."""


class InvalidActionError(ResolutionConfigurationError):
    """Raised when an action is missing, unrecognized, or illegal for its issue type."""

    def __init__(self, message: str, *, issue_id: str) -> None:
        super().__init__(message)
        self.issue_id = issue_id


class UnknownActionTargetError(ResolutionConfigurationError):
    """Raised when a ``Replace`` resolution points at nothing usable."""

    def __init__(self, message: str, *, issue_id: str, action_id: str) -> None:
        super().__init__(message)
        self.issue_id = issue_id
        self.action_id = action_id


class ChainedReplaceError(ResolutionConfigurationError):
    """Raised when a ``Replace`` target is itself resolved by another ``Replace``."""


class DuplicateSelectionError(ResolutionConfigurationError):
    """Raised when more than one candidate is selected for the same issue."""


class StaleResolutionError(ResolutionConfigurationError):
    """Raised when a ledger entry no longer agrees with the current inventories."""


class UnreviewedIssueError(ReconciliationError):
    """Raised when a ledger was supplied but has no entry for a raised issue."""

    def __init__(self, message: str, *, issue_id: str) -> None:
        super().__init__(message)
        self.issue_id = issue_id


class IssueCollisionError(ReconciliationError):
    """Raised when two different resources hash to the same issue identity."""
