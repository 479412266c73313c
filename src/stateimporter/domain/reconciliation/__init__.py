"""Reconciliation of declared resources against observed resources."""

from __future__ import annotations

from .disambiguate import disambiguate, location_candidates
from .engine import ReconciliationEngine, ReconciliationResult
from .errors import (
    ChainedReplaceError,
    DuplicateSelectionError,
    InvalidActionError,
    IssueCollisionError,
    LedgerFormatError,
    ReconciliationError,
    ResolutionConfigurationError,
    StaleResolutionError,
    UnknownActionTargetError,
    UnreviewedIssueError,
)
from .identity import IDENTITY_HASH_LENGTH, identity_hash
from .ledger import LEDGER_HEADER, LedgerRow, ResolutionLedger, ledger_rows
from .mapping import FinalMapper
from .match import match, match_candidates
from .resolve import AppliedResolution, ResolutionApplier
from .tracker import IssueTracker

__all__ = [
    "IDENTITY_HASH_LENGTH",
    "LEDGER_HEADER",
    "AppliedResolution",
    "ChainedReplaceError",
    "DuplicateSelectionError",
    "FinalMapper",
    "InvalidActionError",
    "IssueCollisionError",
    "IssueTracker",
    "LedgerFormatError",
    "LedgerRow",
    "ReconciliationEngine",
    "ReconciliationError",
    "ReconciliationResult",
    "ResolutionApplier",
    "ResolutionConfigurationError",
    "ResolutionLedger",
    "StaleResolutionError",
    "UnknownActionTargetError",
    "UnreviewedIssueError",
    "disambiguate",
    "identity_hash",
    "ledger_rows",
    "location_candidates",
    "match",
    "match_candidates",
]
