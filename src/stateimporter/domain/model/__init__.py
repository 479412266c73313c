"""Reconciliation domain model."""

from __future__ import annotations

from .enums import LEGAL_ACTIONS, REMOVAL_ACTIONS, Action, IssueType, MappedOrigin, MatchStrategy
from .issues import Issue, Resolution
from .mapped import MappedResource
from .resources import DeclaredResource, ObservedResource

__all__ = [
    "LEGAL_ACTIONS",
    "REMOVAL_ACTIONS",
    "Action",
    "DeclaredResource",
    "Issue",
    "IssueType",
    "MappedOrigin",
    "MappedResource",
    "MatchStrategy",
    "ObservedResource",
    "Resolution",
]
