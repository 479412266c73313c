"""Domain enums (pure, dependency-light).

Values are the spellings used in configuration files and in the issue ledger,
so they must stay stable across releases.
"""

from __future__ import annotations

from enum import StrEnum


class MatchStrategy(StrEnum):
    """How a declared resource's match key is compared with observed resources."""

    EXACT = "Exact"
    CONTAINS = "IDContains"
    ENDS_WITH = "IDEndsWith"
    ID_EXACT = "IDExact"


class IssueType(StrEnum):
    NO_RESOURCE_ID = "NoResourceID"
    MULTIPLE_RESOURCE_IDS = "MultipleResourceIDs"
    UNUSED_RESOURCE_ID = "UnusedResourceID"


class Action(StrEnum):
    """Resolution recorded against an issue, and the final action of a mapping."""

    USE = "Use"
    IGNORE = "Ignore"
    REPLACE = "Replace"
    DESTROY = "Destroy"


class MappedOrigin(StrEnum):
    """Which inventory a mapped resource record was produced from."""

    FROM_DECLARED = "FromDeclared"
    FROM_OBSERVED = "FromObserved"


LEGAL_ACTIONS: dict[IssueType, frozenset[Action]] = {
    IssueType.NO_RESOURCE_ID: frozenset({Action.IGNORE, Action.REPLACE}),
    IssueType.MULTIPLE_RESOURCE_IDS: frozenset({Action.IGNORE, Action.USE}),
    IssueType.UNUSED_RESOURCE_ID: frozenset({Action.IGNORE, Action.REPLACE, Action.DESTROY}),
}

REMOVAL_ACTIONS: frozenset[Action] = frozenset({Action.REPLACE, Action.DESTROY})
