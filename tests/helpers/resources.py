"""Builders for declared and observed resources and reviewed ledgers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stateimporter.domain.model import (
    Action,
    DeclaredResource,
    Issue,
    IssueType,
    MatchStrategy,
    ObservedResource,
    Resolution,
)
from stateimporter.domain.reconciliation import ResolutionLedger, identity_hash

if TYPE_CHECKING:
    from collections.abc import Iterable

RG = "/subscriptions/00000000-1111-2222-3333-444444444444/resourceGroups/rg-app"


def make_observed(
    resource_id: str,
    *,
    name: str = "",
    resource_type: str = "microsoft.storage/storageaccounts",
    location: str = "",
) -> ObservedResource:
    return ObservedResource(id=resource_id, type=resource_type, name=name, location=location)


def make_declared(
    address: str,
    *,
    resource_name: str = "",
    match_strategy: MatchStrategy = MatchStrategy.EXACT,
    location: str = "",
    resource_type: str = "azurerm_storage_account",
    sub_type: str = "",
    api_version: str = "",
) -> DeclaredResource:
    return DeclaredResource(
        address=address,
        type=resource_type,
        name=address.rsplit(".", 1)[-1],
        sub_type=sub_type,
        location=location,
        resource_name=resource_name,
        match_strategy=match_strategy,
        api_version=api_version,
    )


def declared_issue(
    address: str,
    issue_type: IssueType,
    resolution: Resolution,
    *,
    candidate_ids: Iterable[str] = (),
) -> Issue:
    return Issue(
        issue_id=identity_hash(address),
        issue_type=issue_type,
        resource_address=address,
        candidate_ids=list(candidate_ids),
        resolution=resolution,
    )


def unused_issue(resource_id: str, action: Action) -> Issue:
    return Issue(
        issue_id=identity_hash(resource_id),
        issue_type=IssueType.UNUSED_RESOURCE_ID,
        resource_address=resource_id,
        candidate_ids=[resource_id],
        resolution=Resolution(action=action),
    )


def make_ledger(*issues: Issue) -> ResolutionLedger:
    return ResolutionLedger.from_issues(issues)
