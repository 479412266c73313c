from __future__ import annotations

import pytest

from stateimporter.domain.model import Action, IssueType, MappedOrigin
from stateimporter.domain.reconciliation import AppliedResolution, FinalMapper
from tests.helpers.resources import make_declared, make_observed


def test_bind_records_declared_address_and_api_version() -> None:
    mapper = FinalMapper()
    resource = make_declared("azapi_resource.vault", api_version="2023-07-01")

    record = mapper.bind(resource, make_observed("/vaults/kv"))

    assert record.origin is MappedOrigin.FROM_DECLARED
    assert record.action is Action.USE
    assert record.resource_id == "/vaults/kv"
    assert record.api_version == "2023-07-01"
    assert record.issue_type is None


def test_declared_ignore_is_still_emitted() -> None:
    mapper = FinalMapper()
    resource = make_declared("azurerm_storage_account.logs")
    applied = AppliedResolution(
        issue_id="abc1234",
        issue_type=IssueType.NO_RESOURCE_ID,
        action=Action.IGNORE,
    )

    mapper.record_declared(resource, applied)

    [record] = mapper.mapped_resources()
    assert record.action is Action.IGNORE
    assert record.resource_id == ""
    assert record.issue_type is IssueType.NO_RESOURCE_ID


def test_unused_ignore_is_dropped_and_removals_recorded() -> None:
    mapper = FinalMapper()
    kept = make_observed("/accounts/kept", resource_type="microsoft.storage/storageaccounts")
    removed = make_observed("/accounts/old", resource_type="microsoft.storage/storageaccounts")

    ignored = mapper.record_observed(
        AppliedResolution(
            issue_id="1111111",
            issue_type=IssueType.UNUSED_RESOURCE_ID,
            action=Action.IGNORE,
            target=kept,
        )
    )
    record = mapper.record_observed(
        AppliedResolution(
            issue_id="2222222",
            issue_type=IssueType.UNUSED_RESOURCE_ID,
            action=Action.DESTROY,
            target=removed,
        )
    )

    assert ignored is None
    assert record is not None
    assert record.origin is MappedOrigin.FROM_OBSERVED
    assert record.resource_type == "microsoft.storage/storageaccounts"
    assert mapper.mapped_resources() == [record]


def test_declared_records_precede_removals() -> None:
    mapper = FinalMapper()
    mapper.remove(make_observed("/accounts/old"), action=Action.REPLACE)
    mapper.bind(make_declared("azurerm_storage_account.logs"), make_observed("/accounts/new"))

    origins = [record.origin for record in mapper.mapped_resources()]

    assert origins == [MappedOrigin.FROM_DECLARED, MappedOrigin.FROM_OBSERVED]


def test_each_resource_is_mapped_once() -> None:
    mapper = FinalMapper()
    resource = make_declared("azurerm_storage_account.logs")
    old = make_observed("/accounts/old")
    mapper.bind(resource, make_observed("/accounts/new"))
    mapper.remove(old, action=Action.DESTROY)

    with pytest.raises(ValueError, match="already mapped"):
        mapper.ignore(resource, issue_type=IssueType.NO_RESOURCE_ID)
    with pytest.raises(ValueError, match="already mapped"):
        mapper.remove(old, action=Action.REPLACE)


def test_remove_requires_a_removal_action() -> None:
    with pytest.raises(ValueError, match="Not a removal action"):
        FinalMapper().remove(make_observed("/accounts/old"), action=Action.USE)
