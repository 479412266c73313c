"""Ports for loading the inventories a reconciliation pass works on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stateimporter.domain.model import DeclaredResource, ObservedResource


@runtime_checkable
class ObservedResourceProvider(Protocol):
    """Callable port returning live resources, deduplicated by ID."""

    def __call__(self) -> Sequence[ObservedResource]:
        ...


@runtime_checkable
class DeclaredResourceProvider(Protocol):
    """Callable port returning declared resources with match keys assigned."""

    def __call__(self) -> Sequence[DeclaredResource]:
        ...


__all__ = ["DeclaredResourceProvider", "ObservedResourceProvider"]
