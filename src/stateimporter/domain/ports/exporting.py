"""Ports for persisting reconciliation output and reading reviewed ledgers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from stateimporter.domain.directives import Directives
    from stateimporter.domain.model import DeclaredResource, Issue, MappedResource
    from stateimporter.domain.reconciliation import ResolutionLedger


@runtime_checkable
class LedgerLoader(Protocol):
    def __call__(self, path: Path) -> ResolutionLedger:
        ...


@runtime_checkable
class LedgerExporter(Protocol):
    def __call__(self, issues: Mapping[str, Issue], path: Path | None = None) -> Path:
        ...


@runtime_checkable
class ResultExporter(Protocol):
    """Structured export of issues, declared resources and the final mapping."""

    def export_issues(self, issues: Mapping[str, Issue]) -> Path:
        ...

    def export_declared(self, resources: Sequence[DeclaredResource]) -> Path:
        ...

    def export_mapping(self, mapped: Sequence[MappedResource]) -> Path:
        ...


@runtime_checkable
class DirectiveWriter(Protocol):
    def __call__(self, directives: Directives) -> Sequence[Path]:
        ...

    def clean(self) -> None:
        """Remove directive files left over from an earlier run."""
        ...


__all__ = ["DirectiveWriter", "LedgerExporter", "LedgerLoader", "ResultExporter"]
