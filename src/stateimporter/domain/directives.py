"""Derive import and removal directives from the terminal mapping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from stateimporter.domain.model import REMOVAL_ACTIONS, Action, MappedOrigin

if TYPE_CHECKING:
    from collections.abc import Iterable

    from stateimporter.domain.model import MappedResource


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportDirective:
    """Bind the declared address ``to`` to the real resource ``id``."""

    to: str
    id: str


@dataclass(frozen=True, slots=True, kw_only=True)
class RemovalDirective:
    """Remove the real resource ``id``; ``type`` selects the removal command."""

    id: str
    type: str


@dataclass(slots=True)
class Directives:
    imports: list[ImportDirective] = field(default_factory=list["ImportDirective"])
    removals: list[RemovalDirective] = field(default_factory=list["RemovalDirective"])


def import_id(record: MappedResource) -> str:
    if record.api_version:
        return f"{record.resource_id}?api-version={record.api_version}"
    return record.resource_id


def build_directives(mapped: Iterable[MappedResource]) -> Directives:
    directives = Directives()
    for record in mapped:
        if record.origin is MappedOrigin.FROM_DECLARED and record.action is Action.USE:
            directives.imports.append(
                ImportDirective(to=record.resource_address, id=import_id(record))
            )
        elif record.origin is MappedOrigin.FROM_OBSERVED and record.action in REMOVAL_ACTIONS:
            directives.removals.append(
                RemovalDirective(id=record.resource_id, type=record.resource_type)
            )
    return directives


__all__ = ["Directives", "ImportDirective", "RemovalDirective", "build_directives", "import_id"]
