"""Observed and declared infrastructure resources."""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import MatchStrategy


@dataclass(frozen=True, slots=True, kw_only=True)
class ObservedResource:
    """Resource discovered in the live cloud environment.

    ``id`` is globally unique; providers collapse duplicates before the
    resources reach the reconciliation engine.
    """

    id: str
    type: str
    name: str
    location: str = ""


@dataclass(slots=True, kw_only=True)
class DeclaredResource:
    """Resource declared by the infrastructure-as-code plan.

    ``resource_name`` and ``match_strategy`` are assigned upstream from the
    naming rules for the resource type. ``candidates`` is filled by the
    matcher and narrowed by the disambiguator during a reconciliation pass.
    """

    address: str
    type: str
    name: str = ""
    sub_type: str = ""
    location: str = ""
    resource_name: str = ""
    match_strategy: MatchStrategy = MatchStrategy.EXACT
    api_version: str = ""
    candidates: list[ObservedResource] = field(default_factory=list["ObservedResource"])

    @property
    def candidate_ids(self) -> list[str]:
        return [candidate.id for candidate in self.candidates]
