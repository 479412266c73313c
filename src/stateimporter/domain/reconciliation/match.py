"""Candidate matching between one declared resource and the observed inventory.

All comparisons are case-insensitive string comparisons; there is no fuzzy
matching.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from stateimporter.domain.model import MatchStrategy

if TYPE_CHECKING:
    from collections.abc import Iterable

    from stateimporter.domain.model import DeclaredResource, ObservedResource

type MatchPredicate = Callable[[ObservedResource, str], bool]


def _name_equals(observed: ObservedResource, key: str) -> bool:
    return observed.name.lower() == key


def _id_contains(observed: ObservedResource, key: str) -> bool:
    return key in observed.id.lower()


def _id_ends_with(observed: ObservedResource, key: str) -> bool:
    return observed.id.lower().endswith(key)


def _id_equals(observed: ObservedResource, key: str) -> bool:
    return observed.id.lower() == key


_PREDICATES: dict[MatchStrategy, MatchPredicate] = {
    MatchStrategy.EXACT: _name_equals,
    MatchStrategy.CONTAINS: _id_contains,
    MatchStrategy.ENDS_WITH: _id_ends_with,
    MatchStrategy.ID_EXACT: _id_equals,
}


def match_candidates(
    resource: DeclaredResource,
    observed: Iterable[ObservedResource],
) -> list[ObservedResource]:
    """Return the observed resources satisfying ``resource``'s match strategy.

    Candidates keep the observed input order. A declared resource without a
    match key has no candidates.
    """

    if not resource.resource_name:
        return []
    key = resource.resource_name.lower()
    predicate = _PREDICATES[resource.match_strategy]
    return [candidate for candidate in observed if predicate(candidate, key)]


def match(resource: DeclaredResource, observed: Iterable[ObservedResource]) -> None:
    """Append every matching observed resource to ``resource.candidates``."""

    resource.candidates.extend(match_candidates(resource, observed))
