"""Location-affinity narrowing for declared resources with several candidates.

Location is a strong, cheap signal for near-duplicate names across regions,
but it never picks among candidates that still look alike. The ID-substring
test can also match unrelated resources whose ID happens to contain the
location string; that behaviour is kept for compatibility with existing
ledgers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stateimporter.domain.model import DeclaredResource, ObservedResource


def location_candidates(resource: DeclaredResource) -> list[ObservedResource]:
    """Return candidates in the declared location, by equality or ID substring."""

    location = resource.location.lower()
    selected: list[ObservedResource] = []
    for candidate in resource.candidates:
        if resource.location == candidate.location or location in candidate.id.lower():
            selected.append(candidate)
    return selected


def disambiguate(resource: DeclaredResource) -> ObservedResource | None:
    """Narrow ``resource.candidates`` to one candidate if location settles it.

    Returns the chosen candidate, or ``None`` when the ambiguity remains; in
    that case the candidate list is left untouched so the issue can carry the
    full list.
    """

    selected = location_candidates(resource)
    if len(selected) != 1:
        return None
    resource.candidates[:] = selected
    return selected[0]
