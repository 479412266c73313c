"""Translate a Terraform JSON plan into declared resources.

Responsibilities of this stage:
- keep managed resources whose address matches no ignore pattern
- split ``azapi_resource`` types of the form ``Type@ApiVersion``
- assign the match key and match strategy from the naming rules
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from stateimporter.domain.model import DeclaredResource, MatchStrategy

from .schema import PlanDocument, ResourceChange

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from stateimporter.config.settings import NameFormat

log = getLogger(__name__)

AZAPI_RESOURCE_TYPE = "azapi_resource"


@dataclass(slots=True)
class PlanTranslator:
    name_formats: Iterable[NameFormat] = ()
    ignore_address_patterns: Iterable[str] = ()
    _formats: tuple[NameFormat, ...] = field(init=False, default=())
    _ignore: tuple[re.Pattern[str], ...] = field(init=False, default=())

    def __post_init__(self) -> None:
        self._formats = tuple(self.name_formats)
        self._ignore = tuple(re.compile(pattern) for pattern in self.ignore_address_patterns)

    def __call__(self, plan: PlanDocument | Mapping[str, object]) -> list[DeclaredResource]:
        document = plan if isinstance(plan, PlanDocument) else PlanDocument.model_validate(plan)
        resources: list[DeclaredResource] = []
        for change in document.resource_changes:
            if change.mode != "managed":
                log.debug(f"Skipping resource with mode {change.mode}")
                continue
            if any(pattern.search(change.address) for pattern in self._ignore):
                log.debug(f"Ignoring Resource: {change.address}")
                continue
            resources.append(self.translate(change))
            log.debug(f"Adding Resource: {change.address}")
        return resources

    def translate(self, change: ResourceChange) -> DeclaredResource:
        properties = change.change.after
        sub_type, api_version = split_azapi_type(change.type, properties)
        resource = DeclaredResource(
            address=change.address,
            type=change.type,
            name=change.name,
            sub_type=sub_type,
            api_version=api_version,
            location=_string_property(properties, "location"),
        )

        rule = self.naming_rule(change.type, sub_type)
        if rule is not None:
            resource.resource_name = rule.render(properties)
            resource.match_strategy = rule.match_strategy
        elif name := _string_property(properties, "name"):
            resource.resource_name = name
            resource.match_strategy = MatchStrategy.EXACT
        else:
            log.debug(
                f"Resource {change.address} does not have a name property or mapped name property"
            )
        return resource

    def naming_rule(self, resource_type: str, sub_type: str) -> NameFormat | None:
        """Pick the naming rule for a resource; the last applicable rule wins."""

        chosen: NameFormat | None = None
        for rule in self._formats:
            if sub_type and rule.type == sub_type:
                chosen = rule
            elif rule.type == resource_type and rule.sub_type in (None, sub_type):
                chosen = rule
        return chosen


def split_azapi_type(resource_type: str, properties: Mapping[str, object]) -> tuple[str, str]:
    """Return ``(sub_type, api_version)`` for an ``azapi_resource``, blanks otherwise."""

    if resource_type != AZAPI_RESOURCE_TYPE:
        return "", ""
    value = properties.get("type")
    if not isinstance(value, str) or not value:
        return "", ""
    sub_type, _, api_version = value.partition("@")
    return sub_type, api_version


def _string_property(properties: Mapping[str, object], name: str) -> str:
    value = properties.get(name)
    return value if isinstance(value, str) else ""
