"""Translate Resource Graph payloads into observed resources."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stateimporter.domain.model import ObservedResource

from .schema import ResourcePayload

if TYPE_CHECKING:
    from collections.abc import Mapping


def parse_observed_resource(payload: ResourcePayload | Mapping[str, object]) -> ObservedResource:
    resource = (
        payload
        if isinstance(payload, ResourcePayload)
        else ResourcePayload.model_validate(payload)
    )
    return ObservedResource(
        id=resource.id,
        type=resource.type,
        name=resource.name,
        location=resource.location,
    )
