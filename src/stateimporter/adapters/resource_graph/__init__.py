"""Public interface for the Azure Resource Graph adapter."""

from __future__ import annotations

from .client import ResourceGraphError, ResourceGraphFetcher, build_arm_client
from .schema import QueryRequest, QueryResponse, ResourcePayload
from .translator import parse_observed_resource

__all__ = [
    "QueryRequest",
    "QueryResponse",
    "ResourceGraphError",
    "ResourceGraphFetcher",
    "ResourcePayload",
    "build_arm_client",
    "parse_observed_resource",
]
