"""HTTP client for Azure Resource Graph queries."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from azure.identity import DefaultAzureCredential
from pydantic import ValidationError

from stateimporter.adapters.arm import ArmClient, acquire_access_token
from stateimporter.config.resource_graph import ACCESS_TOKEN_ENV_VAR, RESOURCE_GRAPH_API_VERSION
from stateimporter.config.settings import QueryScope

from .schema import ErrorResponse, QueryRequest, QueryRequestOptions, QueryResponse
from .translator import parse_observed_resource

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    import httpx

    from stateimporter.config.resource_graph import ResourceGraphConfig
    from stateimporter.config.settings import ResourceGraphQuery
    from stateimporter.domain.model import ObservedResource

log = getLogger(__name__)

RESOURCE_GRAPH_PATH = "/providers/Microsoft.ResourceGraph/resources"
MAX_PAGES_PER_QUERY = 1000


def build_arm_client(
    config: ResourceGraphConfig,
    *,
    credential_factory: Callable[..., DefaultAzureCredential] = DefaultAzureCredential,
) -> ArmClient:
    """Client authenticated with the configured token or the default credential chain."""

    access_token = config.access_token
    if access_token:
        log.debug(f"Using the configured access token ({ACCESS_TOKEN_ENV_VAR})")
    else:
        access_token = acquire_access_token(
            config.token_scope,
            authority=config.authority_host,
            credential_factory=credential_factory,
        )
    return ArmClient(config.resilience, access_token=access_token)


class ResourceGraphError(RuntimeError):
    """Raised when Resource Graph rejects a query or returns an unexpected payload."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


@dataclass(slots=True)
class ResourceGraphFetcher:
    """Run the configured queries and collect observed resources.

    Queries run per scope, subscriptions first. The first occurrence of a
    resource ID wins and resources whose ID matches an ignore pattern are
    dropped.
    """

    config: ResourceGraphConfig
    client_factory: Callable[[ResourceGraphConfig], ArmClient] = field(
        default=build_arm_client
    )
    _ignore_patterns: tuple[re.Pattern[str], ...] = field(init=False, default=())

    def __post_init__(self) -> None:
        self._ignore_patterns = tuple(
            re.compile(pattern) for pattern in self.config.ignore_resource_id_patterns
        )

    def __call__(self) -> list[ObservedResource]:
        return asyncio.run(self._fetch_resources_async())

    async def _fetch_resources_async(self) -> list[ObservedResource]:
        resources: dict[str, ObservedResource] = {}
        async with self.client_factory(self.config) as client:
            if self.config.subscription_ids:
                log.info("Running graph queries for Subscriptions")
                await self._run_scope(client, QueryScope.SUBSCRIPTION, resources)
            if self.config.management_group_ids:
                log.info("Running graph queries for Management Groups")
                await self._run_scope(client, QueryScope.MANAGEMENT_GROUP, resources)
        log.info(f"Resource Graph returned {len(resources)} resources")
        return list(resources.values())

    async def _run_scope(
        self,
        client: ArmClient,
        scope: QueryScope,
        resources: dict[str, ObservedResource],
    ) -> None:
        for query in self.config.queries:
            if query.scope is not scope:
                log.debug(f"Skipping query {query.name} for scope {scope}")
                continue
            log.info(f"Running Resource Graph Query: {query.name}")
            log.debug(f"Query: {query.query}")
            async for payload in self._query_pages(client, query):
                for item in payload.data:
                    self._collect(parse_observed_resource(item), resources)

    def _collect(self, resource: ObservedResource, resources: dict[str, ObservedResource]) -> None:
        if any(pattern.search(resource.id) for pattern in self._ignore_patterns):
            log.debug(f"Ignoring Resource ID: {resource.id}")
            return
        if resource.id in resources:
            log.debug(f"Skipping duplicate Resource ID: {resource.id}")
            return
        resources[resource.id] = resource

    async def _query_pages(
        self,
        client: ArmClient,
        query: ResourceGraphQuery,
    ) -> AsyncIterator[QueryResponse]:
        skip_token: str | None = None
        for _ in range(MAX_PAGES_PER_QUERY):
            request = self._build_request(query, skip_token=skip_token)
            payload = await self._perform_request(client=client, request=request)
            yield payload
            skip_token = payload.skip_token
            if not skip_token:
                return
        raise ResourceGraphError(
            f"Query {query.name} exceeded {MAX_PAGES_PER_QUERY} result pages"
        )

    def _build_request(self, query: ResourceGraphQuery, *, skip_token: str | None) -> QueryRequest:
        options = QueryRequestOptions(skip_token=skip_token)
        if query.scope is QueryScope.SUBSCRIPTION:
            return QueryRequest(
                query=query.query,
                subscriptions=list(self.config.subscription_ids),
                options=options,
            )
        return QueryRequest(
            query=query.query,
            management_groups=list(self.config.management_group_ids),
            options=options,
        )

    async def _perform_request(
        self,
        *,
        client: ArmClient,
        request: QueryRequest,
    ) -> QueryResponse:
        url = f"{self.config.arm_endpoint}{RESOURCE_GRAPH_PATH}"
        response = await client.post_json(
            url,
            request.to_payload(),
            api_version=RESOURCE_GRAPH_API_VERSION,
        )

        payload = _json_or_none(response)
        if response.is_error:
            if isinstance(payload, dict) and "error" in payload:
                error = ErrorResponse.model_validate(payload).error
                log.error(f"Resource Graph error {error.code}: {error.message}")
                raise ResourceGraphError(error.message, code=error.code)
            raise ResourceGraphError(
                f"Resource Graph request failed with HTTP {response.status_code}"
            )

        if not isinstance(payload, dict) or "data" not in payload:
            raise ResourceGraphError("Unexpected Resource Graph response payload")
        try:
            return QueryResponse.model_validate(payload)
        except ValidationError as exc:
            raise ResourceGraphError(f"Unexpected Resource Graph response payload: {exc}") from exc


def _json_or_none(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        return None
