"""Async client for Azure Resource Manager endpoints.

Tokens come from the default Azure credential chain (``azure-identity``):
environment service principals, workload and managed identities, then the
Azure CLI login. Retries are handled by the transport (``httpx-retries``),
including ``Retry-After`` on throttled responses; the optional rate limit is
enforced before each request leaves the client.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, TypedDict

import httpx
from aiolimiter import AsyncLimiter
from azure.core.exceptions import ClientAuthenticationError
from azure.identity import DefaultAzureCredential
from httpx_retries import Retry, RetryTransport

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from httpx._types import TimeoutTypes

    from stateimporter.config.http_resilience import ResilienceConfig, RetryPolicy

log = getLogger(__name__)

QUOTA_REMAINING_HEADER = "x-ms-user-quota-remaining"
QUOTA_RESETS_AFTER_HEADER = "x-ms-user-quota-resets-after"


class ArmAuthenticationError(RuntimeError):
    """Raised when no credential in the chain can issue an ARM token."""


def acquire_access_token(
    scope: str,
    *,
    authority: str,
    credential_factory: Callable[..., DefaultAzureCredential] = DefaultAzureCredential,
) -> str:
    credential = credential_factory(authority=authority)
    try:
        token = credential.get_token(scope)
    except ClientAuthenticationError as exc:
        raise ArmAuthenticationError(
            f"Could not acquire an Azure token for {scope} from {authority}: {exc}"
        ) from exc
    finally:
        credential.close()
    log.debug(f"Acquired Azure token for {scope}")
    return token.token


class AsyncClientOptions(TypedDict, total=False):
    timeout: TimeoutTypes
    transport: httpx.AsyncBaseTransport


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


class ArmClient:
    """Bearer-authenticated JSON client for one ARM endpoint."""

    def __init__(self, config: ResilienceConfig, *, access_token: str) -> None:
        self.config = config
        self._access_token = access_token
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )
        client_kwargs: AsyncClientOptions = {
            "timeout": config.timeout_seconds,
            "transport": RetryTransport(retry=build_retry(config.retry)),
        }
        self._client = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> ArmClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, object],
        *,
        api_version: str,
    ) -> httpx.Response:
        """POST ``payload`` as JSON with the bearer token and ``api-version``."""

        headers = {"Authorization": f"Bearer {self._access_token}"}
        if self._limiter is None:
            response = await self._post(url, payload, api_version, headers)
        else:
            if not self._limiter.has_capacity():
                log.debug(f"{self.config.name}: waiting for rate limit capacity")
            async with self._limiter:
                response = await self._post(url, payload, api_version, headers)
        self._log_quota(response)
        return response

    async def _post(
        self,
        url: str,
        payload: Mapping[str, object],
        api_version: str,
        headers: dict[str, str],
    ) -> httpx.Response:
        return await self._client.post(
            url,
            params={"api-version": api_version},
            json=dict(payload),
            headers=headers,
        )

    def _log_quota(self, response: httpx.Response) -> None:
        remaining = response.headers.get(QUOTA_REMAINING_HEADER)
        if remaining is None:
            return
        resets_after = response.headers.get(QUOTA_RESETS_AFTER_HEADER, "unknown")
        log.debug(
            f"{self.config.name}: {remaining} queries left in quota window, "
            f"resets after {resets_after}"
        )
