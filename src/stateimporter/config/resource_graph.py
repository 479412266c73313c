"""Azure Resource Graph configuration values."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .env import optional_env_var
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig
from .settings import CloudName

if TYPE_CHECKING:
    from .settings import ResourceGraphQuery, Settings

RESOURCE_GRAPH_API_VERSION = "2022-10-01"
RESOURCE_GRAPH_TIMEOUT_SECONDS = 60.0
ACCESS_TOKEN_ENV_VAR = "AZURE_ACCESS_TOKEN"

ARM_ENDPOINTS: dict[CloudName, str] = {
    CloudName.AZURE_PUBLIC: "https://management.azure.com",
    CloudName.AZURE_US_GOVERNMENT: "https://management.usgovcloudapi.net",
    CloudName.AZURE_GOVERNMENT: "https://management.usgovcloudapi.net",
    CloudName.AZURE_CHINA: "https://management.chinacloudapi.cn",
}

AUTHORITY_HOSTS: dict[CloudName, str] = {
    CloudName.AZURE_PUBLIC: "https://login.microsoftonline.com",
    CloudName.AZURE_US_GOVERNMENT: "https://login.microsoftonline.us",
    CloudName.AZURE_GOVERNMENT: "https://login.microsoftonline.us",
    CloudName.AZURE_CHINA: "https://login.chinacloudapi.cn",
}

EMPTY_GUID = "00000000-0000-0000-0000-000000000000"
_GUID = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")


@dataclass(frozen=True)
class ResourceGraphConfig:
    """Holds Resource Graph query configuration values.

    Without an ``access_token`` the client authenticates through the default
    Azure credential chain against ``authority_host``.
    """

    arm_endpoint: str
    queries: tuple[ResourceGraphQuery, ...]
    authority_host: str = AUTHORITY_HOSTS[CloudName.AZURE_PUBLIC]
    access_token: str | None = None
    subscription_ids: tuple[str, ...] = ()
    management_group_ids: tuple[str, ...] = ()
    ignore_resource_id_patterns: tuple[str, ...] = ()
    resilience: ResilienceConfig = field(default_factory=lambda: default_resilience())

    @property
    def token_scope(self) -> str:
        return f"{self.arm_endpoint}/.default"


def default_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="resource-graph",
        timeout_seconds=RESOURCE_GRAPH_TIMEOUT_SECONDS,
        # Resource Graph throttles at 15 requests per 5 seconds per tenant.
        ratelimit=RateLimit(max_calls=15, per_seconds=5.0),
    )


def validate_subscription_ids(subscription_ids: tuple[str, ...]) -> None:
    for subscription_id in subscription_ids:
        if subscription_id == EMPTY_GUID or not _GUID.match(subscription_id):
            raise ConfigurationError(
                "Subscription ID is not valid, please update your config file with valid "
                f"subscription IDs: {subscription_id!r}"
            )


def get_resource_graph_config(
    settings: Settings,
    *,
    access_token: str | None = None,
) -> ResourceGraphConfig:
    validate_subscription_ids(settings.subscription_ids)
    if not settings.subscription_ids and not settings.management_group_ids:
        raise ConfigurationError("Subscription IDs or Management Group IDs must be provided")
    if not settings.resource_graph_queries:
        raise ConfigurationError("At least one resource graph query must be configured")

    return ResourceGraphConfig(
        arm_endpoint=ARM_ENDPOINTS[settings.cloud],
        authority_host=AUTHORITY_HOSTS[settings.cloud],
        access_token=access_token or optional_env_var(ACCESS_TOKEN_ENV_VAR),
        queries=settings.resource_graph_queries,
        subscription_ids=settings.subscription_ids,
        management_group_ids=settings.management_group_ids,
        ignore_resource_id_patterns=settings.ignore_resource_id_patterns,
    )
