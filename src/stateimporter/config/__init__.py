"""Application configuration helpers."""

from __future__ import annotations

from .env import child_env, optional_env_var
from .errors import ConfigurationError, SettingsFileError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import JsonLineFormatter, configure_logging, parse_level
from .paths import expand_path
from .resource_graph import (
    ACCESS_TOKEN_ENV_VAR,
    ARM_ENDPOINTS,
    AUTHORITY_HOSTS,
    RESOURCE_GRAPH_API_VERSION,
    ResourceGraphConfig,
    get_resource_graph_config,
)
from .settings import (
    CloudName,
    DeleteCommand,
    NameFormat,
    QueryScope,
    ResourceGraphQuery,
    Settings,
    load_settings,
    parse_settings,
)
from .terraform import TerraformConfig, get_terraform_config

__all__ = [
    "ACCESS_TOKEN_ENV_VAR",
    "ARM_ENDPOINTS",
    "AUTHORITY_HOSTS",
    "RESOURCE_GRAPH_API_VERSION",
    "CloudName",
    "ConfigurationError",
    "DeleteCommand",
    "JsonLineFormatter",
    "NameFormat",
    "QueryScope",
    "RateLimit",
    "ResilienceConfig",
    "ResourceGraphConfig",
    "ResourceGraphQuery",
    "RetryPolicy",
    "Settings",
    "SettingsFileError",
    "TerraformConfig",
    "child_env",
    "configure_logging",
    "expand_path",
    "get_resource_graph_config",
    "get_terraform_config",
    "load_settings",
    "optional_env_var",
    "parse_level",
    "parse_settings",
]
