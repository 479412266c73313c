"""TOML settings file for a mapping run.

Example::

    cloud = "AzurePublic"
    subscription_ids = ["6ad2c5f0-52f3-4e0a-9a33-3c3bd8e1f0d1"]
    ignore_resource_id_patterns = ["/providers/Microsoft.Security/"]

    [[resource_graph_queries]]
    name = "Resources"
    scope = "Subscription"
    query = "resources | project id, name, type, location"

    [[name_formats]]
    type = "azurerm_subnet"
    name_format = "/virtualNetworks/%s/subnets/%s"
    match_strategy = "IDEndsWith"
    arguments = ["virtual_network_name", "name"]

    [[delete_commands]]
    type = "microsoft.network/virtualnetworks"
    command = "az network vnet delete --ids %s"
"""

from __future__ import annotations

import re
import tomllib
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from stateimporter.domain.model import MatchStrategy

from .errors import ConfigurationError, SettingsFileError

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)


class QueryScope(StrEnum):
    SUBSCRIPTION = "Subscription"
    MANAGEMENT_GROUP = "ManagementGroup"


class CloudName(StrEnum):
    AZURE_PUBLIC = "AzurePublic"
    AZURE_US_GOVERNMENT = "AzureUSGovernment"
    AZURE_GOVERNMENT = "AzureGovernment"
    AZURE_CHINA = "AzureChina"


class SettingsModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class ResourceGraphQuery(SettingsModel):
    name: str
    scope: QueryScope
    query: str


class NameFormat(SettingsModel):
    """Naming rule assigning a match key to declared resources of one type.

    ``type`` is compared with both the Terraform type and the resource sub
    type; a rule keyed on the Terraform type can be narrowed with ``sub_type``.
    When several rules apply, the one listed last wins. ``name_format`` is a
    ``%s`` template filled with the named plan properties in order.
    """

    type: str
    name_format: str
    match_strategy: MatchStrategy = MatchStrategy.EXACT
    arguments: tuple[str, ...] = ()
    sub_type: str | None = None

    def render(self, properties: dict[str, object]) -> str:
        values: list[str] = []
        for argument in self.arguments:
            value = properties.get(argument)
            if value is None:
                log.debug(f"Name format argument {argument} not found in resource properties")
                continue
            values.append(str(value))
        try:
            return self.name_format % tuple(values)
        except TypeError:
            log.debug(
                f"Name format {self.name_format!r} for {self.type} expects a different number "
                f"of arguments than {values}"
            )
            return ""


class DeleteCommand(SettingsModel):
    type: str
    command: str


def _compile_patterns(patterns: tuple[str, ...]) -> tuple[str, ...]:
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from None
    return patterns


class Settings(SettingsModel):
    cloud: CloudName = CloudName.AZURE_PUBLIC
    subscription_ids: tuple[str, ...] = ()
    management_group_ids: tuple[str, ...] = ()
    plan_subscription_id: str = ""
    ignore_resource_id_patterns: tuple[str, ...] = ()
    ignore_resource_type_patterns: tuple[str, ...] = ()
    structured_logs: bool = False
    resource_graph_queries: tuple[ResourceGraphQuery, ...] = Field(default=())
    name_formats: tuple[NameFormat, ...] = Field(default=())
    delete_commands: tuple[DeleteCommand, ...] = Field(default=())

    _check_patterns = field_validator(
        "ignore_resource_id_patterns",
        "ignore_resource_type_patterns",
    )(_compile_patterns)


def parse_settings(data: dict[str, object]) -> Settings:
    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings: {exc}") from exc


def load_settings(path: Path | None) -> Settings:
    """Read and validate a TOML settings file; ``None`` yields the defaults."""

    if path is None:
        return Settings()
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except FileNotFoundError:
        raise SettingsFileError(f"Settings file not found: {path}", path=path) from None
    except tomllib.TOMLDecodeError as exc:
        raise SettingsFileError(f"Settings file {path} is not valid TOML: {exc}", path=path) from exc
    log.debug(f"Loaded settings from {path}")
    return parse_settings(data)
