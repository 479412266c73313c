"""Terraform plan configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .paths import expand_path

if TYPE_CHECKING:
    from pathlib import Path

    from .settings import NameFormat, Settings


@dataclass(frozen=True)
class TerraformConfig:
    module_path: Path
    working_folder_path: Path
    plan_subscription_id: str = ""
    skip_init_plan_show: bool = False
    skip_init_only: bool = False
    reuse_plan: bool = False
    ignore_resource_type_patterns: tuple[str, ...] = ()
    name_formats: tuple[NameFormat, ...] = ()
    terraform_binary: str = "terraform"
    az_binary: str = "az"


def get_terraform_config(
    settings: Settings,
    *,
    module_path: str | Path,
    working_folder_path: str | Path,
    plan_subscription_id: str | None = None,
    skip_init_plan_show: bool = False,
    skip_init_only: bool = False,
    reuse_plan: bool = False,
) -> TerraformConfig:
    return TerraformConfig(
        module_path=expand_path(module_path),
        working_folder_path=expand_path(working_folder_path),
        plan_subscription_id=plan_subscription_id or settings.plan_subscription_id,
        skip_init_plan_show=skip_init_plan_show,
        skip_init_only=skip_init_only,
        reuse_plan=reuse_plan,
        ignore_resource_type_patterns=settings.ignore_resource_type_patterns,
        name_formats=settings.name_formats,
    )
