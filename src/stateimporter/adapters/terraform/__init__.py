"""Public interface for the Terraform adapter."""

from __future__ import annotations

from .provider import TerraformPlanError, TerraformPlanProvider, load_plan
from .runner import TerraformCommandError, TerraformPlanRunner
from .schema import PlanDocument, ResourceChange
from .translator import PlanTranslator, split_azapi_type

__all__ = [
    "PlanDocument",
    "PlanTranslator",
    "ResourceChange",
    "TerraformCommandError",
    "TerraformPlanError",
    "TerraformPlanProvider",
    "TerraformPlanRunner",
    "load_plan",
    "split_azapi_type",
]
