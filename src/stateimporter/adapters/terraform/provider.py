"""Declared-resource provider backed by a Terraform module."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .runner import TerraformCommandError, TerraformPlanRunner
from .schema import PlanDocument
from .translator import PlanTranslator

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from stateimporter.config.terraform import TerraformConfig
    from stateimporter.domain.model import DeclaredResource

log = getLogger(__name__)


class TerraformPlanError(RuntimeError):
    """Raised when the JSON plan cannot be read."""


@dataclass(slots=True)
class TerraformPlanProvider:
    config: TerraformConfig
    runner: Callable[[], Path] | None = None
    translator: PlanTranslator | None = None
    _runner: Callable[[], Path] = field(init=False)
    _translator: PlanTranslator = field(init=False)

    def __post_init__(self) -> None:
        self._runner = self.runner or TerraformPlanRunner(self.config)
        self._translator = self.translator or PlanTranslator(
            name_formats=self.config.name_formats,
            ignore_address_patterns=self.config.ignore_resource_type_patterns,
        )

    def __call__(self) -> list[DeclaredResource]:
        plan_path = self._runner()
        resources = self._translator(load_plan(plan_path))
        log.info(f"Read {len(resources)} resources from the Terraform plan")
        return resources


def load_plan(path: Path) -> PlanDocument:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise TerraformPlanError(f"Terraform JSON plan not found: {path}") from None
    try:
        return PlanDocument.model_validate(json.loads(raw))
    except (ValueError, ValidationError) as exc:
        raise TerraformPlanError(f"Terraform JSON plan {path} is not valid: {exc}") from exc


__all__ = ["TerraformCommandError", "TerraformPlanError", "TerraformPlanProvider", "load_plan"]
