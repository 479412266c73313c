"""Run ``terraform init/plan/show`` to produce a JSON plan for a module."""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from stateimporter.config.env import child_env

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from pathlib import Path

    from stateimporter.config.terraform import TerraformConfig

log = getLogger(__name__)

BACKEND_OVERRIDE_FILE = "backend_override.tf"
BACKEND_OVERRIDE_CONTENT = 'terraform {\n  backend "local" {}\n}\n'
PLAN_FILE = "tfplan"
PLAN_JSON_FILE = "tfplan.json"

type CommandRunner = Callable[..., subprocess.CompletedProcess[str]]


class TerraformCommandError(RuntimeError):
    """Raised when ``terraform`` or ``az`` exits with a non-zero status."""

    def __init__(self, message: str, *, command: Sequence[str], returncode: int) -> None:
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode


@dataclass(slots=True)
class TerraformPlanRunner:
    config: TerraformConfig
    run_command: CommandRunner = field(default=subprocess.run)

    @property
    def plan_path(self) -> Path:
        return self.config.working_folder_path / PLAN_FILE

    @property
    def plan_json_path(self) -> Path:
        return self.config.working_folder_path / PLAN_JSON_FILE

    def __call__(self) -> Path:
        """Produce the JSON plan and return its path."""

        if self.config.skip_init_plan_show:
            log.info("Skipping Terraform init, plan and show")
            return self.plan_json_path

        override = self._write_backend_override()
        try:
            if self.config.reuse_plan and self.is_plan_fresh() and self.is_json_plan_valid():
                log.info("Reusing existing terraform plan files")
            else:
                log.info("Running Terraform init, plan and show")
                if not self.config.skip_init_only:
                    self._init()
                self._plan()
                self._show()
        finally:
            override.unlink(missing_ok=True)
        return self.plan_json_path

    def is_plan_fresh(self) -> bool:
        """True when both plan files are newer than every Terraform file in the module."""

        try:
            plan_time = min(self.plan_path.stat().st_mtime, self.plan_json_path.stat().st_mtime)
        except FileNotFoundError:
            log.debug(f"Plan files not found in {self.config.working_folder_path}")
            return False

        for path in self.config.module_path.rglob("*"):
            if not path.is_file() or path.name == BACKEND_OVERRIDE_FILE:
                continue
            if not (path.name.endswith(".tf") or path.name.endswith(".tf.json")):
                continue
            if path.stat().st_mtime > plan_time:
                log.debug(f"Terraform file {path} is newer than the plan")
                return False
        return True

    def is_json_plan_valid(self) -> bool:
        try:
            data = json.loads(self.plan_json_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.debug(f"JSON plan file {self.plan_json_path} is not readable: {exc}")
            return False
        if not isinstance(data, dict) or "resource_changes" not in data:
            log.debug(f"JSON plan file {self.plan_json_path} missing resource_changes field")
            return False
        return True

    def current_subscription_id(self) -> str:
        command = [self.config.az_binary, "account", "show", "--query", "id", "-o", "tsv"]
        log.debug(f"Running az cli: {' '.join(command)}")
        result = self._run(command, capture_output=True)
        subscription_id = result.stdout.strip()
        log.debug(f"Subscription ID: {subscription_id}")
        return subscription_id

    def _write_backend_override(self) -> Path:
        path = self.config.module_path / BACKEND_OVERRIDE_FILE
        log.debug(f"Creating backend override file: {path}")
        path.write_text(BACKEND_OVERRIDE_CONTENT, encoding="utf-8")
        return path

    def _chdir(self) -> str:
        return f"-chdir={self.config.module_path}"

    def _init(self) -> None:
        command = [self.config.terraform_binary, self._chdir(), "init", "-upgrade"]
        log.info(f"Running Terraform init: {' '.join(command)}")
        self._run(command)

    def _plan(self) -> None:
        subscription_id = self.config.plan_subscription_id or self.current_subscription_id()
        command = [
            self.config.terraform_binary,
            self._chdir(),
            "plan",
            f"-out={self.plan_path}",
        ]
        log.info(f"Running Terraform plan: {' '.join(command)}")
        self._run(command, env=child_env({"ARM_SUBSCRIPTION_ID": subscription_id}))

    def _show(self) -> None:
        command = [
            self.config.terraform_binary,
            self._chdir(),
            "show",
            "-json",
            str(self.plan_path),
        ]
        log.info(f"Running Terraform show: {' '.join(command)}")
        result = self._run(command, capture_output=True)
        self.plan_json_path.write_text(result.stdout, encoding="utf-8")

    def _run(
        self,
        command: Sequence[str],
        *,
        capture_output: bool = False,
        env: Mapping[str, str] | None = None,
    ) -> subprocess.CompletedProcess[str]:
        try:
            result = self.run_command(
                list(command),
                check=False,
                text=True,
                stdout=subprocess.PIPE if capture_output else None,
                env=dict(env) if env is not None else None,
            )
        except FileNotFoundError as exc:
            raise TerraformCommandError(
                f"Executable not found: {command[0]}", command=command, returncode=127
            ) from exc
        if result.returncode != 0:
            raise TerraformCommandError(
                f"Command failed with exit code {result.returncode}: {' '.join(command)}",
                command=command,
                returncode=result.returncode,
            )
        return result
