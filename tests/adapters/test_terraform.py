from __future__ import annotations

import json
import os
import subprocess
from pathlib import Path  # noqa: TC003

import pytest

from stateimporter.adapters.terraform import (
    PlanTranslator,
    TerraformCommandError,
    TerraformPlanError,
    TerraformPlanProvider,
    TerraformPlanRunner,
    load_plan,
    split_azapi_type,
)
from stateimporter.adapters.terraform.runner import BACKEND_OVERRIDE_FILE
from stateimporter.config import NameFormat, TerraformConfig
from stateimporter.domain.model import MatchStrategy

SUBSCRIPTION_ID = "6ad2c5f0-52f3-4e0a-9a33-3c3bd8e1f0d1"


def _change(address: str, after: dict[str, object], *, mode: str = "managed") -> dict[str, object]:
    resource_type, _, name = address.rpartition(".")
    return {
        "address": address,
        "mode": mode,
        "type": resource_type,
        "name": name,
        "change": {"actions": ["create"], "after": after, "after_unknown": {}},
    }


def _plan(*changes: dict[str, object]) -> dict[str, object]:
    return {"format_version": "1.2", "resource_changes": list(changes)}


class FakeCommands:
    def __init__(self, plan: dict[str, object] | None = None) -> None:
        self.calls: list[list[str]] = []
        self.envs: list[dict[str, str] | None] = []
        self.plan = plan or _plan()

    def __call__(self, command: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        self.calls.append(command)
        env = kwargs.get("env")
        self.envs.append(env if isinstance(env, dict) else None)
        stdout = ""
        if command[0] == "az":
            stdout = f"{SUBSCRIPTION_ID}\n"
        elif "show" in command:
            stdout = json.dumps(self.plan)
        return subprocess.CompletedProcess(command, 0, stdout=stdout)

    def verbs(self) -> list[str]:
        return [call[2] if call[0] == "terraform" else call[1] for call in self.calls]


def _config(tmp_path: Path, **overrides: object) -> TerraformConfig:
    module = tmp_path / "module"
    module.mkdir(exist_ok=True)
    (module / "main.tf").write_text('resource "azurerm_resource_group" "rg" {}\n')
    work = tmp_path / "work"
    work.mkdir(exist_ok=True)
    values: dict[str, object] = {"module_path": module, "working_folder_path": work}
    values.update(overrides)
    return TerraformConfig(**values)  # type: ignore[arg-type]


def test_split_azapi_type() -> None:
    assert split_azapi_type(
        "azapi_resource", {"type": "Microsoft.App/containerApps@2023-05-01"}
    ) == ("Microsoft.App/containerApps", "2023-05-01")
    assert split_azapi_type("azapi_resource", {"type": "Microsoft.App/jobs"}) == (
        "Microsoft.App/jobs",
        "",
    )
    assert split_azapi_type("azurerm_subnet", {"type": "ignored@1"}) == ("", "")


def test_translator_uses_name_property_by_default() -> None:
    translator = PlanTranslator()

    [resource] = translator(
        _plan(_change("azurerm_storage_account.logs", {"name": "stlogs", "location": "westeurope"}))
    )

    assert resource.resource_name == "stlogs"
    assert resource.match_strategy is MatchStrategy.EXACT
    assert resource.location == "westeurope"
    assert resource.name == "logs"


def test_translator_applies_naming_rule() -> None:
    rule = NameFormat(
        type="azurerm_subnet",
        name_format="/virtualNetworks/%s/subnets/%s",
        match_strategy=MatchStrategy.ENDS_WITH,
        arguments=("virtual_network_name", "name"),
    )
    translator = PlanTranslator(name_formats=[rule])

    [resource] = translator(
        _plan(_change("azurerm_subnet.app", {"name": "snet-app", "virtual_network_name": "vnet"}))
    )

    assert resource.resource_name == "/virtualNetworks/vnet/subnets/snet-app"
    assert resource.match_strategy is MatchStrategy.ENDS_WITH


def test_translator_renders_blank_key_when_arguments_are_missing() -> None:
    rule = NameFormat(
        type="azurerm_subnet",
        name_format="/virtualNetworks/%s/subnets/%s",
        arguments=("virtual_network_name", "name"),
    )

    [resource] = PlanTranslator(name_formats=[rule])(
        _plan(_change("azurerm_subnet.app", {"name": "snet-app"}))
    )

    assert resource.resource_name == ""


def test_last_applicable_naming_rule_wins() -> None:
    generic = NameFormat(type="azapi_resource", name_format="%s", arguments=("name",))
    scoped = NameFormat(
        type="azapi_resource",
        sub_type="Microsoft.App/jobs",
        name_format="jobs/%s",
        match_strategy=MatchStrategy.CONTAINS,
        arguments=("name",),
    )
    by_sub_type = NameFormat(
        type="Microsoft.App/containerApps",
        name_format="containerApps/%s",
        match_strategy=MatchStrategy.ENDS_WITH,
        arguments=("name",),
    )
    translator = PlanTranslator(name_formats=[generic, scoped, by_sub_type])

    app, job, other = translator(
        _plan(
            _change(
                "azapi_resource.app",
                {"name": "ca-web", "type": "Microsoft.App/containerApps@2023-05-01"},
            ),
            _change("azapi_resource.job", {"name": "job-1", "type": "Microsoft.App/jobs@2023-05-01"}),
            _change("azapi_resource.other", {"name": "x", "type": "Microsoft.Web/sites@2022-03-01"}),
        )
    )

    assert (app.resource_name, app.api_version) == ("containerApps/ca-web", "2023-05-01")
    assert app.sub_type == "Microsoft.App/containerApps"
    assert (job.resource_name, job.match_strategy) == ("jobs/job-1", MatchStrategy.CONTAINS)
    assert other.resource_name == "x"


def test_later_terraform_type_rule_overrides_earlier_sub_type_rule() -> None:
    by_sub_type = NameFormat(
        type="Microsoft.App/containerApps",
        name_format="containerApps/%s",
        match_strategy=MatchStrategy.ENDS_WITH,
        arguments=("name",),
    )
    generic = NameFormat(type="azapi_resource", name_format="%s", arguments=("name",))

    [app] = PlanTranslator(name_formats=[by_sub_type, generic])(
        _plan(
            _change(
                "azapi_resource.app",
                {"name": "ca-web", "type": "Microsoft.App/containerApps@2023-05-01"},
            )
        )
    )

    assert (app.resource_name, app.match_strategy) == ("ca-web", MatchStrategy.EXACT)


def test_sub_type_constraint_selects_the_matching_rule() -> None:
    scoped = NameFormat(
        type="azapi_resource",
        sub_type="Microsoft.App/jobs",
        name_format="jobs/%s",
        match_strategy=MatchStrategy.CONTAINS,
        arguments=("name",),
    )

    [job] = PlanTranslator(name_formats=[scoped])(
        _plan(_change("azapi_resource.job", {"name": "job-1", "type": "Microsoft.App/jobs@2023-05-01"}))
    )

    assert job.resource_name == "jobs/job-1"
    assert job.match_strategy is MatchStrategy.CONTAINS


def test_translator_skips_data_sources_and_ignored_addresses() -> None:
    translator = PlanTranslator(ignore_address_patterns=[r"^azurerm_role_assignment\."])

    resources = translator(
        _plan(
            _change("azurerm_client_config.current", {}, mode="data"),
            _change("azurerm_role_assignment.reader", {"name": "ra"}),
            _change("azurerm_resource_group.rg", {"name": "rg-app"}),
        )
    )

    assert [resource.address for resource in resources] == ["azurerm_resource_group.rg"]


def test_runner_runs_init_plan_show(tmp_path: Path) -> None:
    commands = FakeCommands()
    config = _config(tmp_path)
    runner = TerraformPlanRunner(config, run_command=commands)

    path = runner()

    assert path == config.working_folder_path / "tfplan.json"
    assert commands.verbs() == ["init", "account", "plan", "show"]
    plan_env = commands.envs[2]
    assert plan_env is not None
    assert plan_env["ARM_SUBSCRIPTION_ID"] == SUBSCRIPTION_ID
    assert json.loads(path.read_text()) == _plan()
    assert not (config.module_path / BACKEND_OVERRIDE_FILE).exists()


def test_runner_uses_configured_subscription_and_skips_init(tmp_path: Path) -> None:
    commands = FakeCommands()
    runner = TerraformPlanRunner(
        _config(tmp_path, plan_subscription_id="sub-from-flag", skip_init_only=True),
        run_command=commands,
    )

    runner()

    assert commands.verbs() == ["plan", "show"]
    assert commands.envs[0] is not None
    assert commands.envs[0]["ARM_SUBSCRIPTION_ID"] == "sub-from-flag"


def test_runner_skip_everything(tmp_path: Path) -> None:
    commands = FakeCommands()
    config = _config(tmp_path, skip_init_plan_show=True)

    path = TerraformPlanRunner(config, run_command=commands)()

    assert commands.calls == []
    assert path == config.working_folder_path / "tfplan.json"


def test_runner_reuses_fresh_plan(tmp_path: Path) -> None:
    commands = FakeCommands()
    config = _config(tmp_path, reuse_plan=True, plan_subscription_id=SUBSCRIPTION_ID)
    runner = TerraformPlanRunner(config, run_command=commands)
    runner.plan_path.write_text("binary plan")
    runner.plan_json_path.write_text(json.dumps(_plan()))
    stale = (config.module_path / "main.tf").stat().st_mtime - 60
    os.utime(config.module_path / "main.tf", (stale, stale))

    runner()

    assert commands.calls == []


def test_runner_replans_when_module_changed(tmp_path: Path) -> None:
    commands = FakeCommands()
    config = _config(tmp_path, reuse_plan=True, plan_subscription_id=SUBSCRIPTION_ID)
    runner = TerraformPlanRunner(config, run_command=commands)
    runner.plan_path.write_text("binary plan")
    runner.plan_json_path.write_text(json.dumps(_plan()))
    newer = runner.plan_json_path.stat().st_mtime + 60
    os.utime(config.module_path / "main.tf", (newer, newer))

    assert not runner.is_plan_fresh()
    runner()

    assert commands.verbs() == ["init", "plan", "show"]


def test_runner_rejects_plan_json_without_resource_changes(tmp_path: Path) -> None:
    runner = TerraformPlanRunner(_config(tmp_path), run_command=FakeCommands())
    runner.plan_json_path.write_text(json.dumps({"format_version": "1.2"}))

    assert not runner.is_json_plan_valid()


def test_runner_raises_on_failed_command(tmp_path: Path) -> None:
    def failing(command: list[str], **_kwargs: object) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(command, 1, stdout="")

    config = _config(tmp_path)
    runner = TerraformPlanRunner(config, run_command=failing)

    with pytest.raises(TerraformCommandError) as excinfo:
        runner()

    assert excinfo.value.returncode == 1
    assert excinfo.value.command[2] == "init"
    assert not (config.module_path / BACKEND_OVERRIDE_FILE).exists()


def test_runner_reports_missing_executable(tmp_path: Path) -> None:
    def missing(_command: list[str], **_kwargs: object) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError("terraform")

    runner = TerraformPlanRunner(_config(tmp_path), run_command=missing)

    with pytest.raises(TerraformCommandError, match="Executable not found"):
        runner()


def test_provider_translates_plan_from_runner(tmp_path: Path) -> None:
    config = _config(tmp_path)
    plan_path = config.working_folder_path / "tfplan.json"
    plan_path.write_text(json.dumps(_plan(_change("azurerm_resource_group.rg", {"name": "rg-app"}))))

    provider = TerraformPlanProvider(config, runner=lambda: plan_path)

    [resource] = provider()
    assert resource.resource_name == "rg-app"


def test_load_plan_errors(tmp_path: Path) -> None:
    with pytest.raises(TerraformPlanError, match="not found"):
        load_plan(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(TerraformPlanError, match="not valid"):
        load_plan(broken)


def test_provider_reads_sample_plan(sample_plan_path: Path) -> None:
    rule = NameFormat(
        type="azurerm_subnet",
        name_format="/virtualNetworks/%s/subnets/%s",
        match_strategy=MatchStrategy.ENDS_WITH,
        arguments=("virtual_network_name", "name"),
    )
    config = TerraformConfig(
        module_path=sample_plan_path.parent,
        working_folder_path=sample_plan_path.parent,
        ignore_resource_type_patterns=(r"^azurerm_role_assignment\.",),
        name_formats=(rule,),
    )

    resources = TerraformPlanProvider(config, runner=lambda: sample_plan_path)()

    assert [resource.address for resource in resources] == [
        "azurerm_resource_group.app",
        'azurerm_subnet.app["web"]',
        "azapi_resource.job",
    ]
    group, subnet, job = resources
    assert (group.resource_name, group.location) == ("rg-app", "westeurope")
    assert subnet.resource_name == "/virtualNetworks/vnet-hub/subnets/snet-web"
    assert (job.sub_type, job.api_version, job.resource_name) == (
        "Microsoft.App/jobs",
        "2024-03-01",
        "job-nightly",
    )
