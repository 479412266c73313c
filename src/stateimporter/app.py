"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from stateimporter.adapters.hcl import HclDirectiveWriter
from stateimporter.adapters.json_export import JsonExporter
from stateimporter.adapters.ledger_csv import LedgerCsvExporter, load_ledger
from stateimporter.adapters.resource_graph import ResourceGraphFetcher
from stateimporter.adapters.terraform import TerraformPlanProvider
from stateimporter.config import get_resource_graph_config, get_terraform_config
from stateimporter.config.paths import expand_path
from stateimporter.domain.directives import build_directives
from stateimporter.domain.reconciliation import ReconciliationEngine

if TYPE_CHECKING:
    from pathlib import Path

    from stateimporter.config import Settings
    from stateimporter.domain.ports import (
        DeclaredResourceProvider,
        DirectiveWriter,
        LedgerExporter,
        LedgerLoader,
        ObservedResourceProvider,
        ResultExporter,
    )
    from stateimporter.domain.reconciliation import ReconciliationResult, ResolutionLedger

log = getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class MappingOutcome:
    result: ReconciliationResult
    written: list[Path] = field(default_factory=list["Path"])

    @property
    def has_issues(self) -> bool:
        return self.result.has_issues


def map_resources(
    *,
    observed_provider: ObservedResourceProvider,
    declared_provider: DeclaredResourceProvider,
    result_exporter: ResultExporter,
    ledger_exporter: LedgerExporter,
    directive_writer: DirectiveWriter,
    ledger: ResolutionLedger | None = None,
    issues_csv_path: Path | None = None,
) -> MappingOutcome:
    """Reconcile one Terraform module against Azure and write the outputs.

    A pass that leaves issues writes the issue ledger for review and stops;
    a clean pass writes the final mapping and the import and destroy files.
    """

    observed = observed_provider()
    directive_writer.clean()
    declared = declared_provider()

    result = ReconciliationEngine(ledger=ledger).reconcile(declared, observed)
    outcome = MappingOutcome(result=result)
    outcome.written.append(result_exporter.export_issues(result.issues))
    outcome.written.append(result_exporter.export_declared(declared))

    if result.has_issues:
        log.warning(
            f"Found {len(result.issues)} issues based on the Terraform Plan and "
            "Resource Graph Queries"
        )
        outcome.written.append(ledger_exporter(result.issues, issues_csv_path))
        return outcome

    log.info("No issues found based on the Terraform Plan and Resource Graph Queries")
    outcome.written.append(result_exporter.export_mapping(result.mapped))
    directives = build_directives(result.mapped)
    outcome.written.extend(directive_writer(directives))
    log.info(
        f"Wrote {len(directives.imports)} import blocks and "
        f"{len(directives.removals)} destroy blocks"
    )
    return outcome


def run_mapping(
    settings: Settings,
    *,
    module_path: str | Path,
    working_folder_path: str | Path,
    issues_csv: str | Path | None = None,
    plan_subscription_id: str | None = None,
    skip_init_plan_show: bool = False,
    skip_init_only: bool = False,
    reuse_plan: bool = False,
    observed_provider: ObservedResourceProvider | None = None,
    declared_provider: DeclaredResourceProvider | None = None,
    ledger_loader: LedgerLoader = load_ledger,
) -> MappingOutcome:
    """Run a mapping pass with the adapters configured from ``settings``."""

    terraform_config = get_terraform_config(
        settings,
        module_path=module_path,
        working_folder_path=working_folder_path,
        plan_subscription_id=plan_subscription_id,
        skip_init_plan_show=skip_init_plan_show,
        skip_init_only=skip_init_only,
        reuse_plan=reuse_plan,
    )
    working_folder = terraform_config.working_folder_path
    working_folder.mkdir(parents=True, exist_ok=True)

    ledger = ledger_loader(expand_path(issues_csv)) if issues_csv else None
    log.info(
        f"Starting mapping: module={terraform_config.module_path}, "
        f"working_folder={working_folder}, ledger={'yes' if ledger is not None else 'no'}"
    )

    effective_observed = observed_provider or ResourceGraphFetcher(
        get_resource_graph_config(settings)
    )
    effective_declared = declared_provider or TerraformPlanProvider(terraform_config)

    return map_resources(
        observed_provider=effective_observed,
        declared_provider=effective_declared,
        result_exporter=JsonExporter(working_folder),
        ledger_exporter=LedgerCsvExporter(working_folder),
        directive_writer=HclDirectiveWriter(
            terraform_config.module_path,
            delete_commands=settings.delete_commands,
        ),
        ledger=ledger,
    )
