from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from stateimporter import __version__
from stateimporter.app import run_mapping
from stateimporter.config import ConfigurationError, configure_logging, load_settings, parse_level

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

VERBOSITY_CHOICES = ("trace", "debug", "info", "warning", "error", "fatal")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Map Terraform-declared resources to live Azure resources"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser(
        "run",
        help="Reconcile a Terraform module against Azure and write import/destroy blocks",
    )
    run.add_argument(
        "--config",
        type=Path,
        help="TOML settings file with queries, scopes and naming rules",
    )
    run.add_argument(
        "-t",
        "--terraform-module-path",
        default=".",
        help="Terraform module path to use (default: %(default)s)",
    )
    run.add_argument(
        "-w",
        "--working-folder-path",
        default=".",
        help="Folder for plan files, JSON exports and the issues CSV (default: %(default)s)",
    )
    run.add_argument(
        "-c",
        "--issues-csv",
        help="Reviewed issues CSV from a previous run",
    )
    run.add_argument(
        "-x",
        "--skip-init-plan-show",
        action="store_true",
        help="Skip init, plan, and show steps and read the existing JSON plan",
    )
    run.add_argument(
        "-k",
        "--skip-init-only",
        action="store_true",
        help="Skip the init step",
    )
    run.add_argument(
        "-r",
        "--reuse-plan",
        action="store_true",
        help="Reuse existing plan files when they are newer than the Terraform files",
    )
    run.add_argument(
        "-s",
        "--plan-subscription-id",
        help="Subscription ID to use for terraform plan instead of the az cli subscription",
    )
    run.add_argument(
        "-v",
        "--verbosity",
        choices=VERBOSITY_CHOICES,
        default="info",
        help="Log level (default: %(default)s)",
    )
    run.add_argument(
        "--structured-logs",
        action="store_true",
        default=None,
        help="Emit one JSON object per log line",
    )

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        settings = load_settings(parsed_args.config)
        structured = (
            settings.structured_logs
            if parsed_args.structured_logs is None
            else parsed_args.structured_logs
        )
        configure_logging(
            level=parse_level(parsed_args.verbosity),
            structured=structured,
            force=True,
        )
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    for key, value in sorted(vars(parsed_args).items()):
        log.debug(f"Command Flag: {key} = {value}")

    try:
        if parsed_args.command != "run":
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
        outcome = run_mapping(
            settings,
            module_path=parsed_args.terraform_module_path,
            working_folder_path=parsed_args.working_folder_path,
            issues_csv=parsed_args.issues_csv,
            plan_subscription_id=parsed_args.plan_subscription_id,
            skip_init_plan_show=parsed_args.skip_init_plan_show,
            skip_init_only=parsed_args.skip_init_only,
            reuse_plan=parsed_args.reuse_plan,
        )
        log.info(f"Mapping finished: issues={len(outcome.result.issues)}, files={len(outcome.written)}")
    except Exception:
        log.exception("Fatal error during mapping")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
