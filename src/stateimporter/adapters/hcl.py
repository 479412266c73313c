"""Write ``imports.tf`` and ``destroy.tf`` from reconciliation directives."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

    from stateimporter.config.settings import DeleteCommand
    from stateimporter.domain.directives import Directives, ImportDirective, RemovalDirective

log = getLogger(__name__)

IMPORTS_FILE = "imports.tf"
DESTROY_FILE = "destroy.tf"

DEFAULT_DELETE_COMMAND = """$resourceID = (az resource show --ids %s | ConvertFrom-Json | Select-Object -ExpandProperty id)
if ($resourceID -ne $null) {
	Write-Host "Deleting resource..."
	az resource delete --ids $resourceID --verbose
} else {
	Write-Host "Resource not found, skipping deletion."
}"""


def hcl_string(value: str) -> str:
    """Quote ``value`` as an HCL string literal."""

    # JSON escaping covers quotes, backslashes and control characters.
    quoted = json.dumps(value, ensure_ascii=False)
    return quoted.replace("${", "$${").replace("%{", "%%{")


def render_import_blocks(imports: Iterable[ImportDirective]) -> str:
    blocks = [
        f"import {{\n  id = {hcl_string(directive.id)}\n  to = {directive.to}\n}}\n"
        for directive in imports
    ]
    return "\n".join(blocks)


@dataclass(slots=True)
class HclDirectiveWriter:
    module_path: Path
    delete_commands: Sequence[DeleteCommand] = field(default_factory=tuple)

    def __call__(self, directives: Directives) -> list[Path]:
        return [
            self.write_imports(directives.imports),
            self.write_removals(directives.removals),
        ]

    def write_imports(self, imports: Iterable[ImportDirective]) -> Path:
        path = self.module_path / IMPORTS_FILE
        path.write_text(render_import_blocks(imports), encoding="utf-8")
        log.info(f"HCL imports file {IMPORTS_FILE} written to: {path}")
        return path

    def write_removals(self, removals: Iterable[RemovalDirective]) -> Path:
        path = self.module_path / DESTROY_FILE
        path.write_text(self.render_removal_blocks(removals), encoding="utf-8")
        log.info(f"HCL destroy file {DESTROY_FILE} written to: {path}")
        return path

    def render_removal_blocks(self, removals: Iterable[RemovalDirective]) -> str:
        blocks: list[str] = []
        for index, directive in enumerate(removals, start=1):
            command = hcl_string(self.delete_command(directive.type).replace("%s", directive.id))
            blocks.append(
                f'resource "terraform_data" "destroy_{index:03d}" {{\n'
                f"  triggers_replace = {command}\n"
                f'  provisioner "local-exec" {{\n'
                f"    command     = {command}\n"
                f'    interpreter = ["pwsh", "-Command"]\n'
                f"  }}\n"
                f"}}\n"
            )
        return "\n".join(blocks)

    def delete_command(self, resource_type: str) -> str:
        """Return the delete command template for a type; the last configured match wins."""

        template = DEFAULT_DELETE_COMMAND
        for command in self.delete_commands:
            if command.type.lower() == resource_type.lower():
                template = command.command
        return template

    def clean(self, file_names: Iterable[str] = (IMPORTS_FILE, DESTROY_FILE)) -> None:
        for file_name in file_names:
            path = self.module_path / file_name
            if path.exists():
                log.debug(f"File {path} already exists, it will be deleted")
                path.unlink()
