from __future__ import annotations

from pathlib import Path  # noqa: TC003

from stateimporter.adapters.hcl import (
    DESTROY_FILE,
    IMPORTS_FILE,
    HclDirectiveWriter,
    hcl_string,
    render_import_blocks,
)
from stateimporter.config import DeleteCommand
from stateimporter.domain.directives import Directives, ImportDirective, RemovalDirective

VAULT_ID = "/subscriptions/s/resourceGroups/rg/providers/Microsoft.KeyVault/vaults/kv-app"


def test_hcl_string_escapes_quotes_and_templates() -> None:
    assert hcl_string('say "hi"') == '"say \\"hi\\""'
    assert hcl_string("${var.x} %{if}") == '"$${var.x} %%{if}"'


def test_render_import_blocks() -> None:
    rendered = render_import_blocks(
        [
            ImportDirective(to="azurerm_key_vault.app", id=VAULT_ID),
            ImportDirective(to='azurerm_subnet.app["a"]', id="/subnets/a"),
        ]
    )

    assert rendered == (
        f'import {{\n  id = "{VAULT_ID}"\n  to = azurerm_key_vault.app\n}}\n'
        "\n"
        'import {\n  id = "/subnets/a"\n  to = azurerm_subnet.app["a"]\n}\n'
    )


def test_destroy_blocks_use_default_command(tmp_path: Path) -> None:
    writer = HclDirectiveWriter(tmp_path)

    rendered = writer.render_removal_blocks(
        [RemovalDirective(id=VAULT_ID, type="microsoft.keyvault/vaults")]
    )

    assert rendered.startswith('resource "terraform_data" "destroy_001" {\n')
    assert f"az resource show --ids {VAULT_ID}" in rendered
    assert 'interpreter = ["pwsh", "-Command"]' in rendered
    assert rendered.count("az resource delete --ids $resourceID") == 2


def test_configured_delete_command_matches_type_case_insensitively(tmp_path: Path) -> None:
    writer = HclDirectiveWriter(
        tmp_path,
        delete_commands=(
            DeleteCommand(type="Microsoft.KeyVault/vaults", command="az keyvault delete --id %s"),
            DeleteCommand(
                type="microsoft.keyvault/VAULTS",
                command="az keyvault delete --id %s && az keyvault purge --id %s",
            ),
        ),
    )

    rendered = writer.render_removal_blocks(
        [
            RemovalDirective(id=VAULT_ID, type="microsoft.keyvault/vaults"),
            RemovalDirective(id="/accounts/old", type="microsoft.storage/storageaccounts"),
        ]
    )

    assert f"az keyvault delete --id {VAULT_ID} && az keyvault purge --id {VAULT_ID}" in rendered
    assert '"destroy_002"' in rendered
    assert "az resource show --ids /accounts/old" in rendered


def test_writer_writes_and_cleans_files(tmp_path: Path) -> None:
    writer = HclDirectiveWriter(tmp_path)

    written = writer(
        Directives(
            imports=[ImportDirective(to="azurerm_key_vault.app", id=VAULT_ID)],
            removals=[],
        )
    )

    assert written == [tmp_path / IMPORTS_FILE, tmp_path / DESTROY_FILE]
    assert "to = azurerm_key_vault.app" in (tmp_path / IMPORTS_FILE).read_text()
    assert (tmp_path / DESTROY_FILE).read_text() == ""

    writer.clean()

    assert not (tmp_path / IMPORTS_FILE).exists()
    assert not (tmp_path / DESTROY_FILE).exists()
