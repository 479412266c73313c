"""JSON export of issues, declared resources and the final mapping."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import TypeAdapter

from stateimporter.domain.model import DeclaredResource, Issue, MappedResource

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

log = getLogger(__name__)

ISSUES_JSON_FILE = "issues.json"
RESOURCES_JSON_FILE = "resources.json"
FINAL_JSON_FILE = "final.json"

_ISSUES = TypeAdapter(dict[str, Issue])
_DECLARED = TypeAdapter(list[DeclaredResource])
_MAPPED = TypeAdapter(list[MappedResource])


@dataclass(slots=True)
class JsonExporter:
    working_folder_path: Path
    indent: int | None = 2

    def export_issues(self, issues: Mapping[str, Issue]) -> Path:
        return self._write(ISSUES_JSON_FILE, _ISSUES.dump_json(dict(issues), indent=self.indent))

    def export_declared(self, resources: Sequence[DeclaredResource]) -> Path:
        return self._write(
            RESOURCES_JSON_FILE,
            _DECLARED.dump_json(list(resources), indent=self.indent),
        )

    def export_mapping(self, mapped: Sequence[MappedResource]) -> Path:
        return self._write(FINAL_JSON_FILE, _MAPPED.dump_json(list(mapped), indent=self.indent))

    def _write(self, file_name: str, payload: bytes) -> Path:
        path = self.working_folder_path / file_name
        path.write_bytes(payload)
        log.debug(f"Wrote {path}")
        return path

