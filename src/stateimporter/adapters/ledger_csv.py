"""CSV persistence for the resolution ledger.

Export writes the issues of an unresolved pass with blank action columns;
import reads the reviewed file back and validates it into a
``ResolutionLedger``.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from stateimporter.domain.reconciliation import (
    LEDGER_HEADER,
    LedgerFormatError,
    LedgerRow,
    ResolutionLedger,
    ledger_rows,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from stateimporter.domain.model import Issue

log = getLogger(__name__)

ISSUES_CSV_FILE = "issues.csv"


def write_ledger(rows: Iterable[LedgerRow], path: Path) -> Path:
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(LEDGER_HEADER)
        writer.writerows(row.cells() for row in rows)
    return path


def read_ledger_rows(path: Path) -> list[LedgerRow]:
    with path.open(encoding="utf-8-sig", newline="") as handle:
        records = list(csv.reader(handle))

    if not records:
        raise LedgerFormatError(f"Ledger file is empty: {path}")
    header = tuple(cell.strip() for cell in records[0])
    if header != LEDGER_HEADER:
        raise LedgerFormatError(f"Invalid ledger header in {path}: {list(records[0])}")
    return [LedgerRow.from_cells(record) for record in records[1:] if any(record)]


@dataclass(slots=True)
class LedgerCsvExporter:
    working_folder_path: Path

    def __call__(self, issues: Mapping[str, Issue], path: Path | None = None) -> Path:
        target = path or self.working_folder_path / ISSUES_CSV_FILE
        rows = ledger_rows(issues)
        write_ledger(rows, target)
        log.info(f"Issues written to {target}")
        return target


def load_ledger(path: Path) -> ResolutionLedger:
    """Read and validate a reviewed ledger; any violation raises."""

    log.info("Importing issues from supplied CSV file")
    try:
        rows = read_ledger_rows(path)
    except FileNotFoundError:
        raise LedgerFormatError(f"Ledger file not found: {path}") from None
    ledger = ResolutionLedger.from_rows(rows)
    log.info(f"Imported {len(ledger)} resolved issues from CSV file")
    return ledger
