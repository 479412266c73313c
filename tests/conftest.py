from __future__ import annotations

from pathlib import Path

import pytest

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def sample_plan_path() -> Path:
    return DATA_DIR / "tfplan.json"


@pytest.fixture(autouse=True)
def _no_access_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("AZURE_ACCESS_TOKEN", raising=False)
