"""Environment variables read by the CLI and handed to subprocesses."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


def optional_env_var(name: str) -> str | None:
    """Return the stripped value of ``name``; blank values count as unset."""

    value = (os.getenv(name) or "").strip()
    return value or None


def child_env(overrides: Mapping[str, str]) -> dict[str, str]:
    """Copy of the current environment with ``overrides`` applied, for ``terraform``."""

    return {**os.environ, **overrides}
