"""Errors raised while assembling the configuration of a mapping run."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class ConfigurationError(RuntimeError):
    """Raised when settings, flags or environment values are invalid."""


class SettingsFileError(ConfigurationError):
    """Raised when the TOML settings file cannot be read or parsed."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(message)
        self.path = path
