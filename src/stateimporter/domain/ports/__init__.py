"""Domain port definitions for adapters."""

from __future__ import annotations

from .exporting import DirectiveWriter, LedgerExporter, LedgerLoader, ResultExporter
from .fetching import DeclaredResourceProvider, ObservedResourceProvider

__all__ = [
    "DeclaredResourceProvider",
    "DirectiveWriter",
    "LedgerExporter",
    "LedgerLoader",
    "ObservedResourceProvider",
    "ResultExporter",
]
