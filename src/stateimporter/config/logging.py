"""Logging setup for the command line."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime

from .errors import ConfigurationError

_LEVELS: dict[str, int] = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
}


class JsonLineFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "time": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def parse_level(name: str) -> int:
    """Map a verbosity name (``trace`` through ``fatal``) onto a logging level."""

    try:
        return _LEVELS[name.strip().lower()]
    except KeyError:
        allowed = ", ".join(_LEVELS)
        raise ConfigurationError(f"Unknown log level {name!r}; expected one of {allowed}") from None


def configure_logging(
    *,
    level: int | str = logging.INFO,
    structured: bool = False,
    force: bool = False,
) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: we default
    to INFO level and a terse format suitable for CLI output. ``structured=True``
    switches to one JSON object per line. Pass ``force=True`` to reconfigure during
    tests or specialised entry points.
    """

    if isinstance(level, str):
        level = parse_level(level)

    handlers: list[logging.Handler] | None = None
    if structured:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonLineFormatter())
        handlers = [handler]

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=force,
    )
