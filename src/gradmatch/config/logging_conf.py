"""Logging setup for gradmatch runs.

Every record passes through a :class:`RunContextFilter` that stamps it with
the fields of the run in progress (command, seed, iterations...), so JSON
output from a ``run`` can be grouped per search without threading those
values through each ``logger`` call.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import IO, Any, Mapping

from .constants import LOG_FILE_NAME
from .schemas import RunConfig
from .settings import Settings, get_settings

__all__ = ["JSONFormatter", "RunContextFilter", "configure_logging", "run_context"]

PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# attributes every LogRecord carries; anything else came from ``extra`` or the filter
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


def run_context(config: RunConfig) -> dict[str, Any]:
    """Fields identifying one genetic search in the logs."""
    return {
        "seed": config.seed,
        "iterations": config.iterations,
        "population_size": config.population_size,
        "manager_weighting": config.manager_weighting,
    }


class RunContextFilter(logging.Filter):
    """Attach the current run's fields to every record that lacks them."""

    def __init__(self, context: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self.context: dict[str, Any] = dict(context or {})

    def update(self, fields: Mapping[str, Any]) -> None:
        self.context.update(fields)

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.context.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with ``extra`` and run fields at top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, value)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(
    *,
    settings: Settings | None = None,
    level: int | str = logging.INFO,
    structured: bool | None = None,
    stream: IO[str] | None = None,
    context: Mapping[str, Any] | None = None,
) -> RunContextFilter:
    """Route gradmatch logs to ``stream`` and ``logs_dir / 'gradmatch.log'``.

    ``structured=None`` follows ``settings.structured_logging``. The returned
    filter already carries ``environment`` plus ``context``; callers add run
    fields later with ``update(run_context(config))``.
    """

    settings = settings or get_settings()
    structured = settings.structured_logging if structured is None else structured

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)

    context_filter = RunContextFilter({"environment": settings.environment, **(context or {})})
    formatter: logging.Formatter = (
        JSONFormatter() if structured else logging.Formatter(PLAIN_FORMAT, "%Y-%m-%d %H:%M:%S")
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(stream)]
    log_path = settings.logs_dir / LOG_FILE_NAME
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    except OSError:  # pragma: no cover - read-only filesystems
        root_logger.warning("Cannot open log file %s; logging to stream only", log_path)

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)
    return context_filter
