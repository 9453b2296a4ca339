"""JSON log output for machine-readable runs (``--log-json``)."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else came from ``extra=``.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName", "stage_tag"}

# Set by StageContextFilter; reported under context only when present.
_STAGE_ATTRS = ("stage", "source_path")


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Keys are ``timestamp`` (UTC, ISO-8601), ``level``, ``logger``,
    ``message``, plus ``context`` for extra fields and the pipeline stage,
    and ``exception`` when the record carries a traceback.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name and record.name != "root":
            entry["logger"] = record.name

        context: dict[str, Any] = {}
        for key, value in vars(record).items():
            if key in _RECORD_ATTRS or key in _STAGE_ATTRS or key.startswith("_"):
                continue
            context[key] = value
        for key in _STAGE_ATTRS:
            value = getattr(record, key, None)
            if value:
                context[key] = value
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)
