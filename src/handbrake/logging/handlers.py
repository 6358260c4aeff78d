"""Log record formatters.

Text output is one line per record, prefixed with the job tag set by
JobContextFilter. JSON output is one object per line for log collectors.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

TEXT_FORMAT = "%(asctime)s - %(job_tag)s%(name)s - %(levelname)s - %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# Attributes present on every record; anything else was passed via extra=
_BUILTIN_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

JOB_ATTRS = ("job_id", "output_path")
_FILTER_ATTRS = frozenset(JOB_ATTRS) | {"job_tag"}


def text_formatter() -> logging.Formatter:
    """Return the formatter used for plain-text logs."""
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Collect the fields a caller attached to record with extra=."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _BUILTIN_ATTRS
        and key not in _FILTER_ATTRS
        and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """Format each record as a single-line JSON object.

    Keys are ``timestamp`` (UTC, ISO-8601), ``level``, ``message``, and when
    present ``logger``, ``context`` and ``exception``. ``context`` merges
    the record's extra fields with the current job id and output path;
    the job values win over an extra field of the same name.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name != "root":
            entry["logger"] = record.name

        context = extra_fields(record)
        for attr in JOB_ATTRS:
            value = getattr(record, attr, None)
            if value:
                context[attr] = value
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
