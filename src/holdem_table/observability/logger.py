"""Key=value logging for the table, with hand and seat context carried along."""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

ROOT_LOGGER_NAME = "holdem_table"

# Table context fields lead each line.
CONTEXT_FIELDS = ("hand", "stage", "seat")


class StructuredFormatter(logging.Formatter):
    """
    Render a record as ``key=value`` pairs joined by `` | ``.

    Order: time, level, logger, message, then hand/stage/seat when present,
    then any other context fields in the order they were given.
    """

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = dict(getattr(record, "extra_fields", {}))
        for key in CONTEXT_FIELDS:
            if key in context:
                fields[key] = context.pop(key)
        fields.update(context)

        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)

        return " | ".join(f"{k}={v}" for k, v in fields.items() if v is not None)


class ContextLogger(logging.LoggerAdapter):
    """Adapter whose bound fields are merged under each call's ``extra_fields``."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        extra["extra_fields"] = {**self.extra, **extra.get("extra_fields", {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **context: Any) -> "ContextLogger":
        """Same logger, more context: ``logger.bind(hand=3).info(...)``."""
        return ContextLogger(self.logger, {**self.extra, **context})


def setup_logging(
    level: int | str = logging.INFO,
    format_style: str = "structured",
    stream: TextIO | None = None,
) -> None:
    """
    Send ``holdem_table`` records to a stream (stdout by default).

    Calling it again replaces the previous handler.

    Args:
        level: Level number or name such as "DEBUG"
        format_style: "structured" for key=value lines, "simple" for plain ones
        stream: Where to write
    """
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")

    table_logger = logging.getLogger(ROOT_LOGGER_NAME)
    table_logger.setLevel(level)
    table_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    if format_style == "structured":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)-7s %(name)s: %(message)s"))
    table_logger.addHandler(handler)


def get_logger(name: str, **context: Any) -> ContextLogger:
    """Logger under ``holdem_table.`` with ``context`` on every record."""
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return ContextLogger(logging.getLogger(name), context)
